"""Initial schema — users, articles, comments, reaction catalog and assignments.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-17

Seeds the reaction catalog with the same list as articlehub.db.seed.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_REACTIONS = [
    ("👍", "like"),
    ("👎", "dislike"),
    ("❤️", "love"),
    ("😂", "laugh"),
    ("😮", "wow"),
    ("😢", "sad"),
    ("😡", "angry"),
]


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("username", sa.String(50), nullable=False, unique=True),
        sa.Column("email", sa.String(100), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("avatar_url", sa.String(255), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "articles",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_articles_author_id", "articles", ["author_id"])
    op.create_index("ix_articles_created_at", "articles", ["created_at"])

    op.create_table(
        "comments",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("content", sa.Text, nullable=False),
        sa.Column("article_id", sa.Integer, sa.ForeignKey("articles.id", ondelete="CASCADE"), nullable=False),
        sa.Column("author_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_comments_article_id", "comments", ["article_id"])
    op.create_index("ix_comments_author_id", "comments", ["author_id"])

    reactions = op.create_table(
        "reactions",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("emoji", sa.String(10), nullable=False, unique=True),
        sa.Column("name", sa.String(50), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )

    for subject_table, subject_col in (("articles", "article_id"), ("comments", "comment_id")):
        table = f"{subject_table[:-1]}_reactions"
        op.create_table(
            table,
            sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
            sa.Column(subject_col, sa.Integer, sa.ForeignKey(f"{subject_table}.id", ondelete="CASCADE"), nullable=False),
            sa.Column("user_id", sa.Integer, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
            sa.Column("reaction_id", sa.Integer, sa.ForeignKey("reactions.id", ondelete="CASCADE"), nullable=False),
            sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
            sa.UniqueConstraint(subject_col, "user_id", name=f"uq_{table}_{subject_col[:-3]}_user"),
        )
        op.create_index(f"ix_{table}_{subject_col}", table, [subject_col])

    op.bulk_insert(reactions, [{"emoji": e, "name": n} for e, n in _REACTIONS])


def downgrade() -> None:
    op.drop_table("comment_reactions")
    op.drop_table("article_reactions")
    op.drop_table("reactions")
    op.drop_table("comments")
    op.drop_table("articles")
    op.drop_table("users")
