"""Reaction ORM — emoji catalog and per-user reaction assignments on articles and comments.

Invariants:
    - ReactionKind rows are reference data: seeded once, read-only afterwards
    - UNIQUE(subject, user) on both assignment tables: one reaction per user per subject
    - Assignment rows cascade-delete with their subject, user, or reaction kind

Design Decisions:
    - Two concrete tables sharing a mixin over one polymorphic table: real FKs give
      DB-level cascades (ADR: referential integrity over table count)
    - Store maps SubjectType to (model, subject column); no polymorphic identity needed
"""

from datetime import datetime

from sqlalchemy import (
    String, DateTime, Integer, ForeignKey, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, declared_attr

from articlehub.db.base import Base
from articlehub.models.user import _utcnow


class ReactionKind(Base):
    """Catalog entry — one emoji users can react with."""
    __tablename__ = "reactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    emoji: Mapped[str] = mapped_column(String(10), unique=True, nullable=False)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )


class _AssignmentColumns:
    """Columns shared by both assignment tables."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    @declared_attr
    def user_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False,
        )

    @declared_attr
    def reaction_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer, ForeignKey("reactions.id", ondelete="CASCADE"), nullable=False,
        )

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), nullable=False, default=_utcnow,
        )


class ArticleReaction(_AssignmentColumns, Base):
    """A user's reaction on an article."""
    __tablename__ = "article_reactions"
    __table_args__ = (
        UniqueConstraint("article_id", "user_id", name="uq_article_reactions_article_user"),
    )

    article_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )


class CommentReaction(_AssignmentColumns, Base):
    """A user's reaction on a comment."""
    __tablename__ = "comment_reactions"
    __table_args__ = (
        UniqueConstraint("comment_id", "user_id", name="uq_comment_reactions_comment_user"),
    )

    comment_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("comments.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
