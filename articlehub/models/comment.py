"""Comment ORM — reader comments attached to an article.

Invariants:
    - Always belongs to an Article and a User (cascade on either delete)
    - Listed oldest-first per article

Design Decisions:
    - author eagerly joined, same as Article
"""

from datetime import datetime

from sqlalchemy import Text, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from articlehub.db.base import Base
from articlehub.models.user import User, _utcnow


class Comment(Base):
    """Comment on an article."""
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    article_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("articles.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    author: Mapped[User] = relationship(User, lazy="joined")
