"""Article ORM — authored long-form posts.

Invariants:
    - Always belongs to a User (author_id FK, cascade on user delete)
    - Deleting an article removes its comments and all reactions (DB cascade + service bulk delete)

Design Decisions:
    - author eagerly joined: every article response carries author username/avatar
    - No ORM collections for comments/reactions: counts and summaries come from grouped queries
"""

from datetime import datetime

from sqlalchemy import String, Text, DateTime, Integer, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from articlehub.db.base import Base
from articlehub.models.user import User, _utcnow


class Article(Base):
    """Article entity."""
    __tablename__ = "articles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow,
    )

    author: Mapped[User] = relationship(User, lazy="joined")
