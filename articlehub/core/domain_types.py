"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, ArticleId, CommentId, ReactionKindId wrap int primary keys in 1..MAX_ID
    - A Subject is (SubjectType, id); articles and comments are the only reactable targets
    - ReactionKind and ReactionAssignment are frozen: core never mutates them

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and URL path segments without custom encoders
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", int)
ArticleId = NewType("ArticleId", int)
CommentId = NewType("CommentId", int)
ReactionKindId = NewType("ReactionKindId", int)

# Primary keys are 32-bit INTEGER columns
MAX_ID: int = 2**31 - 1


# ─── Enums ───────────────────────────────────────────────────────

class SubjectType(str, Enum):
    """Entities a reaction can target — value doubles as the URL segment."""
    ARTICLE = "article"
    COMMENT = "comment"

    @property
    def label(self) -> str:
        return self.value.capitalize()


# ─── Value Objects ───────────────────────────────────────────────

@dataclass(frozen=True)
class Subject:
    """Polymorphic reaction target."""
    type: SubjectType
    id: int


@dataclass(frozen=True)
class ReactionKind:
    """Catalog entry: one emoji a reaction may reference."""
    id: ReactionKindId
    emoji: str
    display_name: str


@dataclass(frozen=True)
class ReactionAssignment:
    """A user's current reaction on a subject (at most one per user and subject)."""
    subject: Subject
    user_id: UserId
    reaction_kind_id: ReactionKindId
    id: int | None = None
    created_at: datetime | None = None
