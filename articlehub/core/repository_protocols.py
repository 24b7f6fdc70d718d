"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - replace_assignment is atomic: delete-old then insert-new, one transaction
    - Mutations raise ReactionConflictError when a concurrent writer got there first

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: implementations do IO; the decision functions that consume
      their results (reaction_assignment.py) stay pure and sync
"""

from collections.abc import Sequence
from typing import Protocol

from articlehub.core.domain_types import (
    ReactionAssignment, ReactionKind, ReactionKindId, Subject, SubjectType, UserId,
)


class ReactionStore(Protocol):
    """Contract for reaction persistence — implemented by services/reaction_store.py."""
    async def subject_exists(self, subject: Subject) -> bool: ...
    async def get_reaction_kind(
        self, kind_id: ReactionKindId,
    ) -> ReactionKind | None: ...
    async def list_reaction_kinds(self) -> list[ReactionKind]: ...
    async def get_assignment(
        self, subject: Subject, user_id: UserId,
    ) -> ReactionAssignment | None: ...
    async def insert_assignment(
        self, subject: Subject, user_id: UserId, kind_id: ReactionKindId,
    ) -> ReactionAssignment: ...
    async def replace_assignment(
        self, subject: Subject, user_id: UserId,
        old_kind_id: ReactionKindId, new_kind_id: ReactionKindId,
    ) -> ReactionAssignment: ...
    async def delete_assignment(
        self, subject: Subject, user_id: UserId, kind_id: ReactionKindId,
    ) -> bool: ...
    async def summarize(
        self,
        subject_type: SubjectType,
        subject_ids: Sequence[int],
        requester_id: UserId | None = None,
        with_users: bool = False,
    ) -> dict[int, list[dict]]: ...
