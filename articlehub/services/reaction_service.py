"""Reaction Service — orchestrates existence checks, the pure decision, and the store mutation.

Invariants:
    - Order: subject exists -> reaction kind exists -> read assignment -> decide -> apply
    - NotFound (subject or kind) is raised before any decision runs
    - Rejected(ALREADY_ASSIGNED) -> ReactionAlreadyAssignedError; Rejected(NOT_FOUND) -> 404

Design Decisions:
    - Impureim sandwich: store reads (impure) -> decide_* (pure) -> store writes (impure)
    - Depends on the ReactionStore protocol, not SQLAlchemy: unit tests can pass a fake
"""

import logging
from dataclasses import dataclass

from articlehub.core.domain_types import (
    ReactionAssignment, ReactionKind, ReactionKindId, Subject, UserId,
)
from articlehub.core.errors import (
    ErrorContext, ReactionAlreadyAssignedError, ResourceNotFoundError,
)
from articlehub.core.reaction_assignment import (
    Insert, Outcome, Rejected, Replace,
    decide_assignment, decide_removal,
)
from articlehub.core.repository_protocols import ReactionStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AssignmentResult:
    """What assign() did, for the HTTP layer to render."""
    outcome: Outcome
    assignment: ReactionAssignment
    kind: ReactionKind


class ReactionService:
    """Place, remove and summarize reactions on articles and comments."""

    def __init__(self, store: ReactionStore):
        self.store = store

    async def assign(
        self, subject: Subject, user_id: UserId, kind_id: ReactionKindId,
    ) -> AssignmentResult:
        await self._require_subject(subject)
        kind = await self.store.get_reaction_kind(kind_id)
        if kind is None:
            raise ResourceNotFoundError("Reaction", kind_id)

        existing = await self.store.get_assignment(subject, user_id)
        outcome = decide_assignment(existing, kind_id)

        match outcome:
            case Insert(kind_id=new_kind):
                assignment = await self.store.insert_assignment(
                    subject, user_id, new_kind,
                )
            case Replace(old_kind_id=old_kind, new_kind_id=new_kind):
                assignment = await self.store.replace_assignment(
                    subject, user_id, old_kind, new_kind,
                )
            case Rejected():
                raise ReactionAlreadyAssignedError(
                    kind_id,
                    ErrorContext(user_id=user_id, resource_type=subject.type.label,
                                 resource_id=str(subject.id)),
                )

        logger.info(
            f"Reaction {type(outcome).__name__.lower()} on {subject.type.value} {subject.id}",
            extra={"user_id": user_id, "subject_type": subject.type.value,
                   "subject_id": subject.id, "reaction_kind_id": kind_id,
                   "outcome": type(outcome).__name__},
        )
        return AssignmentResult(outcome=outcome, assignment=assignment, kind=kind)

    async def remove(
        self,
        subject: Subject,
        user_id: UserId,
        expected_kind_id: ReactionKindId | None = None,
    ) -> Outcome:
        await self._require_subject(subject)
        existing = await self.store.get_assignment(subject, user_id)
        outcome = decide_removal(existing, expected_kind_id)

        if isinstance(outcome, Rejected):
            raise ResourceNotFoundError("Reaction", expected_kind_id or "current")

        removed = await self.store.delete_assignment(subject, user_id, outcome.kind_id)
        if not removed:
            # concurrent removal already deleted it
            raise ResourceNotFoundError("Reaction", outcome.kind_id)
        logger.info(
            f"Reaction removed from {subject.type.value} {subject.id}",
            extra={"user_id": user_id, "subject_type": subject.type.value,
                   "subject_id": subject.id, "reaction_kind_id": outcome.kind_id},
        )
        return outcome

    async def summary(
        self, subject: Subject, requester_id: UserId | None = None,
    ) -> list[dict]:
        await self._require_subject(subject)
        summaries = await self.store.summarize(
            subject.type, [subject.id], requester_id, with_users=True,
        )
        return summaries[subject.id]

    async def catalog(self) -> list[ReactionKind]:
        return await self.store.list_reaction_kinds()

    async def _require_subject(self, subject: Subject) -> None:
        if not await self.store.subject_exists(subject):
            raise ResourceNotFoundError(subject.type.label, subject.id)

