"""Reaction Assignment — pure decision rules for placing and removing reactions.

Invariants:
    - decide_assignment / decide_removal are PURE: return an Outcome, never mutate
    - A user holds at most one reaction kind per subject
    - Same kind resubmitted -> Rejected(ALREADY_ASSIGNED); different kind -> Replace
    - Shell applies Insert/Replace/Removed against the store inside one transaction

Design Decisions:
    - Outcomes as frozen dataclasses over status dicts: exhaustive match in the shell
    - Catalog and subject existence are checked by the shell BEFORE deciding
      (NotFound for those never reaches this module)
"""

from dataclasses import dataclass
from enum import Enum

from articlehub.core.domain_types import ReactionAssignment, ReactionKindId


class RejectionReason(str, Enum):
    """Why a reaction request produced no mutation."""
    ALREADY_ASSIGNED = "already_assigned"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class Insert:
    """No prior assignment — create one."""
    kind_id: ReactionKindId


@dataclass(frozen=True)
class Replace:
    """User switches kinds — delete old then insert new, atomically."""
    old_kind_id: ReactionKindId
    new_kind_id: ReactionKindId


@dataclass(frozen=True)
class Removed:
    """Existing assignment should be deleted."""
    kind_id: ReactionKindId


@dataclass(frozen=True)
class Rejected:
    """Request is a no-op; caller surfaces a client error."""
    reason: RejectionReason


Outcome = Insert | Replace | Removed | Rejected


def decide_assignment(
    existing: ReactionAssignment | None, requested_kind_id: ReactionKindId,
) -> Outcome:
    """Decide how to honour a request to place requested_kind_id."""
    if existing is None:
        return Insert(requested_kind_id)
    if existing.reaction_kind_id == requested_kind_id:
        return Rejected(RejectionReason.ALREADY_ASSIGNED)
    return Replace(existing.reaction_kind_id, requested_kind_id)


def decide_removal(
    existing: ReactionAssignment | None,
    expected_kind_id: ReactionKindId | None = None,
) -> Outcome:
    """Decide whether a removal request deletes anything.

    expected_kind_id, when given, must match the held kind: a client removing a
    reaction it no longer holds gets NOT_FOUND rather than silently dropping
    whatever it holds now.
    """
    if existing is None:
        return Rejected(RejectionReason.NOT_FOUND)
    if expected_kind_id is not None and existing.reaction_kind_id != expected_kind_id:
        return Rejected(RejectionReason.NOT_FOUND)
    return Removed(existing.reaction_kind_id)
