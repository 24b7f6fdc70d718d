"""Reaction Routes — catalog, place/replace, remove and per-subject summaries.

Invariants:
    - {subject_type} is "article" or "comment"; anything else is a validation error
    - POST answers 201 with outcome "inserted" or "replaced"; re-placing the held
      kind is 400 REACTION_ALREADY_ASSIGNED, a lost race is 409 REACTION_CONFLICT
    - DELETE optionally names the kind the client believes it holds (?reaction_id=)

Design Decisions:
    - Thin shell over ReactionService: the store is built per request on the request session
"""

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.api.dependencies import get_current_user, get_optional_user
from articlehub.core.domain_types import (
    MAX_ID, ReactionKindId, Subject, SubjectType, UserId,
)
from articlehub.core.reaction_assignment import Replace
from articlehub.infrastructure.database import get_db
from articlehub.models import User
from articlehub.schemas.reaction import ReactionRequest
from articlehub.services.reaction_service import AssignmentResult, ReactionService
from articlehub.services.reaction_store import SqlReactionStore

router = APIRouter(prefix="/api/reactions", tags=["reactions"])


def _service(db: AsyncSession) -> ReactionService:
    return ReactionService(SqlReactionStore(db))


def _render_assignment(result: AssignmentResult) -> dict:
    assignment = result.assignment
    return {
        "id": assignment.id,
        f"{assignment.subject.type.value}_id": assignment.subject.id,
        "user_id": assignment.user_id,
        "reaction_id": assignment.reaction_kind_id,
        "emoji": result.kind.emoji,
        "name": result.kind.display_name,
        "created_at": assignment.created_at.isoformat() if assignment.created_at else None,
    }


@router.get("")
async def list_reaction_kinds(db: AsyncSession = Depends(get_db)):
    kinds = await _service(db).catalog()
    return {
        "reactions": [
            {"id": k.id, "emoji": k.emoji, "name": k.display_name} for k in kinds
        ],
    }


@router.post("/{subject_type}/{subject_id}", status_code=status.HTTP_201_CREATED)
async def place_reaction(
    subject_type: SubjectType,
    body: ReactionRequest,
    subject_id: int = Path(gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    result = await _service(db).assign(
        Subject(subject_type, subject_id), UserId(user.id), ReactionKindId(body.reaction_id),
    )
    replaced = isinstance(result.outcome, Replace)
    response = {
        "message": "Reaction updated successfully" if replaced else "Reaction added successfully",
        "outcome": "replaced" if replaced else "inserted",
        "reaction": _render_assignment(result),
    }
    if replaced:
        response["replaced_reaction_id"] = result.outcome.old_kind_id
    return response


@router.delete("/{subject_type}/{subject_id}")
async def remove_reaction(
    subject_type: SubjectType,
    subject_id: int = Path(gt=0, le=MAX_ID),
    reaction_id: int | None = Query(None, gt=0, le=MAX_ID),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    await _service(db).remove(
        Subject(subject_type, subject_id),
        UserId(user.id),
        ReactionKindId(reaction_id) if reaction_id is not None else None,
    )
    return {"message": "Reaction removed successfully"}


@router.get("/{subject_type}/{subject_id}")
async def get_reactions(
    subject_type: SubjectType,
    subject_id: int = Path(gt=0, le=MAX_ID),
    user: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    reactions = await _service(db).summary(
        Subject(subject_type, subject_id), UserId(user.id) if user else None,
    )
    return {"reactions": reactions}
