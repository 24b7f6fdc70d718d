"""SQL Reaction Store — SQLAlchemy implementation of core.repository_protocols.ReactionStore.

Invariants:
    - Each mutation commits exactly once; on any failure the session is rolled back
    - replace_assignment deletes the OLD kind only (conditional delete) then inserts the new
      one in the same transaction; zero rows deleted means a concurrent writer won
    - IntegrityError on insert (UNIQUE(subject, user)) is a ReactionConflictError, never a 500

Design Decisions:
    - Subject tables addressed through _TARGETS (model + subject column) instead of a
      polymorphic table: keeps DB-level FKs and cascades
    - summarize issues one grouped query per concern for the whole batch of subjects
"""

import logging
from collections.abc import Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.core.domain_types import (
    ReactionAssignment, ReactionKind, ReactionKindId, Subject, SubjectType, UserId,
)
from articlehub.core.errors import ReactionConflictError, ErrorContext
from articlehub.core.reaction_summary import summarize_reactions
from articlehub.models import (
    Article, ArticleReaction, Comment, CommentReaction, ReactionKind as ReactionKindRow, User,
)

logger = logging.getLogger(__name__)

_TARGETS = {
    SubjectType.ARTICLE: (Article, ArticleReaction, ArticleReaction.article_id),
    SubjectType.COMMENT: (Comment, CommentReaction, CommentReaction.comment_id),
}


def _to_kind(row: ReactionKindRow) -> ReactionKind:
    return ReactionKind(
        id=ReactionKindId(row.id), emoji=row.emoji, display_name=row.name,
    )


class SqlReactionStore:
    """Reaction persistence over an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Reads ───────────────────────────────────────────────────

    async def subject_exists(self, subject: Subject) -> bool:
        model, _, _ = _TARGETS[subject.type]
        result = await self.db.execute(
            select(model.id).where(model.id == subject.id),
        )
        return result.scalar_one_or_none() is not None

    async def get_reaction_kind(
        self, kind_id: ReactionKindId,
    ) -> ReactionKind | None:
        row = await self.db.get(ReactionKindRow, kind_id)
        return _to_kind(row) if row else None

    async def list_reaction_kinds(self) -> list[ReactionKind]:
        result = await self.db.execute(
            select(ReactionKindRow).order_by(ReactionKindRow.id),
        )
        return [_to_kind(row) for row in result.scalars().all()]

    async def get_assignment(
        self, subject: Subject, user_id: UserId,
    ) -> ReactionAssignment | None:
        _, table, subject_col = _TARGETS[subject.type]
        result = await self.db.execute(
            select(table.id, table.user_id, table.reaction_id, table.created_at)
            .where(subject_col == subject.id)
            .where(table.user_id == user_id)
        )
        row = result.one_or_none()
        return self._to_assignment(subject, row) if row else None

    # ─── Mutations ───────────────────────────────────────────────

    async def insert_assignment(
        self, subject: Subject, user_id: UserId, kind_id: ReactionKindId,
    ) -> ReactionAssignment:
        row = self._new_row(subject, user_id, kind_id)
        self.db.add(row)
        await self._commit_or_conflict(subject, user_id)
        return self._detach(subject, row)

    async def replace_assignment(
        self, subject: Subject, user_id: UserId,
        old_kind_id: ReactionKindId, new_kind_id: ReactionKindId,
    ) -> ReactionAssignment:
        deleted = await self._delete_rows(subject, user_id, old_kind_id)
        if deleted == 0:
            await self.db.rollback()
            raise ReactionConflictError(
                "Your reaction was changed by another request; reload and retry",
                ErrorContext(user_id=user_id, resource_type=subject.type.label,
                             resource_id=str(subject.id)),
            )
        row = self._new_row(subject, user_id, new_kind_id)
        self.db.add(row)
        await self._commit_or_conflict(subject, user_id)
        return self._detach(subject, row)

    async def delete_assignment(
        self, subject: Subject, user_id: UserId, kind_id: ReactionKindId,
    ) -> bool:
        deleted = await self._delete_rows(subject, user_id, kind_id)
        await self.db.commit()
        return deleted > 0

    # ─── Aggregation ─────────────────────────────────────────────

    async def summarize(
        self,
        subject_type: SubjectType,
        subject_ids: Sequence[int],
        requester_id: UserId | None = None,
        with_users: bool = False,
    ) -> dict[int, list[dict]]:
        if not subject_ids:
            return {}
        _, table, subject_col = _TARGETS[subject_type]
        catalog = await self.list_reaction_kinds()

        counts = await self.db.execute(
            select(subject_col, table.reaction_id, func.count(table.id))
            .where(subject_col.in_(subject_ids))
            .group_by(subject_col, table.reaction_id)
        )

        held: list[tuple[int, int]] = []
        if requester_id is not None:
            held_rows = await self.db.execute(
                select(subject_col, table.reaction_id)
                .where(subject_col.in_(subject_ids))
                .where(table.user_id == requester_id)
            )
            held = [(r[0], r[1]) for r in held_rows.all()]

        holders = None
        if with_users:
            holder_rows = await self.db.execute(
                select(subject_col, table.reaction_id, User.username)
                .join(User, User.id == table.user_id)
                .where(subject_col.in_(subject_ids))
            )
            holders = [(r[0], r[1], r[2]) for r in holder_rows.all()]

        return summarize_reactions(
            catalog,
            subject_ids,
            [(r[0], r[1], r[2]) for r in counts.all()],
            held,
            holders,
        )

    # ─── Helpers ─────────────────────────────────────────────────

    async def _delete_rows(
        self, subject: Subject, user_id: UserId, kind_id: ReactionKindId,
    ) -> int:
        _, table, subject_col = _TARGETS[subject.type]
        result = await self.db.execute(
            delete(table)
            .where(subject_col == subject.id)
            .where(table.user_id == user_id)
            .where(table.reaction_id == kind_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def _commit_or_conflict(self, subject: Subject, user_id: UserId) -> None:
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            logger.warning(
                f"Reaction uniqueness violated: {e.orig}",
                extra={"user_id": user_id, "subject_type": subject.type.value,
                       "subject_id": subject.id},
            )
            raise ReactionConflictError(
                "Another request set your reaction at the same time; reload and retry",
                ErrorContext(user_id=user_id, resource_type=subject.type.label,
                             resource_id=str(subject.id)),
            )

    @staticmethod
    def _new_row(subject: Subject, user_id: UserId, kind_id: ReactionKindId):
        _, table, subject_col = _TARGETS[subject.type]
        return table(
            **{subject_col.key: subject.id, "user_id": user_id, "reaction_id": kind_id},
        )

    @staticmethod
    def _to_assignment(subject: Subject, row) -> ReactionAssignment:
        return ReactionAssignment(
            subject=subject,
            user_id=UserId(row.user_id),
            reaction_kind_id=ReactionKindId(row.reaction_id),
            id=row.id,
            created_at=row.created_at,
        )

    def _detach(self, subject: Subject, row) -> ReactionAssignment:
        # bulk deletes bypass the identity map; keep assignment rows out of it
        assignment = self._to_assignment(subject, row)
        self.db.expunge(row)
        return assignment
