"""Reaction Store & Service — assignment rule against a real (SQLite) database.

Invariants:
    - After a successful assign with kind K, the stored assignment is exactly K (one row)
    - Same kind twice -> REACTION_ALREADY_ASSIGNED; A then B -> Replace(A, B)
    - Stale writers lose with ReactionConflictError and never leave two rows
    - Missing subject or kind -> ResourceNotFoundError before any write
"""

import pytest
from sqlalchemy import func, select

from articlehub.core.domain_types import (
    ReactionKindId, Subject, SubjectType, UserId,
)
from articlehub.core.errors import (
    ReactionAlreadyAssignedError, ReactionConflictError, ResourceNotFoundError,
)
from articlehub.core.reaction_assignment import Insert, Removed, Replace
from articlehub.models import Article, ArticleReaction, Comment, User
from articlehub.services.reaction_service import ReactionService
from articlehub.services.reaction_store import SqlReactionStore


@pytest.fixture
async def users(test_db):
    rows = [
        User(username=name, email=f"{name}@mail.com", password_hash="x")
        for name in ("ann", "ben", "cid")
    ]
    test_db.add_all(rows)
    await test_db.commit()
    return [UserId(u.id) for u in rows]


@pytest.fixture
async def subject(test_db, users):
    article = Article(title="Title", content="Body of the article", author_id=users[0])
    test_db.add(article)
    await test_db.commit()
    return Subject(SubjectType.ARTICLE, article.id)


@pytest.fixture
def store(test_db):
    return SqlReactionStore(test_db)


@pytest.fixture
def service(store):
    return ReactionService(store)


async def _row_count(db, subject: Subject) -> int:
    return await db.scalar(
        select(func.count(ArticleReaction.id)).where(ArticleReaction.article_id == subject.id),
    )


# ─── assign ──────────────────────────────────────────────────────

async def test_assign_then_lookup_returns_exactly_that_kind(service, store, subject, users, test_db):
    result = await service.assign(subject, users[0], ReactionKindId(2))
    assert result.outcome == Insert(2)
    assert result.kind.display_name == "dislike"

    held = await store.get_assignment(subject, users[0])
    assert held.reaction_kind_id == 2
    assert await _row_count(test_db, subject) == 1


async def test_same_kind_twice_is_already_assigned(service, subject, users):
    await service.assign(subject, users[0], ReactionKindId(1))
    with pytest.raises(ReactionAlreadyAssignedError):
        await service.assign(subject, users[0], ReactionKindId(1))


async def test_switching_kinds_replaces(service, store, subject, users, test_db):
    await service.assign(subject, users[0], ReactionKindId(1))
    result = await service.assign(subject, users[0], ReactionKindId(3))

    assert result.outcome == Replace(1, 3)
    held = await store.get_assignment(subject, users[0])
    assert held.reaction_kind_id == 3
    assert await _row_count(test_db, subject) == 1


async def test_unknown_subject_is_not_found(service, users):
    with pytest.raises(ResourceNotFoundError) as exc:
        await service.assign(Subject(SubjectType.ARTICLE, 999), users[0], ReactionKindId(1))
    assert exc.value.context.resource_type == "Article"


async def test_unknown_kind_is_not_found(service, subject, users, test_db):
    with pytest.raises(ResourceNotFoundError) as exc:
        await service.assign(subject, users[0], ReactionKindId(999))
    assert exc.value.context.resource_type == "Reaction"
    assert await _row_count(test_db, subject) == 0


async def test_comment_subjects_use_their_own_table(service, store, test_db, users, subject):
    comment = Comment(content="hi", article_id=subject.id, author_id=users[1])
    test_db.add(comment)
    await test_db.commit()
    comment_subject = Subject(SubjectType.COMMENT, comment.id)

    await service.assign(comment_subject, users[0], ReactionKindId(4))

    assert (await store.get_assignment(comment_subject, users[0])).reaction_kind_id == 4
    assert await store.get_assignment(subject, users[0]) is None


# ─── remove ──────────────────────────────────────────────────────

async def test_remove_without_assignment_is_not_found(service, subject, users):
    with pytest.raises(ResourceNotFoundError):
        await service.remove(subject, users[0])


async def test_remove_after_insert(service, store, subject, users):
    await service.assign(subject, users[0], ReactionKindId(1))
    outcome = await service.remove(subject, users[0])
    assert outcome == Removed(1)
    assert await store.get_assignment(subject, users[0]) is None


async def test_remove_with_stale_expected_kind_keeps_current(service, store, subject, users):
    await service.assign(subject, users[0], ReactionKindId(1))
    with pytest.raises(ResourceNotFoundError):
        await service.remove(subject, users[0], ReactionKindId(2))
    assert (await store.get_assignment(subject, users[0])).reaction_kind_id == 1


# ─── concurrency (stale reads applied directly to the store) ────

async def test_second_insert_for_same_user_conflicts(store, subject, users, test_db):
    await store.insert_assignment(subject, users[0], ReactionKindId(1))
    with pytest.raises(ReactionConflictError):
        await store.insert_assignment(subject, users[0], ReactionKindId(2))
    assert (await store.get_assignment(subject, users[0])).reaction_kind_id == 1
    assert await _row_count(test_db, subject) == 1


async def test_replace_with_stale_old_kind_conflicts(store, subject, users, test_db):
    await store.insert_assignment(subject, users[0], ReactionKindId(1))
    # another request already moved the user from 2 (never held here) to something else
    with pytest.raises(ReactionConflictError):
        await store.replace_assignment(subject, users[0], ReactionKindId(2), ReactionKindId(3))
    assert (await store.get_assignment(subject, users[0])).reaction_kind_id == 1
    assert await _row_count(test_db, subject) == 1


async def test_delete_of_already_removed_assignment_reports_false(store, subject, users):
    await store.insert_assignment(subject, users[0], ReactionKindId(1))
    assert await store.delete_assignment(subject, users[0], ReactionKindId(1)) is True
    assert await store.delete_assignment(subject, users[0], ReactionKindId(1)) is False


# ─── summarize ───────────────────────────────────────────────────

async def test_three_users_distinct_kinds_summary(service, store, subject, users):
    for user_id, kind in zip(users, (1, 2, 3)):
        await service.assign(subject, user_id, ReactionKindId(kind))

    summary = await service.summary(subject, users[1])
    counts = {e["id"]: e["count"] for e in summary}
    assert counts == {1: 1, 2: 1, 3: 1, 4: 0, 5: 0, 6: 0, 7: 0}
    assert [e["id"] for e in summary if e["user_reacted"]] == [2]
    assert summary[0]["users"] == ["ann"]


async def test_anonymous_summary_never_marks_user_reacted(service, subject, users):
    await service.assign(subject, users[0], ReactionKindId(1))
    summary = await service.summary(subject, None)
    assert not any(e["user_reacted"] for e in summary)


async def test_summarize_empty_batch(store):
    assert await store.summarize(SubjectType.ARTICLE, []) == {}


async def test_catalog_ordered_by_id(service):
    kinds = await service.catalog()
    assert [k.id for k in kinds] == [1, 2, 3, 4, 5, 6, 7]
    assert kinds[0].emoji == "👍"
