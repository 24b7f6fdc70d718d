"""Reaction Races — two sessions assigning at once against a file-backed SQLite database.

Invariants:
    - Concurrent writers for one (subject, user) never leave two rows
    - The loser gets ReactionConflictError, or ReactionAlreadyAssignedError when it
      read the winner's row
    - A conflict surfaces over HTTP as 409 REACTION_CONFLICT

Design Decisions:
    - A file database (not :memory: over StaticPool) so each session owns its
      connection and the database's locking decides the winner
"""

import asyncio

import pytest
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from articlehub.core.domain_types import ReactionKindId, Subject, SubjectType, UserId
from articlehub.core.errors import ReactionAlreadyAssignedError, ReactionConflictError
from articlehub.db.base import Base
from articlehub.db.seed import seed_reaction_kinds
from articlehub.models import Article, ArticleReaction, User
from articlehub.services.reaction_service import AssignmentResult, ReactionService
from articlehub.services.reaction_store import SqlReactionStore


@pytest.fixture
async def file_sessions(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'race.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as db:
        await seed_reaction_kinds(db)
    yield factory
    await engine.dispose()


@pytest.fixture
async def reacting_user(file_sessions):
    async with file_sessions() as db:
        user = User(username="racer", email="racer@mail.com", password_hash="x")
        db.add(user)
        await db.commit()
        article = Article(title="Title", content="Body of the article", author_id=user.id)
        db.add(article)
        await db.commit()
        return UserId(user.id), Subject(SubjectType.ARTICLE, article.id)


async def _assign(factory, subject, user_id, kind):
    async with factory() as db:
        service = ReactionService(SqlReactionStore(db))
        return await service.assign(subject, user_id, ReactionKindId(kind))


async def _stored_kinds(factory, subject) -> list[int]:
    async with factory() as db:
        result = await db.execute(
            select(ArticleReaction.reaction_id).where(ArticleReaction.article_id == subject.id),
        )
        return list(result.scalars().all())


async def test_simultaneous_same_kind_has_one_winner(file_sessions, reacting_user):
    user_id, subject = reacting_user
    results = await asyncio.gather(
        _assign(file_sessions, subject, user_id, 1),
        _assign(file_sessions, subject, user_id, 1),
        return_exceptions=True,
    )

    winners = [r for r in results if isinstance(r, AssignmentResult)]
    losers = [r for r in results if not isinstance(r, AssignmentResult)]
    assert len(winners) == 1
    assert len(losers) == 1
    assert isinstance(losers[0], (ReactionConflictError, ReactionAlreadyAssignedError))
    assert await _stored_kinds(file_sessions, subject) == [1]


async def test_simultaneous_different_kinds_leave_one_row(file_sessions, reacting_user):
    user_id, subject = reacting_user
    results = await asyncio.gather(
        _assign(file_sessions, subject, user_id, 1),
        _assign(file_sessions, subject, user_id, 2),
        return_exceptions=True,
    )

    winners = [r for r in results if isinstance(r, AssignmentResult)]
    losers = [r for r in results if not isinstance(r, AssignmentResult)]
    assert winners
    assert all(isinstance(e, ReactionConflictError) for e in losers)
    stored = await _stored_kinds(file_sessions, subject)
    assert len(stored) == 1
    assert stored[0] in {w.kind.id for w in winners}


async def test_lost_race_over_http_is_conflict(client, bob, article, monkeypatch):
    first = await client.post(
        f"/api/reactions/article/{article['id']}", json={"reaction_id": 1},
        headers=bob["headers"],
    )
    assert first.status_code == 201

    async def stale_read(self, subject, user_id):
        return None

    # the request decides Insert on a stale read; the unique constraint rejects it
    monkeypatch.setattr(SqlReactionStore, "get_assignment", stale_read)
    res = await client.post(
        f"/api/reactions/article/{article['id']}", json={"reaction_id": 2},
        headers=bob["headers"],
    )
    assert res.status_code == 409
    error = res.json()["error"]
    assert error["code"] == "REACTION_CONFLICT"
    assert error["category"] == "conflict"

    monkeypatch.undo()
    summary = (await client.get(
        f"/api/reactions/article/{article['id']}", headers=bob["headers"],
    )).json()["reactions"]
    assert [r["id"] for r in summary if r["user_reacted"]] == [1]
    assert sum(r["count"] for r in summary) == 1
