"""Catalog Seeding — creates tables and inserts the default reaction catalog.

Invariants:
    - seed_reaction_kinds is idempotent: existing emojis are never duplicated or modified
    - DEFAULT_REACTION_KINDS order defines catalog ids on a fresh database

Design Decisions:
    - Runnable as `python -m articlehub.db.seed` for local setups without Alembic;
      production uses the initial migration, which seeds the same list
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from articlehub.config import get_settings
from articlehub.db.base import Base
from articlehub.db.session import create_session_factory
from articlehub.infrastructure.observability import setup_logging
from articlehub.models import ReactionKind

logger = logging.getLogger(__name__)

DEFAULT_REACTION_KINDS: list[tuple[str, str]] = [
    ("👍", "like"),
    ("👎", "dislike"),
    ("❤️", "love"),
    ("😂", "laugh"),
    ("😮", "wow"),
    ("😢", "sad"),
    ("😡", "angry"),
]


async def seed_reaction_kinds(db: AsyncSession) -> int:
    """Insert missing catalog entries. Returns the number inserted."""
    result = await db.execute(select(ReactionKind.emoji))
    present = set(result.scalars().all())
    missing = [
        ReactionKind(emoji=emoji, name=name)
        for emoji, name in DEFAULT_REACTION_KINDS
        if emoji not in present
    ]
    db.add_all(missing)
    await db.commit()
    return len(missing)


async def setup_database(database_url: str) -> None:
    engine, session_factory = create_session_factory(database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")
        async with session_factory() as db:
            inserted = await seed_reaction_kinds(db)
        logger.info(f"Reaction catalog seeded ({inserted} new)")
    finally:
        await engine.dispose()


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, "text")
    asyncio.run(setup_database(settings.database_url))


if __name__ == "__main__":
    main()
