"""Database Infrastructure — declarative Base, standalone session factory, catalog seeding.

Invariants:
    - Single async engine per process for the API (infrastructure/database.py)
    - Scripts (seed, migrations) build their own short-lived engine

Design Decisions:
    - asyncpg driver for PostgreSQL, aiosqlite for tests and local experiments
"""
