"""Database Infrastructure — SQLAlchemy declarative base for the SQL backend.

Invariants:
    - Single async engine per process (owned by DatabaseSessionManager)
    - All sessions are async (AsyncSession)

Design Decisions:
    - aiosqlite for SQLite, asyncpg for PostgreSQL: the two SQL variants share one backend
"""
