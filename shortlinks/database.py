"""Database engine and session factory setup for the shortlinks service.

This module provides SQLAlchemy async engine creation, session factories,
and schema lifecycle operations using PostgreSQL (asyncpg) as the backend.

Flow Diagram — Database Lifecycle
=================================
::
    ┌─────────────┐
    │ lifespan()  │
    │ startup     │
    └──────┬──────┘
           ▼
    ┌──────────────┐
    │ create_engine│
    │ _from_settings│
    └──────┬───────┘
           ▼
    ┌─────────────┐
    │ init_db()   │
    │ create_all  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Link store  │
    │ owns session│
    │ factory     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ close_db()  │
    │ (shutdown)  │
    └─────────────┘

How to Use
===========
**Step 1 — Build on startup**::
    engine = create_engine_from_settings(settings)
    await init_db(engine)

**Step 2 — Hand the session factory to a store**::
    store = SQLAlchemyLinkStore(create_session_factory(engine))

**Step 3 — Cleanup on shutdown**::
    await close_db(engine)

Key Behaviours
===============
- No engine exists at import time; the application lifespan owns it.
- Connection pooling is configured for PostgreSQL only; other URLs
  (SQLite in tests) use SQLAlchemy's default pool for their dialect.
- In production the asyncpg connection requires SSL without certificate
  verification, as managed Postgres providers expect.
- Tables are created automatically on application startup.

Classes:
    Base:  SQLAlchemy declarative base for all models.

Functions:
    create_engine_from_settings():  Builds the async engine.
    create_session_factory():  Builds an ``async_sessionmaker``.
    init_db():  Creates all tables.
    close_db():  Disposes the engine.
"""

from typing import Any

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from shortlinks.config import Settings

__all__ = ["Base", "create_engine_from_settings", "create_session_factory", "init_db", "close_db"]


class Base(DeclarativeBase):
    pass


def create_engine_from_settings(settings: Settings) -> AsyncEngine:
    options: dict[str, Any] = {"echo": False}
    if settings.DATABASE_URL.startswith("postgresql"):
        options.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
        if settings.is_production:
            options["connect_args"] = {"ssl": "require"}
    return create_async_engine(settings.DATABASE_URL, **options)


def create_session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    # Registers the Link table on Base.metadata.
    import shortlinks.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db(engine: AsyncEngine) -> None:
    await engine.dispose()
