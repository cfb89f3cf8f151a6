"""SQLAlchemy implementation of the link store.

Every operation runs in its own short transaction and relies on the database
for atomicity:

- insert: plain ``INSERT``; the unique index on ``short_code`` rejects
  duplicates and the resulting ``IntegrityError`` becomes ``CodeConflictError``.
- record_click: ``UPDATE ... SET clicks = clicks + 1 ... RETURNING original_url``.
- delete: ``DELETE ... RETURNING id``.

Works with PostgreSQL (asyncpg) in production and SQLite (aiosqlite) in tests.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shortlinks.exceptions import CodeConflictError, LinkNotFoundError, StoreError
from shortlinks.models import Link
from shortlinks.store.base import LinkStore

__all__ = ["SQLAlchemyLinkStore"]

logger = logging.getLogger("shortlinks")


class SQLAlchemyLinkStore(LinkStore):
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._sessions = session_factory

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncSession]:
        async with self._sessions() as session:
            try:
                async with session.begin():
                    yield session
            except IntegrityError:
                raise
            except (SQLAlchemyError, OSError) as exc:
                logger.error(f"Store failure during {operation}: {exc}")
                raise StoreError(f"Failed to {operation}") from exc

    async def insert(self, link: Link) -> Link:
        try:
            async with self._transaction("create link") as session:
                session.add(link)
        except IntegrityError as exc:
            raise CodeConflictError(link.code) from exc
        return link

    async def record_click(self, code: str) -> str:
        stmt = (
            update(Link)
            .where(Link.code == code)
            .values(clicks=Link.clicks + 1, last_clicked_at=func.now())
            .returning(Link.target_url)
            .execution_options(synchronize_session=False)
        )
        async with self._transaction("record click") as session:
            target_url = (await session.execute(stmt)).scalar_one_or_none()
        if target_url is None:
            raise LinkNotFoundError(code)
        return target_url

    async def list_all(self) -> list[Link]:
        stmt = select(Link).order_by(Link.created_at.desc(), Link.id.desc())
        async with self._transaction("fetch links") as session:
            return list((await session.execute(stmt)).scalars().all())

    async def get(self, code: str) -> Link:
        async with self._transaction("fetch link") as session:
            link = (await session.execute(select(Link).where(Link.code == code))).scalar_one_or_none()
        if link is None:
            raise LinkNotFoundError(code)
        return link

    async def delete(self, code: str) -> bool:
        stmt = delete(Link).where(Link.code == code).returning(Link.id).execution_options(synchronize_session=False)
        async with self._transaction("delete link") as session:
            deleted_id = (await session.execute(stmt)).scalar_one_or_none()
        return deleted_id is not None

    async def ping(self) -> None:
        async with self._transaction("reach database") as session:
            await session.execute(text("SELECT 1"))
