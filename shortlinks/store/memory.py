"""In-memory implementation of the link store.

Used by tests and local experiments. A single ``asyncio.Lock`` serialises every
operation, which gives the same guarantees the database provides for the SQL
store: one winner per code and no lost click increments.

Stored links are private copies; callers always receive fresh ``Link``
instances, so mutating a returned object never changes the store.
"""

import asyncio
import itertools

from shortlinks.exceptions import CodeConflictError, LinkNotFoundError
from shortlinks.models import Link, utcnow
from shortlinks.store.base import LinkStore

__all__ = ["InMemoryLinkStore"]


def _copy(link: Link) -> Link:
    return Link(
        id=link.id,
        code=link.code,
        target_url=link.target_url,
        clicks=link.clicks,
        created_at=link.created_at,
        last_clicked_at=link.last_clicked_at,
    )


class InMemoryLinkStore(LinkStore):
    def __init__(self) -> None:
        self._links: dict[str, Link] = {}
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._links)

    async def insert(self, link: Link) -> Link:
        async with self._lock:
            if link.code in self._links:
                raise CodeConflictError(link.code)
            stored = _copy(link)
            stored.id = next(self._ids)
            if stored.clicks is None:
                stored.clicks = 0
            if stored.created_at is None:
                stored.created_at = utcnow()
            self._links[stored.code] = stored
            link.id = stored.id
            return _copy(stored)

    async def record_click(self, code: str) -> str:
        async with self._lock:
            link = self._links.get(code)
            if link is None:
                raise LinkNotFoundError(code)
            link.clicks += 1
            link.last_clicked_at = utcnow()
            return link.target_url

    async def list_all(self) -> list[Link]:
        async with self._lock:
            ordered = sorted(self._links.values(), key=lambda link: (link.created_at, link.id), reverse=True)
            return [_copy(link) for link in ordered]

    async def get(self, code: str) -> Link:
        async with self._lock:
            link = self._links.get(code)
            if link is None:
                raise LinkNotFoundError(code)
            return _copy(link)

    async def delete(self, code: str) -> bool:
        async with self._lock:
            return self._links.pop(code, None) is not None
