"""Abstract base class for link stores.

This class establishes the contract every link store must honour, regardless of
the storage mechanism (PostgreSQL, SQLite, process memory).

Responsibilities:
    - Reserve a short code atomically ("insert if absent").
    - Increment a click counter atomically and return the target URL.
    - List, fetch and delete links.
    - Translate backend failures into shortlinks exceptions.

Example:
    >>> store = InMemoryLinkStore()
    >>> await store.insert(Link(code="abc123", target_url="https://example.com", clicks=0))
    >>> await store.record_click("abc123")
    'https://example.com'
    >>> (await store.get("abc123")).clicks
    1
"""

from abc import ABC, abstractmethod

from shortlinks.models import Link

__all__ = ["LinkStore"]


class LinkStore(ABC):
    """Interface for link stores.

    Methods:
        insert(link: Link) -> Link:
            Persist a new link.
            Raises CodeConflictError if the code already exists.
            Raises StoreError on connection or write failure.

        record_click(code: str) -> str:
            Increment clicks, stamp last_clicked_at and return target_url
            in one atomic step.
            Raises LinkNotFoundError if the code does not exist.

        list_all() -> list[Link]:
            All links, newest first.

        get(code: str) -> Link:
            Raises LinkNotFoundError if the code does not exist.

        delete(code: str) -> bool:
            Remove the link. Returns False if there was nothing to remove.

    Subclassing:
        Implementations must make insert and record_click safe under
        concurrent calls: two inserts of one code yield exactly one success,
        and N concurrent clicks raise the counter by exactly N.
    """

    @abstractmethod
    async def insert(self, link: Link) -> Link:
        """Insert ``link`` if its code is free.

        Args:
            link (Link):
                Fully populated link (code, target_url, clicks, created_at).

        Returns:
            Link: the stored link.

        Raises:
            CodeConflictError:
                If a link with the same code already exists.

            StoreError:
                If there is an error in the data store.
        """

    @abstractmethod
    async def record_click(self, code: str) -> str:
        """Atomically count a visit and return the target URL.

        Raises:
            LinkNotFoundError:
                If no link has this code. Nothing is created or modified.

            StoreError:
                If there is an error in the data store.
        """

    @abstractmethod
    async def list_all(self) -> list[Link]:
        pass

    @abstractmethod
    async def get(self, code: str) -> Link:
        pass

    @abstractmethod
    async def delete(self, code: str) -> bool:
        pass

    async def ping(self) -> None:
        """Check the backend is reachable. Raises StoreError if it is not."""

    async def close(self) -> None:
        pass
