"""Redirect-time click recording.

The recorder is the only code path that changes ``clicks``. It delegates the
whole read-modify-write to a single atomic store operation, so concurrent
redirects never lose an increment.
"""

from shortlinks.store import LinkStore

__all__ = ["ClickRecorder"]


class ClickRecorder:
    def __init__(self, store: LinkStore):
        self._store = store

    async def record_click(self, code: str) -> str:
        """Count one visit to ``code`` and return its target URL.

        Raises:
            LinkNotFoundError: if the code is unknown; nothing is written.
            StoreError: if the store fails.
        """
        return await self._store.record_click(code)
