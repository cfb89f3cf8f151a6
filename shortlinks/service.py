"""Shortlinks Service Layer - Core Business Logic

This module provides the request-scoped service used by the HTTP routes. It
wires the code allocator and the click recorder to the injected link store and
wraps every operation with logging and Prometheus metrics.

Architecture Overview
=====================
::
    ┌──────────────────────────────────────────────────────────┐
    │                     LinkService                           │
    │  ┌────────────────┐  ┌────────────────┐  ┌─────────────┐  │
    │  │ CodeAllocator  │  │ ClickRecorder  │  │ list / get  │  │
    │  │                │  │                │  │ / delete    │  │
    │  │ • validate     │  │ • atomic +1    │  │             │  │
    │  │ • generate     │  │ • return URL   │  │             │  │
    │  │ • insert       │  │                │  │             │  │
    │  └────────────────┘  └────────────────┘  └─────────────┘  │
    └──────────────────────────────────────────────────────────┘
                               │
                               ▼
                 ┌──────────────────────────┐
                 │ LinkStore (injected)     │
                 │ PostgreSQL / in-memory   │
                 └──────────────────────────┘

Usage Examples
==============
```python
@router.post("/api/links")
async def create_link(
    payload: LinkCreate,
    service: LinkService = Depends(get_link_service),
) -> LinkCreated:
    link = await service.create_link(payload)
    return LinkCreated(short_url=service.short_url_for(link.code), code=link.code, target_url=link.target_url)
```
"""

import time

from prometheus_client import Counter, Histogram

from shortlinks.allocator import CodeAllocator
from shortlinks.enums import RequestStatus
from shortlinks.exceptions import CodeConflictError, LinkNotFoundError, LinkValidationError
from shortlinks.models import Link
from shortlinks.recorder import ClickRecorder
from shortlinks.schemas import LinkCreate

__all__ = ["LinkService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

LINK_CREATIONS_TOTAL = Counter(
    "shortlinks_creations_total",
    "Total link creation requests",
    ["status"],
)
LINK_REDIRECTS_TOTAL = Counter(
    "shortlinks_redirects_total",
    "Total redirect lookups",
    ["status"],
)
LINK_DELETIONS_TOTAL = Counter(
    "shortlinks_deletions_total",
    "Total link deletion requests",
    ["status"],
)
LINK_CREATION_DURATION = Histogram(
    "shortlinks_creation_duration_seconds",
    "Time taken to create short links",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)


def _status_for(exc: Exception) -> RequestStatus:
    if isinstance(exc, LinkValidationError):
        return RequestStatus.VALIDATION_ERROR
    if isinstance(exc, CodeConflictError):
        return RequestStatus.CONFLICT
    if isinstance(exc, LinkNotFoundError):
        return RequestStatus.NOT_FOUND
    return RequestStatus.ERROR


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================

class LinkService:
    """Service class for link operations.

    Example:
        >>> ctx = RequestContext(services=manager, store=store, generator=generator)
        >>> service = LinkService.from_context(ctx)
        >>> link = await service.create_link(LinkCreate(url="https://example.com"))
        >>> await service.record_click(link.code)
        'https://example.com'
    """

    def __init__(self, ctx: "RequestContext"):
        self._store = ctx.store
        self._logger = ctx.logger
        self._settings = ctx.settings
        self._allocator = CodeAllocator(ctx.store, ctx.generator, ctx.settings.SHORT_CODE_LENGTH)
        self._recorder = ClickRecorder(ctx.store)

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "LinkService":
        return cls(ctx)

    def short_url_for(self, code: str) -> str:
        return f"{self._settings.BASE_URL}/{code}"

    # ========================================================================
    # PUBLIC API METHODS
    # ========================================================================

    async def create_link(self, request: LinkCreate) -> Link:
        """Allocate a code for ``request.url`` and persist the link.

        Raises:
            InvalidUrlError, InvalidCodeFormatError: input rejected, store untouched.
            CodeConflictError: the code is taken. Not retried.
            StoreError: the store failed.
        """
        start_time = time.perf_counter()
        try:
            link = await self._allocator.allocate(request.url, request.custom_code)
        except Exception as exc:
            LINK_CREATION_DURATION.observe(time.perf_counter() - start_time)
            status = _status_for(exc)
            LINK_CREATIONS_TOTAL.labels(status=status).inc()
            if status is RequestStatus.ERROR:
                self._logger.error(f"Link creation error: {exc}")
            else:
                self._logger.warning(f"Link creation rejected: {exc}")
            raise

        duration = time.perf_counter() - start_time
        LINK_CREATION_DURATION.observe(duration)
        LINK_CREATIONS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"Link created: {link.code} -> {link.target_url} in {duration:.3f}s")
        return link

    async def record_click(self, code: str) -> str:
        try:
            target_url = await self._recorder.record_click(code)
        except Exception as exc:
            LINK_REDIRECTS_TOTAL.labels(status=_status_for(exc)).inc()
            raise
        LINK_REDIRECTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        return target_url

    async def list_links(self) -> list[Link]:
        return await self._store.list_all()

    async def get_link(self, code: str) -> Link:
        return await self._store.get(code)

    async def delete_link(self, code: str) -> bool:
        """Remove the link for ``code``.

        Raises:
            LinkNotFoundError: nothing to delete, including a repeated delete.
        """
        try:
            deleted = await self._store.delete(code)
        except Exception:
            LINK_DELETIONS_TOTAL.labels(status=RequestStatus.ERROR).inc()
            raise
        if not deleted:
            LINK_DELETIONS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            raise LinkNotFoundError(code)
        LINK_DELETIONS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.info(f"Link deleted: {code}")
        return True
