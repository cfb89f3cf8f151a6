"""Short code allocation.

Flow Diagram — allocate()
=========================
::
    ┌─────────────┐
    │ target_url, │
    │ requested?  │
    └──────┬──────┘
           ▼
    ┌─────────────┐    no match
    │ URL matches ├──────────────► InvalidUrlError
    │ https?://.+ │
    └──────┬──────┘
           ▼
    ┌─────────────┐  yes  ┌──────────────┐  no match
    │ requested   ├──────►│ [A-Za-z0-9]  ├──────────► InvalidCodeFormatError
    │ code?       │       │ {6,8}        │
    └──────┬──────┘       └──────┬───────┘
        no │                     │
           ▼                     │
    ┌─────────────┐              │
    │ generator.  │              │
    │ generate_   │              │
    │ code(6)     │              │
    └──────┬──────┘              │
           ▼◄────────────────────┘
    ┌─────────────┐   duplicate
    │ store.insert├──────────────► CodeConflictError
    └──────┬──────┘
           ▼
         Link

Key Behaviours
===============
- Validation happens before the store is touched, so rejected input never
  mutates anything.
- There is no retry on conflict, for generated codes either; the caller
  decides whether to try again.
- Codes equal to a reserved top-level route are reported as conflicts.
"""

import re

from shortlinks.codes import CodeGenerator
from shortlinks.exceptions import CodeConflictError, InvalidCodeFormatError, InvalidUrlError
from shortlinks.models import Link, utcnow
from shortlinks.store import LinkStore

__all__ = ["CodeAllocator", "RESERVED_CODES", "URL_PATTERN", "CODE_PATTERN"]

URL_PATTERN = re.compile(r"^https?://.+")
CODE_PATTERN = re.compile(r"[A-Za-z0-9]{6,8}")
DEFAULT_CODE_LENGTH = 6

# Exact paths answered by app routes ahead of the redirect route. The static
# mount only claims ``/static/...``, so a bare ``static`` code still redirects.
RESERVED_CODES = frozenset({"healthz", "metrics"})


class CodeAllocator:
    def __init__(self, store: LinkStore, generator: CodeGenerator, code_length: int = DEFAULT_CODE_LENGTH):
        self._store = store
        self._generator = generator
        self._code_length = code_length

    async def allocate(self, target_url: str | None, requested_code: str | None = None) -> Link:
        if not isinstance(target_url, str) or not URL_PATTERN.match(target_url):
            raise InvalidUrlError()

        if requested_code:
            if not CODE_PATTERN.fullmatch(requested_code):
                raise InvalidCodeFormatError()
            code = requested_code
        else:
            code = self._generator.generate_code(self._code_length)

        if code in RESERVED_CODES:
            raise CodeConflictError(code)

        link = Link(code=code, target_url=target_url, clicks=0, created_at=utcnow())
        return await self._store.insert(link)
