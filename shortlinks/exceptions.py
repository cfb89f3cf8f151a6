"""Exceptions raised by the allocator, the click recorder and the link stores.

Classes:
    LinkError:
        Base class for every shortlinks error.

    LinkValidationError:
        Input rejected before the store is touched.

    InvalidUrlError:
        Target URL is missing or does not match ``^https?://.+``.

    InvalidCodeFormatError:
        Requested code does not match ``^[A-Za-z0-9]{6,8}$``.

    CodeConflictError:
        The short code is already taken.

    LinkNotFoundError:
        No link exists for the short code.

    StoreError:
        The data store failed (connection issues, timeouts, driver errors).

Example:
    >>> from shortlinks.exceptions import CodeConflictError
    >>> raise CodeConflictError("abc123")
    Traceback (most recent call last):
        ...
    shortlinks.exceptions.CodeConflictError: Code 'abc123' already exists
"""

__all__ = [
    "LinkError",
    "LinkValidationError",
    "InvalidUrlError",
    "InvalidCodeFormatError",
    "CodeConflictError",
    "LinkNotFoundError",
    "StoreError",
]


class LinkError(Exception):
    """Generic base class for shortlinks exceptions."""

    pass


class LinkValidationError(LinkError):
    """Client input that fails validation."""

    pass


class InvalidUrlError(LinkValidationError):
    def __init__(self, message: str = "Invalid URL") -> None:
        super().__init__(message)


class InvalidCodeFormatError(LinkValidationError):
    def __init__(self, message: str = "Custom code must be 6-8 alphanumeric characters") -> None:
        super().__init__(message)


class CodeConflictError(LinkError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Code '{code}' already exists")


class LinkNotFoundError(LinkError):
    def __init__(self, code: str) -> None:
        self.code = code
        super().__init__(f"Link '{code}' not found")


class StoreError(LinkError):
    """Exception raised when the data store fails.

    e.g. connection issues, timeouts, driver errors.
    """

    pass
