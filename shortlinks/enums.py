"""Shared enums for the shortlinks service.

Using enums instead of string literals for metric labels keeps label values
consistent across the codebase.
"""

from enum import StrEnum

__all__ = ["RequestStatus"]


class RequestStatus(StrEnum):
    """Outcome of a service operation, used as a Prometheus label."""

    SUCCESS = "success"
    VALIDATION_ERROR = "validation_error"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    ERROR = "error"
