"""Pagination engine exceptions.

The engine recovers locally from bad cursors, limits and filter values, so
the only error it raises itself is ``InvalidCursorError``, and only when
strict cursor handling is switched on. Storage errors pass through untouched.
"""
from __future__ import annotations

from typing import Any


class PaginationError(Exception):
    """Base exception for pagination engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize pagination error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidCursorError(PaginationError):
    """A cursor could not be decoded for the requested entity.

    Raised only by paginators configured with ``strict_cursors=True``.

    Attributes:
        entity: Entity the cursor was presented to
    """

    def __init__(self, entity: str):
        self.entity = entity
        super().__init__("Invalid pagination cursor", details={"entity": entity})


__all__ = ["InvalidCursorError", "PaginationError"]
