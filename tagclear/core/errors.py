"""Error kinds surfaced by the persistence layer."""

from __future__ import annotations


class TagClearError(Exception):
    """Base exception for tagclear."""


class ConnectionFailure(TagClearError):
    """Raised when the backing store is unreachable or refuses the operation."""


class ConstraintViolation(TagClearError):
    """Raised when a write would break a store constraint (e.g. a tag without a user)."""


class NotFound(TagClearError):
    """Raised when a lookup expecting exactly one row finds zero or several."""
