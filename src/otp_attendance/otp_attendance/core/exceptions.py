from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class ConfigurationError(DomainError):
    """Raised at startup when settings are missing or malformed."""


class PersistenceError(DomainError):
    """Raised when the attendance store fails an operation."""

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"{operation} failed{detail}")


class DuplicateEventError(PersistenceError):
    """The (user, date, kind) slot is already taken."""
