"""
Application-level exceptions.

Every exception the domain raises carries a `category`. The category alone decides
the HTTP status and title of the problem response (see api/v1/error_handlers.py), so
adding a new exception never requires touching the handler, only picking a category.
"""

from enum import Enum
from typing import Iterable, Mapping


class FaultCategory(Enum):
    """Fault buckets and the (status, title) pair each one maps to."""

    NOT_FOUND = (404, "Not Found")
    BAD_REQUEST = (400, "Bad Request")
    BUSINESS_RULE = (409, "Business Rule Violation")
    VALIDATION = (400, "Validation Error")
    PERSISTENCE_CONFLICT = (409, "Database Update Error")
    UNCLASSIFIED = (500, "Internal Server Error")

    @property
    def status(self) -> int:
        return self.value[0]

    @property
    def title(self) -> str:
        return self.value[1]


class LibraryError(Exception):
    """
    Base exception for service and repository errors.

    - message: human-friendly message (safe to show to clients for most categories)
    - category: class-level FaultCategory used to build the HTTP response
    """

    category: FaultCategory = FaultCategory.UNCLASSIFIED

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotFoundError(LibraryError):
    category = FaultCategory.NOT_FOUND

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class BadRequestError(LibraryError):
    category = FaultCategory.BAD_REQUEST


class BusinessRuleError(LibraryError):
    """A request that is well-formed but conflicts with the current state (e.g. a second active loan)."""
    category = FaultCategory.BUSINESS_RULE


class ValidationFailedError(LibraryError):
    """Raised when a DTO fails its rule table. `violations` maps wire field name -> messages."""
    category = FaultCategory.VALIDATION

    def __init__(self, violations: Mapping[str, list[str]], message: str = "One or more validation errors occurred"):
        super().__init__(message)
        self.violations = {field: list(messages) for field, messages in violations.items()}

    def __str__(self) -> str:
        fields = ", ".join(self.violations)
        return f"{self.message} (fields: {fields})" if fields else self.message


class PersistenceConflictError(LibraryError):
    """
    The database refused a write (unique, not-null, foreign-key or check constraint).

    - kind: constraint kind reported by the integrity classifier (for logs)
    - fields: best-effort column names (for logs)
    - constraint: DB constraint name (for logs only, never sent to clients)
    """
    category = FaultCategory.PERSISTENCE_CONFLICT

    def __init__(self, message: str, *, kind: str | None = None,
                 fields: Iterable[str] | None = None, constraint: str | None = None):
        super().__init__(message)
        self.kind = kind
        self.fields = list(fields) if fields else None
        self.constraint = constraint

    def __str__(self) -> str:
        parts = []
        if self.kind:
            parts.append(f"kind: {self.kind}")
        if self.fields:
            parts.append(f"fields: {', '.join(self.fields)}")
        if self.constraint:
            parts.append(f"constraint: {self.constraint}")
        if parts:
            return f"{self.message} ({'; '.join(parts)})"
        return self.message


__all__ = [
    "FaultCategory",
    "LibraryError",
    "NotFoundError",
    "BadRequestError",
    "BusinessRuleError",
    "ValidationFailedError",
    "PersistenceConflictError",
]
