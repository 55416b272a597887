"""
Error kinds shared by every bounded context.

Each domain error belongs to exactly one kind. The interface layer maps
kinds (not individual errors) to responses, so clients can branch on a
small, stable set of names:

    unauthenticated | not-found | permission-denied | invalid-argument | internal

No framework imports allowed.
"""

from enum import Enum


class ErrorKind(Enum):
    """Named error kinds exposed at the API boundary."""

    UNAUTHENTICATED = "unauthenticated"
    NOT_FOUND = "not-found"
    PERMISSION_DENIED = "permission-denied"
    INVALID_ARGUMENT = "invalid-argument"
    INTERNAL = "internal"


class DomainError(Exception):
    """Base error for all domain errors."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class UnauthenticatedError(DomainError):
    """Raised when an operation requires a caller identity and none was given."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "User must be authenticated") -> None:
        super().__init__(message)


class NotFoundError(DomainError):
    """Base for missing-record errors."""

    kind = ErrorKind.NOT_FOUND


class PermissionDeniedError(DomainError):
    """Base for authorization failures on an existing record."""

    kind = ErrorKind.PERMISSION_DENIED


class InvalidArgumentError(DomainError):
    """Base for client-correctable input and integrity errors."""

    kind = ErrorKind.INVALID_ARGUMENT


class InternalError(DomainError):
    """Base for failures that are opaque to the caller."""

    kind = ErrorKind.INTERNAL
