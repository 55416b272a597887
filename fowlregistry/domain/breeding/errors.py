"""
Domain-specific errors for the breeding bounded context.

Each one specialises a shared error kind from fowlregistry.domain.errors.
No framework imports allowed.
"""

from fowlregistry.domain.errors import (
    InvalidArgumentError,
    NotFoundError,
    PermissionDeniedError,
)


class PedigreeRootNotFoundError(NotFoundError):
    """Raised when the fowl a family tree was requested for does not exist."""

    def __init__(self, fowl_id: str) -> None:
        super().__init__(f"Fowl not found: {fowl_id}")
        self.fowl_id = fowl_id


class VaccinationEventNotFoundError(NotFoundError):
    def __init__(self, event_id: str) -> None:
        super().__init__(f"Vaccination event not found: {event_id}")
        self.event_id = event_id


class FowlAccessDeniedError(PermissionDeniedError):
    """Raised when a caller changes health records of a fowl they do not own."""

    def __init__(self, fowl_id: str) -> None:
        super().__init__(f"Caller does not own fowl {fowl_id}")
        self.fowl_id = fowl_id


class VaccinationAlreadyCompletedError(InvalidArgumentError):
    def __init__(self, event_id: str) -> None:
        super().__init__(f"Vaccination event already completed: {event_id}")
        self.event_id = event_id


class InvalidVaccinationError(InvalidArgumentError):
    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid vaccination event: {reason}")
        self.reason = reason


class InvalidAnalyticsPeriodError(InvalidArgumentError):
    """Raised when a custom analytics window has missing or inverted bounds."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Invalid analytics period: {reason}")
        self.reason = reason


class UnsupportedExportFormatError(InvalidArgumentError):
    def __init__(self, export_format: str) -> None:
        super().__init__(f"Unsupported export format: {export_format}")
        self.export_format = export_format
