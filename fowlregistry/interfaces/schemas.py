"""
Pydantic schemas shared by every router.

API bodies use camelCase field names, matching the stored record shapes
clients already know. Python code uses snake_case; aliases bridge the two.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema serialised with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class HealthResponse(BaseModel):
    """Response schema for the health check endpoint."""

    status: str
    version: str


class ErrorResponse(BaseModel):
    """Standard error response returned by all error handlers.

    Attributes:
        error: One of unauthenticated, not-found, permission-denied,
            invalid-argument, internal.
        detail: Human-readable message, generic for internal errors.
    """

    error: str
    detail: str | None = None


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    401: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}
