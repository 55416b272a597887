"""
Centralized error handlers for FastAPI.

Maps domain error kinds to HTTP responses with the body
{"error": <kind>, "detail": <message>}. Internal errors never expose
their message; unexpected exceptions collapse to the internal kind.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fowlregistry.domain.errors import DomainError, ErrorKind

logger = logging.getLogger(__name__)

HTTP_400 = 400
HTTP_401 = 401
HTTP_403 = 403
HTTP_404 = 404
HTTP_422 = 422
HTTP_500 = 500

STATUS_BY_KIND = {
    ErrorKind.UNAUTHENTICATED: HTTP_401,
    ErrorKind.NOT_FOUND: HTTP_404,
    ErrorKind.PERMISSION_DENIED: HTTP_403,
    ErrorKind.INVALID_ARGUMENT: HTTP_400,
    ErrorKind.INTERNAL: HTTP_500,
}

INTERNAL_DETAIL = "Internal server error"


def _error_response(status_code: int, error: str, detail: str | None = None) -> JSONResponse:
    """Build a consistent JSON error response."""
    body: dict[str, str | None] = {"error": error}
    if detail:
        body["detail"] = detail
    return JSONResponse(status_code=status_code, content=body)


def register_error_handlers(app: FastAPI) -> None:
    """Register all domain error handlers on the FastAPI application.

    Args:
        app: The FastAPI application instance.
    """

    @app.exception_handler(DomainError)
    async def handle_domain_error(_request: Request, exc: DomainError) -> JSONResponse:
        """Map any domain error to the response of its kind."""
        status_code = STATUS_BY_KIND.get(exc.kind, HTTP_500)
        if exc.kind is ErrorKind.INTERNAL:
            logger.error("%s: %s", type(exc).__name__, exc.message)
            return _error_response(status_code, exc.kind.value, INTERNAL_DETAIL)
        logger.warning("%s: %s", type(exc).__name__, exc.message)
        return _error_response(status_code, exc.kind.value, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Handle malformed request bodies and query parameters."""
        fields = [".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()]
        logger.warning("Request validation failed: %s", fields)
        return _error_response(
            HTTP_422,
            ErrorKind.INVALID_ARGUMENT.value,
            "Invalid request: " + ", ".join(fields),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected(_request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unexpected errors. Never exposes internals."""
        logger.exception("Unexpected error: %s", type(exc).__name__)
        return _error_response(HTTP_500, ErrorKind.INTERNAL.value, INTERNAL_DETAIL)
