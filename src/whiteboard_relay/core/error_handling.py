"""Error handling and exception handlers for whiteboard-relay.

Every HTTP error is rendered as a structured JSON body that carries the
request's correlation ID.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog
from litestar import Response
from litestar.status_codes import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

if TYPE_CHECKING:
    from litestar import Request
    from litestar.exceptions import HTTPException, ValidationException

logger = structlog.get_logger(__name__)

STATUS_CODES = {
    400: "bad_request",
    404: "not_found",
    405: "method_not_allowed",
    409: "conflict",
    422: "validation_error",
    429: "rate_limited",
    500: "internal_error",
    503: "service_unavailable",
}


@dataclass
class ErrorDetail:
    """Details about a specific error."""

    field: str | None = None
    message: str = ""
    code: str = "error"


@dataclass
class ErrorResponse:
    """Structured error response format."""

    status: str = "error"
    message: str = ""
    code: str = "internal_error"
    correlation_id: str | None = None
    details: list[ErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: dict[str, Any] = {
            "status": self.status,
            "message": self.message,
            "code": self.code,
        }
        if self.correlation_id:
            result["correlation_id"] = self.correlation_id
        if self.details:
            result["details"] = [{"field": d.field, "message": d.message, "code": d.code} for d in self.details]
        return result

    def to_response(self, status_code: int) -> Response[dict[str, Any]]:
        return Response(content=self.to_dict(), status_code=status_code, media_type="application/json")


def get_correlation_id(request: Request) -> str | None:
    """Extract correlation ID from request state or headers."""
    correlation_id = request.scope.get("state", {}).get("correlation_id")
    if correlation_id:
        return correlation_id
    return request.headers.get("X-Correlation-ID") or request.headers.get("X-Request-ID")


def validation_exception_handler(request: Request, exc: ValidationException) -> Response[dict[str, Any]]:
    """Handle request validation errors with per-field details."""
    correlation_id = get_correlation_id(request)

    details: list[ErrorDetail] = []
    for error in exc.extra or []:
        if isinstance(error, dict):
            details.append(
                ErrorDetail(
                    field=error.get("key") or None,
                    message=error.get("message", str(error)),
                    code="validation_error",
                )
            )
        else:
            details.append(ErrorDetail(message=str(error), code="validation_error"))
    if not details:
        details.append(ErrorDetail(message=str(exc.detail), code="validation_error"))

    logger.warning(
        "Validation error",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        error_count=len(details),
    )

    return ErrorResponse(
        message="Validation failed",
        code="validation_error",
        correlation_id=correlation_id,
        details=details,
    ).to_response(HTTP_422_UNPROCESSABLE_ENTITY)


def http_exception_handler(request: Request, exc: HTTPException) -> Response[dict[str, Any]]:
    """Handle HTTP exceptions, including router 404/405s."""
    correlation_id = get_correlation_id(request)
    error_code = STATUS_CODES.get(exc.status_code, "error")

    log_level = "warning" if exc.status_code < 500 else "error"
    getattr(logger, log_level)(
        "HTTP exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        status_code=exc.status_code,
        error_code=error_code,
    )

    return ErrorResponse(
        message=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
        code=error_code,
        correlation_id=correlation_id,
    ).to_response(exc.status_code)


def room_not_found_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle RoomNotFoundError exceptions."""
    correlation_id = get_correlation_id(request)
    room_id = getattr(exc, "room_id", "unknown")

    logger.warning(
        "Room not found",
        correlation_id=correlation_id,
        room_id=room_id,
        path=request.url.path,
    )

    return ErrorResponse(
        message=f"Room not found: {room_id}",
        code="room_not_found",
        correlation_id=correlation_id,
        details=[ErrorDetail(field="room_id", message=str(exc), code="not_found")],
    ).to_response(HTTP_404_NOT_FOUND)


def relay_error_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle any other RelayError as a bad request."""
    correlation_id = get_correlation_id(request)

    logger.warning("Relay error", correlation_id=correlation_id, error=str(exc), path=request.url.path)

    return ErrorResponse(
        message=str(exc),
        code="relay_error",
        correlation_id=correlation_id,
    ).to_response(HTTP_400_BAD_REQUEST)


def generic_exception_handler(request: Request, exc: Exception) -> Response[dict[str, Any]]:
    """Handle unexpected exceptions with a generic error response.

    Logs the full exception but returns a safe message to the client.
    """
    correlation_id = get_correlation_id(request)

    logger.exception(
        "Unhandled exception",
        correlation_id=correlation_id,
        path=request.url.path,
        method=request.method,
        exc_info=exc,
    )

    return ErrorResponse(
        message="An unexpected error occurred. Please try again later.",
        code="internal_error",
        correlation_id=correlation_id,
    ).to_response(HTTP_500_INTERNAL_SERVER_ERROR)


def get_exception_handlers() -> dict:
    """Get all exception handlers for the application.

    Returns:
        Dictionary mapping exception types to handler functions.
    """
    from litestar.exceptions import HTTPException, ValidationException

    from whiteboard_relay.exceptions import RelayError, RoomNotFoundError

    return {
        ValidationException: validation_exception_handler,
        HTTPException: http_exception_handler,
        RoomNotFoundError: room_not_found_handler,
        RelayError: relay_error_handler,
        Exception: generic_exception_handler,
    }
