"""Mindshare API error handling.

Global exception handlers, all producing the shared error envelope:
- MindshareHttpError: route-raised errors with an explicit status and code
- MindshareError: domain errors escaping a route map to 400 INVALID_INPUT
- HTTPException: FastAPI/Starlette HTTP exceptions
- RequestValidationError: request schema errors map to 422
- Exception: catch-all, 500 with no internals exposed
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException

from mindshare.api.error_model import get_error_code_for_status, make_error_response
from mindshare.errors import MindshareError

logger = logging.getLogger(__name__)

INVALID_INPUT = "INVALID_INPUT"


class ErrorResponse(BaseModel):
    """Error envelope schema."""

    code: str
    message: str
    details: dict[str, Any] | None = None
    request_id: str | None = None


class MindshareHttpError(Exception):
    """Application-level HTTP error with structured error envelope.

    Attributes:
        status_code: HTTP status code.
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional dict with additional error context.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details

    @classmethod
    def invalid_input(cls, exc: MindshareError) -> MindshareHttpError:
        return cls(400, INVALID_INPUT, exc.message, exc.details or None)


async def mindshare_http_error_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, MindshareHttpError)

    return make_error_response(
        request,
        code=exc.code,
        message=exc.message,
        http_status=exc.status_code,
        details=exc.details,
    )


async def mindshare_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map a domain error that escaped a route to 400 INVALID_INPUT."""
    assert isinstance(exc, MindshareError)

    logger.info("Rejected request: %s", exc)
    return make_error_response(
        request,
        code=INVALID_INPUT,
        message=exc.message,
        http_status=400,
        details=exc.details or None,
    )


async def http_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    assert isinstance(exc, HTTPException)

    message = str(exc.detail) if exc.detail else f"HTTP {exc.status_code}"
    return make_error_response(
        request,
        code=get_error_code_for_status(exc.status_code),
        message=message,
        http_status=exc.status_code,
        details=None,
    )


async def request_validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Map pydantic request errors to 422 with field paths and messages only."""
    assert isinstance(exc, RequestValidationError)

    safe_details: list[dict[str, Any]] = []
    for error in exc.errors():
        loc = error.get("loc", ())
        safe_loc = [str(part) for part in loc if part not in ("body", "query", "path")]
        safe_details.append(
            {
                "field": ".".join(safe_loc) if safe_loc else "request",
                "message": error.get("msg", "Validation error"),
            }
        )

    return make_error_response(
        request,
        code="REQUEST_VALIDATION_FAILED",
        message="Request validation failed",
        http_status=422,
        details={"errors": safe_details} if safe_details else None,
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fail closed: 500 with a generic message; the traceback goes to the log only."""
    request_id = getattr(request.state, "request_id", None)

    logger.exception(
        "Unhandled exception: %s",
        type(exc).__name__,
        extra={"request_id": request_id},
    )

    return make_error_response(
        request,
        code="INTERNAL_ERROR",
        message="An internal error occurred",
        http_status=500,
        details=None,
    )
