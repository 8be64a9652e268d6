"""
Response Envelope

Every endpoint answers with the same envelope::

    {"success": true, "message": "...", "data": {...}, "error": null, "timestamp": "..."}

Errors use the same shape with ``success=false`` and the error code in
``error``. The exception handlers registered here translate service errors
and HTTP exceptions into that shape.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from starlette.exceptions import HTTPException

from app.core.exceptions import ServiceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard response envelope."""

    success: bool
    message: str
    data: T | None = None
    error: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def ok(cls, data: Any = None, message: str = "Request successful") -> "ApiResponse":
        return cls(success=True, message=message, data=data)

    @classmethod
    def fail(cls, error: str, message: str = "Request failed") -> "ApiResponse":
        return cls(success=False, message=message, error=error)


def _error_response(
    status_code: int,
    error: str,
    message: str,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse.fail(error=error, message=message)
    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )


async def service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    return _error_response(exc.status_code, exc.error_code, exc.message)


async def http_exception_handler(_request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTPExceptions, including structured ``{"error", "message"}`` details."""
    if isinstance(exc.detail, dict):
        error = str(exc.detail.get("error", "HTTP_ERROR"))
        message = str(exc.detail.get("message", "Request failed"))
    else:
        error = "HTTP_ERROR"
        message = str(exc.detail)

    return _error_response(exc.status_code, error, message, headers=exc.headers)


async def validation_error_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = "; ".join(
        f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in exc.errors()
    )
    return _error_response(422, "VALIDATION_ERROR", errors)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "INTERNAL_ERROR",
        "An unexpected error occurred.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-producing exception handlers on the app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


__all__ = ["ApiResponse", "register_exception_handlers"]
