"""Exception handlers producing the ``{error, message, timestamp}`` error body."""

from __future__ import annotations

import logging
import traceback
from http import HTTPStatus
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notifyhub.domain.exceptions import ValidationError

from .schemas import ErrorDetail, ErrorResponse

logger = logging.getLogger(__name__)

VALIDATION_ERROR = "Validation Error"
INTERNAL_SERVER_ERROR = "Internal Server Error"


def _error_body(payload: ErrorResponse) -> dict[str, Any]:
    return payload.model_dump(mode="json", exclude_none=True)


def _field_path(location: tuple[Any, ...] | list[Any]) -> str:
    parts = [str(part) for part in location if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


def _status_phrase(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return "Error"


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        ErrorDetail(field=_field_path(error.get("loc", ())), message=error.get("msg", "Invalid value"))
        for error in exc.errors()
    ]
    logger.info("Rejected %s %s: %d validation errors", request.method, request.url.path, len(details))
    body = ErrorResponse(
        error=VALIDATION_ERROR,
        message="Request data is invalid",
        details=details,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(body))


async def domain_validation_handler(request: Request, exc: ValidationError) -> JSONResponse:
    body = ErrorResponse(
        error=VALIDATION_ERROR,
        message=exc.message,
        details=[ErrorDetail(**detail) for detail in exc.details] or None,
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error_body(body))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else _status_phrase(exc.status_code)
    body = ErrorResponse(error=_status_phrase(exc.status_code), message=message)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(body),
        headers=getattr(exc, "headers", None),
    )


def build_unhandled_exception_handler(expose_stack: bool):
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        body = ErrorResponse(
            error=INTERNAL_SERVER_ERROR,
            message="An internal server error occurred",
            stack="".join(traceback.format_exception(exc)) if expose_stack else None,
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=_error_body(body)
        )

    return unhandled_exception_handler


def register_exception_handlers(app: FastAPI, *, expose_stack: bool) -> None:
    """Install the JSON error handlers on ``app``."""

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ValidationError, domain_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, build_unhandled_exception_handler(expose_stack))


__all__ = ["register_exception_handlers"]
