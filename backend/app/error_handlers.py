"""
Exception handlers for FastAPI.

Every error leaves the API as {"error": message, "code": CODE} plus
"details" for validation failures. Outside production, with DEBUG on, the
body also carries the formatted traceback under "stack".
"""

import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from meapi.errors import AppError, ErrorCode
from meapi.logging import get_context, get_logger

from .auth.dependencies import get_client_ip
from .config import get_settings

logger = get_logger("backend.errors")

HTTP_STATUS_CODES = {
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.METHOD_NOT_ALLOWED,
    status.HTTP_413_REQUEST_ENTITY_TOO_LARGE: ErrorCode.REQUEST_TOO_LARGE,
}

UNIQUE_VIOLATION_MARKERS = ("unique", "duplicate")


def _request_context(request: Request) -> dict[str, Any]:
    """Request fields attached to every error log line."""
    return {
        "method": request.method,
        "path": request.url.path,
        "ip": get_client_ip(request),
        "request_id": get_context().get("request_id", "-"),
    }


def _error_response(
    exc: BaseException,
    error: AppError,
) -> JSONResponse:
    payload = error.to_dict()
    settings = get_settings()
    if settings.debug and not settings.is_production:
        payload["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=error.status_code, content=payload, headers=error.headers)


def validation_details(exc: RequestValidationError) -> list[dict[str, str]]:
    """
    Flatten pydantic errors into {field, message, location} entries.

    location is where the value came from (body, query, path); field is the
    dotted path inside it, e.g. "skills.0.name".
    """
    details = []
    for err in exc.errors():
        loc = list(err.get("loc", ()))
        location = str(loc[0]) if loc else "body"
        field = ".".join(str(part) for part in loc[1:]) or location
        message = str(err.get("msg", "Invalid value"))
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        details.append({"field": field, "message": message, "location": location})
    return details


def classify_integrity_error(exc: IntegrityError) -> AppError:
    """Unique violations are conflicts; every other constraint failure is a bad request."""
    text = str(exc.orig).lower()
    if any(marker in text for marker in UNIQUE_VIOLATION_MARKERS):
        return AppError(
            "Duplicate field value",
            status_code=status.HTTP_409_CONFLICT,
            code=ErrorCode.DUPLICATE_ENTRY,
        )
    return AppError(
        "Foreign key constraint failed",
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.FOREIGN_KEY_CONSTRAINT,
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        log = logger.error if exc.status_code >= 500 else logger.warning
        log(
            "app_error",
            error=exc.message,
            code=exc.code,
            status_code=exc.status_code,
            **_request_context(request),
        )
        return _error_response(exc, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        details = validation_details(exc)
        logger.warning("validation_error", errors=details, **_request_context(request))
        return _error_response(
            exc,
            AppError(
                "Validation failed",
                status_code=status.HTTP_400_BAD_REQUEST,
                code=ErrorCode.VALIDATION_ERROR,
                details=details,
            ),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        code = HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.HTTP_ERROR)
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = f"Not found - {request.url.path}"
        else:
            message = str(exc.detail)
        logger.warning(
            "http_exception",
            error=message,
            status_code=exc.status_code,
            **_request_context(request),
        )
        return _error_response(
            exc,
            AppError(message, status_code=exc.status_code, code=code, headers=exc.headers),
        )

    @app.exception_handler(IntegrityError)
    async def integrity_error_handler(request: Request, exc: IntegrityError):
        error = classify_integrity_error(exc)
        logger.warning(
            "integrity_error",
            code=error.code,
            error=str(exc.orig),
            **_request_context(request),
        )
        return _error_response(exc, error)

    @app.exception_handler(SQLAlchemyError)
    async def database_error_handler(request: Request, exc: SQLAlchemyError):
        logger.exception(
            "database_error",
            error=str(exc),
            error_type=type(exc).__name__,
            **_request_context(request),
        )
        return _error_response(
            exc,
            AppError(
                "Database error",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.DATABASE_ERROR,
            ),
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception):
        # Full details stay server-side
        logger.exception(
            "unhandled_exception",
            error=str(exc),
            error_type=type(exc).__name__,
            **_request_context(request),
        )
        return _error_response(
            exc,
            AppError(
                "Something went wrong",
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                code=ErrorCode.INTERNAL_ERROR,
            ),
        )
