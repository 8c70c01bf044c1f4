"""
Application error type and machine-readable error codes.

Services and route handlers raise AppError; the API layer renders it as
{"error": message, "code": code} with the carried HTTP status.
"""

from typing import Any


class ErrorCode:
    """Error codes returned in the "code" field of every error body."""

    # Authentication
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    MISSING_CREDENTIALS = "MISSING_CREDENTIALS"

    # Request validation
    VALIDATION_ERROR = "VALIDATION_ERROR"
    SEARCH_QUERY_REQUIRED = "SEARCH_QUERY_REQUIRED"
    INVALID_PROJECT_ID = "INVALID_PROJECT_ID"
    INVALID_WORK_ID = "INVALID_WORK_ID"

    # Resource absence
    NOT_FOUND = "NOT_FOUND"
    METHOD_NOT_ALLOWED = "METHOD_NOT_ALLOWED"
    PROFILES_NOT_FOUND = "PROFILES_NOT_FOUND"
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    PROJECT_NOT_FOUND = "PROJECT_NOT_FOUND"
    WORK_NOT_FOUND = "WORK_NOT_FOUND"

    # Conflicts
    PROFILE_EXISTS = "PROFILE_EXISTS"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"
    FOREIGN_KEY_CONSTRAINT = "FOREIGN_KEY_CONSTRAINT"

    # Rate limiting
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    WRITE_RATE_LIMIT_EXCEEDED = "WRITE_RATE_LIMIT_EXCEEDED"
    AUTH_RATE_LIMIT_EXCEEDED = "AUTH_RATE_LIMIT_EXCEEDED"
    SEARCH_RATE_LIMIT_EXCEEDED = "SEARCH_RATE_LIMIT_EXCEEDED"

    # Fallbacks
    REQUEST_TOO_LARGE = "REQUEST_TOO_LARGE"
    HTTP_ERROR = "HTTP_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class AppError(Exception):
    """
    An error that is safe to show to API clients.

    Attributes:
        message: Human readable description, returned as "error"
        status_code: HTTP status of the response
        code: One of the ErrorCode values
        details: Optional list of per-field problems
        headers: Extra response headers (e.g. Retry-After)
    """

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        code: str = ErrorCode.INTERNAL_ERROR,
        details: list[dict[str, Any]] | None = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.headers = headers

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"AppError({self.message!r}, {self.status_code}, {self.code!r})"


__all__ = ["AppError", "ErrorCode"]
