"""
Rate limiting dependencies using the meapi sliding-window limiter.

Every budget is keyed by client IP.
"""

from fastapi import Request, Response, status

from meapi.errors import AppError
from meapi.logging import get_logger
from meapi.security import get_rate_limiter

from ..auth.dependencies import get_client_ip
from ..config import get_settings

logger = get_logger("api.rate_limit")


def _check_limit(
    limiter_name: str,
    request: Request,
    response: Response | None = None,
) -> None:
    """
    Common logic to check rate limit and set headers.
    """
    if not get_settings().rate_limit_enabled:
        return

    limiter = get_rate_limiter()
    client_ip = get_client_ip(request)
    result = limiter.check(limiter_name, f"ip:{client_ip}")

    if response is not None:
        for key, value in result.to_headers().items():
            response.headers[key] = value

    if not result.allowed:
        config = limiter.get_config(limiter_name)
        logger.warning(
            "rate_limit_rejected",
            limiter=limiter_name,
            ip=client_ip,
            path=request.url.path,
            method=request.method,
            retry_after=result.retry_after,
        )
        raise AppError(
            config.message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            code=config.code,
            headers=result.to_headers(),
        )


def enforce_general_rate_limit(request: Request, response: Response) -> None:
    """Every /api request: 100 per 15 minutes by default."""
    _check_limit("general", request, response)


def enforce_write_rate_limit(request: Request, response: Response) -> None:
    """Profile mutations: 20 per 15 minutes by default."""
    _check_limit("write", request, response)


def enforce_auth_rate_limit(request: Request, response: Response) -> None:
    """Login attempts: 5 per 15 minutes by default."""
    _check_limit("auth", request, response)


def enforce_search_rate_limit(request: Request, response: Response) -> None:
    """Search requests: 30 per minute by default."""
    _check_limit("search", request, response)
