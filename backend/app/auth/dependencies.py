"""
Authentication dependencies for FastAPI routes.

Reads are public; every other method must carry
`Authorization: Bearer <token>` issued by POST /api/auth/login.
"""

from typing import Any, Dict

from fastapi import Depends, Request, status
from fastapi.security import OAuth2PasswordBearer

from meapi.errors import AppError, ErrorCode
from meapi.logging import get_logger

from ..config import get_settings
from .jwt import TokenExpiredError, decode_access_token

logger = get_logger("auth")

# auto_error=False so a missing header surfaces as NO_TOKEN instead of FastAPI's 401
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)

SAFE_METHODS = frozenset({"GET", "HEAD", "OPTIONS"})


def get_client_ip(request: Request) -> str:
    """
    Get the client IP address from the request.

    The socket peer address is used unless TRUST_PROXY_HEADERS is set, in
    which case the first X-Forwarded-For entry wins. Rate limits are keyed by
    this value, so the header is ignored by default.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded and get_settings().trust_proxy_headers:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def get_current_claims(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> Dict[str, Any]:
    """
    Verify the bearer token and return its claims.

    Steps:
    1) Reject a missing token with 401 NO_TOKEN.
    2) Decode the JWT; an expired one is 403 TOKEN_EXPIRED, anything else
       that fails verification is 403 INVALID_TOKEN.
    3) Attach the claims to request.state.user.
    """
    if not token:
        logger.warning("auth_failed", reason="no_token", ip=get_client_ip(request), path=request.url.path)
        raise AppError(
            "Access denied. No token provided.",
            status_code=status.HTTP_401_UNAUTHORIZED,
            code=ErrorCode.NO_TOKEN,
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        claims = decode_access_token(token)
    except TokenExpiredError:
        logger.warning("auth_failed", reason="token_expired", ip=get_client_ip(request), path=request.url.path)
        raise AppError(
            "Access denied. Token expired.",
            status_code=status.HTTP_403_FORBIDDEN,
            code=ErrorCode.TOKEN_EXPIRED,
        ) from None
    except ValueError as exc:
        logger.warning(
            "auth_failed",
            reason="invalid_token",
            error=str(exc),
            ip=get_client_ip(request),
            path=request.url.path,
        )
        raise AppError(
            "Access denied. Invalid token.",
            status_code=status.HTTP_403_FORBIDDEN,
            code=ErrorCode.INVALID_TOKEN,
        ) from None

    request.state.user = claims
    logger.debug("user_authenticated", user_id=claims.get("id"), path=request.url.path)
    return claims


def require_auth(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> Dict[str, Any] | None:
    """
    Gate for write routes.

    GET, HEAD and OPTIONS pass through unchecked and return None; every other
    method must present a valid token.
    """
    if request.method in SAFE_METHODS:
        return None
    return get_current_claims(request, token)
