"""
JWT helper utilities.
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import ExpiredSignatureError, JWTError, jwt

from ..config import get_settings


class InvalidTokenError(ValueError):
    """Token signature, format or claims failed verification."""


class TokenExpiredError(InvalidTokenError):
    """Token was valid but its exp claim is in the past."""


def create_access_token(data: Dict[str, Any], expires_minutes: int | None = None) -> str:
    """
    Create a signed JWT access token with expiration and JTI.

    Args:
        data: Claims to include in the token (e.g., {"sub": "1", "role": "admin"}).
        expires_minutes: Optional override for expiration window in minutes.
            Zero or negative values produce an already-expired token.

    Returns:
        Encoded JWT string.
    """
    settings = get_settings()
    to_encode = data.copy()
    minutes = settings.access_token_expire_minutes if expires_minutes is None else expires_minutes
    expire = datetime.now(timezone.utc) + timedelta(minutes=minutes)
    to_encode.update({
        "exp": expire,
        "jti": str(uuid.uuid4()),
    })
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Decode and validate a JWT access token.

    Args:
        token: Encoded JWT string.

    Returns:
        Decoded payload dict.

    Raises:
        TokenExpiredError: If the token is past its expiry.
        InvalidTokenError: If the signature or format check fails.
    """
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as exc:
        raise TokenExpiredError("Token expired") from exc
    except JWTError as exc:
        raise InvalidTokenError("Invalid token") from exc


def get_token_expiry(token: str) -> datetime | None:
    """Get the expiration datetime from a token, or None if it does not verify."""
    try:
        payload = decode_access_token(token)
    except ValueError:
        return None
    exp = payload.get("exp")
    return datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None
