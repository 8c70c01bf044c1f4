"""
Security module for Me-API.

Provides:
- Configuration validation
- Rate limiting
- Password hashing
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .passwords import hash_password, verify_password
    from .rate_limiter import RateLimiter, RateLimitResult, get_rate_limiter
    from .validation import SecurityConfigError, validate_security_config


def __getattr__(name: str) -> Any:
    """
    Lazy attribute loading to avoid import-time cycles.

    The rate limiter pulls in the Redis client, which needs settings and
    logging; importing it eagerly from here would create circular imports.
    """
    if name in {"RateLimiter", "RateLimitResult", "get_rate_limiter"}:
        from . import rate_limiter

        return getattr(rate_limiter, name)

    if name in {"SecurityConfigError", "validate_security_config"}:
        from . import validation

        return getattr(validation, name)

    if name in {"hash_password", "verify_password"}:
        from . import passwords

        return getattr(passwords, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "RateLimiter",
    "RateLimitResult",
    "SecurityConfigError",
    "get_rate_limiter",
    "hash_password",
    "validate_security_config",
    "verify_password",
]
