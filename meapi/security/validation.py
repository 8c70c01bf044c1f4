"""
Security configuration validation.

Ensures critical security settings are properly configured
before the application starts.
"""

import re
from dataclasses import dataclass

from meapi.logging import get_logger

logger = get_logger("security.validation")

FORBIDDEN_SECRETS = (
    "CHANGE_ME",
    "changeme",
    "secret",
    "your-secret-key",
    "your-secret-key-change-in-production",
    "jwt-secret",
    "supersecret",
    "development",
    "test",
)


class SecurityConfigError(Exception):
    """Raised when security configuration is invalid."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        message = "Security configuration errors:\n" + "\n".join(f"  - {e}" for e in errors)
        super().__init__(message)


@dataclass
class ValidationResult:
    """Result of security validation."""

    valid: bool
    errors: list[str]
    warnings: list[str]


def validate_jwt_secret(secret: str) -> tuple[bool, str | None]:
    """
    Validate JWT secret key.

    Requirements:
    - Must be at least 32 characters
    - Must not be a default/placeholder value
    - Should contain letters or digits

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not secret:
        return False, "JWT_SECRET is not set"

    if secret.lower() in [v.lower() for v in FORBIDDEN_SECRETS]:
        return False, f"JWT_SECRET cannot be a default value like '{secret}'"

    if len(secret) < 32:
        return False, f"JWT_SECRET must be at least 32 characters (got {len(secret)})"

    if not re.search(r"[A-Za-z0-9]", secret):
        return False, "JWT_SECRET should contain a mix of letters and numbers"

    return True, None


def validate_password_hash(password_hash: str) -> tuple[bool, str | None]:
    """
    Validate the admin bcrypt hash.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not password_hash:
        return False, "ADMIN_PASSWORD_HASH is not set"

    if not re.fullmatch(r"\$2[abxy]\$\d{2}\$[./A-Za-z0-9]{53}", password_hash):
        return False, "ADMIN_PASSWORD_HASH is not a bcrypt hash"

    return True, None


def validate_cors_origins(origins: str, is_production: bool = False) -> tuple[bool, str | None, str | None]:
    """
    Validate CORS allowed origins.

    Args:
        origins: Comma-separated list of origins
        is_production: Whether the app runs in production

    Returns:
        Tuple of (is_valid, error_message, warning_message)
    """
    if not origins:
        return False, "FRONTEND_URL is not set", None

    origin_list = [o.strip() for o in origins.split(",")]

    if "*" in origin_list:
        return True, None, "CORS allows all origins (*) - not recommended for production"

    localhost_patterns = ["localhost", "127.0.0.1", "0.0.0.0"]
    has_localhost = any(
        any(pattern in origin for pattern in localhost_patterns) for origin in origin_list
    )

    if has_localhost and is_production:
        return (
            True,
            None,
            "CORS includes localhost origins - verify this is intentional in production",
        )

    return True, None, None


def validate_database_url(url: str, is_production: bool = False) -> tuple[bool, str | None, str | None]:
    """
    Validate database URL security.

    Returns:
        Tuple of (is_valid, error_message, warning_message)
    """
    if not url:
        return False, "DATABASE_URL is not set", None

    if url.startswith("sqlite") and is_production:
        return True, None, "Using SQLite in production - consider PostgreSQL"

    if "@" in url and "://" in url:
        credentials = url.split("://")[1].split("@")[0]
        if ":" in credentials:
            _, password = credentials.split(":", 1)
            if password in ["password", "postgres", "admin", "root", ""]:
                return True, None, "Database password appears to be weak or default"

    return True, None, None


def validate_security_config(
    jwt_secret: str,
    admin_password_hash: str,
    cors_origins: str | None = None,
    database_url: str | None = None,
    is_production: bool = False,
    strict: bool = False,
) -> ValidationResult:
    """
    Validate all security configuration.

    Args:
        jwt_secret: JWT signing secret
        admin_password_hash: bcrypt hash of the admin password
        cors_origins: CORS allowed origins
        database_url: Database connection URL
        is_production: Whether the app runs in production
        strict: If True, treat warnings as errors

    Returns:
        ValidationResult with errors and warnings

    Raises:
        SecurityConfigError: If validation fails (or warns, with strict=True)
    """
    errors: list[str] = []
    warnings: list[str] = []

    valid, error = validate_jwt_secret(jwt_secret)
    if not valid and error:
        errors.append(error)

    valid, error = validate_password_hash(admin_password_hash)
    if not valid and error:
        errors.append(error)

    if cors_origins is not None:
        valid, error, warning = validate_cors_origins(cors_origins, is_production)
        if not valid and error:
            errors.append(error)
        if warning:
            warnings.append(warning)

    if database_url is not None:
        valid, error, warning = validate_database_url(database_url, is_production)
        if not valid and error:
            errors.append(error)
        if warning:
            warnings.append(warning)

    for error in errors:
        logger.error("config_validation_error", error=error)
    for warning in warnings:
        logger.warning("config_validation_warning", warning=warning)

    if strict and (errors or warnings):
        raise SecurityConfigError(errors + warnings)
    if errors:
        raise SecurityConfigError(errors)

    return ValidationResult(valid=True, errors=errors, warnings=warnings)


def generate_secure_key() -> str:
    """Generate a random JWT secret (64 URL-safe characters)."""
    import secrets

    return secrets.token_urlsafe(48)


__all__ = [
    "SecurityConfigError",
    "ValidationResult",
    "generate_secure_key",
    "validate_cors_origins",
    "validate_database_url",
    "validate_jwt_secret",
    "validate_password_hash",
    "validate_security_config",
]
