"""
Application configuration using Pydantic settings.

Usage:
    from meapi.config import get_settings
    settings = get_settings()

Every value is read once from the environment (or a .env file) when
get_settings() is first called.
"""

from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import AliasChoices, Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# bcrypt hash of "password", the stock admin account of the playground
DEFAULT_ADMIN_PASSWORD_HASH = "$2a$10$92IXUNpkjO0rOQ5byMi.Ye4oKoEa3Ro9llC/.og/at2.uheWG/igi"


class Settings(BaseSettings):
    """
    Unified application settings loaded from environment variables and .env file.

    Required for production:
        - JWT_SECRET (min 32 chars)
        - ADMIN_PASSWORD_HASH (anything but the stock hash)
        - DATABASE_URL (PostgreSQL recommended)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App settings
    app_name: str = "Me-API Playground"
    app_version: str = Field(default="1.0.0", validation_alias="APP_VERSION")
    api_prefix: str = "/api"
    env: str = Field(default="development", validation_alias=AliasChoices("ENV", "NODE_ENV"))
    debug: bool = Field(default=False, validation_alias="DEBUG")
    host: str = Field(default="0.0.0.0", validation_alias="HOST")
    port: int = Field(default=3000, validation_alias="PORT")
    max_request_size_mb: int = Field(default=10, validation_alias="MAX_REQUEST_SIZE_MB")

    # Database
    database_url: str = Field(default="sqlite:///me_api.db", validation_alias="DATABASE_URL")
    db_pool_size: int = Field(default=10, validation_alias="DB_POOL_SIZE")
    db_max_overflow: int = Field(default=20, validation_alias="DB_MAX_OVERFLOW")
    db_pool_pre_ping: bool = Field(default=True, validation_alias="DB_POOL_PRE_PING")
    db_echo: bool = Field(default=False, validation_alias="DB_ECHO")
    # Create missing tables at startup; migrations live in backend/alembic
    db_create_tables: bool = Field(default=True, validation_alias="DB_CREATE_TABLES")

    # JWT / Authentication
    jwt_secret_key: str = Field(
        default="CHANGE_ME", validation_alias=AliasChoices("JWT_SECRET", "JWT_SECRET_KEY")
    )
    jwt_algorithm: str = Field(default="HS256", validation_alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24,
        validation_alias=AliasChoices("JWT_EXPIRES_MINUTES", "ACCESS_TOKEN_EXPIRE_MINUTES"),
    )

    # The single account allowed to write
    admin_user_id: int = Field(default=1, validation_alias="ADMIN_USER_ID")
    admin_username: str = Field(default="admin", validation_alias="ADMIN_USERNAME")
    admin_password_hash: str = Field(
        default=DEFAULT_ADMIN_PASSWORD_HASH, validation_alias="ADMIN_PASSWORD_HASH"
    )
    admin_role: str = Field(default="admin", validation_alias="ADMIN_ROLE")

    # Rate limiting (limit per window, window in seconds)
    rate_limit_enabled: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    rate_limit_backend: Literal["memory", "redis"] = Field(
        default="memory", validation_alias="RATE_LIMIT_BACKEND"
    )
    general_rate_limit: int = Field(default=100, validation_alias="GENERAL_RATE_LIMIT")
    general_rate_window: int = Field(default=900, validation_alias="GENERAL_RATE_WINDOW")
    write_rate_limit: int = Field(default=20, validation_alias="WRITE_RATE_LIMIT")
    write_rate_window: int = Field(default=900, validation_alias="WRITE_RATE_WINDOW")
    auth_rate_limit: int = Field(default=5, validation_alias="AUTH_RATE_LIMIT")
    auth_rate_window: int = Field(default=900, validation_alias="AUTH_RATE_WINDOW")
    search_rate_limit: int = Field(default=30, validation_alias="SEARCH_RATE_LIMIT")
    search_rate_window: int = Field(default=60, validation_alias="SEARCH_RATE_WINDOW")

    # Only behind a reverse proxy that overwrites X-Forwarded-For
    trust_proxy_headers: bool = Field(default=False, validation_alias="TRUST_PROXY_HEADERS")

    # CORS
    cors_allowed_origins: str = Field(
        default="http://localhost:3001",
        validation_alias=AliasChoices("FRONTEND_URL", "CORS_ALLOWED_ORIGINS"),
    )

    # Redis (only used with RATE_LIMIT_BACKEND=redis)
    redis_host: str = Field(default="localhost", validation_alias="REDIS_HOST")
    redis_port: int = Field(default=6379, validation_alias="REDIS_PORT")
    redis_db: int = Field(default=0, validation_alias="REDIS_DB")
    redis_password: Optional[str] = Field(default=None, validation_alias="REDIS_PASSWORD")

    strict_security: bool = Field(default=False, validation_alias="STRICT_SECURITY")

    @property
    def redis_url(self) -> str:
        """Construct Redis URL from components."""
        auth = f":{self.redis_password}@" if self.redis_password else ""
        return f"redis://{auth}{self.redis_host}:{self.redis_port}/{self.redis_db}"

    @property
    def is_production(self) -> bool:
        return self.env.lower() in ("production", "prod")

    @field_validator("jwt_secret_key")
    @classmethod
    def validate_jwt_secret(cls, v: str, info: ValidationInfo) -> str:
        """Validate JWT secret - warns in dev, errors in production."""
        import warnings

        env = str(info.data.get("env", "development"))
        is_production = env.lower() in ("production", "prod")

        forbidden_values = [
            "CHANGE_ME", "changeme", "secret", "your-secret-key",
            "your-secret-key-change-in-production", "jwt-secret",
            "supersecret", "development", "test",
        ]

        is_forbidden = v.lower() in [fv.lower() for fv in forbidden_values]
        is_too_short = len(v) < 32

        if is_production:
            if is_forbidden:
                raise ValueError(
                    f"JWT_SECRET cannot be a default value ('{v}') in production. "
                    "Generate a secure key with: python -c \"import secrets; print(secrets.token_urlsafe(48))\""
                )
            if is_too_short:
                raise ValueError(
                    f"JWT_SECRET must be at least 32 characters in production (got {len(v)})."
                )
        elif is_forbidden:
            warnings.warn(
                f"JWT_SECRET is set to a default value ('{v}'). "
                "This is insecure - set a proper key for production.",
                UserWarning,
                stacklevel=2,
            )
        elif is_too_short:
            warnings.warn(
                f"JWT_SECRET should be at least 32 characters (got {len(v)})",
                UserWarning,
                stacklevel=2,
            )

        return v

    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        return [origin.strip() for origin in self.cors_allowed_origins.split(",") if origin.strip()]

    def validate_production_config(self) -> tuple[List[str], List[str]]:
        """
        Validate configuration for production deployment.

        Returns:
            Tuple of (errors, warnings) - errors are fatal, warnings are advisory
        """
        errors = []
        warnings = []

        if self.jwt_secret_key == "CHANGE_ME":
            errors.append("JWT_SECRET must be set for production")
        elif len(self.jwt_secret_key) < 32:
            errors.append("JWT_SECRET must be at least 32 characters")

        if self.admin_password_hash == DEFAULT_ADMIN_PASSWORD_HASH:
            warnings.append(
                "ADMIN_PASSWORD_HASH is the stock hash of 'password' - "
                "set your own bcrypt hash before exposing the API."
            )

        if self.rate_limit_backend == "memory":
            warnings.append(
                "Rate limit counters are process-local - use RATE_LIMIT_BACKEND=redis "
                "when running more than one instance."
            )

        if self.strict_security:
            if self.admin_password_hash == DEFAULT_ADMIN_PASSWORD_HASH:
                errors.append("ADMIN_PASSWORD_HASH must be changed when STRICT_SECURITY=true")
            if "localhost" in self.cors_allowed_origins:
                errors.append("CORS should not allow localhost in strict security mode")

        return errors, warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()


__all__ = ["Settings", "get_settings", "DEFAULT_ADMIN_PASSWORD_HASH"]
