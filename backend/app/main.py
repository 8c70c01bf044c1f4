"""
FastAPI application entry point.

Uses structured logging from meapi.logging.
Includes security validation and rate limiting.
"""

import time
from typing import Callable

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from meapi import __version__
from meapi.cache import redis_store
from meapi.db import db
from meapi.errors import ErrorCode
from meapi.logging import RequestLoggingMiddleware, configure_logging, get_logger
from meapi.security import SecurityConfigError, validate_security_config

from .config import get_settings
from .dependencies.rate_limit import enforce_general_rate_limit
from .error_handlers import register_exception_handlers
from .middleware.request_id import RequestIDMiddleware
from .middleware.security import SecurityHeadersMiddleware
from .routers import auth as auth_router
from .routers import profile as profile_router
from .routers import queries as queries_router


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """Middleware to limit request body size."""

    def __init__(self, app, max_size_mb: int = 10):
        super().__init__(app)
        self.max_size = max_size_mb * 1024 * 1024
        self.max_size_mb = max_size_mb

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_size:
            return JSONResponse(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                content={
                    "error": f"Request too large. Maximum request size is {self.max_size_mb}MB",
                    "code": ErrorCode.REQUEST_TOO_LARGE,
                },
            )

        return await call_next(request)


# Configure structured logging
settings = get_settings()
configure_logging(level="DEBUG" if settings.debug else "INFO")
logger = get_logger("api")


def validate_security_on_startup() -> bool:
    """Validate security configuration before serving requests."""
    try:
        result = validate_security_config(
            jwt_secret=settings.jwt_secret_key,
            admin_password_hash=settings.admin_password_hash,
            cors_origins=settings.cors_allowed_origins,
            database_url=settings.database_url,
            is_production=settings.is_production,
            strict=settings.strict_security,
        )
    except SecurityConfigError as e:
        for error in e.errors:
            logger.error("security_config_error", error=error)
        raise

    for warning in result.warnings:
        logger.warning("security_warning", message=warning)

    config_errors, config_warnings = settings.validate_production_config()
    for warning in config_warnings:
        logger.warning("config_warning", message=warning)
    if settings.is_production and config_errors:
        raise SecurityConfigError(config_errors)

    logger.info("security_validation_passed")
    return True


def check_database_health(max_retries: int = 3, retry_delay: float = 2.0) -> bool:
    """
    Check database connectivity with retry logic.

    Raises:
        RuntimeError: If database is unreachable after all retries
    """
    for attempt in range(max_retries):
        try:
            with db.session() as session:
                session.execute(text("SELECT 1"))
            logger.info("database_health_check_passed", attempt=attempt + 1)
            return True
        except SQLAlchemyError as e:
            logger.warning(
                "database_health_check_failed",
                attempt=attempt + 1,
                max_retries=max_retries,
                error=str(e),
            )
            if attempt < max_retries - 1:
                time.sleep(retry_delay * (attempt + 1))

    raise RuntimeError(
        f"Database unreachable after {max_retries} attempts. "
        "Check DATABASE_URL configuration and database server status."
    )


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name, version=__version__, debug=settings.debug)

    app.add_middleware(RequestSizeLimitMiddleware, max_size_mb=settings.max_request_size_mb)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Accept-Encoding",
            "Origin",
            "X-Requested-With",
            "X-Request-ID",
        ],
        # Expose rate limit headers to the frontend
        expose_headers=[
            "X-RateLimit-Limit",
            "X-RateLimit-Remaining",
            "X-RateLimit-Reset",
            "Retry-After",
            "X-Request-ID",
        ],
    )

    # GZip compression for responses > 500 bytes
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(SecurityHeadersMiddleware)

    # Structured request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Request ID middleware (for tracing). Added last so it runs outermost and
    # the request id is bound before the logging middleware writes its start line
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.on_event("startup")
    async def startup_event():
        """Initialize services on startup."""
        logger.info("app_startup", app_name=settings.app_name, environment=settings.env)

        # Both debug flag AND non-production ENV required to skip security validation
        allow_security_bypass = settings.debug and not settings.is_production
        try:
            validate_security_on_startup()
        except SecurityConfigError:
            if not allow_security_bypass:
                logger.error(
                    "security_validation_failed_fatal",
                    message="Set valid secrets or use ENV=development with DEBUG=true to bypass.",
                )
                raise
            logger.warning(
                "security_validation_skipped",
                message="Security validation bypassed (DEBUG=true and ENV!=production)",
            )

        db.initialize(settings.database_url)
        if settings.db_create_tables:
            db.create_all_tables()
        logger.info("database_initialized")

        check_database_health(max_retries=3, retry_delay=2.0)

        if settings.rate_limit_backend == "redis":
            if redis_store.initialize():
                logger.info("rate_limiter_redis_backend", redis_host=settings.redis_host)
            else:
                logger.warning("rate_limiter_memory_fallback", reason="Redis unavailable")

    @app.on_event("shutdown")
    async def shutdown_event():
        """Cleanup on shutdown."""
        logger.info("app_shutdown")
        if settings.rate_limit_backend == "redis":
            redis_store.reset()

    api_dependencies = [Depends(enforce_general_rate_limit)]

    app.include_router(auth_router.router, prefix=settings.api_prefix, dependencies=api_dependencies)
    app.include_router(
        profile_router.router, prefix=settings.api_prefix, dependencies=api_dependencies
    )
    app.include_router(
        queries_router.router, prefix=settings.api_prefix, dependencies=api_dependencies
    )

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "backend.app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug and not settings.is_production,
    )
