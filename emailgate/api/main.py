"""
FastAPI application factory and configuration.

This module creates the FastAPI application instance, wires the
process-scoped infrastructure (stores, hasher, mail sender) in the
lifespan, and exposes the health check.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from psycopg_pool import ConnectionPool

from emailgate.adapters.repository.memory import (
    InMemoryAccountRepository,
    InMemoryPendingVerificationRepository,
)
from emailgate.adapters.repository.postgres import (
    PostgresAccountRepository,
    PostgresPendingVerificationRepository,
    run_migrations,
)
from emailgate.adapters.smtp.console import ConsoleEmailSender
from emailgate.adapters.smtp.sender import SmtpEmailSender
from emailgate.api.v1 import request_validation_failure
from emailgate.api.v1 import router as v1_router
from emailgate.config.settings import Settings, get_settings
from emailgate.domain.exceptions import StorageError
from emailgate.domain.hashing import BcryptHasher

logger = logging.getLogger(__name__)

# OpenAPI tags for documentation grouping
tags_metadata = [
    {
        "name": "v1",
        "description": "Account API v1 - Sign up, verify email address and sign in",
    },
]


def build_email_sender(settings: Settings) -> ConsoleEmailSender | SmtpEmailSender:
    """Create the configured mail sender."""
    if settings.mail_backend == "smtp":
        return SmtpEmailSender(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_user,
            password=settings.smtp_password,
            sender=settings.mail_from,
            use_ssl=settings.smtp_use_ssl,
            timeout=settings.smtp_timeout,
        )
    return ConsoleEmailSender()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI lifespan context manager.

    Manages application startup and shutdown:
    - Creates the stores (PostgreSQL pool + migrations, or in-memory)
    - Creates the hasher and mail sender, checks the mail relay
    - Closes the connection pool on shutdown
    """
    settings: Settings = app.state.settings
    pool: ConnectionPool | None = None

    logger.info("Starting application...")

    if settings.storage_backend == "postgres":
        logger.info("Connecting to database...")
        pool = ConnectionPool(
            conninfo=settings.database_url,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
            open=True,
        )
        logger.info("Running database migrations...")
        run_migrations(pool)
        app.state.accounts = PostgresAccountRepository(pool)
        app.state.pending = PostgresPendingVerificationRepository(pool)
    else:
        logger.warning("Using in-memory storage; data is lost on shutdown")
        app.state.accounts = InMemoryAccountRepository()
        app.state.pending = InMemoryPendingVerificationRepository()

    app.state.hasher = BcryptHasher(cost=settings.bcrypt_cost)
    app.state.email_sender = build_email_sender(settings)
    app.state.email_sender.check_connection()

    logger.info("Application startup complete")

    yield

    # Shutdown
    logger.info("Shutting down application...")
    if pool is not None:
        pool.close()
        logger.info("Database connection pool closed")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application; settings default to the environment."""
    app = FastAPI(
        title="emailgate",
        description="Account registration with expiring email verification links",
        version="0.1.0",
        openapi_tags=tags_metadata,
        lifespan=lifespan,
    )
    app.state.settings = settings or get_settings()

    # Include v1 API routes
    app.include_router(v1_router, prefix="/v1/user")
    app.add_exception_handler(RequestValidationError, request_validation_failure)

    @app.get("/health", response_model=None)
    def health_check(request: Request) -> dict[str, str] | JSONResponse:
        """
        Health check endpoint with storage validation.

        Returns 200 OK if application and storage are healthy, 503 otherwise.
        """
        try:
            request.app.state.accounts.ping()
        except StorageError:
            logger.exception("Health check failed")
            return JSONResponse(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                content={"status": "unhealthy"},
            )
        return {"status": "healthy"}

    return app


app = create_app()
