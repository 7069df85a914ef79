"""devboard - multi-role task tracking board."""

import logging
import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from src.core.config import DEV_SECRET_KEY, settings
from src.core.db_client import close_connection, init_db
from src.core.logging import configure_logfire, instrument_fastapi
from src.interface.api_router import link_router, router as api_router
from src.interface.error_handlers import register_exception_handlers
from src.services.user_service import ensure_admin_user


logger = logging.getLogger(__name__)


def validate_startup_configuration() -> None:
    """Validate required credentials before serving requests.

    In production the session signing key must be set and must not be the
    development default, otherwise anyone could forge session cookies.

    Exits the process with status 1 when validation fails.
    """
    logger.info("startup_validation_begin")

    try:
        if settings.is_production:
            secret_key = settings.require_credential("secret_key", "Session signing key")
            if secret_key == DEV_SECRET_KEY:
                raise ValueError(
                    "Session signing key is the development default. Set SECRET_KEY environment variable "
                    "or add to .env file."
                )

        logger.info("startup_validation", extra={"stage": "credentials", "status": "ok"})

    except ValueError as e:
        logger.error("startup_validation_failed", extra={"error": str(e)})
        print(f"\nStartup validation failed: {e}\n", file=sys.stderr)  # noqa: T201
        sys.exit(1)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan context manager."""
    # Configure logging first so validation logs are captured
    configure_logfire()

    validate_startup_configuration()

    await init_db()
    logger.info("Database initialized")

    await ensure_admin_user()
    yield
    await close_connection()


app = FastAPI(
    title="devboard",
    description="Task board for community managers and developers",
    version="0.1.0",
    lifespan=lifespan,
)

# Instrument FastAPI with Logfire
instrument_fastapi(app)

# Register routers
app.include_router(api_router)
app.include_router(link_router)
register_exception_handlers(app)


@app.get("/health")
async def health_check() -> JSONResponse:
    """Health check endpoint."""
    return JSONResponse(content={"status": "healthy"}, status_code=200)
