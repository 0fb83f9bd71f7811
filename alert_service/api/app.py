"""FastAPI application configuration."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from alert_service import __version__
from alert_service.api.alerts import router as alerts_router
from alert_service.api.health import router as health_router
from alert_service.api.models import ErrorResponse
from alert_service.api.security import verify_basic_auth
from alert_service.config import get_config
from alert_service.database.connection import dispose_engine
from alert_service.database.migrations import run_migrations
from alert_service.observability.sentry import init_sentry
from alert_service.utils.logging import configure_logging

_config = get_config()
configure_logging(_config.log_level)
init_sentry(_config.environment)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_application: FastAPI) -> AsyncIterator[None]:
    """Run migrations on startup if enabled and release the pool on shutdown."""
    config = get_config()
    if config.auto_migrate:
        run_migrations(config.db)

    logger.info(f"Alert service starting: environment={config.environment}")
    yield

    logger.info("Alert service shutting down")
    dispose_engine()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    :returns: Configured FastAPI application instance.
    """
    config = get_config()

    application = FastAPI(
        title="Alert Service API",
        version=__version__,
        lifespan=lifespan,
        responses={
            401: {"model": ErrorResponse, "description": "Unauthorised"},
            500: {"model": ErrorResponse, "description": "Internal server error"},
        },
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    application.include_router(health_router)
    application.include_router(alerts_router, dependencies=[Depends(verify_basic_auth)])

    logger.info("FastAPI application created")

    return application


# Application instance for uvicorn
app = create_app()
