"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from deploy_triggers.api.middleware.correlation import CorrelationIdMiddleware
from deploy_triggers.api.routes import health_routes, instantiate_routes
from deploy_triggers.config import get_settings, Settings


logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()
    logger.info(
        "application_starting",
        environment=settings.environment.value,
        debug=settings.debug,
    )
    yield
    logger.info("application_shutdown_complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Deployment Trigger Engine",
        description="Decides when workload configs need a new rollout and why",
        version="1.0.0",
        docs_url=f"{settings.api_prefix}/docs",
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(health_routes.router)
    if settings.observability.metrics_enabled:
        app.include_router(health_routes.metrics_router)
    app.include_router(instantiate_routes.router, prefix=settings.api_prefix)

    return app
