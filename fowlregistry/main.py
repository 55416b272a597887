"""
Application entry point.

Creates the FastAPI application and wires together:
- Routers (one per bounded context)
- Error handlers (centralized domain-to-HTTP mapping)
- Security middleware (headers, rate limiting)
- Logging configuration
- The daily analytics export scheduler

No business logic belongs here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from slowapi.errors import RateLimitExceeded

from fowlregistry.core.config import settings
from fowlregistry.infrastructure.database import init_schema
from fowlregistry.infrastructure.scheduler import AnalyticsExportScheduler
from fowlregistry.interfaces.breeding.router import router as breeding_router
from fowlregistry.interfaces.dependencies import get_engine
from fowlregistry.interfaces.health import router as health_router
from fowlregistry.interfaces.ownership.dependencies import (
    build_export_analytics_use_case,
    get_transfer_notifier,
)
from fowlregistry.interfaces.ownership.router import router as ownership_router
from fowlregistry.interfaces.ownership.router import user_router
from fowlregistry.shared.errors.handlers import register_error_handlers
from fowlregistry.shared.logging import configure_logging
from fowlregistry.shared.security.headers import SecurityHeadersMiddleware
from fowlregistry.shared.security.rate_limiting import (
    limiter,
    rate_limit_exceeded_handler,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: schema, export scheduler, notification drain."""
    scheduler = None
    if settings.auto_create_schema:
        init_schema(get_engine())

    if settings.analytics_export_enabled:
        scheduler = AnalyticsExportScheduler(
            build_export_analytics_use_case(get_engine()),
            hour_utc=settings.analytics_export_hour_utc,
        )
        scheduler.start()
    app.state.export_scheduler = scheduler

    yield

    if scheduler is not None:
        scheduler.stop()
    await get_transfer_notifier().drain()
    logger.info("Shutdown complete")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Registers routers, error handlers, and security middleware.
    This is the composition root of the application.

    Returns:
        A fully configured FastAPI application instance.
    """
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        lifespan=lifespan,
    )

    # --- Rate Limiting ---
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # --- Security Middleware ---
    app.add_middleware(SecurityHeadersMiddleware)

    # --- Error Handlers ---
    register_error_handlers(app)

    # --- Routers ---
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(ownership_router, prefix="/api/v1")
    app.include_router(user_router, prefix="/api/v1")
    app.include_router(breeding_router, prefix="/api/v1")

    return app


app = create_app()
