# File: src/salestrack/main.py
"""FastAPI application factory."""

import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

import uvicorn
from fastapi import FastAPI

from salestrack.core.logging import configure_logging, get_logger
from salestrack.utils.datetime import now_utc

configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for startup and shutdown events."""
    start_time = now_utc()
    logger.info("app.startup", message="SalesTrack starting up", timestamp=start_time.isoformat())

    from salestrack.api.health import set_app_start_time

    set_app_start_time(start_time)

    yield

    logger.info("app.shutdown", message="SalesTrack shutting down gracefully")


def _setup_middleware(app: FastAPI) -> None:
    """Configure middleware. Last added runs first."""
    from salestrack.middleware.logging import RequestIDMiddleware
    from salestrack.middleware.sentry import SentryContextMiddleware

    app.add_middleware(SentryContextMiddleware)
    app.add_middleware(RequestIDMiddleware)


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    from salestrack.api.collection_items import router as collection_items_router
    from salestrack.api.health import router as health_router
    from salestrack.api.sales_entries import router as sales_entries_router

    app.include_router(health_router)
    app.include_router(sales_entries_router)
    app.include_router(collection_items_router)


def create_app() -> FastAPI:
    """Application factory for SalesTrack."""
    app = FastAPI(
        title="SalesTrack API",
        description="Retail sales tracking with Excel import and export",
        version="0.1.0",
        lifespan=lifespan,
    )

    from salestrack.core.exception_handlers import register_exception_handlers
    from salestrack.core.sentry import init_sentry

    init_sentry()
    register_exception_handlers(app)

    # Per-owner import progress, shared by all requests in this process
    app.state.import_states = {}

    _setup_middleware(app)
    _register_routers(app)

    logger.info(
        "app.configured",
        message="FastAPI application created successfully",
        environment=os.getenv("ENVIRONMENT", "development"),
    )

    return app


def run() -> None:
    """Development server entrypoint."""
    uvicorn.run(
        "salestrack.main:create_app",
        factory=True,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
