"""
FastAPI application entry point for FreshRoute Dispatch.

Cold-chain vehicle dispatch API.
"""
from contextlib import asynccontextmanager
from typing import AsyncGenerator
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from freshroute.core.config import settings
from freshroute.api.v1 import api_router

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Runs startup and shutdown logic.
    """
    # Schema is managed by Alembic; nothing to create here
    logger.info(f"{settings.app_name} {settings.app_version} starting")
    yield
    logger.info(f"{settings.app_name} shutting down")


def create_application() -> FastAPI:
    """Create and configure FastAPI application."""

    app = FastAPI(
        title=settings.app_name,
        description="""
        ## FreshRoute Dispatch

        Assigns trucks to fresh-produce orders and plans their pickup/drop runs:

        - **Risk rules**: product limits, distance and weather pick the vehicle class
        - **Fleet allocation**: cheapest acceptable class, largest trucks first
        - **Routing**: nearest-neighbor manifests with pickup before drop

        ### Modes

        - Daily batch via Celery (`POST /dispatch/daily-batch`)
        - Immediate assignment (`POST /dispatch/orders/{order_id}/assign`)

        ### Vehicle classes

        `UNCOVERED` < `COVERED` < `REFRIGERATED`. A more protective truck can
        always take a less demanding load.
        """,
        version=settings.app_version,
        openapi_url=f"{settings.api_v1_prefix}/openapi.json",
        docs_url=f"{settings.api_v1_prefix}/docs",
        redoc_url=f"{settings.api_v1_prefix}/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure properly in production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include API router
    app.include_router(api_router, prefix=settings.api_v1_prefix)

    return app


# Create application instance
app = create_application()


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "fleet_lock_backend": settings.fleet_lock_backend,
        "live_weather": settings.openweather_api_key is not None,
    }


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "docs": f"{settings.api_v1_prefix}/docs",
        "openapi": f"{settings.api_v1_prefix}/openapi.json",
    }
