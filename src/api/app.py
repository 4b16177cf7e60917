# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI Application Factory.

This module provides the main application factory for the LMS
compliance API.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src import __version__
from src.api.dependencies import close_db, init_db
from src.api.middleware.auth import AuthMiddleware
from src.api.routes import health
from src.api.v1 import router as v1_router
from src.core.config import get_settings
from src.infrastructure.database import create_schema
from src.utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Configures logging and opens the database pool on startup; closes
    the pool on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings = get_settings()
    setup_logging(settings)

    logger.info(
        "Starting LMS compliance API (environment=%s, debug=%s)",
        settings.environment,
        settings.debug,
    )

    # =========================================================================
    # Startup
    # =========================================================================

    await init_db()
    logger.info("Database connections initialized")

    if settings.db.create_schema and not settings.is_production:
        await create_schema()
        logger.info("Database schema created")

    yield

    # =========================================================================
    # Shutdown
    # =========================================================================

    try:
        await close_db()
        logger.info("Database connections closed")
    except Exception as e:
        logger.warning("Error closing database connections: %s", str(e))

    logger.info("Shutting down LMS compliance API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a new FastAPI instance with all
    middleware, routes, and configurations applied.

    Returns:
        Configured FastAPI application instance.
    """
    settings = get_settings()

    app = FastAPI(
        title="LMS Compliance API",
        description="Exam grading, certificates and compliance tracking",
        version=__version__,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
        # Disable automatic redirects from /path to /path/
        # This prevents 307 redirects that lose Authorization headers
        redirect_slashes=False,
    )

    # =========================================================================
    # Middleware (order matters - last added is first executed)
    # =========================================================================

    # Auth middleware - validates JWT tokens
    app.add_middleware(AuthMiddleware)

    # CORS middleware (added last so it executes first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.origins_list,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
    )

    # =========================================================================
    # Routes
    # =========================================================================
    app.include_router(health.router, tags=["Health"])
    app.include_router(v1_router)

    return app


def run() -> None:
    """Serve the API with uvicorn using the API_* settings."""
    settings = get_settings()

    uvicorn.run(
        "src.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.api.reload else settings.api.workers,
        reload=settings.api.reload,
    )
