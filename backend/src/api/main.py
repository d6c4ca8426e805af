"""
Playhub API Application Entry Point

FastAPI application setup with all routers, middleware, and lifecycle management.

Application Architecture:
=========================
┌─────────────────────────────────────────────────────────────────────────────┐
│                           PLAYHUB API                                       │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   Middleware Stack:  CORS → Error Handler (ErrorKind → status code)         │
│                              │                                              │
│                              ▼                                              │
│   Routers:  Health │ Submissions │ Discovery │ Catalog │ Images │ Admin     │
│                              │                                              │
│                              ▼                                              │
│   Dependencies:  Database session │ Auth (JWT) │ Services                   │
│                              │                                              │
│                              ▼                                              │
│   Ingestion:  Source adapter → inventory → validation gate → router         │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Lifecycle:
==========
1. Application starts → lifespan startup
2. Database connection verified, storage roots created
3. Application serves requests
4. Application stops → lifespan shutdown
5. Database connection closed

Usage:
======
    # Run with uvicorn
    uvicorn src.api.main:app --host 0.0.0.0 --port 8000 --reload

    # Or programmatically
    from src.api.main import create_application
    app = create_application()
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config.settings import settings
from src.shared.db import init_db, close_db
from src.shared.core.logging import logger
from src.api.middleware import setup_exception_handlers
from src.api.routes import register_routes


def ensure_storage_roots() -> None:
    """Create the content, thumbnail, image and scratch directories."""
    for root in (
        settings.CONTENT_ROOT,
        settings.THUMBNAIL_ROOT,
        settings.IMAGE_ROOT,
        settings.UPLOAD_TEMP_DIR,
    ):
        Path(root).mkdir(parents=True, exist_ok=True)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
    - Verify the database connection
    - Create storage roots

    Shutdown:
    - Close database connections
    """
    logger.info(
        "Starting Playhub API",
        app_name=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
    )

    await init_db()
    ensure_storage_roots()
    logger.info("Playhub API started successfully", content_root=settings.CONTENT_ROOT)

    yield

    logger.info("Shutting down Playhub API")
    await close_db()
    logger.info("Playhub API shutdown complete")


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance

    This factory function:
    1. Creates the FastAPI app with settings
    2. Adds middleware (CORS)
    3. Sets up exception handlers
    4. Registers all routes
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="Community content ingestion and moderation",
        version=settings.APP_VERSION,
        # Only show docs in development
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # MIDDLEWARE
    # ═══════════════════════════════════════════════════════════════════════════

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ═══════════════════════════════════════════════════════════════════════════
    # EXCEPTION HANDLERS
    # ═══════════════════════════════════════════════════════════════════════════

    setup_exception_handlers(app)

    # ═══════════════════════════════════════════════════════════════════════════
    # ROUTES
    # ═══════════════════════════════════════════════════════════════════════════

    register_routes(app)

    return app


# Create the application instance
app = create_application()
