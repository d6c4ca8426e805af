"""
Route Registration

Centralizes all route registration for the FastAPI application.

Route Hierarchy:
================
    /health, /ready, /live  → Health check endpoints
    /submissions            → Archive, video, remote and link submissions
    /discover               → Source registry search and one-click import
    /items                  → Public catalog, likes, owner deletion
    /categories             → Category registry
    /images                 → Community image marketplace
    /admin                  → Moderation (administrators only)

Usage:
======
    from src.api.routes import register_routes

    app = FastAPI()
    register_routes(app)
"""

from fastapi import FastAPI

from src.api.handlers import (
    catalog_handler,
    discovery_handler,
    health_handler,
    image_handler,
    moderation_handler,
    submission_handler,
)


def register_routes(app: FastAPI) -> None:
    """
    Register all API routes.

    Args:
        app: FastAPI application instance
    """
    # Health check endpoints (no prefix, root level)
    app.include_router(
        health_handler.router,
        tags=["Health"],
    )

    app.include_router(
        submission_handler.router,
        prefix="/submissions",
        tags=["Submissions"],
    )

    app.include_router(
        discovery_handler.router,
        prefix="/discover",
        tags=["Discovery"],
    )

    app.include_router(
        catalog_handler.router,
        prefix="/items",
        tags=["Catalog"],
    )

    app.include_router(
        catalog_handler.category_router,
        prefix="/categories",
        tags=["Catalog"],
    )

    app.include_router(
        image_handler.router,
        prefix="/images",
        tags=["Images"],
    )

    app.include_router(
        moderation_handler.router,
        prefix="/admin",
        tags=["Moderation"],
    )
