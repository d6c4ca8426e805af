"""
Playhub Backend

Community content ingestion and moderation: bundles, videos, links and
images go through validation, classification and moderation before they
reach the public catalog.

Package Structure:
==================
    src/
    ├── api/        ← FastAPI application
    ├── shared/     ← Shared code (models, services, ingestion, etc.)
    └── config/     ← Configuration

Running the Application:
========================
    # API Server
    uvicorn src.api.main:app --reload
"""
