"""
Shared Module

Everything below the HTTP layer:
- Models: SQLAlchemy ORM models
- Repositories: Data access layer
- Services: Business logic layer
- Ingestion: Source adapters, inventory, validation gate, classifier
- Schemas: Pydantic request/response models
- Core: Logging, exceptions
- Adapters: Tree storage and the HTTP fetcher

Package Structure:
==================
    shared/
    ├── core/           ← Logging, exceptions
    ├── db/             ← Database session management
    ├── models/         ← SQLAlchemy models
    ├── repositories/   ← Data access layer
    ├── services/       ← Business logic
    ├── ingestion/      ← Bundle pipeline (no database access)
    ├── schemas/        ← Pydantic schemas
    ├── adapters/       ← Storage and HTTP
    └── utils/          ← Utilities

Usage:
======
    from src.shared.models import User, ContentItem
    from src.shared.repositories import ContentItemRepository
    from src.shared.services import SubmissionService
    from src.shared.core import logger, PlayhubException
"""
