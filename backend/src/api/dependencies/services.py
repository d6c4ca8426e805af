"""
Service Dependencies

FastAPI dependencies for service injection.

Services are created per request with the request's db session. Storage
roots are read from settings when each service is built, so tests can
point them at a temporary directory.

Usage:
======
    from src.api.dependencies.services import get_catalog_service

    @router.get("/items")
    async def list_items(catalog: CatalogService = Depends(get_catalog_service)):
        return await catalog.list_items()
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies.database import get_db
from src.shared.services.catalog_service import CatalogService
from src.shared.services.discovery_service import DiscoveryService
from src.shared.services.gamification_service import GamificationService
from src.shared.services.image_service import ImageService
from src.shared.services.moderation_service import ModerationService
from src.shared.services.submission_service import SubmissionService


async def get_submission_service(
    db: AsyncSession = Depends(get_db),
) -> SubmissionService:
    """
    Dependency to get SubmissionService instance.

    Uses the default content storage and a fresh HTTP fetcher.
    """
    return SubmissionService(db)


async def get_catalog_service(
    db: AsyncSession = Depends(get_db),
) -> CatalogService:
    return CatalogService(db)


async def get_moderation_service(
    db: AsyncSession = Depends(get_db),
) -> ModerationService:
    return ModerationService(db)


async def get_gamification_service(
    db: AsyncSession = Depends(get_db),
) -> GamificationService:
    return GamificationService(db)


async def get_image_service(
    db: AsyncSession = Depends(get_db),
) -> ImageService:
    return ImageService(db)


async def get_discovery_service(
    db: AsyncSession = Depends(get_db),
    submissions: SubmissionService = Depends(get_submission_service),
) -> DiscoveryService:
    """Discovery imports reuse the request's SubmissionService."""
    return DiscoveryService(db, submissions=submissions)
