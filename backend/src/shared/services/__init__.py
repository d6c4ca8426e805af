"""
Business Logic Services

Services encapsulate business logic and coordinate between repositories,
the ingestion pipeline, storage and domain rules.

Service Pattern:
================
    Handler → Service → Repository → Database
                ↘ Ingestion pipeline / storage / HTTP fetcher

Services should:
- Contain business logic and validation
- Coordinate multiple repositories if needed
- Leave the commit to the request-scoped session
- NOT handle HTTP concerns (that's for handlers)

Available Services:
===================
- SubmissionService: Ingestion, duplicate guard, status routing, slugs
- ModerationService: Status state machine, flags, deletions
- GamificationService: XP awards and likes
- CatalogService: Public listings, search, trending, detail
- ImageService: Community image uploads and feed
- DiscoveryService: Source registry search and one-click import

Usage:
======
    from src.shared.services import SubmissionService

    service = SubmissionService(db)
    result = await service.submit(user.id, request)
"""

from src.shared.services.submission_service import SubmissionService
from src.shared.services.moderation_service import ModerationService
from src.shared.services.gamification_service import GamificationService
from src.shared.services.catalog_service import CatalogService
from src.shared.services.image_service import ImageService
from src.shared.services.discovery_service import DiscoveryService
from src.shared.services.url_service import URLService

__all__ = [
    "SubmissionService",
    "ModerationService",
    "GamificationService",
    "CatalogService",
    "ImageService",
    "DiscoveryService",
    "URLService",
]
