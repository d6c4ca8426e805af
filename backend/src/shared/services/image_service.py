"""
Image Service

Business logic for the community image marketplace.

Upload Flow:
============
1. Daily quota check (RateLimitError when exhausted)
2. Type check: JPEG/PNG/WebP only, SVG always refused
3. Pillow processing in a worker thread (original.webp + thumb.webp)
4. Category from the user's choice or the image keyword table
5. INSERT with status PENDING, then slug from title + base-36 id

Uploads always wait for an administrator; approval is what pays XP.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.adapters.storage import TreeStorage, image_storage
from src.shared.core.exceptions import InputError, NotFoundError, RateLimitError
from src.shared.core.logging import logger
from src.shared.ingestion.classifier import IMAGE_CATEGORIES, IMAGE_CLASSIFIER
from src.shared.ingestion.slugs import build_slug
from src.shared.models.community_image import CommunityImage
from src.shared.models.enums import ModerationStatus
from src.shared.models.user import User
from src.shared.repositories.community_image_repository import CommunityImageRepository
from src.shared.utils.formatting import format_megabytes
from src.shared.utils.images import (
    ALLOWED_IMAGE_TYPES,
    ORIGINAL_NAME,
    THUMBNAIL_NAME,
    is_allowed_image,
    process_image,
)


QUOTA_WINDOW = timedelta(hours=24)


@dataclass
class ImagePage:
    """Paginated image feed."""

    images: list[CommunityImage]
    total: int
    page: int
    page_size: int

    @property
    def has_more(self) -> bool:
        return self.page * self.page_size < self.total


class ImageService:
    """Service for community image uploads and public reads."""

    def __init__(self, session: AsyncSession, storage: Optional[TreeStorage] = None) -> None:
        """
        Initialize ImageService.

        Args:
            session: Async database session
            storage: Community image storage (defaults to IMAGE_ROOT)
        """
        self.session = session
        self.storage = storage or image_storage()
        self.image_repo = CommunityImageRepository(session)

    # ═══════════════════════════════════════════════════════════════════════════
    # UPLOAD
    # ═══════════════════════════════════════════════════════════════════════════

    async def upload(
        self,
        user: User,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str],
        title: str,
        description: Optional[str] = None,
        category: Optional[str] = None,
    ) -> CommunityImage:
        """
        Store, process and register one image.

        Raises:
            RateLimitError: Daily quota used up
            InputError: Missing title, wrong type, SVG, too large, unreadable
        """
        since = datetime.now(timezone.utc) - QUOTA_WINDOW
        if await self.image_repo.count_uploads_since(user.id, since) >= settings.MAX_DAILY_IMAGE_UPLOADS:
            raise RateLimitError(
                f"Daily upload limit reached ({settings.MAX_DAILY_IMAGE_UPLOADS} images/day). "
                "Please try again tomorrow.",
                retry_after=int(QUOTA_WINDOW.total_seconds()),
            )

        if not title or not title.strip():
            raise InputError("Title is required")
        if (content_type or "").lower() == "image/svg+xml" or (filename or "").lower().endswith(".svg"):
            raise InputError("SVG images are not allowed")
        if not is_allowed_image(content_type, filename, ALLOWED_IMAGE_TYPES):
            raise InputError("Only JPEG, PNG and WebP images are allowed")
        if len(data) > settings.IMAGE_MAX_BYTES:
            raise InputError(
                f"Image too large. Max size is {format_megabytes(settings.IMAGE_MAX_BYTES)}."
            )

        if category not in IMAGE_CATEGORIES:
            category = IMAGE_CLASSIFIER.classify(title, description)

        directory = await asyncio.to_thread(self.storage.allocate)
        try:
            processed = await asyncio.to_thread(
                process_image,
                data,
                directory,
                settings.IMAGE_THUMBNAIL_SIZE,
                settings.IMAGE_WEBP_QUALITY,
            )
            image = CommunityImage(
                uploader_id=user.id,
                title=title.strip(),
                description=description,
                category=category,
                creator_name=user.name,
                image_path=self.storage.public_url(directory, ORIGINAL_NAME),
                thumbnail_path=self.storage.public_url(directory, THUMBNAIL_NAME),
                width=processed.width,
                height=processed.height,
                file_size=processed.file_size,
                orientation=processed.orientation,
                dominant_color=processed.dominant_color,
                status=ModerationStatus.PENDING,
            )
            self.session.add(image)
            await self.session.flush()

            await self.image_repo.assign_slug(
                image.id,
                build_slug(image.title, image.id, settings.SLUG_MAX_LENGTH),
            )
            await self.session.refresh(image)
        except BaseException:
            await asyncio.shield(asyncio.to_thread(self.storage.discard, directory))
            raise

        logger.info("Image uploaded", image_id=image.id, user_id=user.id, category=category)
        return image

    # ═══════════════════════════════════════════════════════════════════════════
    # PUBLIC READS
    # ═══════════════════════════════════════════════════════════════════════════

    async def feed(
        self,
        category: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ImagePage:
        """Newest approved images, optionally in one category ("all" means none)."""
        if category == "all":
            category = None
        try:
            images = await self.image_repo.list_public(
                category=category,
                offset=(page - 1) * page_size,
                limit=page_size,
            )
            total = await self.image_repo.count_public(category)
        except SQLAlchemyError as e:
            logger.error("Image feed failed", error=str(e))
            return ImagePage(images=[], total=0, page=page, page_size=page_size)
        return ImagePage(images=images, total=total, page=page, page_size=page_size)

    async def trending(self) -> list[CommunityImage]:
        try:
            return await self.image_repo.trending_public(settings.TRENDING_LIMIT)
        except SQLAlchemyError as e:
            logger.error("Image trending failed", error=str(e))
            return []

    async def categories(self) -> dict[str, int]:
        try:
            return await self.image_repo.public_category_counts()
        except SQLAlchemyError as e:
            logger.error("Image categories failed", error=str(e))
            return {}

    async def open_image(self, slug: str) -> CommunityImage:
        """
        Public detail by slug; counts a view.

        Raises:
            NotFoundError: Unknown slug, or image not public
        """
        image = await self.image_repo.get_public_by_slug(slug)
        if image is None:
            raise NotFoundError("Image", details={"slug": slug})
        await self.image_repo.increment_counters(image.id, view_count=1)
        await self.session.refresh(image)
        return image

    async def record_download(self, image_id: int) -> CommunityImage:
        image = await self.image_repo.get_public(image_id)
        if image is None:
            raise NotFoundError("Image", image_id)
        await self.image_repo.increment_counters(image_id, downloads=1)
        await self.session.refresh(image)
        return image
