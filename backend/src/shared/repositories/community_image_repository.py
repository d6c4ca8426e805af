"""
CommunityImage Repository

Database operations for the community image marketplace.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.community_image import CommunityImage
from src.shared.models.enums import ModerationStatus
from src.shared.models.likes import ImageLike


def public_filter():
    """Approved and not hidden."""
    return (
        CommunityImage.status == ModerationStatus.APPROVED,
        or_(CommunityImage.visible.is_(None), CommunityImage.visible.is_(True)),
    )


class CommunityImageRepository(BaseRepository[CommunityImage]):
    """Repository for CommunityImage database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(CommunityImage, session)

    async def get_public_by_slug(self, slug: str) -> Optional[CommunityImage]:
        """Get an approved, visible image by slug."""
        result = await self.session.execute(
            select(CommunityImage).where(CommunityImage.slug == slug, *public_filter())
        )
        return result.scalar_one_or_none()

    async def get_public(self, image_id: int) -> Optional[CommunityImage]:
        """Get an approved, visible image by id."""
        result = await self.session.execute(
            select(CommunityImage).where(CommunityImage.id == image_id, *public_filter())
        )
        return result.scalar_one_or_none()

    async def list_by_uploader(self, user_id: int) -> list[CommunityImage]:
        """All images uploaded by a user, regardless of status."""
        result = await self.session.execute(
            select(CommunityImage).where(CommunityImage.uploader_id == user_id)
        )
        return list(result.scalars().all())

    async def count_uploads_since(self, user_id: int, since: datetime) -> int:
        """Uploads by a user created at or after `since`."""
        result = await self.session.execute(
            select(func.count(CommunityImage.id)).where(
                CommunityImage.uploader_id == user_id,
                CommunityImage.created_at >= since,
            )
        )
        return result.scalar() or 0

    # ═══════════════════════════════════════════════════════════════════════════
    # PUBLIC LISTINGS
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_public(
        self,
        category: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> list[CommunityImage]:
        """Approved, visible images, newest first."""
        query = select(CommunityImage).where(*public_filter())
        if category:
            query = query.where(CommunityImage.category == category)
        query = (
            query.order_by(CommunityImage.created_at.desc(), CommunityImage.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_public(self, category: Optional[str] = None) -> int:
        """Count of approved, visible images."""
        query = select(func.count(CommunityImage.id)).where(*public_filter())
        if category:
            query = query.where(CommunityImage.category == category)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def trending_public(self, limit: int = 20) -> list[CommunityImage]:
        """
        Approved, visible images ranked by engagement.

        SQL Generated:
            ... ORDER BY downloads * 3 + likes * 2 + view_count DESC LIMIT 20
        """
        score = CommunityImage.downloads * 3 + CommunityImage.likes * 2 + CommunityImage.view_count
        result = await self.session.execute(
            select(CommunityImage)
            .where(*public_filter())
            .order_by(score.desc(), CommunityImage.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def public_category_counts(self) -> dict[str, int]:
        """Number of approved, visible images per category."""
        result = await self.session.execute(
            select(CommunityImage.category, func.count(CommunityImage.id))
            .where(*public_filter())
            .group_by(CommunityImage.category)
            .order_by(CommunityImage.category)
        )
        return {row[0]: row[1] for row in result.all()}

    # ═══════════════════════════════════════════════════════════════════════════
    # MODERATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_by_status(
        self,
        status: Optional[ModerationStatus],
        offset: int = 0,
        limit: int = 50,
    ) -> list[CommunityImage]:
        """Moderation queue, oldest first."""
        query = select(CommunityImage)
        if status is not None:
            query = query.where(CommunityImage.status == status)
        query = query.order_by(CommunityImage.created_at.asc(), CommunityImage.id.asc())
        result = await self.session.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def assign_slug(self, image_id: int, slug: str) -> None:
        """Write the slug computed from the freshly assigned id."""
        await self.session.execute(
            update(CommunityImage)
            .where(CommunityImage.id == image_id)
            .values(slug=slug)
            .execution_options(synchronize_session=False)
        )

    async def add_like(self, user_id: int, image_id: int) -> bool:
        """Insert the (user, image) like record; False if it already exists."""
        return await self.insert_unique(ImageLike(user_id=user_id, image_id=image_id))
