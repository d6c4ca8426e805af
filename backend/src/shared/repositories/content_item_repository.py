"""
ContentItem Repository

Database operations for catalog items: public listings, moderation queues,
like records and activity.

Public Visibility:
==================
Every public query goes through `public_filter()`:

    status = 'APPROVED' AND (visible IS NULL OR visible = true)

Pending and rejected rows never leave this repository through a public
method, whatever their other flags say.
"""

from typing import Optional

from sqlalchemy import func, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.activity import ContentActivity
from src.shared.models.content_item import ContentItem
from src.shared.models.enums import ActivityType, ModerationStatus
from src.shared.models.likes import ContentLike


def public_filter():
    """WHERE clause shared by every public read path."""
    return (
        ContentItem.status == ModerationStatus.APPROVED,
        or_(ContentItem.visible.is_(None), ContentItem.visible.is_(True)),
    )


class ContentItemRepository(BaseRepository[ContentItem]):
    """Repository for ContentItem database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(ContentItem, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # LOOKUPS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_by_source_identity(self, source_identity: str) -> Optional[ContentItem]:
        """Find the item imported from a given remote source or archive fingerprint."""
        result = await self.session.execute(
            select(ContentItem).where(ContentItem.source_identity == source_identity)
        )
        return result.scalar_one_or_none()

    async def get_public_by_slug(self, slug: str) -> Optional[ContentItem]:
        """Get an approved, visible item by slug."""
        result = await self.session.execute(
            select(ContentItem).where(ContentItem.slug == slug, *public_filter())
        )
        return result.scalar_one_or_none()

    async def list_by_owner(self, user_id: int) -> list[ContentItem]:
        """All items owned by a user, regardless of status."""
        result = await self.session.execute(
            select(ContentItem).where(ContentItem.user_id == user_id)
        )
        return list(result.scalars().all())

    # ═══════════════════════════════════════════════════════════════════════════
    # PUBLIC LISTINGS
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_public(
        self,
        category: Optional[str] = None,
        offset: int = 0,
        limit: int = 20,
    ) -> list[ContentItem]:
        """
        Approved, visible items: featured first, then higher rank, then newest.

        SQL Generated:
            SELECT * FROM content_items
            WHERE status = 'APPROVED' AND (visible IS NULL OR visible = true)
              AND category = 'game'
            ORDER BY featured DESC, rank_order DESC, created_at DESC
            OFFSET 0 LIMIT 20
        """
        query = select(ContentItem).where(*public_filter())
        if category:
            query = query.where(ContentItem.category == category)
        query = (
            query.order_by(
                ContentItem.featured.desc(),
                ContentItem.rank_order.desc(),
                ContentItem.created_at.desc(),
                ContentItem.id.desc(),
            )
            .offset(offset)
            .limit(limit)
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_public(self, category: Optional[str] = None) -> int:
        """Count of approved, visible items in an optional category."""
        query = select(func.count(ContentItem.id)).where(*public_filter())
        if category:
            query = query.where(ContentItem.category == category)
        result = await self.session.execute(query)
        return result.scalar() or 0

    async def search_public(self, text: str, limit: int = 20) -> list[ContentItem]:
        """Case-insensitive substring search over title and description."""
        pattern = f"%{text}%"
        result = await self.session.execute(
            select(ContentItem)
            .where(
                *public_filter(),
                or_(ContentItem.title.ilike(pattern), ContentItem.description.ilike(pattern)),
            )
            .order_by(ContentItem.trending_score.desc(), ContentItem.id.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def trending_public(self, limit: int = 20) -> list[ContentItem]:
        """Approved, visible items ordered by trending score."""
        result = await self.session.execute(
            select(ContentItem)
            .where(*public_filter())
            .order_by(ContentItem.trending_score.desc(), ContentItem.play_count.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    # ═══════════════════════════════════════════════════════════════════════════
    # MODERATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_by_status(
        self,
        status: Optional[ModerationStatus],
        offset: int = 0,
        limit: int = 50,
    ) -> list[ContentItem]:
        """Moderation queue, oldest first so nothing starves."""
        query = select(ContentItem)
        if status is not None:
            query = query.where(ContentItem.status == status)
        query = query.order_by(ContentItem.created_at.asc(), ContentItem.id.asc())
        result = await self.session.execute(query.offset(offset).limit(limit))
        return list(result.scalars().all())

    async def assign_slug(self, item_id: int, slug: str) -> None:
        """Write the slug computed from the freshly assigned id."""
        await self.session.execute(
            update(ContentItem)
            .where(ContentItem.id == item_id)
            .values(slug=slug)
            .execution_options(synchronize_session=False)
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # LIKES & ACTIVITY
    # ═══════════════════════════════════════════════════════════════════════════

    async def add_like(self, user_id: int, item_id: int) -> bool:
        """
        Insert the (user, item) like record.

        Returns:
            False when the pair already exists
        """
        return await self.insert_unique(ContentLike(user_id=user_id, item_id=item_id))

    async def record_activity(
        self,
        user_id: int,
        item_id: int,
        activity_type: ActivityType,
    ) -> None:
        """Append one activity row."""
        self.session.add(
            ContentActivity(user_id=user_id, item_id=item_id, activity_type=activity_type)
        )
        await self.session.flush()
