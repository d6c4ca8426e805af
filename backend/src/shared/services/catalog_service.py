"""
Catalog Service

Public reads of the content catalog plus owner deletion.

Every read goes through the repository's public filter
(status = APPROVED and visible not false). Listing paths degrade to an
empty result when the database errors instead of failing the page; the
detail lookup does not, because a missing item must stay a 404.

Trending:
=========
    trending_score = play_count + 2 * likes

maintained incrementally by the same UPDATE that bumps each counter.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.core.exceptions import AuthorizationError, NotFoundError
from src.shared.core.logging import logger
from src.shared.models.category import Category
from src.shared.models.content_item import ContentItem
from src.shared.models.enums import ActivityType
from src.shared.models.user import User
from src.shared.repositories.category_repository import CategoryRepository
from src.shared.repositories.content_item_repository import ContentItemRepository
from src.shared.services.moderation_service import ModerationService
from src.shared.utils.permissions import is_administrator, is_content_owner


PLAY_TRENDING_WEIGHT = 1.0


@dataclass
class ItemPage:
    """Paginated public listing."""

    items: list[ContentItem]
    total: int
    page: int
    page_size: int

    @property
    def has_next(self) -> bool:
        return self.page * self.page_size < self.total

    @property
    def has_prev(self) -> bool:
        return self.page > 1


class CatalogService:
    """Service for public catalog reads."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.item_repo = ContentItemRepository(session)
        self.category_repo = CategoryRepository(session)

    async def list_items(
        self,
        category: Optional[str] = None,
        page: int = 1,
        page_size: int = 20,
    ) -> ItemPage:
        """Featured first, then higher rank, then newest."""
        try:
            items = await self.item_repo.list_public(
                category=category,
                offset=(page - 1) * page_size,
                limit=page_size,
            )
            total = await self.item_repo.count_public(category)
        except SQLAlchemyError as e:
            logger.error("Catalog listing failed", error=str(e), category=category)
            return ItemPage(items=[], total=0, page=page, page_size=page_size)
        return ItemPage(items=items, total=total, page=page, page_size=page_size)

    async def search(self, query: str, limit: int = 20) -> list[ContentItem]:
        text = (query or "").strip()
        if not text:
            return []
        try:
            return await self.item_repo.search_public(text, limit=limit)
        except SQLAlchemyError as e:
            logger.error("Catalog search failed", error=str(e))
            return []

    async def trending(self, limit: Optional[int] = None) -> list[ContentItem]:
        try:
            return await self.item_repo.trending_public(limit or settings.TRENDING_LIMIT)
        except SQLAlchemyError as e:
            logger.error("Trending listing failed", error=str(e))
            return []

    async def list_categories(self) -> list[Category]:
        try:
            return await self.category_repo.list_all()
        except SQLAlchemyError as e:
            logger.error("Category listing failed", error=str(e))
            return []

    async def open_item(self, slug: str, user_id: Optional[int] = None) -> ContentItem:
        """
        Public detail by slug. Counts a play and, for signed-in users,
        records a play activity.

        Raises:
            NotFoundError: Unknown slug, or item not public
        """
        item = await self.item_repo.get_public_by_slug(slug)
        if item is None:
            raise NotFoundError("Content item", details={"slug": slug})

        await self.item_repo.increment_counters(
            item.id,
            play_count=1,
            trending_score=PLAY_TRENDING_WEIGHT,
        )
        if user_id is not None:
            await self.item_repo.record_activity(user_id, item.id, ActivityType.PLAY)
        await self.session.refresh(item)
        return item

    async def delete_item(self, user: User, item_id: int, moderation: ModerationService) -> None:
        """
        Delete an item as its owner or as an administrator.

        Raises:
            NotFoundError: Unknown id
            AuthorizationError: Neither owner nor administrator
        """
        item = await self.item_repo.get(item_id)
        if item is None:
            raise NotFoundError("Content item", item_id)
        if not (is_content_owner(user.id, item) or is_administrator(user)):
            raise AuthorizationError("Only the owner or an administrator can delete this item")
        await moderation.delete_item(item_id)
