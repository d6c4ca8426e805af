"""
Category Repository

Lookups and get-or-create for the category registry.
"""

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.category import Category
from src.shared.models.content_item import ContentItem


class CategoryRepository(BaseRepository[Category]):
    """Repository for Category database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(Category, session)

    async def get_by_slug(self, slug: str) -> Optional[Category]:
        """Get a category by its unique slug."""
        result = await self.session.execute(select(Category).where(Category.slug == slug))
        return result.scalar_one_or_none()

    async def get_or_create(self, slug: str, category_type: Optional[str] = None) -> Category:
        """
        Return the category for `slug`, creating it on first use.

        The display name is the capitalized slug. A concurrent request may
        create the same slug between our SELECT and INSERT; the insert runs
        in a savepoint so that race resolves to a re-read instead of an error.
        """
        existing = await self.get_by_slug(slug)
        if existing:
            return existing

        category = Category(
            name=slug.capitalize(),
            slug=slug,
            type=category_type or slug,
        )
        if not await self.insert_unique(category):
            return await self.get_by_slug(slug)

        await self.session.refresh(category)
        return category

    async def list_all(self) -> list[Category]:
        """All categories ordered by name."""
        result = await self.session.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())

    async def delete_category(self, category_id: int) -> bool:
        """
        Delete a category and detach items that referenced it.

        Items keep their denormalized category slug.
        """
        category = await self.get(category_id)
        if not category:
            return False

        await self.session.execute(
            update(ContentItem)
            .where(ContentItem.category_id == category_id)
            .values(category_id=None)
            .execution_options(synchronize_session=False)
        )
        await self.session.delete(category)
        await self.session.flush()
        return True

