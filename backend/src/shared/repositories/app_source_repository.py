"""
AppSource Repository

Read access to the curated discovery registry.
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.app_source import AppSource


class AppSourceRepository(BaseRepository[AppSource]):
    """Repository for AppSource database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(AppSource, session)

    async def list_all(self) -> list[AppSource]:
        """
        Every registry entry.

        The registry is curated and small, and keyword overlap on a JSON
        array is not portable SQL, so ranking happens in the service.
        """
        result = await self.session.execute(select(AppSource).order_by(AppSource.id))
        return list(result.scalars().all())
