"""
User Repository

Database operations specific to the User model.

Common Operations:
==================
- get_by_email()              → Find user by email address
- award_xp()                  → Atomic XP/counter increment with level recompute
- list_with_upload_counts()   → Admin overview of users and their submissions
"""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.shared.repositories.base import BaseRepository
from src.shared.models.community_image import CommunityImage
from src.shared.models.content_item import ContentItem
from src.shared.models.user import User


class UserRepository(BaseRepository[User]):
    """Repository for User database operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(User, session)

    # ═══════════════════════════════════════════════════════════════════════════
    # LOOKUP METHODS
    # ═══════════════════════════════════════════════════════════════════════════

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def list_with_upload_counts(
        self,
        offset: int = 0,
        limit: int = 100,
    ) -> list[tuple[User, int, int]]:
        """
        List users newest first with their item and image counts.

        Returns:
            (user, item_count, image_count) tuples

        SQL Generated:
            SELECT users.*, (SELECT count(*) FROM content_items WHERE user_id = users.id),
                   (SELECT count(*) FROM community_images WHERE uploader_id = users.id)
            FROM users ORDER BY created_at DESC
        """
        item_count = (
            select(func.count(ContentItem.id))
            .where(ContentItem.user_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        image_count = (
            select(func.count(CommunityImage.id))
            .where(CommunityImage.uploader_id == User.id)
            .correlate(User)
            .scalar_subquery()
        )
        result = await self.session.execute(
            select(User, item_count, image_count)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return [(row[0], row[1] or 0, row[2] or 0) for row in result.all()]

    # ═══════════════════════════════════════════════════════════════════════════
    # GAMIFICATION
    # ═══════════════════════════════════════════════════════════════════════════

    async def award_xp(
        self,
        user_id: int,
        xp: int,
        xp_per_level: int,
        uploads: int = 0,
        likes: int = 0,
    ) -> bool:
        """
        Add XP and counters in one UPDATE and recompute the level from the new XP.

        Every right-hand side reads the pre-update row, so the level expression
        uses (xp_points + xp) and stays consistent with the stored XP.

        SQL Generated:
            UPDATE users
            SET xp_points = xp_points + 5,
                total_likes = total_likes + 1,
                level = (xp_points + 5) / 1000 + 1
            WHERE id = 17

        Returns:
            True if the user exists
        """
        new_xp = User.xp_points + xp
        result = await self.session.execute(
            update(User)
            .where(User.id == user_id)
            .values(
                xp_points=new_xp,
                total_uploads=User.total_uploads + uploads,
                total_likes=User.total_likes + likes,
                level=new_xp // xp_per_level + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) > 0
