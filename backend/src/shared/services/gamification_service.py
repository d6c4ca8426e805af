"""
Gamification Service

XP and level side effects of approvals and likes.

Rules:
======
- Approval (images): uploader gets XP_PER_APPROVAL and one upload credit
- Like: liker's record is inserted first; only a successful insert bumps
  the like counter and pays the owner XP_PER_LIKE (never for self-likes)
- level = floor(xp_points / XP_PER_LEVEL) + 1, recomputed in the same UPDATE

The like record's uniqueness constraint is the only dedup mechanism, so
two identical concurrent likes still pay out exactly once.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.core.exceptions import NotFoundError
from src.shared.core.logging import logger
from src.shared.models.enums import ActivityType
from src.shared.repositories.community_image_repository import CommunityImageRepository
from src.shared.repositories.content_item_repository import ContentItemRepository
from src.shared.repositories.user_repository import UserRepository


# Each like adds this much to an item's trending score
LIKE_TRENDING_WEIGHT = 2.0


@dataclass
class LikeOutcome:
    """Result of a like request."""

    liked: bool
    already_liked: bool
    likes: int


class GamificationService:
    """Service for XP awards and like handling."""

    def __init__(self, session: AsyncSession) -> None:
        """
        Initialize GamificationService.

        Args:
            session: Async database session
        """
        self.session = session
        self.user_repo = UserRepository(session)
        self.item_repo = ContentItemRepository(session)
        self.image_repo = CommunityImageRepository(session)

    async def award_approval(self, uploader_id: int) -> None:
        """Credit an approved upload to its uploader."""
        await self.user_repo.award_xp(
            uploader_id,
            xp=settings.XP_PER_APPROVAL,
            xp_per_level=settings.XP_PER_LEVEL,
            uploads=1,
        )
        logger.info("Approval XP awarded", user_id=uploader_id, xp=settings.XP_PER_APPROVAL)

    async def award_like(self, owner_id: int, liker_id: int) -> None:
        """Pay the owner for a like received from someone else."""
        if owner_id == liker_id:
            return
        await self.user_repo.award_xp(
            owner_id,
            xp=settings.XP_PER_LIKE,
            xp_per_level=settings.XP_PER_LEVEL,
            likes=1,
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # LIKES
    # ═══════════════════════════════════════════════════════════════════════════

    async def like_item(self, user_id: int, item_id: int) -> LikeOutcome:
        """
        Like a public content item.

        Raises:
            NotFoundError: Item missing, pending, rejected or hidden
        """
        item = await self.item_repo.get(item_id)
        if item is None or not item.is_public:
            raise NotFoundError("Content item", item_id)

        if not await self.item_repo.add_like(user_id, item_id):
            return LikeOutcome(liked=False, already_liked=True, likes=item.likes)

        await self.item_repo.increment_counters(
            item_id,
            likes=1,
            trending_score=LIKE_TRENDING_WEIGHT,
        )
        await self.item_repo.record_activity(user_id, item_id, ActivityType.LIKE)
        await self.award_like(item.user_id, user_id)

        await self.session.refresh(item)
        logger.info("Item liked", item_id=item_id, user_id=user_id, likes=item.likes)
        return LikeOutcome(liked=True, already_liked=False, likes=item.likes)

    async def like_image(self, user_id: int, image_id: int) -> LikeOutcome:
        """
        Like a public community image.

        Raises:
            NotFoundError: Image missing or not public
        """
        image = await self.image_repo.get_public(image_id)
        if image is None:
            raise NotFoundError("Image", image_id)

        if not await self.image_repo.add_like(user_id, image_id):
            return LikeOutcome(liked=False, already_liked=True, likes=image.likes)

        await self.image_repo.increment_counters(image_id, likes=1)
        await self.award_like(image.uploader_id, user_id)

        await self.session.refresh(image)
        logger.info("Image liked", image_id=image_id, user_id=user_id, likes=image.likes)
        return LikeOutcome(liked=True, already_liked=False, likes=image.likes)
