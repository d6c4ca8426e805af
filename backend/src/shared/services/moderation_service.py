"""
Moderation Service

The administrator side of the catalog: the status state machine, the
presentation flags, manual thumbnails and every deletion path.

State Machine:
==============
    PENDING ──approve──► APPROVED   (terminal for status)
       │
       └────reject────► REJECTED   (terminal for status)

    Setting a field to its current value is a successful no-op.
    visible / featured / rank_order change independently of status.

Deletion:
=========
Storage first, then the row. Row deletion cascades to likes and activity.
Deleting a user removes every stored tree of their items and images before
the account row goes.
"""

import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.adapters.storage import (
    TreeStorage,
    content_storage,
    image_storage,
    thumbnail_storage,
)
from src.shared.core.exceptions import ConflictError, InputError, NotFoundError
from src.shared.core.logging import logger
from src.shared.models.category import Category
from src.shared.models.community_image import CommunityImage
from src.shared.models.content_item import ContentItem
from src.shared.models.enums import ModerationStatus
from src.shared.models.user import User
from src.shared.repositories.category_repository import CategoryRepository
from src.shared.repositories.community_image_repository import CommunityImageRepository
from src.shared.repositories.content_item_repository import ContentItemRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.services.gamification_service import GamificationService
from src.shared.utils.images import ALLOWED_THUMBNAIL_TYPES, is_allowed_image
from src.shared.utils.uploads import sanitize_filename


def check_status_transition(current: ModerationStatus, target: ModerationStatus) -> bool:
    """
    Validate a status change.

    Returns:
        True if the status actually changes, False for a no-op

    Raises:
        InputError: Target is PENDING (nothing moves back into the queue)
        ConflictError: Current status is already terminal
    """
    if current == target:
        return False
    if target == ModerationStatus.PENDING:
        raise InputError("Status can only be set to approved or rejected")
    if current != ModerationStatus.PENDING:
        raise ConflictError(
            f"Status is already {current.value} and cannot change to {target.value}"
        )
    return True


class ModerationService:
    """
    Service for administrator actions.

    Handles:
    - Status transitions for items and images
    - Visibility, featured and rank flags
    - Manual thumbnails
    - Item, image, user and category deletion
    """

    def __init__(
        self,
        session: AsyncSession,
        content: Optional[TreeStorage] = None,
        thumbnails: Optional[TreeStorage] = None,
        images: Optional[TreeStorage] = None,
    ) -> None:
        """
        Initialize ModerationService.

        Args:
            session: Async database session
            content: Bundle and video storage
            thumbnails: Manual thumbnail storage
            images: Community image storage
        """
        self.session = session
        self.content = content or content_storage()
        self.thumbnails = thumbnails or thumbnail_storage()
        self.images = images or image_storage()
        self.item_repo = ContentItemRepository(session)
        self.image_repo = CommunityImageRepository(session)
        self.user_repo = UserRepository(session)
        self.category_repo = CategoryRepository(session)
        self.gamification = GamificationService(session)

    # ═══════════════════════════════════════════════════════════════════════════
    # CONTENT ITEMS
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_items(
        self,
        status: Optional[ModerationStatus] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> list[ContentItem]:
        """Moderation queue, oldest first. No status means every item."""
        return await self.item_repo.list_by_status(
            status,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

    async def get_item(self, item_id: int) -> ContentItem:
        item = await self.item_repo.get(item_id)
        if item is None:
            raise NotFoundError("Content item", item_id)
        return item

    async def set_item_status(self, item_id: int, status: ModerationStatus) -> ContentItem:
        """Approve or reject an item."""
        item = await self.get_item(item_id)
        if not check_status_transition(item.status, status):
            return item

        item.status = status
        await self.session.flush()
        await self.session.refresh(item)
        logger.info("Item status changed", item_id=item_id, status=status.value)
        return item

    async def set_item_flags(
        self,
        item_id: int,
        visible: Optional[bool] = None,
        featured: Optional[bool] = None,
        rank_order: Optional[int] = None,
    ) -> ContentItem:
        """Change any of the presentation flags; None leaves a flag alone."""
        item = await self.get_item(item_id)
        changes = {
            field: value
            for field, value in (
                ("visible", visible),
                ("featured", featured),
                ("rank_order", rank_order),
            )
            if value is not None and getattr(item, field) != value
        }
        if not changes:
            return item

        for field, value in changes.items():
            setattr(item, field, value)
        await self.session.flush()
        await self.session.refresh(item)
        logger.info("Item flags changed", item_id=item_id, **changes)
        return item

    async def set_item_thumbnail(
        self,
        item_id: int,
        data: bytes,
        filename: Optional[str],
        content_type: Optional[str],
    ) -> ContentItem:
        """
        Store a manual thumbnail and point the item at it.

        Raises:
            InputError: Not an allowed image type, or over the size cap
        """
        if len(data) > settings.THUMBNAIL_MAX_BYTES:
            raise InputError("Thumbnail too large")
        if not is_allowed_image(content_type, filename, ALLOWED_THUMBNAIL_TYPES):
            raise InputError("Thumbnail must be a JPEG, PNG, WebP or GIF image")

        item = await self.get_item(item_id)
        suffix = "." + sanitize_filename(filename).rsplit(".", 1)[-1].lower()
        destination = self.thumbnails.file_path(suffix, prefix="thumbnail")
        await asyncio.to_thread(destination.write_bytes, data)

        previous = item.thumbnail_path
        item.thumbnail_path = self.thumbnails.public_url(destination)
        try:
            await self.session.flush()
        except BaseException:
            await asyncio.to_thread(self.thumbnails.discard, destination)
            raise
        await self.thumbnails.remove_url(previous)
        await self.session.refresh(item)
        return item

    async def delete_item(self, item_id: int) -> None:
        """Remove an item's stored tree, then its row."""
        item = await self.get_item(item_id)
        await self.remove_item_files(item)
        await self.item_repo.delete(item_id)
        logger.info("Item deleted", item_id=item_id)

    async def remove_item_files(self, item: ContentItem) -> None:
        """Storage side of an item deletion."""
        await self.content.remove_url(item.file_url)
        await self.thumbnails.remove_url(item.thumbnail_path)

    # ═══════════════════════════════════════════════════════════════════════════
    # COMMUNITY IMAGES
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_images(
        self,
        status: Optional[ModerationStatus] = None,
        page: int = 1,
        page_size: int = 50,
    ) -> list[CommunityImage]:
        return await self.image_repo.list_by_status(
            status,
            offset=(page - 1) * page_size,
            limit=page_size,
        )

    async def get_image(self, image_id: int) -> CommunityImage:
        image = await self.image_repo.get(image_id)
        if image is None:
            raise NotFoundError("Image", image_id)
        return image

    async def set_image_status(self, image_id: int, status: ModerationStatus) -> CommunityImage:
        """Approve or reject an image. Approval pays the uploader."""
        image = await self.get_image(image_id)
        if not check_status_transition(image.status, status):
            return image

        image.status = status
        await self.session.flush()
        if status == ModerationStatus.APPROVED:
            await self.gamification.award_approval(image.uploader_id)
        await self.session.refresh(image)
        logger.info("Image status changed", image_id=image_id, status=status.value)
        return image

    async def set_image_visibility(self, image_id: int, visible: bool) -> CommunityImage:
        image = await self.get_image(image_id)
        if image.visible != visible:
            image.visible = visible
            await self.session.flush()
            await self.session.refresh(image)
        return image

    async def delete_image(self, image_id: int) -> None:
        """Remove an image's folder, then its row."""
        image = await self.get_image(image_id)
        await self.images.remove_url(image.image_path)
        await self.image_repo.delete(image_id)
        logger.info("Image deleted", image_id=image_id)

    # ═══════════════════════════════════════════════════════════════════════════
    # USERS
    # ═══════════════════════════════════════════════════════════════════════════

    async def list_users(self, page: int = 1, page_size: int = 100) -> list[tuple[User, int, int]]:
        """Users with their item and image counts."""
        return await self.user_repo.list_with_upload_counts(
            offset=(page - 1) * page_size,
            limit=page_size,
        )

    async def set_user_suspended(self, user_id: int, suspended: bool) -> User:
        user = await self.user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if user.is_suspended != suspended:
            user.is_suspended = suspended
            await self.session.flush()
            await self.session.refresh(user)
        logger.info("User suspension changed", user_id=user_id, suspended=suspended)
        return user

    async def delete_user(self, user_id: int) -> None:
        """
        Delete a user and everything they uploaded.

        Every stored tree goes first; the row delete then cascades to
        items, images, likes and activity.
        """
        user = await self.user_repo.get(user_id)
        if user is None:
            raise NotFoundError("User", user_id)

        items = await self.item_repo.list_by_owner(user_id)
        images = await self.image_repo.list_by_uploader(user_id)
        for item in items:
            await self.remove_item_files(item)
        for image in images:
            await self.images.remove_url(image.image_path)

        await self.user_repo.delete(user_id)
        logger.info(
            "User deleted",
            user_id=user_id,
            items=len(items),
            images=len(images),
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # CATEGORIES
    # ═══════════════════════════════════════════════════════════════════════════

    async def create_category(self, name: str, slug: str, category_type: Optional[str] = None) -> Category:
        """
        Raises:
            ConflictError: Slug already taken
        """
        category = Category(name=name, slug=slug, type=category_type or slug)
        if not await self.category_repo.insert_unique(category):
            raise ConflictError(f"Category '{slug}' already exists")
        await self.session.refresh(category)
        return category

    async def delete_category(self, category_id: int) -> None:
        if not await self.category_repo.delete_category(category_id):
            raise NotFoundError("Category", category_id)
