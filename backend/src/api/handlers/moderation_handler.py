"""
Moderation Handler

Administrator-only endpoints. Every route depends on AdminAccount, so a
non-administrator gets 403 before any service runs.

Route Map:
==========
    /admin/items                     GET     queue by status
    /admin/items/{id}/status         PATCH   approve / reject
    /admin/items/{id}/visibility     PATCH
    /admin/items/{id}/featured       PATCH
    /admin/items/{id}/rank           PATCH
    /admin/items/{id}/thumbnail      POST    manual thumbnail upload
    /admin/items/{id}                DELETE
    /admin/images ...                same shape for community images
    /admin/users ...                 list, suspend, delete
    /admin/categories                POST / DELETE
    /admin/sources                   POST    add a discovery registry entry
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from src.api.dependencies import AdminAccount
from src.api.dependencies.services import get_discovery_service, get_moderation_service
from src.config.settings import settings
from src.shared.models.enums import ModerationStatus
from src.shared.schemas.common import MessageResponse
from src.shared.schemas.content import CategoryResponse, ContentItemResponse
from src.shared.schemas.discovery import AppSourceCreateRequest, AppSourceResponse
from src.shared.schemas.image import CommunityImageResponse
from src.shared.schemas.moderation import (
    CategoryCreateRequest,
    FeaturedUpdateRequest,
    RankUpdateRequest,
    StatusUpdateRequest,
    SuspensionUpdateRequest,
    VisibilityUpdateRequest,
)
from src.shared.schemas.user import AdminUserResponse, UserResponse
from src.shared.services.discovery_service import DiscoveryService
from src.shared.services.moderation_service import ModerationService
from src.shared.utils.uploads import read_upload


router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════════
# CONTENT ITEMS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/items", response_model=list[ContentItemResponse])
async def list_items(
    _admin: AdminAccount,
    item_status: Optional[ModerationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    moderation: ModerationService = Depends(get_moderation_service),
):
    """Moderation queue, oldest first. Omit status to list everything."""
    items = await moderation.list_items(item_status, page=page, page_size=per_page)
    return [ContentItemResponse.from_item(item) for item in items]


@router.patch("/items/{item_id}/status", response_model=ContentItemResponse)
async def set_item_status(
    item_id: int,
    request: StatusUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    item = await moderation.set_item_status(item_id, request.status)
    return ContentItemResponse.from_item(item)


@router.patch("/items/{item_id}/visibility", response_model=ContentItemResponse)
async def set_item_visibility(
    item_id: int,
    request: VisibilityUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    item = await moderation.set_item_flags(item_id, visible=request.visible)
    return ContentItemResponse.from_item(item)


@router.patch("/items/{item_id}/featured", response_model=ContentItemResponse)
async def set_item_featured(
    item_id: int,
    request: FeaturedUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    item = await moderation.set_item_flags(item_id, featured=request.featured)
    return ContentItemResponse.from_item(item)


@router.patch("/items/{item_id}/rank", response_model=ContentItemResponse)
async def set_item_rank(
    item_id: int,
    request: RankUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    item = await moderation.set_item_flags(item_id, rank_order=request.rank_order)
    return ContentItemResponse.from_item(item)


@router.post("/items/{item_id}/thumbnail", response_model=ContentItemResponse)
async def upload_item_thumbnail(
    item_id: int,
    _admin: AdminAccount,
    file: UploadFile = File(...),
    moderation: ModerationService = Depends(get_moderation_service),
):
    """Replace an item's thumbnail with an uploaded image."""
    data = await read_upload(file, settings.THUMBNAIL_MAX_BYTES)
    item = await moderation.set_item_thumbnail(item_id, data, file.filename, file.content_type)
    return ContentItemResponse.from_item(item)


@router.delete("/items/{item_id}", response_model=MessageResponse)
async def delete_item(
    item_id: int,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    await moderation.delete_item(item_id)
    return MessageResponse(message="Item deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# COMMUNITY IMAGES
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/images", response_model=list[CommunityImageResponse])
async def list_images(
    _admin: AdminAccount,
    image_status: Optional[ModerationStatus] = Query(None, alias="status"),
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    moderation: ModerationService = Depends(get_moderation_service),
):
    return await moderation.list_images(image_status, page=page, page_size=per_page)


@router.patch("/images/{image_id}/status", response_model=CommunityImageResponse)
async def set_image_status(
    image_id: int,
    request: StatusUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    """Approve or reject an image. Approval awards the uploader XP."""
    return await moderation.set_image_status(image_id, request.status)


@router.patch("/images/{image_id}/visibility", response_model=CommunityImageResponse)
async def set_image_visibility(
    image_id: int,
    request: VisibilityUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    return await moderation.set_image_visibility(image_id, request.visible)


@router.delete("/images/{image_id}", response_model=MessageResponse)
async def delete_image(
    image_id: int,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    await moderation.delete_image(image_id)
    return MessageResponse(message="Image deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# USERS
# ═══════════════════════════════════════════════════════════════════════════════


@router.get("/users", response_model=list[AdminUserResponse])
async def list_users(
    _admin: AdminAccount,
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=500),
    moderation: ModerationService = Depends(get_moderation_service),
):
    rows = await moderation.list_users(page=page, page_size=per_page)
    return [
        AdminUserResponse(
            **UserResponse.model_validate(user).model_dump(),
            item_count=item_count,
            image_count=image_count,
        )
        for user, item_count, image_count in rows
    ]


@router.patch("/users/{user_id}/suspend", response_model=UserResponse)
async def set_user_suspended(
    user_id: int,
    request: SuspensionUpdateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    return await moderation.set_user_suspended(user_id, request.suspended)


@router.delete("/users/{user_id}", response_model=MessageResponse)
async def delete_user(
    user_id: int,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    """Delete a user, every stored tree they own, and all their rows."""
    await moderation.delete_user(user_id)
    return MessageResponse(message="User deleted")


# ═══════════════════════════════════════════════════════════════════════════════
# CATEGORIES & DISCOVERY REGISTRY
# ═══════════════════════════════════════════════════════════════════════════════


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: CategoryCreateRequest,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    return await moderation.create_category(request.name, request.slug, request.type)


@router.delete("/categories/{category_id}", response_model=MessageResponse)
async def delete_category(
    category_id: int,
    _admin: AdminAccount,
    moderation: ModerationService = Depends(get_moderation_service),
):
    await moderation.delete_category(category_id)
    return MessageResponse(message="Category deleted")


@router.post(
    "/sources",
    response_model=AppSourceResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_source(
    request: AppSourceCreateRequest,
    _admin: AdminAccount,
    discovery: DiscoveryService = Depends(get_discovery_service),
):
    """Register an importable source for discovery."""
    return await discovery.add_source(
        title=request.title,
        source_url=request.source_url,
        source_type=request.source_type,
        description=request.description,
        keywords=request.keywords,
    )
