"""
Catalog Handler

Public reads of the content catalog, likes and owner deletion.

Only approved, visible items are ever returned here; everything else is
a 404 from the public side.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import CurrentAccount, OptionalUserId, get_pagination
from src.api.dependencies.services import (
    get_catalog_service,
    get_gamification_service,
    get_moderation_service,
)
from src.shared.schemas.common import (
    MessageResponse,
    PaginatedResponse,
    PaginationMeta,
    PaginationParams,
)
from src.shared.schemas.content import (
    CategoryResponse,
    ContentItemResponse,
    LikeResponse,
)
from src.shared.services.catalog_service import CatalogService
from src.shared.services.gamification_service import GamificationService
from src.shared.services.moderation_service import ModerationService


router = APIRouter()
category_router = APIRouter()


@router.get("", response_model=PaginatedResponse[ContentItemResponse])
async def list_items(
    category: Optional[str] = Query(None, description="Filter by category"),
    pagination: PaginationParams = Depends(get_pagination),
    catalog: CatalogService = Depends(get_catalog_service),
):
    """List public items: featured first, then rank, then newest."""
    page = await catalog.list_items(
        category=category,
        page=pagination.page,
        page_size=pagination.per_page,
    )
    return PaginatedResponse[ContentItemResponse](
        data=[ContentItemResponse.from_item(item) for item in page.items],
        pagination=PaginationMeta.create(
            page=page.page,
            per_page=page.page_size,
            total=page.total,
        ),
    )


@router.get("/search", response_model=list[ContentItemResponse])
async def search_items(
    q: str = Query("", description="Text matched against title and description"),
    limit: int = Query(20, ge=1, le=100),
    catalog: CatalogService = Depends(get_catalog_service),
):
    items = await catalog.search(q, limit=limit)
    return [ContentItemResponse.from_item(item) for item in items]


@router.get("/trending", response_model=list[ContentItemResponse])
async def trending_items(
    catalog: CatalogService = Depends(get_catalog_service),
):
    items = await catalog.trending()
    return [ContentItemResponse.from_item(item) for item in items]


@router.get("/{slug}", response_model=ContentItemResponse)
async def get_item(
    slug: str,
    user_id: OptionalUserId,
    catalog: CatalogService = Depends(get_catalog_service),
):
    """
    Public detail by slug.

    Counts a play; signed-in users also get a play activity recorded.
    """
    item = await catalog.open_item(slug, user_id=user_id)
    return ContentItemResponse.from_item(item)


@router.post("/{item_id}/like", response_model=LikeResponse)
async def like_item(
    item_id: int,
    user: CurrentAccount,
    gamification: GamificationService = Depends(get_gamification_service),
):
    """Like an item once. Repeated likes are a no-op, not an error."""
    outcome = await gamification.like_item(user.id, item_id)
    return LikeResponse(
        liked=outcome.liked,
        already_liked=outcome.already_liked,
        likes=outcome.likes,
    )


@router.delete("/{item_id}", response_model=MessageResponse, status_code=status.HTTP_200_OK)
async def delete_item(
    item_id: int,
    user: CurrentAccount,
    catalog: CatalogService = Depends(get_catalog_service),
    moderation: ModerationService = Depends(get_moderation_service),
):
    """Delete an item as its owner or as an administrator."""
    await catalog.delete_item(user, item_id, moderation)
    return MessageResponse(message="Item deleted")


@category_router.get("", response_model=list[CategoryResponse])
async def list_categories(
    catalog: CatalogService = Depends(get_catalog_service),
):
    return await catalog.list_categories()
