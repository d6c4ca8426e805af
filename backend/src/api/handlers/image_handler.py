"""
Image Handler

Community image marketplace: upload, feed, detail, likes and downloads.
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status

from src.api.dependencies import CurrentAccount
from src.api.dependencies.services import get_gamification_service, get_image_service
from src.config.settings import settings
from src.shared.schemas.content import LikeResponse
from src.shared.schemas.image import (
    CommunityImageResponse,
    ImageCategoriesResponse,
    ImageFeedResponse,
    ImageUploadResponse,
)
from src.shared.services.gamification_service import GamificationService
from src.shared.services.image_service import ImageService
from src.shared.utils.uploads import read_upload


router = APIRouter()


@router.post(
    "",
    response_model=ImageUploadResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_image(
    user: CurrentAccount,
    file: UploadFile = File(...),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    images: ImageService = Depends(get_image_service),
):
    """
    Upload one image. It is converted to WebP, thumbnailed and queued for review.
    """
    data = await read_upload(file, settings.IMAGE_MAX_BYTES)
    image = await images.upload(
        user,
        data,
        filename=file.filename,
        content_type=file.content_type,
        title=title or "",
        description=description,
        category=category,
    )
    return ImageUploadResponse(image=CommunityImageResponse.model_validate(image))


@router.get("/feed", response_model=ImageFeedResponse)
async def image_feed(
    category: Optional[str] = Query(None, description='Category, or "all"'),
    page: int = Query(1, ge=1),
    per_page: int = Query(20, ge=1, le=100),
    images: ImageService = Depends(get_image_service),
):
    result = await images.feed(category=category, page=page, page_size=per_page)
    return ImageFeedResponse(
        images=[CommunityImageResponse.model_validate(image) for image in result.images],
        total=result.total,
        page=result.page,
        has_more=result.has_more,
    )


@router.get("/trending", response_model=list[CommunityImageResponse])
async def trending_images(
    images: ImageService = Depends(get_image_service),
):
    return await images.trending()


@router.get("/categories", response_model=ImageCategoriesResponse)
async def image_categories(
    images: ImageService = Depends(get_image_service),
):
    return ImageCategoriesResponse(categories=await images.categories())


@router.get("/{slug}", response_model=CommunityImageResponse)
async def get_image(
    slug: str,
    images: ImageService = Depends(get_image_service),
):
    """Public detail by slug; counts a view."""
    return await images.open_image(slug)


@router.post("/{image_id}/like", response_model=LikeResponse)
async def like_image(
    image_id: int,
    user: CurrentAccount,
    gamification: GamificationService = Depends(get_gamification_service),
):
    outcome = await gamification.like_image(user.id, image_id)
    return LikeResponse(
        liked=outcome.liked,
        already_liked=outcome.already_liked,
        likes=outcome.likes,
    )


@router.post("/{image_id}/download", response_model=CommunityImageResponse)
async def record_download(
    image_id: int,
    images: ImageService = Depends(get_image_service),
):
    """Count a download. The file itself is served statically."""
    return await images.record_download(image_id)
