"""
Community Image Schemas
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from src.shared.models.enums import ModerationStatus, Orientation
from src.shared.schemas.common import BaseSchema


class CommunityImageResponse(BaseSchema):
    """Public representation of a community image."""

    id: int
    uploader_id: int
    title: str
    description: Optional[str] = None
    category: str
    creator_name: Optional[str] = None
    slug: Optional[str] = None
    image_path: str
    thumbnail_path: str
    width: int
    height: int
    file_size: int
    orientation: Orientation
    dominant_color: str
    status: ModerationStatus
    visible: Optional[bool] = None
    likes: int
    downloads: int
    view_count: int
    created_at: datetime


class ImageFeedResponse(BaseModel):
    images: list[CommunityImageResponse]
    total: int
    page: int
    has_more: bool


class ImageUploadResponse(BaseModel):
    image: CommunityImageResponse
    message: str = "Image submitted for review"


class ImageCategoriesResponse(BaseModel):
    """Approved image counts per category."""

    categories: dict[str, int]
