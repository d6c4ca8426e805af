"""
Content Schemas

Request/response models for submissions and the public catalog.

Response Structure:
===================
    SubmissionResponse
    ├── item: ContentItemResponse
    ├── requires_review: bool
    └── bundle_size: "4.20MB"

    ContentItemResponse carries the source badge derived from import_method,
    so clients never need to know the badge table.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from src.shared.ingestion.icons import source_badge
from src.shared.models.content_item import ContentItem
from src.shared.models.enums import ContentType, ImportMethod, ModerationStatus
from src.shared.schemas.common import BaseSchema


# ═══════════════════════════════════════════════════════════════════════════════
# RESPONSE SCHEMAS
# ═══════════════════════════════════════════════════════════════════════════════


class SourceBadge(BaseModel):
    """Display badge for how an item was imported."""

    label: str
    color: str
    icon: str


class CategoryResponse(BaseSchema):
    id: int
    name: str
    slug: str
    type: str


class ContentItemResponse(BaseSchema):
    """Public representation of a content item."""

    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    content_type: ContentType
    category: str
    slug: Optional[str] = None
    file_url: Optional[str] = None
    external_link: Optional[str] = None
    icon_path: Optional[str] = None
    thumbnail_path: Optional[str] = None
    bundle_size: int
    status: ModerationStatus
    visible: Optional[bool] = None
    featured: bool
    rank_order: int
    play_count: int
    likes: int
    trending_score: float
    import_method: Optional[ImportMethod] = None
    badge: Optional[SourceBadge] = None
    created_at: datetime

    @classmethod
    def from_item(cls, item: ContentItem) -> "ContentItemResponse":
        response = cls.model_validate(item)
        badge = source_badge(item.import_method)
        if badge is not None:
            response.badge = SourceBadge(**badge)
        return response


class SubmissionResponse(BaseModel):
    """Result of a submission or one-click import."""

    item: ContentItemResponse
    slug: Optional[str] = None
    requires_review: bool
    bundle_size: str = Field(description='Human-readable size, e.g. "4.20MB"')
    message: str


class LikeResponse(BaseModel):
    """Outcome of a like on an item or image."""

    liked: bool
    already_liked: bool
    likes: int
