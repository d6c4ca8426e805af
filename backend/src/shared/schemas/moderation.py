"""
Moderation Schemas

Request bodies for administrator endpoints.
"""

from typing import Optional

from pydantic import BaseModel, Field

from src.shared.models.enums import ModerationStatus


class StatusUpdateRequest(BaseModel):
    """Approve or reject. Setting "pending" is refused by the service."""

    status: ModerationStatus


class VisibilityUpdateRequest(BaseModel):
    visible: bool


class FeaturedUpdateRequest(BaseModel):
    featured: bool


class RankUpdateRequest(BaseModel):
    rank_order: int = Field(description="Higher values sort first within the featured group")


class SuspensionUpdateRequest(BaseModel):
    suspended: bool


class CategoryCreateRequest(BaseModel):
    """Schema for creating a category."""

    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9-]+$")
    type: Optional[str] = Field(default=None, max_length=50)
