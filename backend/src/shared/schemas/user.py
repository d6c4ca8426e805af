"""
User Schemas

Response models for accounts as seen by administrators.
"""

from datetime import datetime
from typing import Optional

from src.shared.schemas.common import BaseSchema


class UserResponse(BaseSchema):
    """Schema for user response."""

    id: int
    email: str
    name: Optional[str] = None
    is_admin: bool
    is_suspended: bool
    xp_points: int
    level: int
    total_uploads: int
    total_likes: int
    created_at: datetime


class AdminUserResponse(UserResponse):
    """User row with upload counts for the admin list."""

    item_count: int = 0
    image_count: int = 0
