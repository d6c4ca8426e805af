"""
Playhub SQLAlchemy Models

This package contains all database models for the Playhub application.

Model Hierarchy:
================
    User
       ├── content_items (ContentItem[])
       │      ├── like_records (ContentLike[])
       │      └── activities (ContentActivity[])
       ├── images (CommunityImage[])
       │      └── like_records (ImageLike[])
       ├── content_likes / image_likes
       └── activities

    Category           ← registry, referenced by ContentItem.category_id
    AppSource          ← discovery registry, independent of the catalog

Usage:
======
    from src.shared.models import User, ContentItem, ModerationStatus
"""

from src.shared.models.base import Base, TimestampMixin
from src.shared.models.enums import (
    ModerationStatus,
    ContentType,
    ImportMethod,
    SourceType,
    Orientation,
    ActivityType,
)
from src.shared.models.user import User
from src.shared.models.category import Category
from src.shared.models.content_item import ContentItem
from src.shared.models.community_image import CommunityImage
from src.shared.models.likes import ContentLike, ImageLike
from src.shared.models.activity import ContentActivity
from src.shared.models.app_source import AppSource

__all__ = [
    # Base classes and mixins
    "Base",
    "TimestampMixin",
    # Enums
    "ModerationStatus",
    "ContentType",
    "ImportMethod",
    "SourceType",
    "Orientation",
    "ActivityType",
    # Models
    "User",
    "Category",
    "ContentItem",
    "CommunityImage",
    "ContentLike",
    "ImageLike",
    "ContentActivity",
    "AppSource",
]
