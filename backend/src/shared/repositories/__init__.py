"""
Repository Pattern Implementations

Repositories encapsulate database queries and provide a clean API for data access.

Repository Hierarchy:
=====================
    BaseRepository[ModelType]             ← Generic CRUD, atomic counters, insert_unique
         │
         ├── UserRepository               ← Lookups, XP awards
         ├── CategoryRepository           ← Get-or-create registry
         ├── ContentItemRepository        ← Public listings, moderation queue, likes
         ├── CommunityImageRepository     ← Image feed, trending, likes
         └── AppSourceRepository          ← Discovery registry

Usage Example:
==============
    repo = ContentItemRepository(db)
    item = await repo.get_public_by_slug("my-cool-tool-2s")
"""

from src.shared.repositories.base import BaseRepository
from src.shared.repositories.user_repository import UserRepository
from src.shared.repositories.category_repository import CategoryRepository
from src.shared.repositories.content_item_repository import ContentItemRepository
from src.shared.repositories.community_image_repository import CommunityImageRepository
from src.shared.repositories.app_source_repository import AppSourceRepository

__all__ = [
    # Base class
    "BaseRepository",
    # Entity-specific repositories
    "UserRepository",
    "CategoryRepository",
    "ContentItemRepository",
    "CommunityImageRepository",
    "AppSourceRepository",
]
