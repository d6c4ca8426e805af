"""
Pydantic Schemas

Request and response models for the API.

Schema Categories:
==================
- common: Base schemas, pagination, health
- content: Submission, catalog item and like schemas
- image: Community image schemas
- discovery: Source registry search and import
- moderation: Administrator request bodies
- user: User rows for administrators

Usage:
======
    from src.shared.schemas.content import ContentItemResponse, SubmissionResponse
    from src.shared.schemas.common import PaginatedResponse, MessageResponse
"""

from src.shared.schemas.common import (
    BaseSchema,
    PaginationParams,
    PaginationMeta,
    PaginatedResponse,
    MessageResponse,
    HealthResponse,
)
from src.shared.schemas.content import (
    SourceBadge,
    CategoryResponse,
    ContentItemResponse,
    SubmissionResponse,
    LikeResponse,
)
from src.shared.schemas.image import (
    CommunityImageResponse,
    ImageFeedResponse,
    ImageUploadResponse,
    ImageCategoriesResponse,
)
from src.shared.schemas.discovery import (
    DiscoverRequest,
    AppSourceResponse,
    DiscoveryResult,
    DiscoverResponse,
    ImportRequest,
    AppSourceCreateRequest,
)
from src.shared.schemas.moderation import (
    StatusUpdateRequest,
    VisibilityUpdateRequest,
    FeaturedUpdateRequest,
    RankUpdateRequest,
    SuspensionUpdateRequest,
    CategoryCreateRequest,
)
from src.shared.schemas.user import UserResponse, AdminUserResponse

__all__ = [
    # Common
    "BaseSchema",
    "PaginationParams",
    "PaginationMeta",
    "PaginatedResponse",
    "MessageResponse",
    "HealthResponse",
    # Content
    "SourceBadge",
    "CategoryResponse",
    "ContentItemResponse",
    "SubmissionResponse",
    "LikeResponse",
    # Images
    "CommunityImageResponse",
    "ImageFeedResponse",
    "ImageUploadResponse",
    "ImageCategoriesResponse",
    # Discovery
    "DiscoverRequest",
    "AppSourceResponse",
    "DiscoveryResult",
    "DiscoverResponse",
    "ImportRequest",
    "AppSourceCreateRequest",
    # Moderation
    "StatusUpdateRequest",
    "VisibilityUpdateRequest",
    "FeaturedUpdateRequest",
    "RankUpdateRequest",
    "SuspensionUpdateRequest",
    "CategoryCreateRequest",
    # Users
    "UserResponse",
    "AdminUserResponse",
]
