"""
Discovery Schemas

Request/response models for the source registry search and one-click import.
"""

from typing import Optional

from pydantic import BaseModel, Field

from src.shared.models.enums import SourceType
from src.shared.schemas.common import BaseSchema


class DiscoverRequest(BaseModel):
    """Free-text search over the registry."""

    keywords: str = Field(description="Words matched against title, keywords and description")


class AppSourceResponse(BaseSchema):
    id: int
    title: str
    description: Optional[str] = None
    source_url: str
    source_type: SourceType
    keywords: list[str]


class DiscoveryResult(BaseModel):
    """One ranked candidate. Lower rank is a better match."""

    source: AppSourceResponse
    rank: int


class DiscoverResponse(BaseModel):
    results: list[DiscoveryResult]
    total: int


class ImportRequest(BaseModel):
    """Import one registry entry through the submission pipeline."""

    source_id: int
    agreement_accepted: bool = False
    title: Optional[str] = Field(default=None, description="Defaults to the registry title")
    description: Optional[str] = None


class AppSourceCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    source_url: str
    source_type: SourceType
    description: Optional[str] = None
    keywords: list[str] = Field(default_factory=list)
