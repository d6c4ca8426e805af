"""
Pagination dependency.
"""
from fastapi import Query

from src.shared.schemas.common import PaginationParams


async def get_pagination(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: int = Query(20, ge=1, le=100, description="Items per page"),
) -> PaginationParams:
    """Pagination parameters dependency."""
    return PaginationParams(page=page, per_page=per_page)
