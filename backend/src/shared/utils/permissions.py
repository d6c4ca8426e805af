"""
Capability Predicates

Two independent questions asked per request. Neither implies the other:
an administrator is not automatically an owner, and owning an item grants
no moderation rights.

Usage:
======
    if not (is_content_owner(user.id, item) or is_administrator(user)):
        raise AuthorizationError("Only the owner or an administrator can delete this item")
"""

from typing import Optional

from src.shared.models.content_item import ContentItem
from src.shared.models.user import User


def is_administrator(user: Optional[User]) -> bool:
    """True for active administrator accounts."""
    return bool(user is not None and user.is_admin and not user.is_suspended)


def is_content_owner(user_id: Optional[int], item: ContentItem) -> bool:
    """True if `user_id` submitted `item`."""
    return user_id is not None and item.user_id == user_id
