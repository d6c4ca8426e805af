"""
Utilities Package

Common utility functions and helpers.

Contents:
=========
- security: JWT verification
- permissions: Administrator and content-owner predicates
- images: Pillow processing for community images and thumbnails
- formatting: Response formatting helpers

Usage:
======
    from src.shared.utils.security import SecurityUtils
    from src.shared.utils.permissions import is_administrator
"""

from src.shared.utils.security import SecurityUtils
from src.shared.utils.permissions import is_administrator, is_content_owner
from src.shared.utils.formatting import format_megabytes

__all__ = [
    "SecurityUtils",
    "is_administrator",
    "is_content_owner",
    "format_megabytes",
]
