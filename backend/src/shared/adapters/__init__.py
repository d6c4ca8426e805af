"""
Adapters Package

Integrations with things outside the process.

Contents:
=========
- storage: Per-entry directory trees under the content, thumbnail and image roots
- http_fetcher: Size- and time-limited HTTP GET for repository and page imports

Note: Database access is handled by shared/db/session.py using async SQLAlchemy.

Usage:
======
    from src.shared.adapters.storage import content_storage
    from src.shared.adapters.http_fetcher import HttpFetcher
"""

from src.shared.adapters.http_fetcher import FetchedResource, HttpFetcher
from src.shared.adapters.storage import (
    TreeStorage,
    content_storage,
    image_storage,
    thumbnail_storage,
)

__all__ = [
    "FetchedResource",
    "HttpFetcher",
    "TreeStorage",
    "content_storage",
    "image_storage",
    "thumbnail_storage",
]
