"""
Icon and Thumbnail Resolver

Finds a conventional icon file inside a bundle, or falls back to a
category placeholder image when no thumbnail was supplied.

Search Order:
=============
    1. Bundle root, each candidate name in priority order
    2. Each immediate subdirectory (sorted), same candidate order

The first hit wins. Deeper directories are never searched.
"""

from typing import Iterable, Optional

from src.shared.models.enums import ImportMethod


ICON_CANDIDATES = ("favicon.ico", "favicon.png", "logo.png", "icon.png", "app-icon.png")

PLACEHOLDER_CATEGORIES = frozenset({"game", "tool", "tutorial", "productivity", "general"})

SOURCE_BADGES = {
    ImportMethod.ARCHIVE: {"label": "Uploaded", "color": "#6366f1", "icon": "upload"},
    ImportMethod.REPOSITORY: {"label": "GitHub", "color": "#24292e", "icon": "github"},
    ImportMethod.URL_SCRAPE: {"label": "Web Import", "color": "#0ea5e9", "icon": "globe"},
}


def find_icon(paths: Iterable[str]) -> Optional[str]:
    """
    Pick the icon from a bundle inventory of relative POSIX paths.

    Returns:
        The relative path of the first matching candidate, or None
    """
    # lowercased name -> path as stored, per directory ("" is the root)
    by_directory: dict[str, dict[str, str]] = {}
    for path in paths:
        parts = path.split("/")
        if len(parts) > 2:
            continue
        directory = parts[0] if len(parts) == 2 else ""
        by_directory.setdefault(directory, {})[parts[-1].lower()] = path

    search_order = [""] + sorted(d for d in by_directory if d)
    for directory in search_order:
        names = by_directory.get(directory, {})
        for candidate in ICON_CANDIDATES:
            if candidate in names:
                return names[candidate]
    return None


def placeholder_thumbnail(category: str, url_prefix: str) -> str:
    """Static placeholder image reference for a category."""
    key = category if category in PLACEHOLDER_CATEGORIES else "general"
    return f"{url_prefix.rstrip('/')}/{key}-thumbnail.png"


def source_badge(import_method: Optional[ImportMethod]) -> Optional[dict[str, str]]:
    """Display badge for how an item was imported; None for videos and links."""
    if import_method is None:
        return None
    return dict(SOURCE_BADGES[import_method])
