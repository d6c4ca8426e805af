"""
Storage adapter - Directory-tree storage under a fixed root.

Every published bundle, video and community image lives in its own
uniquely named subdirectory below a root. Published URLs are relative
references into that tree; serving them is someone else's job.

Layout:
=======
    CONTENT_ROOT/
        3f2a9c.../index.html        ← bundle, URL /uploads/community-apps/3f2a9c.../index.html
        81be0d.../clip.mp4          ← video
    THUMBNAIL_ROOT/
        thumbnail-5d1e....png       ← flat files, one per manual thumbnail

Usage:
======
    storage = TreeStorage(settings.CONTENT_ROOT, settings.CONTENT_URL_PREFIX)
    directory = storage.allocate()
    url = storage.public_url(directory, "index.html")
    await storage.remove_url(url)
"""

import asyncio
import shutil
import uuid
from pathlib import Path
from typing import Optional

from src.config.settings import settings
from src.shared.core.logging import logger


class TreeStorage:
    """
    Adapter for one storage root.

    Handles:
    - Allocating collision-free directories
    - Mapping stored paths to public URLs and back
    - Removing whole trees
    """

    def __init__(self, root: str | Path, url_prefix: str) -> None:
        """
        Initialize the storage adapter.

        Args:
            root: Filesystem directory holding the stored trees
            url_prefix: Public URL prefix the root is served under
        """
        self.root = Path(root)
        self.url_prefix = "/" + url_prefix.strip("/")

    # ═══════════════════════════════════════════════════════════════════════════
    # ALLOCATION
    # ═══════════════════════════════════════════════════════════════════════════

    def allocate(self) -> Path:
        """
        Create a fresh, uniquely named directory under the root.

        mkdir without exist_ok is the collision check: a clash simply draws
        another name.
        """
        self.root.mkdir(parents=True, exist_ok=True)
        while True:
            candidate = self.root / uuid.uuid4().hex
            try:
                candidate.mkdir()
            except FileExistsError:
                continue
            return candidate

    def file_path(self, suffix: str, prefix: str = "file") -> Path:
        """Path for a new flat file directly under the root."""
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root / f"{prefix}-{uuid.uuid4().hex}{suffix}"

    # ═══════════════════════════════════════════════════════════════════════════
    # URL MAPPING
    # ═══════════════════════════════════════════════════════════════════════════

    def public_url(self, stored: Path, relative: Optional[str] = None) -> str:
        """
        Public URL for a stored directory (plus a path inside it) or file.

        Example:
            public_url(root / "3f2a", "game/index.html")
            # -> "/uploads/community-apps/3f2a/game/index.html"
        """
        parts = [self.url_prefix, stored.relative_to(self.root).as_posix()]
        if relative:
            parts.append(relative.lstrip("/"))
        return "/".join(parts)

    def entry_for_url(self, url: Optional[str]) -> Optional[Path]:
        """
        The top-level entry under the root that a public URL points into.

        Returns None for URLs outside this root (placeholders, external
        links) and for anything that would not stay under the root.
        """
        if not url or not url.startswith(self.url_prefix + "/"):
            return None
        remainder = url[len(self.url_prefix) + 1:]
        top = remainder.split("/", 1)[0]
        if top in ("", ".", ".."):
            return None
        return self.root / top

    # ═══════════════════════════════════════════════════════════════════════════
    # REMOVAL
    # ═══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def discard(path: Path) -> None:
        """Remove a stored tree or file. Missing paths are fine. Blocking."""
        if path.is_dir() and not path.is_symlink():
            shutil.rmtree(path, ignore_errors=True)
        else:
            path.unlink(missing_ok=True)

    async def remove(self, path: Path) -> None:
        """Remove a stored tree or file without blocking the event loop."""
        await asyncio.to_thread(self.discard, path)
        logger.info("Storage entry removed", path=str(path))

    async def remove_url(self, url: Optional[str]) -> bool:
        """
        Remove whatever a public URL points into.

        Returns:
            True if the URL belonged to this root
        """
        entry = self.entry_for_url(url)
        if entry is None:
            return False
        await self.remove(entry)
        return True


def content_storage() -> TreeStorage:
    """Bundles and videos."""
    return TreeStorage(settings.CONTENT_ROOT, settings.CONTENT_URL_PREFIX)


def thumbnail_storage() -> TreeStorage:
    """Manually uploaded thumbnails."""
    return TreeStorage(settings.THUMBNAIL_ROOT, settings.THUMBNAIL_URL_PREFIX)


def image_storage() -> TreeStorage:
    """Community images."""
    return TreeStorage(settings.IMAGE_ROOT, settings.IMAGE_URL_PREFIX)
