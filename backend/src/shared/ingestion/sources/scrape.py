"""
URL-Scrape Source

Fetches one page, saves it as the entry document and downloads the
same-origin stylesheets, scripts and images it references.

Asset Rules:
============
- data: URIs are skipped
- Other hosts and well-known CDN hosts are skipped
- Each asset is saved at its URL path relative to the page's directory,
  or relative to the site root when it lives elsewhere on the host
- A failed asset is logged and skipped; the page import still succeeds

Only the page fetch itself can fail the import.
"""

import asyncio
import posixpath
from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urljoin, urlparse

from bs4 import BeautifulSoup

from src.config.settings import settings
from src.shared.adapters.http_fetcher import HttpFetcher
from src.shared.core.exceptions import InputError, UpstreamError, ValidationError
from src.shared.core.logging import logger
from src.shared.ingestion.sources.base import BundleSource
from src.shared.models.enums import ImportMethod


CDN_MARKERS = ("cdn.", "googleapis.com", "cloudflare.com")

ASSET_SELECTORS = (
    ("link[rel~=stylesheet][href]", "href"),
    ("script[src]", "src"),
    ("img[src]", "src"),
)


def collect_asset_references(html: str) -> list[str]:
    """Stylesheet, script and image references in document order, deduplicated."""
    soup = BeautifulSoup(html, "html.parser")
    seen: set[str] = set()
    references: list[str] = []
    for selector, attribute in ASSET_SELECTORS:
        for tag in soup.select(selector):
            value = (tag.get(attribute) or "").strip()
            if value and value not in seen:
                seen.add(value)
                references.append(value)
    return references


def asset_destination(page_url: str, asset_url: str) -> str:
    """
    Relative save path for an asset fetched alongside `page_url`.

    Example:
        asset_destination("https://a.io/games/snake/", "https://a.io/games/snake/js/app.js")
        # -> "js/app.js"
        asset_destination("https://a.io/games/snake/", "https://a.io/static/site.css")
        # -> "static/site.css"
    """
    page_path = urlparse(page_url).path or "/"
    page_dir = page_path if page_path.endswith("/") else posixpath.dirname(page_path) + "/"
    asset_path = posixpath.normpath(unquote(urlparse(asset_url).path or "/"))

    if asset_path.startswith(page_dir) and asset_path != page_dir.rstrip("/"):
        relative = asset_path[len(page_dir):]
    else:
        relative = asset_path.lstrip("/")
    if not relative or relative.endswith("/") or relative == ".":
        relative = posixpath.join(relative.rstrip("/."), "asset").lstrip("/")
    return relative


class UrlScrapeSource(BundleSource):
    """Bundle from a live web page."""

    import_method = ImportMethod.URL_SCRAPE

    def __init__(self, url: str, fetcher: Optional[HttpFetcher] = None) -> None:
        parsed = urlparse(url or "")
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise InputError("Invalid URL format", details={"url": url})
        self.url = url
        self.fetcher = fetcher or HttpFetcher()

    async def materialize(self, target: Path) -> None:
        page = await self.fetcher.fetch(
            self.url,
            timeout=settings.SCRAPE_PAGE_TIMEOUT_SECONDS,
            max_bytes=settings.SCRAPE_PAGE_MAX_BYTES,
        )
        await asyncio.to_thread(_write_file, target, "index.html", page.content)

        base_url = page.url or self.url
        base_host = urlparse(base_url).hostname
        saved = ["index.html"]

        for reference in collect_asset_references(page.text):
            asset_url = self._resolve(reference, base_url, base_host)
            if asset_url is None:
                continue
            relative = asset_destination(base_url, asset_url)
            if relative in saved:
                continue
            try:
                asset = await self.fetcher.fetch(
                    asset_url,
                    timeout=settings.SCRAPE_ASSET_TIMEOUT_SECONDS,
                    max_bytes=settings.SCRAPE_ASSET_MAX_BYTES,
                )
                await asyncio.to_thread(_write_file, target, relative, asset.content)
            except (UpstreamError, ValidationError, OSError) as e:
                logger.warning("Asset skipped", url=asset_url, error=str(e))
                continue
            saved.append(relative)

        logger.info("Page scraped", url=self.url, files=len(saved))

    @staticmethod
    def _resolve(reference: str, base_url: str, base_host: Optional[str]) -> Optional[str]:
        """Absolute same-origin URL for a reference, or None if it must be skipped."""
        if reference.lower().startswith("data:"):
            return None
        if any(marker in reference for marker in CDN_MARKERS):
            logger.debug("Skipping CDN asset", reference=reference)
            return None
        absolute = urljoin(base_url, reference)
        parsed = urlparse(absolute)
        if parsed.scheme not in ("http", "https") or parsed.hostname != base_host:
            logger.debug("Skipping cross-origin asset", url=absolute)
            return None
        return absolute


def _write_file(root: Path, relative: str, content: bytes) -> None:
    """Write `content` at `relative` under `root`, refusing anything that escapes it."""
    destination = (root / relative).resolve()
    resolved_root = root.resolve()
    if resolved_root not in destination.parents:
        raise ValidationError(violations=[f"Path escapes bundle root: {relative}"])
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_bytes(content)
