"""
URL service - Source identity normalization.

The duplicate guard compares source identities, so two spellings of the
same remote source must normalize to one string:

    HTTPS://www.GitHub.com/Octo/Snake.git/     → https://github.com/octo/snake
    https://example.com/game/?utm_source=x#top → https://example.com/game

Archive uploads have no remote address; their identity is a content
fingerprint instead ("sha256:<hex>").
"""

import hashlib
from pathlib import Path
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse


class URLService:
    """Service for source identity operations."""

    TRACKING_PARAMS = {
        "utm_source",
        "utm_medium",
        "utm_campaign",
        "utm_term",
        "utm_content",
        "ref",
        "fbclid",
        "gclid",
        "mc_cid",
        "mc_eid",
    }

    @staticmethod
    def normalize_url(url: str) -> str:
        """
        Normalize URL for deduplication.
        - Convert to lowercase
        - Remove tracking parameters
        - Standardize to HTTPS
        - Remove trailing slashes, fragments and a trailing .git
        """
        parsed = urlparse(url.strip().lower())

        clean_query = urlencode(
            [
                (key, value)
                for key, value in parse_qsl(parsed.query, keep_blank_values=True)
                if key not in URLService.TRACKING_PARAMS
            ]
        )

        path = parsed.path.rstrip("/")
        if path.endswith(".git"):
            path = path[:-4]

        netloc = parsed.netloc
        if netloc.startswith("www."):
            netloc = netloc[4:]

        return urlunparse(
            (
                "https",  # Force HTTPS
                netloc,
                path,
                "",  # params
                clean_query,
                "",  # fragment
            )
        )

    @staticmethod
    def repository_identity(owner: str, repo: str) -> str:
        """Canonical identity of a hosted repository."""
        return URLService.normalize_url(f"https://github.com/{owner}/{repo}")

    @staticmethod
    def fingerprint_bytes(data: bytes) -> str:
        """Content identity of an in-memory upload."""
        return f"sha256:{hashlib.sha256(data).hexdigest()}"

    @staticmethod
    def fingerprint_file(path: Path, chunk_size: int = 1024 * 1024) -> str:
        """Content identity of a stored upload. Blocking."""
        digest = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(chunk_size), b""):
                digest.update(chunk)
        return f"sha256:{digest.hexdigest()}"
