"""
Repository Source

Downloads a branch snapshot archive of a hosted repository and extracts it.

Flow:
=====
    https://github.com/octo/snake(.git)
        → parse owner/repo
        → GET .../archive/refs/heads/main.zip     (404 → try next branch)
        → GET .../archive/refs/heads/master.zip
        → safe extraction into the target
        → snake-main/ wrapper hoisted to the bundle root

Branch fallback is the only retry. Every other upstream failure surfaces
immediately.
"""

import asyncio
import io
import re
import shutil
import uuid
from pathlib import Path
from typing import Optional

from src.config.settings import settings
from src.shared.adapters.http_fetcher import FetchedResource, HttpFetcher
from src.shared.core.exceptions import InputError, UpstreamNotFoundError
from src.shared.core.logging import logger
from src.shared.ingestion.sources.archive import extract_archive
from src.shared.ingestion.sources.base import BundleSource
from src.shared.models.enums import ImportMethod


_REPOSITORY_PATTERN = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s?#]+)", re.IGNORECASE)


def parse_repository_reference(reference: str) -> tuple[str, str]:
    """
    Extract (owner, repo) from a repository URL.

    Raises:
        InputError: Not a recognizable repository reference
    """
    match = _REPOSITORY_PATTERN.search(reference or "")
    if not match:
        raise InputError("Invalid repository URL", details={"url": reference})
    owner, repo = match.group(1), match.group(2)
    if repo.lower().endswith(".git"):
        repo = repo[:-4]
    if not owner or not repo:
        raise InputError("Invalid repository URL", details={"url": reference})
    return owner, repo


def hoist_single_wrapper(target: Path) -> bool:
    """
    Move the contents of a lone top-level directory up into `target`.

    The wrapper is renamed to a scratch name first, so an inner entry that
    shares the wrapper's name cannot collide with it. Blocking.

    Returns:
        True if a wrapper was hoisted
    """
    entries = list(target.iterdir())
    if len(entries) != 1 or not entries[0].is_dir() or entries[0].is_symlink():
        return False

    wrapper = entries[0].rename(target / f".hoist-{uuid.uuid4().hex}")
    for child in wrapper.iterdir():
        shutil.move(str(child), str(target / child.name))
    wrapper.rmdir()
    return True


class RepositorySource(BundleSource):
    """Bundle from a remote repository snapshot."""

    import_method = ImportMethod.REPOSITORY

    def __init__(
        self,
        reference: str,
        fetcher: Optional[HttpFetcher] = None,
        branches: Optional[list[str]] = None,
    ) -> None:
        self.reference = reference
        self.owner, self.repo = parse_repository_reference(reference)
        self.fetcher = fetcher or HttpFetcher()
        self.branches = list(branches or settings.REPOSITORY_BRANCHES)

    def archive_url(self, branch: str) -> str:
        return settings.REPOSITORY_ARCHIVE_URL.format(
            owner=self.owner,
            repo=self.repo,
            branch=branch,
        )

    async def download(self) -> FetchedResource:
        """
        Fetch the first branch snapshot that exists.

        Raises:
            UpstreamNotFoundError: No probed branch exists
            UpstreamError: Any other failure on any probe
        """
        last_missing: Optional[UpstreamNotFoundError] = None
        for branch in self.branches:
            url = self.archive_url(branch)
            try:
                resource = await self.fetcher.fetch(
                    url,
                    timeout=settings.REPOSITORY_TIMEOUT_SECONDS,
                    max_bytes=settings.REPOSITORY_MAX_BYTES,
                )
            except UpstreamNotFoundError as e:
                logger.info("Branch not found, trying next", repo=f"{self.owner}/{self.repo}", branch=branch)
                last_missing = e
                continue
            logger.info(
                "Repository snapshot downloaded",
                repo=f"{self.owner}/{self.repo}",
                branch=branch,
                bytes=len(resource.content),
            )
            return resource
        raise last_missing or UpstreamNotFoundError(self.reference)

    async def materialize(self, target: Path) -> None:
        resource = await self.download()
        await asyncio.to_thread(self._unpack, resource.content, target)

    @staticmethod
    def _unpack(content: bytes, target: Path) -> None:
        extract_archive(
            io.BytesIO(content),
            target,
            max_bytes=settings.BUNDLE_HARD_CAP_BYTES,
            max_files=settings.BUNDLE_MAX_FILES,
        )
        hoist_single_wrapper(target)
