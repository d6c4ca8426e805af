"""
Discovery Service

Keyword search over the curated source registry and one-click import of
a registry entry through the regular submission pipeline.

Ranking:
========
    1  title contains the whole query
    2  a query word is one of the entry's keywords
    3  description contains the whole query

Entries matching none of these are left out. Ties keep registry order.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.core.exceptions import InputError, NotFoundError
from src.shared.core.logging import logger
from src.shared.models.app_source import AppSource
from src.shared.models.enums import ImportMethod, SourceType
from src.shared.repositories.app_source_repository import AppSourceRepository
from src.shared.services.submission_service import (
    SubmissionRequest,
    SubmissionResult,
    SubmissionService,
)


IMPORT_METHODS = {
    SourceType.REPOSITORY: ImportMethod.REPOSITORY,
    SourceType.URL: ImportMethod.URL_SCRAPE,
}


@dataclass
class RankedSource:
    source: AppSource
    rank: int


def rank_source(source: AppSource, query: str, words: set[str]) -> Optional[int]:
    """Rank of one registry entry for a lowercased query, or None if it does not match."""
    if query in (source.title or "").lower():
        return 1
    keywords = {keyword.lower() for keyword in (source.keywords or [])}
    if keywords & words:
        return 2
    if query in (source.description or "").lower():
        return 3
    return None


class DiscoveryService:
    """Service for the discovery registry."""

    def __init__(self, session: AsyncSession, submissions: Optional[SubmissionService] = None) -> None:
        self.session = session
        self.source_repo = AppSourceRepository(session)
        self.submissions = submissions or SubmissionService(session)

    async def search(self, keywords: str) -> list[RankedSource]:
        """
        Raises:
            InputError: Blank keywords
        """
        query = (keywords or "").strip().lower()
        if not query:
            raise InputError("Keywords required")
        words = set(query.split())

        ranked = []
        for source in await self.source_repo.list_all():
            rank = rank_source(source, query, words)
            if rank is not None:
                ranked.append(RankedSource(source=source, rank=rank))
        ranked.sort(key=lambda entry: entry.rank)

        logger.info("Discovery search", query=query, matches=len(ranked))
        return ranked[: settings.DISCOVERY_RESULT_LIMIT]

    async def import_source(
        self,
        user_id: int,
        source_id: int,
        agreement_accepted: bool,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SubmissionResult:
        """
        Run a registry entry through the repository or scrape adapter.

        Raises:
            NotFoundError: Unknown registry entry
            plus everything SubmissionService.import_remote raises
        """
        source = await self.source_repo.get(source_id)
        if source is None:
            raise NotFoundError("App source", source_id)

        request = SubmissionRequest(
            title=title or source.title,
            description=description or source.description,
            agreement_accepted=agreement_accepted,
            external_link=source.source_url,
        )
        logger.info("Discovery import", source_id=source_id, url=source.source_url)
        return await self.submissions.import_remote(
            user_id,
            source.source_url,
            IMPORT_METHODS[source.source_type],
            request,
        )

    async def add_source(
        self,
        title: str,
        source_url: str,
        source_type: SourceType,
        description: Optional[str] = None,
        keywords: Optional[list[str]] = None,
    ) -> AppSource:
        """Register a new importable source."""
        return await self.source_repo.create(
            title=title,
            description=description,
            source_url=source_url,
            source_type=source_type,
            keywords=[keyword.strip().lower() for keyword in (keywords or []) if keyword.strip()],
        )
