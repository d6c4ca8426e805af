"""
Source Adapters

Each adapter turns one kind of input into a local directory tree:

- ArchiveSource      ← uploaded ZIP archive
- RepositorySource   ← hosted repository branch snapshot
- UrlScrapeSource    ← live page plus same-origin assets
"""

from src.shared.ingestion.sources.base import BundleSource
from src.shared.ingestion.sources.archive import ArchiveSource, extract_archive
from src.shared.ingestion.sources.repository import RepositorySource, parse_repository_reference
from src.shared.ingestion.sources.scrape import UrlScrapeSource

__all__ = [
    "BundleSource",
    "ArchiveSource",
    "extract_archive",
    "RepositorySource",
    "parse_repository_reference",
    "UrlScrapeSource",
]
