"""
Source Adapter Base

A source adapter writes one kind of input (an uploaded archive, a remote
repository snapshot, a scraped page) into an empty target directory. The
pipeline owns the directory and removes it on every failure path; adapters
only fill it.
"""

import asyncio
from abc import ABC, abstractmethod
from pathlib import Path

from src.shared.ingestion.bundle import ContentBundle
from src.shared.models.enums import ImportMethod


class BundleSource(ABC):
    """Base class for all source adapters."""

    import_method: ImportMethod

    @abstractmethod
    async def materialize(self, target: Path) -> None:
        """
        Fill `target` with the bundle's files.

        Raises:
            InputError: The input itself is malformed
            ValidationError: An entry would escape `target`
            UpstreamError: A remote fetch failed
        """

    async def fetch_bundle(self, target: Path) -> ContentBundle:
        """Materialize into `target` and inventory the result."""
        await self.materialize(target)
        return await asyncio.to_thread(ContentBundle.from_directory, target)
