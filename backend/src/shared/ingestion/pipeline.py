"""
Ingestion Pipeline

Source adapter → bundle inventory → validation gate, inside a directory the
pipeline allocates and guarantees to remove on any failure.

    storage.allocate()          ← fresh uniquely named directory
    source.fetch_bundle(dir)    ← adapter fills it, tree is inventoried
    validator.validate(bundle)  ← in a worker thread
    return bundle               ← caller now owns the directory

Once `ingest` returns, the caller is responsible for the directory; the
submission service discards it if persisting the item fails.
"""

import asyncio

from src.shared.adapters.storage import TreeStorage
from src.shared.core.logging import logger
from src.shared.ingestion.bundle import ContentBundle
from src.shared.ingestion.sources.base import BundleSource
from src.shared.ingestion.validation import BundleValidator


class IngestionPipeline:
    """Runs one source through extraction and validation."""

    def __init__(self, storage: TreeStorage, validator: BundleValidator) -> None:
        self.storage = storage
        self.validator = validator

    async def ingest(self, source: BundleSource) -> ContentBundle:
        """
        Produce a validated bundle from `source`.

        Raises:
            InputError, ValidationError, UpstreamError: From the adapter or
                the gate. The allocated directory is gone by then.
        """
        target = await asyncio.to_thread(self.storage.allocate)
        try:
            bundle = await source.fetch_bundle(target)
            logger.info(
                "Bundle inventoried",
                bundle=bundle.directory_name,
                method=source.import_method.value,
                files=bundle.file_count,
                bytes=bundle.total_bytes,
            )
            await asyncio.to_thread(self.validator.validate, bundle)
        except BaseException:
            # Cancellation included: the directory must not outlive a failed run
            await asyncio.shield(asyncio.to_thread(self.storage.discard, target))
            raise
        return bundle
