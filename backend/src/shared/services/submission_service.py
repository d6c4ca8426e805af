"""
Submission Service

Turns a user submission into a persisted ContentItem. This is the
moderation router: it decides the initial status and owns the bundle
directory from the moment the pipeline hands it over.

Flow:
=====
    submit(user_id, request)
        │
        ├─ archive upload   → fingerprint → duplicate guard → ArchiveSource
        ├─ repository link  → normalize   → duplicate guard → RepositorySource
        ├─ page link        → normalize   → duplicate guard → UrlScrapeSource
        ├─ video upload     → own directory, routed by size
        └─ plain link       → LINK item, always pending
                │
                ▼
        pipeline.ingest() → classify → icon/placeholder → status by size
                │
                ▼
        INSERT (savepoint, unique source identity) → slug from id → COMMIT

Bundle and video directories are discarded on any failure up to and
including the commit, so no tree outlives a row that never landed.

Status Routing:
===============
    size <  BUNDLE_REVIEW_THRESHOLD_BYTES               → APPROVED
    review threshold <= size < BUNDLE_HARD_CAP_BYTES    → PENDING
    size >= BUNDLE_HARD_CAP_BYTES                       → rejected by the gate
"""

import asyncio
import shutil
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from sqlalchemy.ext.asyncio import AsyncSession

from src.config.settings import settings
from src.shared.adapters.http_fetcher import HttpFetcher
from src.shared.adapters.storage import TreeStorage, content_storage
from src.shared.core.exceptions import ConflictError, InputError, ValidationError
from src.shared.core.logging import logger
from src.shared.ingestion.bundle import ContentBundle
from src.shared.ingestion.classifier import BUNDLE_CLASSIFIER
from src.shared.ingestion.icons import find_icon, placeholder_thumbnail
from src.shared.ingestion.pipeline import IngestionPipeline
from src.shared.ingestion.slugs import build_slug
from src.shared.ingestion.sources import (
    ArchiveSource,
    BundleSource,
    RepositorySource,
    UrlScrapeSource,
)
from src.shared.ingestion.validation import BundleValidator, ValidationRules
from src.shared.models.content_item import ContentItem
from src.shared.models.enums import ContentType, ImportMethod, ModerationStatus
from src.shared.repositories.category_repository import CategoryRepository
from src.shared.repositories.content_item_repository import ContentItemRepository
from src.shared.services.url_service import URLService
from src.shared.utils.formatting import format_megabytes
from src.shared.utils.uploads import StagedUpload, sanitize_filename


ARCHIVE_EXTENSIONS = (".zip",)
VIDEO_EXTENSIONS = (".mp4", ".webm", ".ogg", ".mov", ".mkv", ".avi", ".m4v")


def determine_initial_status(
    size_bytes: int,
    review_threshold: int,
    hard_cap: int,
) -> ModerationStatus:
    """
    Initial moderation status for a valid bundle of `size_bytes`.

    Raises:
        ValidationError: At or above the hard cap. The gate rejects these
            first, so reaching this branch means the gate was bypassed.
    """
    if size_bytes >= hard_cap:
        raise ValidationError(
            violations=[f"Bundle too large: {size_bytes} bytes (limit {hard_cap})"]
        )
    if size_bytes >= review_threshold:
        return ModerationStatus.PENDING
    return ModerationStatus.APPROVED


@dataclass
class SubmissionRequest:
    """Everything a user sends with one submission."""

    title: str
    description: Optional[str] = None
    agreement_accepted: bool = False
    upload: Optional[StagedUpload] = None
    external_link: Optional[str] = None
    import_method: Optional[ImportMethod] = None
    thumbnail_url: Optional[str] = None


@dataclass
class SubmissionResult:
    """Persisted item plus routing information for the response."""

    item: ContentItem
    requires_review: bool
    bundle_size: str


class SubmissionService:
    """
    Service for content submissions.

    Handles:
    - Input checks (title, agreement, file or link)
    - Duplicate guard on source identity
    - Bundle ingestion through the pipeline
    - Classification, icon lookup and status routing
    - Atomic insert and slug assignment
    """

    def __init__(
        self,
        session: AsyncSession,
        storage: Optional[TreeStorage] = None,
        fetcher: Optional[HttpFetcher] = None,
    ) -> None:
        """
        Initialize SubmissionService.

        Args:
            session: Async database session
            storage: Content root storage (defaults to CONTENT_ROOT)
            fetcher: HTTP fetcher for remote imports
        """
        self.session = session
        self.storage = storage or content_storage()
        self.fetcher = fetcher or HttpFetcher()
        self.item_repo = ContentItemRepository(session)
        self.category_repo = CategoryRepository(session)

    @property
    def pipeline(self) -> IngestionPipeline:
        return IngestionPipeline(
            self.storage,
            BundleValidator(ValidationRules.from_settings(settings)),
        )

    # ═══════════════════════════════════════════════════════════════════════════
    # ENTRY POINTS
    # ═══════════════════════════════════════════════════════════════════════════

    async def submit(self, user_id: int, request: SubmissionRequest) -> SubmissionResult:
        """
        Route one submission to the matching ingestion path.

        The staged upload, if any, is always removed before returning.

        Raises:
            InputError: Missing title/agreement, neither file nor link,
                unsupported file type, malformed link
            ConflictError: Source already imported
            ValidationError: Bundle rejected by the gate
            UpstreamError: Remote fetch failed
        """
        try:
            self._check_request(request)

            if request.upload is not None:
                suffix = request.upload.suffix
                if suffix in ARCHIVE_EXTENSIONS:
                    return await self._submit_archive(user_id, request)
                if suffix in VIDEO_EXTENSIONS:
                    return await self._submit_video(user_id, request)
                raise InputError(
                    f"Unsupported file type {suffix or '(none)'}. Upload a .zip bundle or a video."
                )

            if request.import_method in (ImportMethod.REPOSITORY, ImportMethod.URL_SCRAPE):
                return await self.import_remote(
                    user_id,
                    request.external_link,
                    request.import_method,
                    request,
                )
            return await self._submit_link(user_id, request)
        finally:
            if request.upload is not None:
                await asyncio.to_thread(request.upload.path.unlink, missing_ok=True)

    async def import_remote(
        self,
        user_id: int,
        reference: str,
        import_method: ImportMethod,
        request: SubmissionRequest,
    ) -> SubmissionResult:
        """Import a repository snapshot or a scraped page."""
        self._check_request(request, require_source=False)

        source: BundleSource
        if import_method == ImportMethod.REPOSITORY:
            source = RepositorySource(reference, fetcher=self.fetcher)
            identity = URLService.repository_identity(source.owner, source.repo)
        elif import_method == ImportMethod.URL_SCRAPE:
            source = UrlScrapeSource(reference, fetcher=self.fetcher)
            identity = URLService.normalize_url(reference)
        else:
            raise InputError(f"Unsupported import method: {import_method}")

        return await self._ingest_bundle(user_id, request, source, identity)

    # ═══════════════════════════════════════════════════════════════════════════
    # INGESTION PATHS
    # ═══════════════════════════════════════════════════════════════════════════

    async def _submit_archive(self, user_id: int, request: SubmissionRequest) -> SubmissionResult:
        upload = request.upload
        identity = await asyncio.to_thread(URLService.fingerprint_file, upload.path)
        source = ArchiveSource(
            upload.path,
            max_bytes=settings.BUNDLE_HARD_CAP_BYTES,
            max_files=settings.BUNDLE_MAX_FILES,
        )
        return await self._ingest_bundle(user_id, request, source, identity)

    async def _ingest_bundle(
        self,
        user_id: int,
        request: SubmissionRequest,
        source: BundleSource,
        identity: str,
    ) -> SubmissionResult:
        await self.ensure_not_imported(identity)

        bundle = await self.pipeline.ingest(source)
        try:
            result = await self._persist_bundle(user_id, request, source, identity, bundle)
            # The tree is kept only once its row is durable
            await self.session.commit()
            return result
        except BaseException:
            await asyncio.shield(asyncio.to_thread(self.storage.discard, bundle.root))
            raise

    async def _persist_bundle(
        self,
        user_id: int,
        request: SubmissionRequest,
        source: BundleSource,
        identity: str,
        bundle: ContentBundle,
    ) -> SubmissionResult:
        category = BUNDLE_CLASSIFIER.classify(request.title, request.description, bundle.paths)
        category_row = await self.category_repo.get_or_create(category)

        icon = find_icon(bundle.paths)
        status = determine_initial_status(
            bundle.total_bytes,
            settings.BUNDLE_REVIEW_THRESHOLD_BYTES,
            settings.BUNDLE_HARD_CAP_BYTES,
        )

        item = ContentItem(
            user_id=user_id,
            title=request.title.strip(),
            description=request.description,
            content_type=ContentType.BUNDLE,
            category=category,
            category_id=category_row.id,
            file_url=self.storage.public_url(bundle.root, bundle.entry_document),
            icon_path=self.storage.public_url(bundle.root, icon) if icon else None,
            thumbnail_path=request.thumbnail_url
            or placeholder_thumbnail(category, settings.PLACEHOLDER_URL_PREFIX),
            bundle_size=bundle.total_bytes,
            status=status,
            import_method=source.import_method,
            source_identity=identity,
            agreement_accepted=True,
            agreement_timestamp=datetime.now(timezone.utc),
        )
        await self._insert(item)

        logger.info(
            "Bundle routed",
            item_id=item.id,
            slug=item.slug,
            status=status.value,
            method=source.import_method.value,
            bytes=bundle.total_bytes,
        )
        return SubmissionResult(
            item=item,
            requires_review=status == ModerationStatus.PENDING,
            bundle_size=format_megabytes(bundle.total_bytes),
        )

    async def _submit_video(self, user_id: int, request: SubmissionRequest) -> SubmissionResult:
        upload = request.upload
        if upload.size >= settings.BUNDLE_HARD_CAP_BYTES:
            raise ValidationError(
                violations=[
                    f"Video too large: {upload.size} bytes "
                    f"(limit {settings.BUNDLE_HARD_CAP_BYTES})"
                ]
            )
        status = determine_initial_status(
            upload.size,
            settings.BUNDLE_REVIEW_THRESHOLD_BYTES,
            settings.BUNDLE_HARD_CAP_BYTES,
        )

        directory = await asyncio.to_thread(self.storage.allocate)
        try:
            filename = sanitize_filename(upload.filename, default=f"video{upload.suffix}")
            await asyncio.to_thread(shutil.move, str(upload.path), str(directory / filename))

            category = BUNDLE_CLASSIFIER.classify(request.title, request.description)
            category_row = await self.category_repo.get_or_create(category)
            item = ContentItem(
                user_id=user_id,
                title=request.title.strip(),
                description=request.description,
                content_type=ContentType.VIDEO,
                category=category,
                category_id=category_row.id,
                file_url=self.storage.public_url(directory, filename),
                thumbnail_path=request.thumbnail_url
                or placeholder_thumbnail(category, settings.PLACEHOLDER_URL_PREFIX),
                bundle_size=upload.size,
                status=status,
                agreement_accepted=True,
                agreement_timestamp=datetime.now(timezone.utc),
            )
            await self._insert(item)
            await self.session.commit()
        except BaseException:
            await asyncio.shield(asyncio.to_thread(self.storage.discard, directory))
            raise

        logger.info("Video routed", item_id=item.id, status=status.value, bytes=upload.size)
        return SubmissionResult(
            item=item,
            requires_review=status == ModerationStatus.PENDING,
            bundle_size=format_megabytes(upload.size),
        )

    async def _submit_link(self, user_id: int, request: SubmissionRequest) -> SubmissionResult:
        link = request.external_link.strip()
        parsed = urlparse(link)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise InputError("External link must be an http(s) URL", details={"url": link})

        category = BUNDLE_CLASSIFIER.classify(request.title, request.description)
        category_row = await self.category_repo.get_or_create(category)
        item = ContentItem(
            user_id=user_id,
            title=request.title.strip(),
            description=request.description,
            content_type=ContentType.LINK,
            category=category,
            category_id=category_row.id,
            external_link=link,
            thumbnail_path=request.thumbnail_url
            or placeholder_thumbnail(category, settings.PLACEHOLDER_URL_PREFIX),
            status=ModerationStatus.PENDING,
            agreement_accepted=True,
            agreement_timestamp=datetime.now(timezone.utc),
        )
        await self._insert(item)

        logger.info("Link submitted", item_id=item.id)
        return SubmissionResult(item=item, requires_review=True, bundle_size=format_megabytes(0))

    # ═══════════════════════════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════════════════════════

    @staticmethod
    def _check_request(request: SubmissionRequest, require_source: bool = True) -> None:
        if not request.title or not request.title.strip():
            raise InputError("Title is required")
        if not request.agreement_accepted:
            raise InputError("You must accept the content agreement before publishing")
        if require_source and request.upload is None and not (request.external_link or "").strip():
            raise InputError("Missing file or external link")

    async def ensure_not_imported(self, identity: Optional[str]) -> None:
        """
        Fast-path duplicate check, run before any download or extraction.

        Raises:
            ConflictError: An item with this source identity exists
        """
        if not identity:
            return
        existing = await self.item_repo.get_by_source_identity(identity)
        if existing is not None:
            raise ConflictError(
                f'This source has already been imported as "{existing.title}" '
                f"(slug: {existing.slug})",
                details={"item_id": existing.id, "slug": existing.slug},
            )

    async def _insert(self, item: ContentItem) -> None:
        """
        Insert inside a savepoint, then derive the slug from the new id.

        A unique-constraint failure here means a concurrent import of the
        same source won the race after our pre-check.
        """
        if not await self.item_repo.insert_unique(item):
            await self.ensure_not_imported(item.source_identity)
            raise ConflictError("This source has already been imported")

        slug = build_slug(item.title, item.id, settings.SLUG_MAX_LENGTH)
        await self.item_repo.assign_slug(item.id, slug)
        await self.session.refresh(item)
