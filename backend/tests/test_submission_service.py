import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from src.config.settings import MEGABYTE, settings
from src.shared.core.exceptions import ConflictError, InputError, UpstreamNotFoundError, ValidationError
from src.shared.ingestion.slugs import build_slug
from src.shared.models import ContentItem
from src.shared.models.enums import ContentType, ImportMethod, ModerationStatus
from src.shared.services.submission_service import (
    SubmissionRequest,
    SubmissionService,
    determine_initial_status,
)
from src.shared.utils.uploads import StagedUpload


@pytest.fixture
def small_thresholds(monkeypatch):
    """Review at 100 bytes, reject at 200."""
    monkeypatch.setattr(settings, "BUNDLE_REVIEW_THRESHOLD_BYTES", 100)
    monkeypatch.setattr(settings, "BUNDLE_HARD_CAP_BYTES", 200)


@pytest.fixture
def stage(storage_roots):
    """Write bytes into scratch space as if the upload endpoint had staged them."""
    counter = iter(range(1000))

    def _stage(content, filename="bundle.zip"):
        path = storage_roots.scratch / f"staged-{next(counter)}-{filename}"
        path.write_bytes(content)
        return StagedUpload(path=path, filename=filename, content_type="", size=len(content))

    return _stage


def archive_request(upload, title="Orbit Sim"):
    return SubmissionRequest(title=title, agreement_accepted=True, upload=upload)


async def count_items(session):
    result = await session.execute(select(func.count(ContentItem.id)))
    return result.scalar()


@pytest.mark.parametrize(
    "size, expected",
    [
        (0, ModerationStatus.APPROVED),
        (10 * MEGABYTE - 1, ModerationStatus.APPROVED),
        (10 * MEGABYTE, ModerationStatus.PENDING),
        (20 * MEGABYTE - 1, ModerationStatus.PENDING),
    ],
)
def test_initial_status_by_size(size, expected):
    assert determine_initial_status(size, 10 * MEGABYTE, 20 * MEGABYTE) == expected


def test_initial_status_at_hard_cap_raises():
    with pytest.raises(ValidationError):
        determine_initial_status(20 * MEGABYTE, 10 * MEGABYTE, 20 * MEGABYTE)


# ═══════════════════════════════════════════════════════════════════════════════
# ARCHIVE UPLOADS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_small_archive_is_approved(
    db_session, create_user, stage, make_zip, storage_roots, small_thresholds
):
    user = await create_user()
    upload = stage(make_zip({"index.html": "x" * 10, "logo.png": b"p"}))

    result = await SubmissionService(db_session).submit(user.id, archive_request(upload))

    item = result.item
    assert item.status == ModerationStatus.APPROVED
    assert result.requires_review is False
    assert item.slug == build_slug("Orbit Sim", item.id)
    assert item.content_type == ContentType.BUNDLE
    assert item.import_method == ImportMethod.ARCHIVE
    assert item.source_identity.startswith("sha256:")
    assert item.file_url.startswith("/uploads/community-apps/")
    assert item.file_url.endswith("/index.html")
    assert item.icon_path.endswith("/logo.png")
    assert item.agreement_accepted is True
    assert item.agreement_timestamp is not None

    directories = list(storage_roots.content.iterdir())
    assert len(directories) == 1
    assert (directories[0] / "index.html").exists()
    assert not upload.path.exists()


@pytest.mark.asyncio
async def test_archive_between_thresholds_is_pending(
    db_session, create_user, stage, make_zip, small_thresholds
):
    user = await create_user()
    upload = stage(make_zip({"index.html": "x" * 150}))

    result = await SubmissionService(db_session).submit(user.id, archive_request(upload))

    assert result.item.status == ModerationStatus.PENDING
    assert result.requires_review is True


@pytest.mark.asyncio
async def test_archive_at_hard_cap_leaves_nothing_behind(
    db_session, create_user, stage, make_zip, storage_roots, small_thresholds
):
    user = await create_user()
    upload = stage(make_zip({"index.html": "x" * 250}))

    with pytest.raises(ValidationError):
        await SubmissionService(db_session).submit(user.id, archive_request(upload))

    assert await count_items(db_session) == 0
    assert list(storage_roots.content.iterdir()) == []
    assert not upload.path.exists()


@pytest.mark.asyncio
async def test_invalid_bundle_is_rejected_and_removed(
    db_session, create_user, stage, make_zip, storage_roots
):
    user = await create_user()
    upload = stage(make_zip({"index.html": "<html></html>", "api/handler.py": "print(1)"}))

    with pytest.raises(ValidationError) as exc_info:
        await SubmissionService(db_session).submit(user.id, archive_request(upload))

    assert any("handler.py" in violation for violation in exc_info.value.violations)
    assert await count_items(db_session) == 0
    assert list(storage_roots.content.iterdir()) == []


@pytest.mark.asyncio
async def test_same_archive_twice_conflicts(db_session, create_user, stage, make_zip, storage_roots):
    user = await create_user()
    content = make_zip({"index.html": "<html></html>"})
    service = SubmissionService(db_session)

    first = await service.submit(user.id, archive_request(stage(content)))

    with pytest.raises(ConflictError) as exc_info:
        await service.submit(user.id, archive_request(stage(content), title="Copy"))

    assert first.item.slug in exc_info.value.message
    assert len(list(storage_roots.content.iterdir())) == 1


@pytest.mark.asyncio
async def test_unsupported_upload_type(db_session, create_user, stage):
    user = await create_user()
    upload = stage(b"MZ", filename="setup.exe")

    with pytest.raises(InputError, match="Unsupported file type"):
        await SubmissionService(db_session).submit(user.id, archive_request(upload))

    assert not upload.path.exists()


# ═══════════════════════════════════════════════════════════════════════════════
# REQUEST CHECKS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "request_kwargs, message",
    [
        ({"title": "Orbit", "agreement_accepted": True}, "Missing file or external link"),
        ({"title": "Orbit", "external_link": "https://example.com"}, "accept the content agreement"),
        ({"title": "  ", "agreement_accepted": True, "external_link": "https://x.io"}, "Title is required"),
    ],
)
async def test_request_checks(db_session, create_user, request_kwargs, message):
    user = await create_user()

    with pytest.raises(InputError, match=message):
        await SubmissionService(db_session).submit(user.id, SubmissionRequest(**request_kwargs))


# ═══════════════════════════════════════════════════════════════════════════════
# LINKS & VIDEOS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_link_is_always_pending(db_session, create_user, storage_roots):
    user = await create_user()
    request = SubmissionRequest(
        title="Weekly Planner",
        agreement_accepted=True,
        external_link="https://example.com/planner",
    )

    result = await SubmissionService(db_session).submit(user.id, request)

    assert result.item.content_type == ContentType.LINK
    assert result.item.status == ModerationStatus.PENDING
    assert result.item.external_link == "https://example.com/planner"
    assert result.item.category == "productivity"
    assert result.item.thumbnail_path == "/placeholders/productivity-thumbnail.png"
    assert list(storage_roots.content.iterdir()) == []


@pytest.mark.asyncio
async def test_link_must_be_http(db_session, create_user):
    user = await create_user()
    request = SubmissionRequest(title="Bad", agreement_accepted=True, external_link="javascript:alert(1)")

    with pytest.raises(InputError):
        await SubmissionService(db_session).submit(user.id, request)


@pytest.mark.asyncio
@pytest.mark.parametrize("size, expected", [(50, ModerationStatus.APPROVED), (150, ModerationStatus.PENDING)])
async def test_video_routed_by_size(
    db_session, create_user, stage, storage_roots, small_thresholds, size, expected
):
    user = await create_user()
    upload = stage(b"v" * size, filename="clip.mp4")

    result = await SubmissionService(db_session).submit(user.id, archive_request(upload, title="Clip"))

    assert result.item.content_type == ContentType.VIDEO
    assert result.item.status == expected
    assert result.item.file_url.endswith("/clip.mp4")
    (directory,) = storage_roots.content.iterdir()
    assert (directory / "clip.mp4").stat().st_size == size


# ═══════════════════════════════════════════════════════════════════════════════
# REMOTE IMPORTS
# ═══════════════════════════════════════════════════════════════════════════════

MAIN_URL = "https://github.com/octo/snake/archive/refs/heads/main.zip"


@pytest.mark.asyncio
async def test_repository_import_and_duplicate_precheck(
    db_session, create_user, make_zip, mock_fetcher
):
    user = await create_user()
    requested = []
    archive = make_zip({"snake-main/index.html": "<html></html>", "snake-main/favicon.ico": b"i"})
    service = SubmissionService(db_session, fetcher=mock_fetcher({MAIN_URL: (200, archive)}, requested))
    request = SubmissionRequest(title="Snake", agreement_accepted=True)

    result = await service.import_remote(
        user.id, "https://github.com/octo/snake", ImportMethod.REPOSITORY, request
    )

    assert result.item.source_identity == "https://github.com/octo/snake"
    assert result.item.import_method == ImportMethod.REPOSITORY
    assert result.item.icon_path.endswith("/favicon.ico")
    assert requested == [MAIN_URL]

    with pytest.raises(ConflictError):
        await service.import_remote(
            user.id, "https://www.github.com/Octo/Snake.git", ImportMethod.REPOSITORY, request
        )
    assert requested == [MAIN_URL]


@pytest.mark.asyncio
async def test_scrape_import_through_submit(db_session, create_user, mock_fetcher, storage_roots):
    user = await create_user()
    page = "https://arcade.example.com/pong/"
    fetcher = mock_fetcher({page: (200, b"<html><body>pong</body></html>")})
    request = SubmissionRequest(
        title="Pong",
        agreement_accepted=True,
        external_link=page,
        import_method=ImportMethod.URL_SCRAPE,
    )

    result = await SubmissionService(db_session, fetcher=fetcher).submit(user.id, request)

    assert result.item.import_method == ImportMethod.URL_SCRAPE
    assert result.item.source_identity == "https://arcade.example.com/pong"
    (directory,) = storage_roots.content.iterdir()
    assert (directory / "index.html").exists()


@pytest.mark.asyncio
async def test_failed_remote_import_leaves_nothing_behind(
    db_session, create_user, mock_fetcher, storage_roots
):
    user = await create_user()
    request = SubmissionRequest(title="Ghost", agreement_accepted=True)
    service = SubmissionService(db_session, fetcher=mock_fetcher({}))

    with pytest.raises(UpstreamNotFoundError):
        await service.import_remote(
            user.id, "https://github.com/octo/ghost", ImportMethod.REPOSITORY, request
        )

    assert list(storage_roots.content.iterdir()) == []
    assert await count_items(db_session) == 0


@pytest.mark.asyncio
async def test_unique_identity_is_final_duplicate_guard(
    db_session, create_user, make_zip, mock_fetcher, storage_roots, monkeypatch
):
    user = await create_user()
    archive = make_zip({"snake-main/index.html": "<html></html>"})
    service = SubmissionService(db_session, fetcher=mock_fetcher({MAIN_URL: (200, archive)}))
    request = SubmissionRequest(title="Snake", agreement_accepted=True)
    await service.import_remote(user.id, "https://github.com/octo/snake", ImportMethod.REPOSITORY, request)

    async def lookup_misses(identity):
        return None

    # A concurrent import that passed the pre-check before the first row landed
    monkeypatch.setattr(service.item_repo, "get_by_source_identity", lookup_misses)

    with pytest.raises(ConflictError):
        await service.import_remote(user.id, "https://github.com/octo/snake", ImportMethod.REPOSITORY, request)

    assert await count_items(db_session) == 1
    assert len(list(storage_roots.content.iterdir())) == 1


@pytest.mark.asyncio
async def test_failed_commit_discards_bundle(db_session, create_user, stage, make_zip, storage_roots, monkeypatch):
    user = await create_user()
    upload = stage(make_zip({"index.html": "<html></html>"}))

    async def commit_fails():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", commit_fails)

    with pytest.raises(OperationalError):
        await SubmissionService(db_session).submit(user.id, archive_request(upload))

    assert list(storage_roots.content.iterdir()) == []
    await db_session.rollback()
    assert await count_items(db_session) == 0


@pytest.mark.asyncio
async def test_failed_commit_discards_video(db_session, create_user, stage, storage_roots, monkeypatch):
    user = await create_user()
    upload = stage(b"v" * 10, filename="clip.mp4")

    async def commit_fails():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", commit_fails)

    with pytest.raises(OperationalError):
        await SubmissionService(db_session).submit(user.id, archive_request(upload, title="Clip"))

    assert list(storage_roots.content.iterdir()) == []
