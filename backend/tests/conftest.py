import io
import zipfile
from types import SimpleNamespace

import httpx
import pytest
import pytest_asyncio
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.api.dependencies.database import get_db
from src.api.dependencies.services import get_submission_service
from src.api.main import app
from src.config.settings import settings
from src.shared.adapters.http_fetcher import HttpFetcher
from src.shared.models import Base, ContentItem, ContentType, ModerationStatus, User
from src.shared.services.submission_service import SubmissionService
from src.shared.utils.security import SecurityUtils


@pytest.fixture(autouse=True)
def storage_roots(tmp_path_factory, monkeypatch):
    """Point every storage root at a fresh temporary directory."""
    tmp_path = tmp_path_factory.mktemp("storage")
    roots = SimpleNamespace(
        content=tmp_path / "content",
        thumbnails=tmp_path / "thumbnails",
        images=tmp_path / "images",
        scratch=tmp_path / "scratch",
    )
    for path in vars(roots).values():
        path.mkdir()
    monkeypatch.setattr(settings, "CONTENT_ROOT", str(roots.content))
    monkeypatch.setattr(settings, "THUMBNAIL_ROOT", str(roots.thumbnails))
    monkeypatch.setattr(settings, "IMAGE_ROOT", str(roots.images))
    monkeypatch.setattr(settings, "UPLOAD_TEMP_DIR", str(roots.scratch))
    return roots


@pytest_asyncio.fixture
async def engine(tmp_path):
    db_path = tmp_path / "playhub.db"
    engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")

    # pysqlite's own transaction handling breaks SAVEPOINT; take it over
    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, _record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_maker):
    async def override_get_db():
        async with session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def create_user(session_maker):
    """Commit a user row and return it."""

    async def _create(email="player@example.com", name="Player", is_admin=False, is_suspended=False):
        async with session_maker() as session:
            user = User(email=email, name=name, is_admin=is_admin, is_suspended=is_suspended)
            session.add(user)
            await session.commit()
            await session.refresh(user)
            return user

    return _create


@pytest.fixture
def auth_headers():
    def _headers(user_id):
        token = SecurityUtils.create_access_token(
            data={"user_id": user_id},
            secret_key=settings.SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def make_zip():
    """Build an in-memory ZIP from {name: bytes or str}."""

    def _make(files):
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as zf:
            for name, content in files.items():
                zf.writestr(name, content)
        return buffer.getvalue()

    return _make


@pytest.fixture
def write_tree(tmp_path):
    """Materialize {relative path: bytes or str} under a new directory."""

    def _write(files, name="bundle"):
        root = tmp_path / name
        root.mkdir()
        for relative, content in files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, str):
                content = content.encode()
            path.write_bytes(content)
        return root

    return _write


@pytest.fixture
def mock_fetcher():
    """HttpFetcher answering from {url: (status, body)}; unknown URLs get a 404."""

    def _make(routes, requested=None):
        def handler(request):
            url = str(request.url)
            if requested is not None:
                requested.append(url)
            status, body = routes.get(url, (404, b""))
            return httpx.Response(status, content=body)

        return HttpFetcher(client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))

    return _make


@pytest.fixture
def create_item(session_maker):
    """Commit a bundle item owned by `user_id`; public unless told otherwise."""
    counter = iter(range(1, 10_000))

    async def _create(user_id, title="Orbit Sim", status=ModerationStatus.APPROVED, **fields):
        n = next(counter)
        fields.setdefault("slug", f"item-{n}")
        fields.setdefault("category", "general")
        async with session_maker() as session:
            item = ContentItem(
                user_id=user_id,
                title=title,
                content_type=ContentType.BUNDLE,
                status=status,
                agreement_accepted=True,
                **fields,
            )
            session.add(item)
            await session.commit()
            await session.refresh(item)
            return item

    return _create


@pytest.fixture
def use_fetcher():
    """Route the API's submission service through the given fetcher."""

    def _use(fetcher):
        def override_submission_service(db: AsyncSession = Depends(get_db)):
            return SubmissionService(db, fetcher=fetcher)

        app.dependency_overrides[get_submission_service] = override_submission_service

    yield _use
    app.dependency_overrides.pop(get_submission_service, None)
