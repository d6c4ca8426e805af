import pytest

from src.config.settings import settings
from src.shared.models import AppSource
from src.shared.models.enums import SourceType
from src.shared.services.discovery_service import rank_source


SNAKE_ARCHIVE_URL = "https://github.com/octo/snake/archive/refs/heads/main.zip"


@pytest.fixture
def add_sources(session_maker):
    """Commit registry entries given as AppSource keyword dicts; returns their ids."""

    async def _add(*entries):
        async with session_maker() as session:
            sources = [
                AppSource(source_type=entry.pop("source_type", SourceType.REPOSITORY), **entry)
                for entry in entries
            ]
            session.add_all(sources)
            await session.commit()
            return [source.id for source in sources]

    return _add


@pytest.mark.parametrize(
    "query, expected",
    [
        ("snake", 1),
        ("arcade snake", 2),
        ("classic", 3),
        ("chess", None),
    ],
)
def test_rank_source(query, expected):
    source = AppSource(
        title="Snake",
        description="A classic game",
        source_url="https://github.com/octo/snake",
        source_type=SourceType.REPOSITORY,
        keywords=["arcade", "retro"],
    )

    assert rank_source(source, query, set(query.split())) == expected


@pytest.mark.asyncio
async def test_search_orders_by_rank(client, add_sources):
    await add_sources(
        {"title": "Pong", "description": "Not a snake game", "source_url": "https://a.example/pong", "keywords": []},
        {"title": "Tetris", "source_url": "https://github.com/o/tetris", "keywords": ["snake", "blocks"]},
        {"title": "Chess", "source_url": "https://github.com/o/chess", "keywords": ["board"]},
        {"title": "Snake Classic", "source_url": "https://github.com/o/snake", "keywords": ["arcade"]},
    )

    response = await client.post("/discover", json={"keywords": "Snake"})

    assert response.status_code == 200
    body = response.json()
    assert [(r["source"]["title"], r["rank"]) for r in body["results"]] == [
        ("Snake Classic", 1),
        ("Tetris", 2),
        ("Pong", 3),
    ]
    assert body["total"] == 3


@pytest.mark.asyncio
async def test_search_is_capped(client, add_sources, monkeypatch):
    monkeypatch.setattr(settings, "DISCOVERY_RESULT_LIMIT", 2)
    await add_sources(
        *({"title": f"Racer {n}", "source_url": f"https://github.com/o/racer{n}", "keywords": []} for n in range(4))
    )

    response = await client.post("/discover", json={"keywords": "racer"})

    assert response.json()["total"] == 2


@pytest.mark.asyncio
async def test_blank_keywords_are_rejected(client):
    response = await client.post("/discover", json={"keywords": "   "})

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INPUT_ERROR"


@pytest.mark.asyncio
async def test_import_runs_repository_pipeline(
    client, create_user, auth_headers, add_sources, make_zip, mock_fetcher, use_fetcher
):
    (source_id,) = await add_sources(
        {"title": "Snake", "description": "Arcade classic", "source_url": "https://github.com/octo/snake", "keywords": []}
    )
    use_fetcher(mock_fetcher({SNAKE_ARCHIVE_URL: (200, make_zip({"snake-main/index.html": "<html></html>"}))}))
    user = await create_user()

    response = await client.post(
        "/discover/import",
        json={"source_id": source_id, "agreement_accepted": True},
        headers=auth_headers(user.id),
    )

    assert response.status_code == 201
    item = response.json()["item"]
    assert item["title"] == "Snake"
    assert item["description"] == "Arcade classic"
    assert item["import_method"] == "repository"
    assert response.json()["requires_review"] is False


@pytest.mark.asyncio
async def test_import_of_url_source_scrapes_page(
    client, create_user, auth_headers, add_sources, mock_fetcher, use_fetcher
):
    page = "https://arcade.example.com/pong/"
    (source_id,) = await add_sources(
        {"title": "Pong", "source_url": page, "source_type": SourceType.URL, "keywords": []}
    )
    use_fetcher(mock_fetcher({page: (200, b"<html><body>pong</body></html>")}))
    user = await create_user()

    response = await client.post(
        "/discover/import",
        json={"source_id": source_id, "agreement_accepted": True, "title": "My Pong"},
        headers=auth_headers(user.id),
    )

    assert response.status_code == 201
    assert response.json()["item"]["title"] == "My Pong"
    assert response.json()["item"]["import_method"] == "url_scrape"


@pytest.mark.asyncio
async def test_import_of_unknown_source(client, create_user, auth_headers):
    user = await create_user()

    response = await client.post(
        "/discover/import", json={"source_id": 404, "agreement_accepted": True}, headers=auth_headers(user.id)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_import_needs_agreement(client, create_user, auth_headers, add_sources, mock_fetcher, use_fetcher):
    requested = []
    use_fetcher(mock_fetcher({}, requested))
    (source_id,) = await add_sources(
        {"title": "Snake", "source_url": "https://github.com/octo/snake", "keywords": []}
    )
    user = await create_user()

    response = await client.post("/discover/import", json={"source_id": source_id}, headers=auth_headers(user.id))

    assert response.status_code == 400
    assert requested == []


@pytest.mark.asyncio
async def test_import_requires_account(client):
    response = await client.post("/discover/import", json={"source_id": 1, "agreement_accepted": True})

    assert response.status_code == 401
