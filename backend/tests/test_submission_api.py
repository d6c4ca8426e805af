import pytest

from src.config.settings import settings


def form(**overrides):
    fields = {"title": "Orbit Sim", "agreement_accepted": "true"}
    fields.update(overrides)
    return fields


@pytest.fixture
def submit(client, auth_headers):
    async def _submit(user_id, data, archive=None, filename="bundle.zip"):
        files = {"file": (filename, archive, "application/zip")} if archive is not None else None
        return await client.post("/submissions", data=data, files=files, headers=auth_headers(user_id))

    return _submit


@pytest.mark.asyncio
async def test_small_archive_is_published(submit, create_user, make_zip, storage_roots):
    user = await create_user()

    response = await submit(user.id, form(), make_zip({"index.html": "<html></html>"}))

    assert response.status_code == 201
    body = response.json()
    assert body["requires_review"] is False
    assert body["message"] == "Published successfully."
    assert body["slug"] == body["item"]["slug"]
    assert body["item"]["status"] == "approved"
    assert body["item"]["badge"]["label"] == "Uploaded"
    assert body["bundle_size"] == "0.00MB"
    assert len(list(storage_roots.content.iterdir())) == 1
    assert list(storage_roots.scratch.iterdir()) == []


@pytest.mark.asyncio
async def test_published_item_is_publicly_readable(client, submit, create_user, make_zip):
    user = await create_user()
    created = await submit(user.id, form(), make_zip({"index.html": "<html></html>"}))

    response = await client.get(f"/items/{created.json()['slug']}")

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_large_archive_waits_for_review(submit, create_user, make_zip, monkeypatch):
    monkeypatch.setattr(settings, "BUNDLE_REVIEW_THRESHOLD_BYTES", 100)
    user = await create_user()

    response = await submit(user.id, form(), make_zip({"index.html": "x" * 500}))

    assert response.status_code == 201
    assert response.json()["requires_review"] is True
    assert response.json()["item"]["status"] == "pending"


@pytest.mark.asyncio
async def test_agreement_is_required(submit, create_user, make_zip, storage_roots):
    user = await create_user()

    response = await submit(user.id, form(agreement_accepted="false"), make_zip({"index.html": "x"}))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INPUT_ERROR"
    assert list(storage_roots.content.iterdir()) == []
    assert list(storage_roots.scratch.iterdir()) == []


@pytest.mark.asyncio
async def test_missing_file_and_link(submit, create_user):
    user = await create_user()

    response = await submit(user.id, form())

    assert response.status_code == 400
    assert "Missing file or external link" in response.json()["error"]["message"]


@pytest.mark.asyncio
async def test_requires_authentication(client, make_zip):
    response = await client.post(
        "/submissions",
        data=form(),
        files={"file": ("bundle.zip", make_zip({"index.html": "x"}), "application/zip")},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_duplicate_archive_conflicts(submit, create_user, make_zip):
    user = await create_user()
    archive = make_zip({"index.html": "<html>same</html>"})

    first = await submit(user.id, form(), archive)
    second = await submit(user.id, form(title="Again"), archive)

    assert first.status_code == 201
    assert second.status_code == 409
    assert first.json()["slug"] in second.json()["error"]["message"]


@pytest.mark.asyncio
async def test_invalid_bundle_reports_every_violation(submit, create_user, make_zip, storage_roots):
    user = await create_user()
    archive = make_zip({"main.js": "require('express')", "server.php": "<?php ?>"})

    response = await submit(user.id, form(), archive)

    assert response.status_code == 422
    error = response.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    violations = error["details"]["violations"]
    assert any("Missing index.html" in v for v in violations)
    assert any("server.php" in v for v in violations)
    assert any("Server-side code detected" in v for v in violations)
    assert list(storage_roots.content.iterdir()) == []


@pytest.mark.asyncio
async def test_traversal_archive_is_rejected(submit, create_user, make_zip, storage_roots):
    user = await create_user()

    response = await submit(user.id, form(), make_zip({"index.html": "x", "../../escape.html": "x"}))

    assert response.status_code == 422
    assert list(storage_roots.content.iterdir()) == []
    assert not (storage_roots.content.parent / "escape.html").exists()


@pytest.mark.asyncio
async def test_upload_over_size_limit(submit, create_user, make_zip, storage_roots, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_MAX_BYTES", 64)
    user = await create_user()

    response = await submit(user.id, form(), make_zip({"index.html": "x" * 4096}) + b"\0" * 64)

    assert response.status_code == 400
    assert list(storage_roots.scratch.iterdir()) == []


@pytest.mark.asyncio
async def test_plain_link_waits_for_review(submit, create_user):
    user = await create_user()

    response = await submit(user.id, form(external_link="https://example.com/tool"))

    assert response.status_code == 201
    assert response.json()["requires_review"] is True
    assert response.json()["item"]["content_type"] == "link"


@pytest.mark.asyncio
async def test_repository_import_through_endpoint(submit, create_user, make_zip, mock_fetcher, use_fetcher):
    archive = make_zip({"snake-main/index.html": "<html></html>"})
    use_fetcher(mock_fetcher({"https://github.com/octo/snake/archive/refs/heads/main.zip": (200, archive)}))
    user = await create_user()

    response = await submit(
        user.id,
        form(title="Snake", external_link="https://github.com/octo/snake", import_method="repository"),
    )

    assert response.status_code == 201
    assert response.json()["item"]["badge"]["label"] == "GitHub"
    assert response.json()["item"]["import_method"] == "repository"


@pytest.mark.asyncio
async def test_missing_repository_is_upstream_error(submit, create_user, mock_fetcher, use_fetcher):
    use_fetcher(mock_fetcher({}))
    user = await create_user()

    response = await submit(
        user.id,
        form(title="Ghost", external_link="https://github.com/octo/ghost", import_method="repository"),
    )

    assert response.status_code == 502
    assert response.json()["error"]["code"] == "UPSTREAM_ERROR"


@pytest.mark.asyncio
async def test_encrypted_archive_is_bad_input(submit, create_user, make_zip, storage_roots):
    user = await create_user()
    archive = bytearray(make_zip({"index.html": "<html></html>"}))
    archive[archive.index(b"PK\x01\x02") + 8] |= 0x01

    response = await submit(user.id, form(), bytes(archive))

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INPUT_ERROR"
    assert list(storage_roots.content.iterdir()) == []
    assert list(storage_roots.scratch.iterdir()) == []
