import pytest
import pytest_asyncio

from src.shared.core.exceptions import ConflictError, InputError
from src.shared.models import (
    CommunityImage,
    ContentItem,
    ContentLike,
    ModerationStatus,
    Orientation,
    User,
)
from src.shared.services.moderation_service import check_status_transition


PENDING = ModerationStatus.PENDING
APPROVED = ModerationStatus.APPROVED
REJECTED = ModerationStatus.REJECTED


@pytest_asyncio.fixture
async def admin(create_user):
    return await create_user(email="admin@example.com", name="Admin", is_admin=True)


async def reload(session_maker, model, record_id):
    async with session_maker() as session:
        return await session.get(model, record_id)


# ═══════════════════════════════════════════════════════════════════════════════
# STATE MACHINE
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "current, target, changes",
    [
        (PENDING, APPROVED, True),
        (PENDING, REJECTED, True),
        (APPROVED, APPROVED, False),
        (REJECTED, REJECTED, False),
        (PENDING, PENDING, False),
    ],
)
def test_allowed_transitions(current, target, changes):
    assert check_status_transition(current, target) is changes


@pytest.mark.parametrize("current, target", [(APPROVED, REJECTED), (REJECTED, APPROVED)])
def test_terminal_states_conflict(current, target):
    with pytest.raises(ConflictError):
        check_status_transition(current, target)


@pytest.mark.parametrize("current", [APPROVED, REJECTED])
def test_nothing_moves_back_to_pending(current):
    with pytest.raises(InputError):
        check_status_transition(current, PENDING)


# ═══════════════════════════════════════════════════════════════════════════════
# ACCESS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_non_admin_is_forbidden(client, create_user, auth_headers):
    user = await create_user()

    response = await client.get("/admin/items", headers=auth_headers(user.id))

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "AUTHORIZATION_ERROR"


@pytest.mark.asyncio
async def test_suspended_admin_is_forbidden(client, create_user, auth_headers):
    user = await create_user(is_admin=True, is_suspended=True)

    response = await client.get("/admin/items", headers=auth_headers(user.id))

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_anonymous_is_unauthorized(client):
    response = await client.get("/admin/items")

    assert response.status_code == 401


# ═══════════════════════════════════════════════════════════════════════════════
# ITEMS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_queue_lists_pending_items(client, admin, create_item, auth_headers):
    await create_item(admin.id, slug="waiting", status=PENDING)
    await create_item(admin.id, slug="live")

    response = await client.get("/admin/items", params={"status": "pending"}, headers=auth_headers(admin.id))

    assert [item["slug"] for item in response.json()] == ["waiting"]


@pytest.mark.asyncio
async def test_approve_then_reapprove_is_noop(client, admin, create_item, auth_headers):
    item = await create_item(admin.id, status=PENDING)
    url = f"/admin/items/{item.id}/status"

    first = await client.patch(url, json={"status": "approved"}, headers=auth_headers(admin.id))
    again = await client.patch(url, json={"status": "approved"}, headers=auth_headers(admin.id))

    assert first.status_code == 200
    assert first.json()["status"] == "approved"
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_rejecting_approved_item_conflicts(client, admin, create_item, auth_headers):
    item = await create_item(admin.id)

    response = await client.patch(
        f"/admin/items/{item.id}/status", json={"status": "rejected"}, headers=auth_headers(admin.id)
    )

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_setting_pending_is_bad_input(client, admin, create_item, auth_headers):
    item = await create_item(admin.id)

    response = await client.patch(
        f"/admin/items/{item.id}/status", json={"status": "pending"}, headers=auth_headers(admin.id)
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_item_is_not_found(client, admin, auth_headers):
    response = await client.patch(
        "/admin/items/999/status", json={"status": "approved"}, headers=auth_headers(admin.id)
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_flags_change_independently_of_status(client, admin, create_item, auth_headers):
    item = await create_item(admin.id, status=PENDING)
    headers = auth_headers(admin.id)

    await client.patch(f"/admin/items/{item.id}/visibility", json={"visible": False}, headers=headers)
    await client.patch(f"/admin/items/{item.id}/featured", json={"featured": True}, headers=headers)
    response = await client.patch(f"/admin/items/{item.id}/rank", json={"rank_order": 7}, headers=headers)

    body = response.json()
    assert body["visible"] is False
    assert body["featured"] is True
    assert body["rank_order"] == 7
    assert body["status"] == "pending"


@pytest.mark.asyncio
async def test_hidden_approved_item_leaves_public_listing(client, admin, create_item, auth_headers):
    item = await create_item(admin.id, slug="soon-hidden")

    await client.patch(
        f"/admin/items/{item.id}/visibility", json={"visible": False}, headers=auth_headers(admin.id)
    )

    assert (await client.get("/items/soon-hidden")).status_code == 404


@pytest.mark.asyncio
async def test_thumbnail_upload_replaces_previous(client, admin, create_item, auth_headers, storage_roots):
    old = storage_roots.thumbnails / "thumbnail-old.png"
    old.write_bytes(b"old")
    item = await create_item(admin.id, thumbnail_path="/uploads/thumbnails/thumbnail-old.png")

    response = await client.post(
        f"/admin/items/{item.id}/thumbnail",
        files={"file": ("cover.png", b"\x89PNG fake", "image/png")},
        headers=auth_headers(admin.id),
    )

    assert response.status_code == 200
    path = response.json()["thumbnail_path"]
    assert path.startswith("/uploads/thumbnails/thumbnail-")
    assert path.endswith(".png")
    assert (storage_roots.thumbnails / path.rsplit("/", 1)[-1]).read_bytes() == b"\x89PNG fake"
    assert not old.exists()


@pytest.mark.asyncio
async def test_thumbnail_must_be_an_image(client, admin, create_item, auth_headers):
    item = await create_item(admin.id)

    response = await client.post(
        f"/admin/items/{item.id}/thumbnail",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=auth_headers(admin.id),
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_delete_removes_tree_and_row(
    client, admin, create_item, auth_headers, storage_roots, session_maker
):
    tree = storage_roots.content / "tree1"
    tree.mkdir()
    (tree / "index.html").write_text("x")
    item = await create_item(admin.id, file_url="/uploads/community-apps/tree1/index.html")

    response = await client.delete(f"/admin/items/{item.id}", headers=auth_headers(admin.id))

    assert response.status_code == 200
    assert not tree.exists()
    assert await reload(session_maker, ContentItem, item.id) is None


# ═══════════════════════════════════════════════════════════════════════════════
# USERS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_user_listing_includes_upload_counts(client, admin, create_user, create_item, auth_headers):
    member = await create_user()
    await create_item(member.id)
    await create_item(member.id)

    response = await client.get("/admin/users", headers=auth_headers(admin.id))

    rows = {row["email"]: row for row in response.json()}
    assert rows["player@example.com"]["item_count"] == 2
    assert rows["player@example.com"]["image_count"] == 0
    assert rows["admin@example.com"]["is_admin"] is True


@pytest.mark.asyncio
async def test_suspend_user(client, admin, create_user, auth_headers):
    member = await create_user()

    response = await client.patch(
        f"/admin/users/{member.id}/suspend", json={"suspended": True}, headers=auth_headers(admin.id)
    )

    assert response.json()["is_suspended"] is True
    assert (await client.post("/items/1/like", headers=auth_headers(member.id))).status_code == 403


@pytest.mark.asyncio
async def test_delete_user_removes_trees_and_rows(
    client, admin, create_user, create_item, auth_headers, storage_roots, session_maker
):
    member = await create_user()
    bundle_dir = storage_roots.content / "member-bundle"
    bundle_dir.mkdir()
    (bundle_dir / "index.html").write_text("x")
    image_dir = storage_roots.images / "member-image"
    image_dir.mkdir()
    (image_dir / "original.webp").write_bytes(b"w")

    item = await create_item(member.id, file_url="/uploads/community-apps/member-bundle/index.html")
    others = await create_item(admin.id)
    async with session_maker() as session:
        image = CommunityImage(
            uploader_id=member.id,
            title="Nebula",
            image_path="/community-images/member-image/original.webp",
            thumbnail_path="/community-images/member-image/thumb.webp",
            width=10,
            height=10,
            file_size=1,
            orientation=Orientation.SQUARE,
        )
        session.add_all([image, ContentLike(user_id=member.id, item_id=others.id)])
        await session.commit()
        image_id = image.id

    response = await client.delete(f"/admin/users/{member.id}", headers=auth_headers(admin.id))

    assert response.status_code == 200
    assert not bundle_dir.exists()
    assert not image_dir.exists()
    assert await reload(session_maker, User, member.id) is None
    assert await reload(session_maker, ContentItem, item.id) is None
    assert await reload(session_maker, CommunityImage, image_id) is None
    assert await reload(session_maker, ContentItem, others.id) is not None


# ═══════════════════════════════════════════════════════════════════════════════
# CATEGORIES & SOURCES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_category_lifecycle(client, admin, auth_headers):
    headers = auth_headers(admin.id)
    payload = {"name": "Puzzles", "slug": "puzzles"}

    created = await client.post("/admin/categories", json=payload, headers=headers)
    duplicate = await client.post("/admin/categories", json=payload, headers=headers)
    deleted = await client.delete(f"/admin/categories/{created.json()['id']}", headers=headers)
    missing = await client.delete(f"/admin/categories/{created.json()['id']}", headers=headers)

    assert created.status_code == 201
    assert created.json()["type"] == "puzzles"
    assert duplicate.status_code == 409
    assert deleted.status_code == 200
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_category_slug_format_is_checked(client, admin, auth_headers):
    response = await client.post(
        "/admin/categories", json={"name": "Bad", "slug": "Not A Slug"}, headers=auth_headers(admin.id)
    )

    assert response.status_code == 400
    assert response.json()["error"]["code"] == "INPUT_ERROR"


@pytest.mark.asyncio
async def test_register_source(client, admin, auth_headers):
    response = await client.post(
        "/admin/sources",
        json={
            "title": "Snake",
            "source_url": "https://github.com/octo/snake",
            "source_type": "repository",
            "keywords": [" Arcade ", "Retro", ""],
        },
        headers=auth_headers(admin.id),
    )

    assert response.status_code == 201
    assert response.json()["keywords"] == ["arcade", "retro"]
