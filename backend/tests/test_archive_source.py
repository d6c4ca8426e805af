import io
import zipfile

import pytest

from src.shared.core.exceptions import InputError, ValidationError
from src.shared.ingestion.sources.archive import ArchiveSource, extract_archive, safe_member_path
from src.shared.ingestion.sources.repository import hoist_single_wrapper


def test_extracts_nested_tree(tmp_path, make_zip):
    archive = io.BytesIO(make_zip({"index.html": "<html></html>", "js/main.js": "1"}))
    target = tmp_path / "out"
    target.mkdir()

    written = extract_archive(archive, target)

    assert written == 2
    assert (target / "js" / "main.js").read_text() == "1"


@pytest.mark.parametrize(
    "name",
    ["../evil.html", "a/../../evil.html", "/etc/passwd", "..\\evil.html", "C:/windows/evil.html"],
)
def test_unsafe_member_names(tmp_path, name):
    assert safe_member_path(tmp_path, name) is None


def test_traversal_entry_rejects_whole_archive_before_writing(tmp_path, make_zip):
    archive = io.BytesIO(make_zip({"index.html": "<html></html>", "../escape.html": "x"}))
    target = tmp_path / "out"
    target.mkdir()

    with pytest.raises(ValidationError) as exc_info:
        extract_archive(archive, target)

    assert exc_info.value.violations == ["Path escapes bundle root: ../escape.html"]
    assert list(target.iterdir()) == []
    assert not (tmp_path / "escape.html").exists()


def test_declared_size_at_cap_is_rejected_before_writing(tmp_path, make_zip):
    archive = io.BytesIO(make_zip({"index.html": "x" * 1000}))
    target = tmp_path / "out"
    target.mkdir()

    with pytest.raises(ValidationError):
        extract_archive(archive, target, max_bytes=1000)

    assert list(target.iterdir()) == []


def test_file_count_limit(tmp_path, make_zip):
    archive = io.BytesIO(make_zip({f"f{i}.css": "" for i in range(5)}))
    target = tmp_path / "out"
    target.mkdir()

    with pytest.raises(ValidationError) as exc_info:
        extract_archive(archive, target, max_files=4)

    assert "Too many files: 5" in exc_info.value.violations[0]


def test_not_a_zip_is_input_error(tmp_path):
    target = tmp_path / "out"
    target.mkdir()

    with pytest.raises(InputError):
        extract_archive(io.BytesIO(b"definitely not a zip"), target)


def corrupt_member_data(content):
    """Invert every compressed byte of the first member."""
    with zipfile.ZipFile(io.BytesIO(content)) as zf:
        info = zf.infolist()[0]
    start = info.header_offset + 30 + len(info.filename.encode())
    data = bytearray(content)
    for offset in range(start, start + info.compress_size):
        data[offset] ^= 0xFF
    return bytes(data)


def mark_encrypted(content):
    """Set the encryption flag on the first central directory entry."""
    data = bytearray(content)
    central = data.index(b"PK\x01\x02")
    data[central + 8] |= 0x01
    return bytes(data)


@pytest.mark.parametrize(
    "damage",
    [corrupt_member_data, mark_encrypted],
    ids=["corrupt-deflate-data", "encrypted-member"],
)
def test_unreadable_member_is_input_error(tmp_path, make_zip, damage):
    archive = damage(make_zip({"index.html": "<html>" + "playhub " * 200 + "</html>"}))
    target = tmp_path / "out"
    target.mkdir()

    with pytest.raises(InputError, match="not a valid ZIP archive"):
        extract_archive(io.BytesIO(archive), target)


def test_colliding_entries_are_input_error(tmp_path, make_zip):
    archive = io.BytesIO(make_zip({"index.html": "x", "a": "file", "a/b.html": "x"}))
    target = tmp_path / "out"
    target.mkdir()

    with pytest.raises(InputError, match="not a valid ZIP archive"):
        extract_archive(archive, target)


def test_hoists_single_wrapper_directory(tmp_path):
    target = tmp_path / "bundle"
    (target / "snake-main" / "snake-main").mkdir(parents=True)
    (target / "snake-main" / "index.html").write_text("<html></html>")
    (target / "snake-main" / "snake-main" / "note.txt").write_text("same name as wrapper")

    assert hoist_single_wrapper(target) is True

    assert (target / "index.html").exists()
    assert (target / "snake-main" / "note.txt").exists()
    assert sorted(p.name for p in target.iterdir()) == ["index.html", "snake-main"]


def test_no_hoist_for_multiple_entries(tmp_path):
    target = tmp_path / "bundle"
    (target / "a").mkdir(parents=True)
    (target / "index.html").write_text("x")

    assert hoist_single_wrapper(target) is False


@pytest.mark.asyncio
async def test_archive_source_produces_bundle(tmp_path, make_zip):
    archive_path = tmp_path / "upload.zip"
    archive_path.write_bytes(make_zip({"game/index.html": "<html></html>", "game/icon.png": b"png"}))
    target = tmp_path / "bundle"
    target.mkdir()

    bundle = await ArchiveSource(archive_path).fetch_bundle(target)

    assert bundle.entry_document == "game/index.html"
    assert bundle.paths == ["game/icon.png", "game/index.html"]
