import pytest

from src.shared.ingestion.classifier import BUNDLE_CLASSIFIER, IMAGE_CLASSIFIER
from src.shared.ingestion.icons import find_icon, placeholder_thumbnail, source_badge
from src.shared.ingestion.slugs import build_slug, slugify, to_base36
from src.shared.models.enums import ImportMethod
from src.shared.services.url_service import URLService


# ═══════════════════════════════════════════════════════════════════════════════
# CLASSIFIER
# ═══════════════════════════════════════════════════════════════════════════════


def test_classifies_by_highest_score():
    assert BUNDLE_CLASSIFIER.classify("Space Puzzle Game", "") == "game"


def test_tie_keeps_first_category():
    assert BUNDLE_CLASSIFIER.classify("tool guide") == "tool"


def test_no_keyword_falls_back_to_general():
    assert BUNDLE_CLASSIFIER.classify("Hello world", None) == "general"


def test_filenames_contribute_to_score():
    assert BUNDLE_CLASSIFIER.classify("Untitled", "", ["timer.js", "index.html"]) == "productivity"


def test_image_classifier():
    assert IMAGE_CLASSIFIER.classify("Sunset over the mountain river") == "nature"


# ═══════════════════════════════════════════════════════════════════════════════
# SLUGS
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize("number, expected", [(0, "0"), (35, "z"), (36, "10"), (100, "2s")])
def test_to_base36(number, expected):
    assert to_base36(number) == expected


def test_build_slug_appends_base36_id():
    assert build_slug("My Cool Tool!", 100) == "my-cool-tool-2s"


def test_build_slug_without_usable_title():
    assert build_slug("!!!", 35) == "z"


def test_slugify_bounds_length_and_trims_separators():
    assert slugify("a" * 60) == "a" * 50
    assert slugify("ab cd", max_length=3) == "ab"


# ═══════════════════════════════════════════════════════════════════════════════
# ICONS & BADGES
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "paths, expected",
    [
        (["game/logo.png", "favicon.ico"], "favicon.ico"),
        (["icon.png", "logo.png"], "logo.png"),
        (["b/icon.png", "a/logo.png"], "a/logo.png"),
        (["Logo.PNG"], "Logo.PNG"),
        (["deep/nested/favicon.ico"], None),
        (["index.html"], None),
    ],
)
def test_find_icon(paths, expected):
    assert find_icon(paths) == expected


def test_placeholder_thumbnail():
    assert placeholder_thumbnail("game", "/placeholders/") == "/placeholders/game-thumbnail.png"
    assert placeholder_thumbnail("unknown", "/placeholders") == "/placeholders/general-thumbnail.png"


def test_source_badge():
    assert source_badge(None) is None
    assert source_badge(ImportMethod.REPOSITORY)["label"] == "GitHub"


# ═══════════════════════════════════════════════════════════════════════════════
# SOURCE IDENTITY
# ═══════════════════════════════════════════════════════════════════════════════


@pytest.mark.parametrize(
    "url, expected",
    [
        ("HTTPS://www.GitHub.com/Octo/Snake.git/", "https://github.com/octo/snake"),
        ("https://example.com/game/?utm_source=x#top", "https://example.com/game"),
        ("http://example.com/a?b=1&ref=z", "https://example.com/a?b=1"),
    ],
)
def test_normalize_url(url, expected):
    assert URLService.normalize_url(url) == expected


def test_repository_identity_matches_normalized_url():
    assert URLService.repository_identity("Octo", "Snake") == URLService.normalize_url(
        "https://github.com/octo/snake.git"
    )


def test_fingerprints(tmp_path):
    path = tmp_path / "upload.zip"
    path.write_bytes(b"abc")

    expected = "sha256:ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
    assert URLService.fingerprint_bytes(b"abc") == expected
    assert URLService.fingerprint_file(path) == expected
