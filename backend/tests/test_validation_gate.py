import pytest

from src.shared.core.exceptions import ValidationError
from src.shared.ingestion.bundle import ContentBundle
from src.shared.ingestion.validation import BundleValidator, ValidationRules


def make_validator(max_files=500, hard_cap_bytes=20 * 1024 * 1024):
    return BundleValidator(ValidationRules(max_files=max_files, hard_cap_bytes=hard_cap_bytes))


def reject(root, **rules):
    bundle = ContentBundle.from_directory(root)
    with pytest.raises(ValidationError) as exc_info:
        make_validator(**rules).validate(bundle)
    return exc_info.value


def test_static_bundle_passes(write_tree):
    root = write_tree({
        "index.html": "<html><script src='main.js'></script></html>",
        "main.js": "document.title = 'hi';",
        "style.css": "body { margin: 0 }",
        "assets/sprite.png": b"\x89PNG",
        "LICENSE": "MIT",
    })

    make_validator().validate(ContentBundle.from_directory(root))

    assert root.exists()


def test_blocked_file_rejects_and_removes_directory(write_tree):
    root = write_tree({"index.html": "<html></html>", "api/server.php": "<?php echo 1; ?>"})

    error = reject(root)

    assert any("server.php" in violation for violation in error.violations)
    assert not root.exists()


@pytest.mark.parametrize(
    "files, fragment",
    [
        ({"index.html": "x", "node_modules/lib/a.js": "x"}, "Blocked directory 'node_modules'"),
        ({"index.html": "x", "package.json": "{}"}, "Blocked file: package.json"),
        ({"index.html": "x", ".env": "SECRET=1"}, "Blocked file: .env"),
        ({"index.html": "x", "run.sh": "rm -rf /"}, "Blocked file type .sh"),
        ({"index.html": "x", "archive.tar": "x"}, "Unsupported file type .tar"),
        ({"main.js": "x"}, "Missing index.html"),
    ],
)
def test_single_rule_violations(write_tree, files, fragment):
    error = reject(write_tree(files))

    assert any(fragment in violation for violation in error.violations)


def test_all_violations_are_reported_together(write_tree):
    root = write_tree({"server.py": "print(1)", "composer.json": "{}", "vendor/x.css": ""})

    error = reject(root)

    assert len(error.violations) >= 4
    assert error.details["violations"] == error.violations


def test_symlink_escaping_root_is_rejected(write_tree, tmp_path):
    (tmp_path / "secret.txt").write_text("secret")
    root = write_tree({"index.html": "<html></html>"})
    (root / "leak.txt").symlink_to(tmp_path / "secret.txt")

    error = reject(root)

    assert any("escapes bundle root: leak.txt" in violation for violation in error.violations)


@pytest.mark.parametrize(
    "script",
    [
        "const express = require('express');",
        "import http from 'node:http';",
        "server.listen(8080);",
        "require(\"http\").createServer(handler)",
    ],
)
def test_server_runtime_signatures_in_scripts(write_tree, script):
    root = write_tree({"index.html": "<html></html>", "main.js": script})

    error = reject(root)

    assert any("Server-side code detected" in violation for violation in error.violations)


def test_server_template_in_markup(write_tree):
    root = write_tree({"index.html": "<html><?php echo $x; ?></html>"})

    error = reject(root)

    assert any("PHP tag" in violation for violation in error.violations)


def test_client_code_mentioning_http_is_fine(write_tree):
    root = write_tree({
        "index.html": "<html></html>",
        "main.js": "fetch('https://example.com/data.json').then(r => r.json());",
    })

    make_validator().validate(ContentBundle.from_directory(root))


def test_size_at_hard_cap_is_rejected(write_tree):
    root = write_tree({"index.html": "x" * 100})

    error = reject(root, hard_cap_bytes=100)

    assert any("Bundle too large" in violation for violation in error.violations)


def test_too_many_files(write_tree):
    root = write_tree({"index.html": "x", "a.css": "", "b.css": "", "c.css": ""})

    error = reject(root, max_files=3)

    assert any("Too many files: 4" in violation for violation in error.violations)


def test_extensionless_files_pass(write_tree):
    root = write_tree({"index.html": "<html></html>", "CNAME": "example.com"})

    make_validator().validate(ContentBundle.from_directory(root))
