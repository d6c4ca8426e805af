"""
Validation Gate

Static safety vetting of a bundle before it can be published. This is a
heuristic filter for server-side code and unexpected file types, not a
sandbox and not a malware scanner.

Checks (in order, all violations accumulated):
==============================================
1. Path resolves outside the bundle root
2. Path inside a denylisted directory (node_modules, .git, vendor, ...)
3. Denylisted filename (lockfiles, manifests, .env, server entry points)
4. Denylisted extension (server languages, binaries, shell scripts)
5. Extension not on the static-asset allowlist
6. No entry document at the root or one level down
7. Too many files, or total size at or above the hard cap
8. Server-runtime signatures inside script files

Any rejection removes the bundle directory before ValidationError is raised.

Usage:
======
    validator = BundleValidator(ValidationRules.from_settings(settings))
    validator.validate(bundle)   # blocking; call through asyncio.to_thread
"""

import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from src.shared.core.exceptions import ValidationError
from src.shared.core.logging import logger
from src.shared.ingestion.bundle import ContentBundle


# ═══════════════════════════════════════════════════════════════════════════════
# RULE TABLES
# ═══════════════════════════════════════════════════════════════════════════════

ALLOWED_EXTENSIONS = frozenset({
    # markup, styles, scripts, data
    ".html", ".htm", ".css", ".js", ".mjs", ".json", ".txt", ".md", ".map", ".webmanifest",
    # images
    ".png", ".jpg", ".jpeg", ".gif", ".svg", ".webp", ".ico", ".avif", ".bmp",
    # fonts
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
    # audio and video
    ".mp3", ".wav", ".ogg", ".m4a", ".mp4", ".webm",
})

BLOCKED_EXTENSIONS = frozenset({
    ".php", ".py", ".rb", ".java", ".go", ".rs", ".pl", ".cgi",
    ".exe", ".dll", ".so", ".dylib", ".bin",
    ".sh", ".bash", ".bat", ".cmd", ".ps1",
    ".asp", ".aspx", ".jsp",
})

BLOCKED_FILENAMES = frozenset({
    "package.json", "package-lock.json", "yarn.lock", "pnpm-lock.yaml",
    "composer.json", "composer.lock", "gemfile", "gemfile.lock",
    "requirements.txt", "pipfile", "pipfile.lock",
    "server.js", "app.js", "index.php", ".htaccess",
    ".env", ".git", ".npmrc",
})

BLOCKED_DIRECTORIES = frozenset({
    "node_modules", "bower_components", ".git", ".svn", ".hg", "vendor", "__pycache__",
})

SCRIPT_EXTENSIONS = frozenset({".js", ".mjs"})
MARKUP_EXTENSIONS = frozenset({".html", ".htm"})

_SERVER_MODULES = r"(?:express|http|https|net|child_process|node:http|node:https|node:net|node:child_process)"

SERVER_RUNTIME_SIGNATURES = (
    ("server module require", re.compile(r"require\s*\(\s*['\"]" + _SERVER_MODULES + r"['\"]\s*\)")),
    ("server module import", re.compile(r"import\s+[^;]*?\s+from\s+['\"]" + _SERVER_MODULES + r"['\"]")),
    ("socket listen call", re.compile(r"\b(?:app|server)\.listen\s*\(")),
    ("createServer call", re.compile(r"\bcreateServer\s*\(")),
)

SERVER_TEMPLATE_SIGNATURES = (
    ("PHP tag", re.compile(r"<\?php", re.IGNORECASE)),
    ("server template tag", re.compile(r"<%[\s\S]*?%>")),
)


@dataclass(frozen=True)
class ValidationRules:
    """Numeric limits applied by the gate."""

    max_files: int
    hard_cap_bytes: int

    @classmethod
    def from_settings(cls, settings) -> "ValidationRules":
        return cls(
            max_files=settings.BUNDLE_MAX_FILES,
            hard_cap_bytes=settings.BUNDLE_HARD_CAP_BYTES,
        )


# ═══════════════════════════════════════════════════════════════════════════════
# VALIDATOR
# ═══════════════════════════════════════════════════════════════════════════════


class BundleValidator:
    """Runs every check over a bundle's inventory and reports all violations."""

    def __init__(self, rules: ValidationRules) -> None:
        self.rules = rules

    def validate(self, bundle: ContentBundle) -> None:
        """
        Pass silently or reject.

        Raises:
            ValidationError: With every violation found. The bundle
                directory has already been removed when this is raised.
        """
        violations = self.collect_violations(bundle)
        if not violations:
            logger.info(
                "Bundle passed validation",
                bundle=bundle.directory_name,
                files=bundle.file_count,
                bytes=bundle.total_bytes,
            )
            return

        logger.warning(
            "Bundle rejected",
            bundle=bundle.directory_name,
            violation_count=len(violations),
        )
        shutil.rmtree(bundle.root, ignore_errors=True)
        raise ValidationError(violations=violations)

    def collect_violations(self, bundle: ContentBundle) -> list[str]:
        """All violations, in check order. Reads script files; writes nothing."""
        violations: list[str] = []
        root = bundle.root.resolve()

        for entry in bundle.files:
            if not _is_within(root, bundle.root / entry.path):
                violations.append(f"Path escapes bundle root: {entry.path}")

        for entry in bundle.files:
            blocked_dir = next(
                (part for part in entry.parts[:-1] if part.lower() in BLOCKED_DIRECTORIES),
                None,
            )
            if blocked_dir:
                violations.append(f"Blocked directory '{blocked_dir}': {entry.path}")

        for entry in bundle.files:
            name = entry.name.lower()
            if name in BLOCKED_FILENAMES or name.startswith(".env."):
                violations.append(f"Blocked file: {entry.path}")

        for entry in bundle.files:
            if entry.suffix in BLOCKED_EXTENSIONS:
                violations.append(f"Blocked file type {entry.suffix}: {entry.path}")
            elif entry.suffix and entry.suffix not in ALLOWED_EXTENSIONS:
                violations.append(f"Unsupported file type {entry.suffix}: {entry.path}")

        if bundle.entry_document is None:
            violations.append("Missing index.html at the bundle root or one folder down")

        if bundle.file_count > self.rules.max_files:
            violations.append(
                f"Too many files: {bundle.file_count} (max {self.rules.max_files})"
            )
        if bundle.total_bytes >= self.rules.hard_cap_bytes:
            violations.append(
                f"Bundle too large: {bundle.total_bytes} bytes "
                f"(limit {self.rules.hard_cap_bytes})"
            )

        for entry in bundle.files:
            signature = self._server_signature(bundle.root / entry.path, entry.suffix)
            if signature:
                violations.append(f"Server-side code detected ({signature}): {entry.path}")

        return violations

    @staticmethod
    def _server_signature(path: Path, suffix: str) -> Optional[str]:
        """Label of the first matching signature, if the file is scanned at all."""
        if suffix in SCRIPT_EXTENSIONS:
            patterns = SERVER_RUNTIME_SIGNATURES + SERVER_TEMPLATE_SIGNATURES
        elif suffix in MARKUP_EXTENSIONS:
            patterns = SERVER_TEMPLATE_SIGNATURES
        else:
            return None

        if path.is_symlink():
            return None
        try:
            text = path.read_text(encoding="utf-8", errors="replace")
        except OSError:
            # Unreadable files count as no match
            return None

        for label, pattern in patterns:
            if pattern.search(text):
                return label
        return None


def _is_within(root: Path, candidate: Path) -> bool:
    """True if `candidate`, after resolving links and dot segments, stays under `root`."""
    try:
        resolved = candidate.resolve()
    except (OSError, RuntimeError):
        return False
    return resolved == root or root in resolved.parents
