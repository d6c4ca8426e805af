"""
Content Bundle

A bundle is the local directory tree a source adapter produced. This module
turns that tree into an immutable descriptor: a flat, sorted inventory of
relative POSIX paths with sizes, the total byte size and the detected entry
document. Validation and size/count checks work purely on this inventory.

Entry Document:
===============
    index.html            ← preferred, at the bundle root
    game/index.html       ← accepted one directory level down
    a/b/index.html        ← too deep, not an entry document
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


ENTRY_DOCUMENT_NAMES = ("index.html", "index.htm")


@dataclass(frozen=True)
class BundleFile:
    """One regular file (or symlink) inside a bundle."""

    path: str
    size: int

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def suffix(self) -> str:
        return os.path.splitext(self.name)[1].lower()

    @property
    def parts(self) -> tuple[str, ...]:
        return tuple(self.path.split("/"))


@dataclass(frozen=True)
class ContentBundle:
    """
    Transient descriptor of an extracted bundle.

    Attributes:
        root: Directory holding the bundle, named uniquely under the content root
        files: Inventory sorted by path
        total_bytes: Sum of file sizes
        entry_document: Relative path of the load target, if any
    """

    root: Path
    files: tuple[BundleFile, ...]
    total_bytes: int
    entry_document: Optional[str]

    @classmethod
    def from_directory(cls, root: Path) -> "ContentBundle":
        """Inventory `root` and build the descriptor. Blocking; run in a thread."""
        files = tuple(inventory_tree(root))
        return cls(
            root=root,
            files=files,
            total_bytes=sum(entry.size for entry in files),
            entry_document=find_entry_document(entry.path for entry in files),
        )

    @property
    def directory_name(self) -> str:
        return self.root.name

    @property
    def file_count(self) -> int:
        return len(self.files)

    @property
    def paths(self) -> list[str]:
        return [entry.path for entry in self.files]


def inventory_tree(root: Path) -> list[BundleFile]:
    """
    List every non-directory entry under `root` as a flat, sorted list.

    Symlinks are listed but never followed, and their own size is used, so
    a link pointing outside the bundle is visible to the validator instead
    of silently pulling foreign content in. No side effects.
    """
    entries: list[BundleFile] = []
    for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
        base = Path(dirpath)
        # Symlinked directories show up in dirnames but are not descended into
        names = list(filenames) + [d for d in dirnames if (base / d).is_symlink()]
        for name in names:
            full = base / name
            relative = full.relative_to(root).as_posix()
            entries.append(BundleFile(path=relative, size=full.lstat().st_size))
    entries.sort(key=lambda entry: entry.path)
    return entries


def find_entry_document(paths) -> Optional[str]:
    """
    Pick the entry document from an iterable of relative paths.

    A root-level index wins; otherwise the first index one level down in
    path order. Names compare case-insensitively.
    """
    nested: list[str] = []
    for path in paths:
        parts = path.split("/")
        if parts[-1].lower() not in ENTRY_DOCUMENT_NAMES:
            continue
        if len(parts) == 1:
            return path
        if len(parts) == 2:
            nested.append(path)
    return min(nested) if nested else None
