"""
Archive Source

Extracts a user-supplied ZIP archive into the target directory.

Zip-Slip Defense:
=================
Every entry name is normalized against the target root before anything is
written. Absolute names and names that would land outside the root reject
the whole archive; nothing partial is kept. Entries are written as plain
files through the archive reader, so a symlink entry never becomes a link
on disk.

    ../../etc/passwd        ← rejected
    /abs/path.txt           ← rejected
    game/../index.html      ← normalized to index.html, accepted
"""

import asyncio
import shutil
import zipfile
import zlib
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional, Union

from src.shared.core.exceptions import InputError, ValidationError
from src.shared.core.logging import logger
from src.shared.ingestion.sources.base import BundleSource
from src.shared.models.enums import ImportMethod


ArchiveInput = Union[str, Path, BinaryIO]


def safe_member_path(root: Path, name: str) -> Optional[Path]:
    """
    Destination of an archive entry, or None if it would escape `root`.

    Backslashes are treated as separators so archives built on Windows
    cannot smuggle traversal segments past the check.
    """
    cleaned = name.replace("\\", "/")
    posix = PurePosixPath(cleaned)
    if posix.is_absolute() or (posix.parts and posix.parts[0].endswith(":")):
        return None

    destination = (root / Path(*posix.parts)).resolve() if posix.parts else root.resolve()
    resolved_root = root.resolve()
    if destination != resolved_root and resolved_root not in destination.parents:
        return None
    return destination


def extract_archive(
    archive: ArchiveInput,
    target: Path,
    *,
    max_bytes: Optional[int] = None,
    max_files: Optional[int] = None,
) -> int:
    """
    Safely extract a ZIP archive into `target`. Blocking; run in a thread.

    All entries are checked before the first byte is written, and every
    unsafe name is reported together.

    Returns:
        Number of files written

    Raises:
        InputError: Not a readable ZIP archive, or a member cannot be extracted
        ValidationError: Unsafe entry names, or declared size/count over the limits
    """
    try:
        with zipfile.ZipFile(archive) as zf:
            members = zf.infolist()

            unsafe: list[str] = []
            plan: list[tuple[zipfile.ZipInfo, Path]] = []
            for member in members:
                destination = safe_member_path(target, member.filename)
                if destination is None:
                    unsafe.append(f"Path escapes bundle root: {member.filename}")
                    continue
                plan.append((member, destination))
            if unsafe:
                raise ValidationError("Archive contains unsafe paths", violations=unsafe)

            files = [(m, d) for m, d in plan if not m.is_dir()]
            if max_files is not None and len(files) > max_files:
                raise ValidationError(
                    violations=[f"Too many files: {len(files)} (max {max_files})"]
                )
            declared = sum(m.file_size for m, _ in files)
            if max_bytes is not None and declared >= max_bytes:
                raise ValidationError(
                    violations=[f"Bundle too large: {declared} bytes (limit {max_bytes})"]
                )

            for member, destination in plan:
                if member.is_dir():
                    destination.mkdir(parents=True, exist_ok=True)
                    continue
                destination.parent.mkdir(parents=True, exist_ok=True)
                with zf.open(member) as source, open(destination, "wb") as sink:
                    shutil.copyfileobj(source, sink)
    except zipfile.BadZipFile as e:
        raise InputError(f"Uploaded file is not a valid ZIP archive: {e}") from e
    except (zlib.error, RuntimeError, EOFError, OSError) as e:
        # Corrupt or encrypted members, or entries that collide on disk
        logger.warning("Archive extraction failed", target=target.name, error=str(e))
        raise InputError("Uploaded file is not a valid ZIP archive") from e

    logger.info("Archive extracted", target=target.name, files=len(files))
    return len(files)


class ArchiveSource(BundleSource):
    """Bundle from an uploaded archive file."""

    import_method = ImportMethod.ARCHIVE

    def __init__(
        self,
        archive_path: Path,
        max_bytes: Optional[int] = None,
        max_files: Optional[int] = None,
    ) -> None:
        self.archive_path = archive_path
        self.max_bytes = max_bytes
        self.max_files = max_files

    async def materialize(self, target: Path) -> None:
        await asyncio.to_thread(
            extract_archive,
            self.archive_path,
            target,
            max_bytes=self.max_bytes,
            max_files=self.max_files,
        )
