"""
Upload staging helpers.

Multipart uploads are copied to scratch space in chunks with a size cap,
so services receive a plain file on disk and never touch the web
framework's upload object.
"""

import asyncio
import re
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from src.shared.core.exceptions import InputError
from src.shared.utils.formatting import format_megabytes

CHUNK_SIZE = 1024 * 1024

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


@dataclass(frozen=True)
class StagedUpload:
    """An upload copied to local scratch space."""

    path: Path
    filename: str
    content_type: str
    size: int

    @property
    def suffix(self) -> str:
        return Path(self.filename).suffix.lower()


def sanitize_filename(filename: Optional[str], default: str = "upload") -> str:
    """Basename with anything outside [A-Za-z0-9._-] replaced."""
    name = Path((filename or "").replace("\\", "/")).name
    cleaned = _UNSAFE_FILENAME.sub("_", name).strip("._")
    return cleaned or default


async def stage_upload(file: UploadFile, directory: Path, max_bytes: int) -> StagedUpload:
    """
    Stream `file` into `directory` under a unique name. Disk writes run in a
    worker thread.

    Raises:
        InputError: The upload is larger than max_bytes (partial file removed)
    """
    filename = sanitize_filename(file.filename)
    directory.mkdir(parents=True, exist_ok=True)
    destination = directory / f"{uuid.uuid4().hex}{Path(filename).suffix.lower()}"

    total_size = 0
    try:
        out = await asyncio.to_thread(destination.open, "wb")
        try:
            while True:
                chunk = await file.read(CHUNK_SIZE)
                if not chunk:
                    break
                total_size += len(chunk)
                if total_size > max_bytes:
                    break
                await asyncio.to_thread(out.write, chunk)
        finally:
            await asyncio.to_thread(out.close)

        if total_size > max_bytes:
            await asyncio.to_thread(destination.unlink, missing_ok=True)
            raise InputError(
                f"File too large. Max upload size is {format_megabytes(max_bytes)}."
            )
    finally:
        await file.close()

    return StagedUpload(
        path=destination,
        filename=filename,
        content_type=(file.content_type or "").lower(),
        size=total_size,
    )


async def read_upload(file: UploadFile, max_bytes: int) -> bytes:
    """
    Read a small upload fully into memory.

    Raises:
        InputError: The upload is larger than max_bytes
    """
    try:
        content = await file.read(max_bytes + 1)
    finally:
        await file.close()
    if len(content) > max_bytes:
        raise InputError(f"File too large. Max size is {format_megabytes(max_bytes)}.")
    return content
