"""
Image processing utilities for community images.

Pillow does the work; everything here is blocking and is meant to be
called through asyncio.to_thread.

Output per image directory:
===========================
    original.webp   ← EXIF orientation applied, metadata dropped
    thumb.webp      ← square cover crop, IMAGE_THUMBNAIL_SIZE px
"""

from dataclasses import dataclass
from io import BytesIO
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from src.shared.core.exceptions import InputError
from src.shared.core.logging import get_logger
from src.shared.models.enums import Orientation

logger = get_logger("images")

ORIGINAL_NAME = "original.webp"
THUMBNAIL_NAME = "thumb.webp"
DEFAULT_COLOR = "#808080"

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": (".jpg", ".jpeg"),
    "image/png": (".png",),
    "image/webp": (".webp",),
}
ALLOWED_THUMBNAIL_TYPES = {
    **ALLOWED_IMAGE_TYPES,
    "image/gif": (".gif",),
}


@dataclass(frozen=True)
class ProcessedImage:
    """Metadata of a processed upload."""

    width: int
    height: int
    file_size: int
    orientation: Orientation
    dominant_color: str


def is_allowed_image(content_type: str | None, filename: str | None, allowed: dict) -> bool:
    """Both the declared MIME type and the file extension must be on the list."""
    extensions = allowed.get((content_type or "").lower())
    if not extensions:
        return False
    return (filename or "").lower().endswith(extensions)


def detect_orientation(width: int, height: int) -> Orientation:
    """Within 10% of 1:1 counts as square."""
    ratio = width / height if height else 1.0
    if abs(ratio - 1) < 0.1:
        return Orientation.SQUARE
    return Orientation.LANDSCAPE if ratio > 1 else Orientation.PORTRAIT


def dominant_color(image: Image.Image) -> str:
    """Average colour as #rrggbb, from a 1x1 resize."""
    try:
        pixel = image.convert("RGB").resize((1, 1)).getpixel((0, 0))
    except (OSError, ValueError) as e:
        logger.warning("Dominant colour extraction failed", error=str(e))
        return DEFAULT_COLOR
    return "#{:02x}{:02x}{:02x}".format(*pixel[:3])


def process_image(
    data: bytes,
    directory: Path,
    thumbnail_size: int = 400,
    quality: int = 80,
) -> ProcessedImage:
    """
    Write the normalized original and the thumbnail into `directory`.

    Raises:
        InputError: The bytes are not an image Pillow can read
    """
    try:
        with Image.open(BytesIO(data)) as opened:
            image = ImageOps.exif_transpose(opened)
            image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise InputError(f"Unreadable image: {e}") from e

    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")

    directory.mkdir(parents=True, exist_ok=True)
    original_path = directory / ORIGINAL_NAME
    # A fresh save carries no EXIF block unless one is passed explicitly
    image.save(original_path, "WEBP", quality=quality)

    thumbnail = ImageOps.fit(image, (thumbnail_size, thumbnail_size), Image.Resampling.LANCZOS)
    thumbnail.save(directory / THUMBNAIL_NAME, "WEBP", quality=quality)

    width, height = image.size
    return ProcessedImage(
        width=width,
        height=height,
        file_size=original_path.stat().st_size,
        orientation=detect_orientation(width, height),
        dominant_color=dominant_color(image),
    )
