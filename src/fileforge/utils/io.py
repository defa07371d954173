"""Contains image header decoding and preview helpers.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

import io
import logging
from typing import NamedTuple

import pillow_heif
from PIL import Image, UnidentifiedImageError

LOGGER = logging.getLogger(__name__)

PREVIEW_SIZE = 384

# EXIF orientations that swap the width and height axes.
_TRANSPOSED_ORIENTATIONS = {5, 6, 7, 8}

_HEIC_SIGNATURES = (b"ftypheic", b"ftypheix", b"ftyphevc", b"ftypmif1", b"ftypmsf1")


class ImageSize(NamedTuple):
    """Pixel dimensions of a decoded image."""

    width: int
    height: int


def _open_image(data: bytes) -> Image.Image:
    if data[4:12] in _HEIC_SIGNATURES:
        heif_file = pillow_heif.open_heif(io.BytesIO(data), convert_hdr_to_8bit=True)
        return heif_file.to_pillow()
    return Image.open(io.BytesIO(data))


def _orientation(img_pil: Image.Image) -> int:
    try:
        return int(img_pil.getexif().get(274, 1))
    except (TypeError, ValueError):
        return 1


def read_image_size(data: bytes) -> ImageSize | None:
    """Return the displayed size of an encoded image, or None if undecodable.

    Only the header is parsed. EXIF rotations by 90 degrees swap the axes so the
    result matches what a viewer shows.
    """
    try:
        img_pil = _open_image(data)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        LOGGER.debug("Could not decode image header: %s", exc)
        return None

    width, height = img_pil.size
    if _orientation(img_pil) in _TRANSPOSED_ORIENTATIONS:
        width, height = height, width
    return ImageSize(width=width, height=height)


def make_preview(data: bytes, size: int = PREVIEW_SIZE) -> bytes | None:
    """Render a PNG thumbnail of the image, rotated per EXIF orientation."""
    try:
        img = _open_image(data)
        orientation = _orientation(img)
        if orientation == 3:
            img = img.transpose(Image.ROTATE_180)
        elif orientation == 6:
            img = img.transpose(Image.ROTATE_270)
        elif orientation == 8:
            img = img.transpose(Image.ROTATE_90)

        img.thumbnail((size, size), Image.Resampling.LANCZOS)
        if img.mode not in ("RGB", "RGBA", "L", "LA"):
            img = img.convert("RGBA")
        output = io.BytesIO()
        img.save(output, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        LOGGER.debug("Could not render preview: %s", exc)
        return None
    return output.getvalue()


def format_file_size(size_bytes: float) -> str:
    """Format file size for display."""
    for unit in ["B", "KB", "MB", "GB"]:
        if size_bytes < 1024.0:
            return f"{size_bytes:.1f} {unit}"
        size_bytes /= 1024.0
    return f"{size_bytes:.1f} TB"
