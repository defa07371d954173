"""Per-kind operation table.

Every supported operation is described by one `Operation` record; the rest of
the engine is parameterized by it instead of carrying per-kind code paths.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet, Optional

MIB = 1024 * 1024


class JobKind(str, Enum):
    """Operations the remote service can run."""

    COMPRESS_IMAGE = "compress-image"
    CONVERT_IMAGE = "convert-image"
    RESIZE_IMAGE = "resize-image"
    COMPRESS_PDF = "compress-pdf"
    EXTRACT_PDF = "extract-pdf"
    MERGE_PDF = "merge-pdf"


WEB_IMAGE_TYPES = frozenset({"image/png", "image/jpeg", "image/webp"})
DECODABLE_IMAGE_TYPES = WEB_IMAGE_TYPES | {"image/bmp", "image/tiff", "image/gif", "image/heic"}
PDF_TYPES = frozenset({"application/pdf"})


@dataclass(frozen=True)
class Operation:
    """Static description of one operation kind."""

    kind: JobKind
    endpoint: str
    max_file_size: int
    accepted_types: FrozenSet[str]
    type_label: str
    upload_field: str = "upload"
    min_files: int = 1
    max_files: Optional[int] = 1
    requires_dimensions: bool = False

    @property
    def max_file_size_mb(self) -> int:
        return self.max_file_size // MIB

    @property
    def is_multi_file(self) -> bool:
        return self.max_files is None or self.max_files > 1


OPERATIONS = {
    JobKind.COMPRESS_IMAGE: Operation(
        kind=JobKind.COMPRESS_IMAGE,
        endpoint="/image/compress",
        max_file_size=10 * MIB,
        accepted_types=WEB_IMAGE_TYPES,
        type_label="PNG, JPG or WEBP image",
    ),
    JobKind.CONVERT_IMAGE: Operation(
        kind=JobKind.CONVERT_IMAGE,
        endpoint="/image/convert",
        max_file_size=10 * MIB,
        accepted_types=DECODABLE_IMAGE_TYPES,
        type_label="PNG, JPG, WEBP, BMP, TIFF, GIF or HEIC image",
    ),
    JobKind.RESIZE_IMAGE: Operation(
        kind=JobKind.RESIZE_IMAGE,
        endpoint="/image/resize",
        max_file_size=10 * MIB,
        accepted_types=WEB_IMAGE_TYPES,
        type_label="PNG, JPG or WEBP image",
        requires_dimensions=True,
    ),
    JobKind.COMPRESS_PDF: Operation(
        kind=JobKind.COMPRESS_PDF,
        endpoint="/pdf/compress",
        max_file_size=25 * MIB,
        accepted_types=PDF_TYPES,
        type_label="PDF",
    ),
    JobKind.EXTRACT_PDF: Operation(
        kind=JobKind.EXTRACT_PDF,
        endpoint="/pdf/extract",
        max_file_size=25 * MIB,
        accepted_types=PDF_TYPES,
        type_label="PDF",
    ),
    JobKind.MERGE_PDF: Operation(
        kind=JobKind.MERGE_PDF,
        endpoint="/pdf/merge",
        max_file_size=25 * MIB,
        accepted_types=PDF_TYPES,
        type_label="PDF",
        upload_field="files",
        min_files=2,
        max_files=None,
    ),
}

PROGRESS_ENDPOINT = "/progress"


def get_operation(kind) -> Operation:
    """Look up an operation by `JobKind` or its string value."""
    return OPERATIONS[JobKind(kind)]
