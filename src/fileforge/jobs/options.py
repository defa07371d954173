"""Kind-specific option records and their multipart form fields.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from dataclasses import dataclass
from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

from .files import SelectedFile
from .operations import JobKind

FormFields = List[Tuple[str, str]]

COMPRESSION_LEVELS = ("low", "medium", "high")
MAX_PAGE_NUMBER = 1000

TARGET_FORMATS: Dict[str, str] = {
    "jpg": "Best for photos with many colors",
    "png": "Best for images with transparency",
    "webp": "Modern format with excellent compression",
    "bmp": "Uncompressed bitmap format",
    "tiff": "High-quality format for professional use",
    "gif": "Best for simple animations",
    "ico": "Icon format for websites",
    "pdf": "Document format",
}

_RECOMMENDED_FORMATS = {
    "jpg": ["webp", "png"],
    "png": ["webp", "jpg"],
    "webp": ["jpg", "png"],
    "bmp": ["jpg", "png", "webp"],
    "tiff": ["jpg", "png", "webp"],
    "gif": ["png", "webp", "jpg"],
}
_DEFAULT_RECOMMENDED = ["jpg", "png", "webp"]


class Preset(NamedTuple):
    name: str
    width: int
    height: int


RESIZE_PRESETS = (
    Preset("HD", 1920, 1080),
    Preset("Instagram Square", 1080, 1080),
    Preset("Facebook Cover", 820, 312),
    Preset("Twitter Header", 1500, 500),
    Preset("YouTube Thumbnail", 1280, 720),
    Preset("iPad", 1024, 768),
    Preset("iPhone", 375, 667),
    Preset("Web Banner", 728, 90),
)


def _normalize_format(value: Optional[str]) -> str:
    value = (value or "").lower().lstrip(".")
    return "jpg" if value == "jpeg" else value


def available_formats(input_format: Optional[str]) -> List[str]:
    """Target formats offered for an input, excluding the input's own format."""
    current = _normalize_format(input_format)
    return [fmt for fmt in TARGET_FORMATS if fmt != current]


def recommended_formats(input_format: Optional[str]) -> List[str]:
    return list(_RECOMMENDED_FORMATS.get(_normalize_format(input_format), _DEFAULT_RECOMMENDED))


def find_preset(name: str) -> Optional[Preset]:
    wanted = name.strip().lower()
    for preset in RESIZE_PRESETS:
        if preset.name.lower() == wanted:
            return preset
    return None


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class CompressImageOptions:
    quality: int = 75
    preserve_format: bool = True
    target_size_kb: Optional[int] = None

    def validate(self, inputs: Sequence[SelectedFile]) -> Optional[str]:
        if not _is_int(self.quality) or not 1 <= self.quality <= 100:
            return "Quality must be between 1 and 100."
        if self.target_size_kb is not None and (not _is_int(self.target_size_kb) or self.target_size_kb <= 0):
            return "Target size must be a positive number of KB."
        return None

    def to_fields(self) -> FormFields:
        fields = [("quality", str(self.quality)), ("preserve_format", _flag(self.preserve_format))]
        if self.target_size_kb is not None:
            fields.append(("target_size_kb", str(self.target_size_kb)))
        return fields


@dataclass
class ConvertImageOptions:
    target_format: Optional[str] = None

    def validate(self, inputs: Sequence[SelectedFile]) -> Optional[str]:
        if self.target_format is not None and not isinstance(self.target_format, str):
            return f"Unsupported output format: {self.target_format}."
        target = _normalize_format(self.target_format)
        if not target:
            return "Please select an output format."
        if target not in TARGET_FORMATS:
            return f"Unsupported output format: {self.target_format}."
        if inputs and target == inputs[0].extension:
            return f"The image is already in {target.upper()} format."
        return None

    def to_fields(self) -> FormFields:
        return [("target_format", _normalize_format(self.target_format))]


@dataclass
class ResizeImageOptions:
    width: Optional[int] = None
    height: Optional[int] = None
    maintain_aspect_ratio: bool = True

    def validate(self, inputs: Sequence[SelectedFile]) -> Optional[str]:
        if not (_is_int(self.width) and _is_int(self.height)) or self.width < 1 or self.height < 1:
            return "Please enter valid width and height values."
        return None

    def to_fields(self) -> FormFields:
        return [
            ("width", str(self.width)),
            ("height", str(self.height)),
            ("maintain_aspect_ratio", _flag(self.maintain_aspect_ratio)),
        ]


@dataclass
class CompressPdfOptions:
    compression_level: str = "medium"

    def validate(self, inputs: Sequence[SelectedFile]) -> Optional[str]:
        if not isinstance(self.compression_level, str) or self.compression_level not in COMPRESSION_LEVELS:
            return f"Compression level must be one of: {', '.join(COMPRESSION_LEVELS)}."
        return None

    def to_fields(self) -> FormFields:
        return [("compression_level", self.compression_level)]


@dataclass
class ExtractPdfOptions:
    start_page: int = 1
    end_page: int = 1

    def validate(self, inputs: Sequence[SelectedFile]) -> Optional[str]:
        if not (_is_int(self.start_page) and _is_int(self.end_page)):
            return "Please enter valid page numbers."
        if self.start_page < 1:
            return "Start page must be at least 1."
        if self.end_page < self.start_page:
            return "Invalid page range: end page must be ≥ start page."
        if self.start_page > MAX_PAGE_NUMBER or self.end_page > MAX_PAGE_NUMBER:
            return f"Page numbers cannot exceed {MAX_PAGE_NUMBER}."
        return None

    def to_fields(self) -> FormFields:
        return [("start_page", str(self.start_page)), ("end_page", str(self.end_page))]


@dataclass
class MergePdfOptions:
    def validate(self, inputs: Sequence[SelectedFile]) -> Optional[str]:
        return None

    def to_fields(self) -> FormFields:
        return []


OPTION_TYPES = {
    JobKind.COMPRESS_IMAGE: CompressImageOptions,
    JobKind.CONVERT_IMAGE: ConvertImageOptions,
    JobKind.RESIZE_IMAGE: ResizeImageOptions,
    JobKind.COMPRESS_PDF: CompressPdfOptions,
    JobKind.EXTRACT_PDF: ExtractPdfOptions,
    JobKind.MERGE_PDF: MergePdfOptions,
}


def default_options(kind):
    """Return a fresh option record with defaults for `kind`."""
    return OPTION_TYPES[JobKind(kind)]()
