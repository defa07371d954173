"""Selected input files and the pickers that produce them.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import logging
import mimetypes
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Iterable, List, Optional, Protocol

from fileforge.utils import io
from fileforge.utils.io import ImageSize

logger = logging.getLogger(__name__)

mimetypes.add_type("image/webp", ".webp")
mimetypes.add_type("image/heic", ".heic")

_IMAGE_PREFIX = "image/"


def new_identity() -> str:
    """Return a fresh synthetic identity, independent of the file name."""
    return uuid.uuid4().hex[:12]


def guess_mime_type(name: str) -> str:
    mime_type, _ = mimetypes.guess_type(name)
    return mime_type or "application/octet-stream"


@dataclass(frozen=True)
class SelectedFile:
    """A file chosen by the user, held in memory until submission."""

    name: str
    data: bytes = field(repr=False)
    size_bytes: int
    mime_type: str
    identity: str = field(default_factory=new_identity)
    dimensions: Optional[ImageSize] = None
    preview: Optional[bytes] = field(default=None, repr=False)

    @classmethod
    def from_bytes(
        cls,
        name: str,
        data: bytes,
        mime_type: Optional[str] = None,
        decode_image: bool = True,
    ) -> "SelectedFile":
        """Build a file from raw bytes, decoding image headers when possible."""
        mime_type = mime_type or guess_mime_type(name)
        dimensions = None
        preview = None
        if decode_image and mime_type.startswith(_IMAGE_PREFIX):
            dimensions = io.read_image_size(data)
            if dimensions is not None:
                preview = io.make_preview(data)
        return cls(
            name=name,
            data=data,
            size_bytes=len(data),
            mime_type=mime_type,
            dimensions=dimensions,
            preview=preview,
        )

    @classmethod
    def from_path(cls, path: Path, decode_image: bool = True) -> "SelectedFile":
        logger.debug(f"Reading {path}")
        return cls.from_bytes(path.name, path.read_bytes(), decode_image=decode_image)

    @property
    def stem(self) -> str:
        return Path(self.name).stem

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot, with jpeg normalized to jpg."""
        ext = Path(self.name).suffix.lower().lstrip(".")
        return "jpg" if ext == "jpeg" else ext

    @property
    def size_label(self) -> str:
        return io.format_file_size(self.size_bytes)

    def with_identity(self, identity: str) -> "SelectedFile":
        return replace(self, identity=identity)


class FilePicker(Protocol):
    """Something that lets the user select file(s) outside the engine."""

    def pick(self) -> List[SelectedFile]:
        ...


class LocalFilePicker:
    """Picker over paths already chosen on the local filesystem."""

    def __init__(self, paths: Iterable[Path], decode_image: bool = True):
        self.paths = [Path(path) for path in paths]
        self.decode_image = decode_image

    def pick(self) -> List[SelectedFile]:
        return [SelectedFile.from_path(path, decode_image=self.decode_image) for path in self.paths]
