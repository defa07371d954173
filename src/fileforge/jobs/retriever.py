"""Downloads finished results and saves them under a derived filename.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence, Union

from .errors import RetrievalError
from .files import SelectedFile
from .operations import JobKind

logger = logging.getLogger(__name__)


class FetchTransport(Protocol):
    def fetch_result(self, result_url: str) -> bytes:
        ...


def _suffix(item: SelectedFile) -> str:
    return Path(item.name).suffix


def derive_filename(kind, options, inputs: Sequence[SelectedFile]) -> str:
    """Output name as a function of kind, options and the original filename."""
    kind = JobKind(kind)
    if kind == JobKind.MERGE_PDF:
        return "merged.pdf"

    source = inputs[0]
    if kind == JobKind.COMPRESS_IMAGE:
        return f"{source.stem}_compressed{_suffix(source)}"
    if kind == JobKind.CONVERT_IMAGE:
        return f"{source.stem}_converted.{options.target_format.lower()}"
    if kind == JobKind.RESIZE_IMAGE:
        return f"{source.stem}_{options.width}x{options.height}{_suffix(source)}"
    if kind == JobKind.COMPRESS_PDF:
        return f"{source.stem}_compressed.pdf"
    if kind == JobKind.EXTRACT_PDF:
        if options.start_page == options.end_page:
            page_range = f"page_{options.start_page}"
        else:
            page_range = f"pages_{options.start_page}-{options.end_page}"
        return f"{source.stem}_{page_range}.pdf"
    raise ValueError(f"Unknown job kind: {kind}")


class ResultRetriever:
    """Fetches result bytes and writes them to the output directory.

    `output_dir` may be a path or a callable returning one; a callable is only
    resolved when a result is saved.
    """

    def __init__(self, transport: FetchTransport, output_dir: Union[Path, Callable[[], Path]]):
        self.transport = transport
        self.output_dir = output_dir

    def default_directory(self) -> Path:
        return self.output_dir() if callable(self.output_dir) else self.output_dir

    def retrieve(self, result_ref: str) -> bytes:
        try:
            return self.transport.fetch_result(result_ref)
        except RetrievalError:
            raise
        except Exception as exc:
            raise RetrievalError(f"Failed to download the file: {exc}") from exc

    def save_as(self, data: bytes, filename: str, directory: Optional[Path] = None) -> Path:
        """Persist result bytes with unique filenames."""
        output_dir = directory or self.default_directory()
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise RetrievalError(f"Cannot create output folder {output_dir}: {exc}") from exc

        stem, suffix = Path(filename).stem, Path(filename).suffix
        candidate = output_dir / filename
        counter = 1

        while True:
            try:
                # Exclusive create: an existing file is never replaced.
                with open(candidate, "xb") as handle:
                    handle.write(data)
                break
            except FileExistsError:
                candidate = output_dir / f"{stem}_{counter}{suffix}"
                counter += 1
            except OSError as exc:
                raise RetrievalError(f"Failed to save {candidate.name}: {exc}") from exc

        logger.info("Saved result to %s", candidate)
        return candidate
