"""Contains the PDF commands.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

from pathlib import Path

import click

from fileforge.jobs.operations import JobKind
from fileforge.jobs.options import COMPRESSION_LEVELS

from .common import build_controller, execute, job_options, load_inputs, select_or_fail

INPUT_FILE = click.Path(path_type=Path, exists=True, dir_okay=False)


@click.command()
@click.argument("input_path", type=INPUT_FILE)
@click.option(
    "-l",
    "--level",
    type=click.Choice(COMPRESSION_LEVELS),
    default="medium",
    help="Compression level.",
)
@job_options
def compress_pdf_cli(
    input_path: Path,
    level: str,
    output_dir: Path | None,
    server: str | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
):
    """Reduce the file size of a PDF."""
    controller = build_controller(JobKind.COMPRESS_PDF, server)
    select_or_fail(controller, load_inputs([input_path]))
    controller.options.compression_level = level
    execute(controller, output_dir=output_dir, download=download, timeout=timeout, verbose=verbose)


@click.command()
@click.argument("input_path", type=INPUT_FILE)
@click.option("-s", "--start", "start_page", type=int, default=1, help="First page to extract (1-based).")
@click.option("-e", "--end", "end_page", type=int, default=None, help="Last page to extract, inclusive.")
@job_options
def extract_pdf_cli(
    input_path: Path,
    start_page: int,
    end_page: int | None,
    output_dir: Path | None,
    server: str | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
):
    """Extract a page range from a PDF."""
    controller = build_controller(JobKind.EXTRACT_PDF, server)
    select_or_fail(controller, load_inputs([input_path]))
    controller.options.start_page = start_page
    controller.options.end_page = start_page if end_page is None else end_page
    execute(controller, output_dir=output_dir, download=download, timeout=timeout, verbose=verbose)


@click.command()
@click.argument("input_paths", type=INPUT_FILE, nargs=-1, required=True)
@job_options
def merge_pdf_cli(
    input_paths: tuple[Path, ...],
    output_dir: Path | None,
    server: str | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
):
    """Merge PDFs in the order given."""
    controller = build_controller(JobKind.MERGE_PDF, server)
    select_or_fail(controller, load_inputs(input_paths))
    execute(controller, output_dir=output_dir, download=download, timeout=timeout, verbose=verbose)
