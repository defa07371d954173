"""Contains the image commands.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from fileforge.jobs.operations import JobKind
from fileforge.jobs.options import (
    RESIZE_PRESETS,
    TARGET_FORMATS,
    available_formats,
    find_preset,
    recommended_formats,
)

from .common import build_controller, execute, job_options, load_inputs, select_or_fail

LOGGER = logging.getLogger(__name__)

INPUT_FILE = click.Path(path_type=Path, exists=True, dir_okay=False)


@click.command()
@click.argument("input_path", type=INPUT_FILE)
@click.option("-q", "--quality", type=click.IntRange(1, 100), default=75, help="Compression quality.")
@click.option(
    "--preserve-format/--auto-format",
    default=True,
    help="Keep the input format instead of letting the service pick the optimal one.",
)
@click.option("--target-size-kb", type=int, default=None, help="Target output size in KB.")
@job_options
def compress_image_cli(
    input_path: Path,
    quality: int,
    preserve_format: bool,
    target_size_kb: int | None,
    output_dir: Path | None,
    server: str | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
):
    """Reduce the file size of an image."""
    controller = build_controller(JobKind.COMPRESS_IMAGE, server)
    select_or_fail(controller, load_inputs([input_path]))
    controller.options.quality = quality
    controller.options.preserve_format = preserve_format
    controller.options.target_size_kb = target_size_kb
    execute(controller, output_dir=output_dir, download=download, timeout=timeout, verbose=verbose)


@click.command()
@click.argument("input_path", type=INPUT_FILE)
@click.option(
    "-t",
    "--to",
    "target_format",
    type=click.Choice(list(TARGET_FORMATS), case_sensitive=False),
    required=True,
    help="Output format.",
)
@job_options
def convert_image_cli(
    input_path: Path,
    target_format: str,
    output_dir: Path | None,
    server: str | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
):
    """Convert an image to another format."""
    controller = build_controller(JobKind.CONVERT_IMAGE, server)
    select_or_fail(controller, load_inputs([input_path]))
    controller.options.target_format = target_format.lower()
    execute(controller, output_dir=output_dir, download=download, timeout=timeout, verbose=verbose)


@click.command()
@click.argument("input_path", type=INPUT_FILE)
@click.option("-W", "--width", type=int, default=None, help="Target width in pixels.")
@click.option("-H", "--height", type=int, default=None, help="Target height in pixels.")
@click.option(
    "--preset",
    type=click.Choice([preset.name for preset in RESIZE_PRESETS], case_sensitive=False),
    default=None,
    help="Use a named preset size.",
)
@click.option(
    "--keep-aspect/--no-keep-aspect",
    default=True,
    help="Derive the missing dimension from the image's aspect ratio.",
)
@job_options
def resize_image_cli(
    input_path: Path,
    width: int | None,
    height: int | None,
    preset: str | None,
    keep_aspect: bool,
    output_dir: Path | None,
    server: str | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
):
    """Resize an image."""
    controller = build_controller(JobKind.RESIZE_IMAGE, server)
    select_or_fail(controller, load_inputs([input_path]))

    solver = controller.dimensions
    if solver.lock_aspect != keep_aspect:
        solver.toggle_lock()
    if preset is not None:
        chosen = find_preset(preset)
        solver.apply_preset(chosen.width, chosen.height)
    if width is not None:
        solver.set_width(width)
    if height is not None:
        solver.set_height(height)

    LOGGER.info(
        "Resizing %dx%d to %sx%s", solver.original_width, solver.original_height, solver.width, solver.height
    )
    execute(controller, output_dir=output_dir, download=download, timeout=timeout, verbose=verbose)


@click.command()
@click.argument("input_format", type=str)
def formats_cli(input_format: str):
    """List conversion targets for an input format, recommended ones first."""
    recommended = recommended_formats(input_format)
    for fmt in recommended:
        click.echo(f"{fmt:<5} {TARGET_FORMATS[fmt]} (recommended)")
    for fmt in available_formats(input_format):
        if fmt not in recommended:
            click.echo(f"{fmt:<5} {TARGET_FORMATS[fmt]}")
