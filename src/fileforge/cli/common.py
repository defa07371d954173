"""Shared plumbing for the job commands.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Iterable

import click

from fileforge.client.config_manager import get_config_manager
from fileforge.client.constants import STATUS_COLORS
from fileforge.factory import create_controller
from fileforge.jobs.controller import JobController
from fileforge.jobs.files import LocalFilePicker, SelectedFile
from fileforge.jobs.job import JobSnapshot, JobStatus
from fileforge.utils import logging as logging_utils


_JOB_OPTIONS = [
    click.option(
        "-o",
        "--output-dir",
        type=click.Path(path_type=Path, file_okay=False),
        default=None,
        help="Folder to save the result to. Defaults to the configured output directory.",
    ),
    click.option("--server", type=str, default=None, help="Override the configured API server URL."),
    click.option(
        "--download/--no-download",
        default=True,
        help="Download the result once the job completes.",
    ),
    click.option(
        "--timeout",
        type=float,
        default=None,
        help="Give up waiting after this many seconds. Waits indefinitely by default.",
    ),
    click.option("-v", "--verbose", is_flag=True, help="Activate debug logs."),
]


def job_options(func: Callable) -> Callable:
    """Attach the options shared by every job command."""
    for option in reversed(_JOB_OPTIONS):
        func = option(func)
    return func


def load_inputs(paths: Iterable[Path]) -> list[SelectedFile]:
    return LocalFilePicker(paths).pick()


def build_controller(kind, server: str | None) -> JobController:
    config = get_config_manager()
    if server:
        config.config["api_server"] = server
    if not config.get_api_server():
        raise click.UsageError(
            "API server is not configured. Use --server, `fileforge config set api_server URL` "
            "or FILEFORGE_API_SERVER."
        )
    return create_controller(kind, config_manager=config)


def select_or_fail(controller: JobController, files: list[SelectedFile]) -> None:
    result = controller.select(files)
    if not result:
        raise click.ClickException(result.reason)


def _progress_printer() -> Callable[[JobSnapshot], None]:
    last = {"status": None, "progress": -1}

    def show(snapshot: JobSnapshot) -> None:
        if snapshot.status != last["status"]:
            last["status"] = snapshot.status
            label = click.style(snapshot.status.value, fg=STATUS_COLORS[snapshot.status.value])
            click.echo(f"Status: {label}", err=True)
        if snapshot.status == JobStatus.POLLING and snapshot.progress != last["progress"]:
            last["progress"] = snapshot.progress
            click.echo(f"Progress: {snapshot.progress}%", err=True)

    return show


def execute(
    controller: JobController,
    *,
    output_dir: Path | None,
    download: bool,
    timeout: float | None,
    verbose: bool,
) -> None:
    """Run the controller's job to completion and save the result."""
    logging_utils.configure(logging.DEBUG if verbose else logging.INFO)

    for item in controller.inputs:
        click.echo(f"Input: {item.name} ({item.size_label})", err=True)

    with controller:
        controller.subscribe(_progress_printer())
        snapshot = controller.run()
        if snapshot is None:
            raise click.ClickException(str(controller.error))

        if not controller.wait(timeout):
            raise click.ClickException(f"Job {snapshot.id} did not finish within {timeout} seconds.")

        snapshot = controller.snapshot()
        if snapshot.status == JobStatus.FAILED:
            raise click.ClickException(snapshot.error_message)

        if not download:
            click.echo(snapshot.result_ref)
            return

        path = controller.download(output_dir)
        if path is None:
            raise click.ClickException(controller.notice)
        click.echo(str(path))
