"""Wires controllers to the configured remote service.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from typing import Optional

import requests

from fileforge.client.config_manager import ConfigManager, get_config_manager
from fileforge.client.remote_client import RemoteClient
from fileforge.jobs.controller import JobController
from fileforge.jobs.retriever import ResultRetriever
from fileforge.jobs.submitter import JobSubmitter
from fileforge.jobs.timer import interval_timer_factory


def create_controller(
    kind,
    config_manager: Optional[ConfigManager] = None,
    session: Optional[requests.Session] = None,
) -> JobController:
    """Build a controller for `kind` from user configuration."""
    config = config_manager or get_config_manager()
    client = RemoteClient(
        config.get_api_server() or "",
        timeout=config.get_request_timeout(),
        session=session,
    )
    return JobController(
        kind,
        submitter=JobSubmitter(client),
        fetch_progress=client.fetch_progress,
        retriever=ResultRetriever(client, config.get_output_directory),
        poll_interval=config.get_poll_interval(),
        timer_factory=interval_timer_factory(overlap=config.get_poll_mode() == "fixed"),
    )
