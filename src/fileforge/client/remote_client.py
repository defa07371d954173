"""Helper utilities for calling the remote processing service."""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence, Tuple
from urllib.parse import quote, urljoin

import requests

from fileforge.jobs.errors import PollingError, RetrievalError, SubmissionError
from fileforge.jobs.poller import ProgressReport

from .constants import PROGRESS_PATH

logger = logging.getLogger(__name__)

FileField = Tuple[str, Tuple[str, bytes, str]]


def _decode_json(response: requests.Response, error_cls: type, what: str) -> dict:
    try:
        data = response.json()
    except ValueError as exc:
        raise error_cls(f"{what} response is not valid JSON.") from exc
    if not isinstance(data, dict):
        raise error_cls(f"{what} response is not a JSON object.")
    return data


class RemoteClient:
    """Thin transport over the service's submit, progress and result endpoints.

    Every call issues exactly one request and converts transport failures, HTTP
    errors and malformed bodies into the matching engine error.
    """

    def __init__(
        self,
        api_server: str,
        *,
        timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_server = api_server.rstrip("/")
        self.timeout = timeout
        self.http = session or requests

    def url_for(self, path: str) -> str:
        """Resolve an endpoint path or a relative result location."""
        return urljoin(self.api_server + "/", path.lstrip("/"))

    def submit(self, endpoint: str, fields: Sequence[Tuple[str, str]], files: List[FileField]) -> str:
        """POST a multipart submission and return the issued task id."""
        if not self.api_server:
            raise SubmissionError("API server is not configured.")

        url = self.url_for(endpoint)
        logger.info("Uploading %d file(s) to %s", len(files), url)

        try:
            response = self.http.post(url, data=list(fields), files=files, timeout=self.timeout)
        except requests.RequestException as exc:
            raise SubmissionError(f"Upload failed: {exc}") from exc

        if response.status_code >= 400:
            raise SubmissionError(f"Service error {response.status_code}: {response.text}")

        data = _decode_json(response, SubmissionError, "Submission")
        task_id = data.get("task_id") or data.get("taskId")
        if not task_id:
            raise SubmissionError("Submission response missing task_id field.")
        return str(task_id)

    def fetch_progress(self, task_id: str) -> ProgressReport:
        url = self.url_for(f"{PROGRESS_PATH}/{quote(task_id, safe='')}")
        try:
            response = self.http.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            raise PollingError(f"Failed to fetch progress: {exc}") from exc

        if response.status_code >= 400:
            raise PollingError(f"Failed to fetch progress: service error {response.status_code}")

        data = _decode_json(response, PollingError, "Progress")
        try:
            progress = float(data["progress"])
        except (KeyError, TypeError, ValueError) as exc:
            raise PollingError("Progress response missing a numeric progress field.") from exc
        if not math.isfinite(progress):
            raise PollingError(f"Progress response has a non-finite progress value: {data['progress']!r}.")

        result_url = data.get("result_url")
        if result_url:
            result_url = self.url_for(str(result_url))
        return ProgressReport(progress=progress, result_url=result_url or None)

    def fetch_result(self, result_url: str) -> bytes:
        logger.info("Downloading result from %s", result_url)
        try:
            response = self.http.get(self.url_for(result_url), timeout=self.timeout)
        except requests.RequestException as exc:
            raise RetrievalError(f"Failed to download the file: {exc}") from exc

        if response.status_code >= 400:
            raise RetrievalError(f"Failed to download the file: service error {response.status_code}")
        return response.content
