"""Builds provider-specific submissions and exchanges them for a job id.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import logging
from typing import List, Protocol, Sequence, Tuple

from .errors import SubmissionError
from .files import SelectedFile
from .operations import get_operation

logger = logging.getLogger(__name__)

FormFields = List[Tuple[str, str]]
FileFields = List[Tuple[str, Tuple[str, bytes, str]]]


class SubmitTransport(Protocol):
    def submit(self, endpoint: str, fields: Sequence[Tuple[str, str]], files: FileFields) -> str:
        ...


def build_payload(kind, inputs: Sequence[SelectedFile], options) -> Tuple[str, FormFields, FileFields]:
    """Return (endpoint, form fields, file fields) for a submission.

    File fields keep the order of `inputs`; for merges that order is the page
    order of the output document.
    """
    operation = get_operation(kind)
    files = [(operation.upload_field, (item.name, item.data, item.mime_type)) for item in inputs]
    return operation.endpoint, options.to_fields(), files


class JobSubmitter:
    """Sends one submission per call; failures are never retried."""

    def __init__(self, transport: SubmitTransport):
        self.transport = transport

    def submit(self, kind, inputs: Sequence[SelectedFile], options) -> str:
        endpoint, fields, files = build_payload(kind, inputs, options)
        try:
            job_id = self.transport.submit(endpoint, fields, files)
        except SubmissionError:
            raise
        except Exception as exc:
            raise SubmissionError(f"Failed to upload: {exc}") from exc

        logger.info("Submitted %s for %s, job id %s", get_operation(kind).kind.value,
                    ", ".join(item.name for item in inputs), job_id)
        return job_id
