"""Error taxonomy for the job lifecycle engine.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""


class JobError(RuntimeError):
    """Base class for every error surfaced to the user by the engine."""

    @property
    def message(self) -> str:
        return str(self)


class ValidationError(JobError):
    """Input rejected before a Job exists (size, type, cardinality, options)."""


class SubmissionError(JobError):
    """Raised when creating the remote job fails."""


class PollingError(JobError):
    """Raised when a progress request fails or cannot be decoded."""


class RetrievalError(JobError):
    """Raised when downloading the result artifact fails."""
