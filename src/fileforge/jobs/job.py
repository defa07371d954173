"""Data model for one user-initiated remote job.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import logging
import math
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from .files import SelectedFile
from .operations import JobKind

logger = logging.getLogger(__name__)


class JobStatus(Enum):
    """Possible states for a job in the lifecycle."""
    IDLE = "idle"                 # Created, nothing checked yet
    VALIDATED = "validated"       # Inputs and options accepted
    SUBMITTING = "submitting"     # Upload in flight
    POLLING = "polling"           # Remote job running
    COMPLETED = "completed"       # Finished with a result reference
    FAILED = "failed"             # Finished with an error message

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


_TRANSITIONS = {
    JobStatus.IDLE: {JobStatus.VALIDATED},
    JobStatus.VALIDATED: {JobStatus.SUBMITTING},
    JobStatus.SUBMITTING: {JobStatus.POLLING, JobStatus.FAILED},
    JobStatus.POLLING: {JobStatus.COMPLETED, JobStatus.FAILED},
    JobStatus.COMPLETED: set(),
    JobStatus.FAILED: set(),
}


class InvalidTransition(RuntimeError):
    """Raised when a Job is driven through a transition it does not allow."""


@dataclass(frozen=True)
class JobSnapshot:
    """Read-only view of a Job handed to observers."""
    kind: JobKind
    status: JobStatus
    progress: int
    id: Optional[str]
    input_names: Tuple[str, ...]
    result_ref: Optional[str]
    error_message: Optional[str]


@dataclass
class Job:
    """One submitted operation and its lifecycle state."""
    kind: JobKind
    inputs: Tuple[SelectedFile, ...]
    options: Any
    id: Optional[str] = None
    status: JobStatus = JobStatus.IDLE
    progress: int = 0
    result_ref: Optional[str] = None
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None
    lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)
    _listeners: List[Callable[[JobSnapshot], None]] = field(default_factory=list, init=False, repr=False)
    _finished: threading.Event = field(default_factory=threading.Event, init=False, repr=False)

    # -------------------------------------------------------------------------
    def subscribe(self, listener: Callable[[JobSnapshot], None]) -> None:
        self._listeners.append(listener)

    def _notify(self, snapshot: JobSnapshot) -> None:
        for listener in list(self._listeners):
            listener(snapshot)

    def _snapshot_locked(self) -> JobSnapshot:
        return JobSnapshot(
            kind=self.kind,
            status=self.status,
            progress=self.progress,
            id=self.id,
            input_names=tuple(item.name for item in self.inputs),
            result_ref=self.result_ref,
            error_message=self.error_message,
        )

    def snapshot(self) -> JobSnapshot:
        with self.lock:
            return self._snapshot_locked()

    # -------------------------------------------------------------------------
    def _transition_locked(self, status: JobStatus) -> None:
        if status not in _TRANSITIONS[self.status]:
            raise InvalidTransition(f"{self.kind.value}: cannot go from {self.status.value} to {status.value}")
        self.status = status
        if status.is_terminal:
            self.completed_at = datetime.now()
            self._finished.set()

    def _transition(self, status: JobStatus, **changes: Any) -> JobSnapshot:
        with self.lock:
            self._transition_locked(status)
            for key, value in changes.items():
                setattr(self, key, value)
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return snapshot

    def mark_validated(self) -> JobSnapshot:
        return self._transition(JobStatus.VALIDATED)

    def mark_submitting(self) -> JobSnapshot:
        return self._transition(JobStatus.SUBMITTING)

    def start_polling(self, job_id: str) -> JobSnapshot:
        if not job_id:
            raise InvalidTransition("Polling requires a job id")
        return self._transition(JobStatus.POLLING, id=job_id)

    def record_progress(self, progress: float) -> int:
        """Raise progress to `progress`; lower or duplicate readings are ignored.

        Readings are floored, so 100 is shown only for a finished reading.
        Non-finite readings raise ValueError or OverflowError.
        """
        value = max(0, min(100, math.floor(progress)))
        with self.lock:
            if self.status != JobStatus.POLLING or value <= self.progress:
                return self.progress
            self.progress = value
            snapshot = self._snapshot_locked()
        self._notify(snapshot)
        return value

    def complete(self, result_ref: str) -> bool:
        """Move to COMPLETED. Returns False if the Job already finished."""
        if not result_ref:
            raise InvalidTransition("Completion requires a result reference")
        with self.lock:
            if self.status.is_terminal:
                return False
            self._transition_locked(JobStatus.COMPLETED)
            self.progress = 100
            self.result_ref = result_ref
            snapshot = self._snapshot_locked()
        logger.info("Job %s completed", self.id)
        self._notify(snapshot)
        return True

    def fail(self, message: str) -> bool:
        """Move to FAILED. Returns False if the Job already finished."""
        with self.lock:
            if self.status.is_terminal:
                return False
            self._transition_locked(JobStatus.FAILED)
            self.error_message = message
            snapshot = self._snapshot_locked()
        logger.error("Job %s (%s) failed: %s", self.id, self.kind.value, message)
        self._notify(snapshot)
        return True

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the Job reaches a terminal state."""
        return self._finished.wait(timeout)
