"""Job controller coordinating one operation's lifecycle.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import dataclasses
import logging
import threading
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

from .collection import OrderedCollection
from .dimensions import DimensionConstraintSolver
from .errors import RetrievalError, SubmissionError, ValidationError
from .files import SelectedFile
from .job import Job, JobSnapshot, JobStatus
from .operations import JobKind, get_operation
from .options import ResizeImageOptions, default_options
from .poller import DEFAULT_POLL_INTERVAL, ProgressPoller, ProgressReport
from .retriever import ResultRetriever, derive_filename
from .submitter import JobSubmitter
from .timer import TimerFactory
from .validation import OK, ValidationPolicy, ValidationResult

logger = logging.getLogger(__name__)


class JobController:
    """Runs one job at a time for a single operation kind.

    The controller owns the current selection, the option record, at most one
    Job and the poller driving it. `reset()` returns it to its initial state and
    `close()` releases the poller's timer when the owner goes away.
    """

    def __init__(
        self,
        kind,
        submitter: JobSubmitter,
        fetch_progress: Callable[[str], ProgressReport],
        retriever: ResultRetriever,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.kind = JobKind(kind)
        self.operation = get_operation(self.kind)
        self.policy = ValidationPolicy(self.operation)
        self.submitter = submitter
        self.fetch_progress = fetch_progress
        self.retriever = retriever
        self.poll_interval = poll_interval
        self.timer_factory = timer_factory

        self.collection = OrderedCollection(self.policy)
        self.options = default_options(self.kind)
        self.dimensions: Optional[DimensionConstraintSolver] = None
        self.job: Optional[Job] = None
        self.poller: Optional[ProgressPoller] = None
        self.error: Optional[ValidationError] = None
        self.notice: Optional[str] = None

        self._listeners: List[Callable[[JobSnapshot], None]] = []
        self._lock = threading.RLock()

    # ------------------------------------------------------------------ selection
    @property
    def inputs(self) -> List[SelectedFile]:
        return list(self.collection)

    def select(self, files: Iterable[SelectedFile]) -> ValidationResult:
        """Accept file(s) chosen by the user.

        Multi-file operations append the batch to the collection; single-file
        operations replace the current selection with the first file.
        """
        files = list(files)
        if not files:
            return OK

        with self._lock:
            if self.operation.is_multi_file:
                result = self.collection.append(files)
            else:
                result = self.policy.validate(files[0])
                if result:
                    self.collection.clear()
                    self.collection.append(files[:1])
                    self._on_single_file_selected(self.collection[0])

            self.error = None if result else result.to_error()
        if not result:
            logger.warning("Selection rejected: %s", result.reason)
        return result

    def _on_single_file_selected(self, item: SelectedFile) -> None:
        if self.kind == JobKind.RESIZE_IMAGE:
            dims = item.dimensions
            self.dimensions = DimensionConstraintSolver(dims.width, dims.height)
        elif self.kind == JobKind.CONVERT_IMAGE:
            self.options = default_options(self.kind)

    def remove(self, identity: str) -> bool:
        with self._lock:
            removed = self.collection.remove(identity)
            if removed and not len(self.collection):
                self.error = None
                self.dimensions = None
        return removed

    # ------------------------------------------------------------------ lifecycle
    def subscribe(self, listener: Callable[[JobSnapshot], None]) -> None:
        """Register a callback receiving a snapshot on every Job change."""
        self._listeners.append(listener)

    def _forward(self, job: Job) -> Callable[[JobSnapshot], None]:
        def listener(snapshot: JobSnapshot) -> None:
            if self.job is not job:
                return
            for callback in list(self._listeners):
                callback(snapshot)

        return listener

    def current_options(self):
        """Return a copy of the option record that a run would submit."""
        if self.kind == JobKind.RESIZE_IMAGE and self.dimensions is not None:
            return ResizeImageOptions(
                width=self.dimensions.width,
                height=self.dimensions.height,
                maintain_aspect_ratio=self.dimensions.lock_aspect,
            )
        return dataclasses.replace(self.options)

    def run(self, inputs: Optional[Sequence[SelectedFile]] = None, options=None) -> Optional[JobSnapshot]:
        """Validate, submit and start polling a fresh Job.

        Returns the Job snapshot, or None when validation rejected the input;
        the reason is then available in `error` and no Job is created.
        """
        with self._lock:
            self._release_poller()
            self.job = None
            inputs = tuple(self.inputs if inputs is None else inputs)
            options = self.current_options() if options is None else options

            result = self.policy.validate_submission(inputs, options)
            if not result:
                self.error = result.to_error()
                logger.warning("Run rejected: %s", result.reason)
                return None

            self.error = None
            self.notice = None
            job = Job(kind=self.kind, inputs=inputs, options=options)
            job.subscribe(self._forward(job))
            self.job = job
            job.mark_validated()
            job.mark_submitting()

        try:
            job_id = self.submitter.submit(self.kind, inputs, options)
        except SubmissionError as exc:
            job.fail(str(exc))
            return job.snapshot()

        with self._lock:
            if self.job is not job:
                logger.info("Job %s was discarded during submission, not polling", job_id)
                return job.snapshot()
            self.poller = ProgressPoller(
                job,
                self.fetch_progress,
                interval=self.poll_interval,
                timer_factory=self.timer_factory,
            )
            self.poller.arm(job_id)
        return job.snapshot()

    def snapshot(self) -> Optional[JobSnapshot]:
        job = self.job
        return job.snapshot() if job is not None else None

    @property
    def status(self) -> JobStatus:
        job = self.job
        return job.status if job is not None else JobStatus.IDLE

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the current Job is terminal. False on timeout or no Job."""
        job = self.job
        if job is None:
            return False
        return job.wait(timeout)

    def download(self, directory: Optional[Path] = None) -> Optional[Path]:
        """Fetch the result of a completed Job and save it.

        Failures are kept in `notice` and leave the Job untouched; calling
        again retries.
        """
        job = self.job
        snapshot = job.snapshot() if job is not None else None
        if snapshot is None or snapshot.status != JobStatus.COMPLETED:
            self.notice = "No result available yet."
            return None

        try:
            data = self.retriever.retrieve(snapshot.result_ref)
            filename = derive_filename(self.kind, job.options, job.inputs)
            path = self.retriever.save_as(data, filename, directory)
        except RetrievalError as exc:
            self.notice = str(exc)
            logger.warning("Download failed: %s", exc)
            return None

        self.notice = None
        return path

    def _release_poller(self) -> None:
        poller, self.poller = self.poller, None
        if poller is not None:
            poller.cancel()

    def reset(self) -> None:
        """Cancel polling and discard the Job, selection and messages."""
        with self._lock:
            self._release_poller()
            self.job = None
            self.collection.clear()
            self.options = default_options(self.kind)
            self.dimensions = None
            self.error = None
            self.notice = None
        logger.debug("Controller for %s reset", self.kind.value)

    def close(self) -> None:
        """Release the polling timer; the Job itself is left as it was."""
        with self._lock:
            self._release_poller()

    def __enter__(self) -> "JobController":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
