"""Progress poller: the per-job polling state machine.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .errors import PollingError
from .job import Job
from .timer import Timer, TimerFactory, interval_timer_factory

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0


@dataclass(frozen=True)
class ProgressReport:
    """Decoded response of a progress request."""

    progress: float
    result_url: str | None = None


class PollerState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"
    CANCELLED = "cancelled"


class ProgressPoller:
    """Polls one remote job until it finishes, fails or is cancelled.

    A poller is bound to a single Job and is never re-armed. Once it leaves
    POLLING its timer is released and any tick still in flight is dropped
    without touching the Job.
    """

    def __init__(
        self,
        job: Job,
        fetch_progress: Callable[[str], ProgressReport],
        interval: float = DEFAULT_POLL_INTERVAL,
        timer_factory: TimerFactory | None = None,
        on_terminal: Callable[[ProgressPoller], None] | None = None,
    ):
        self.job = job
        self.fetch_progress = fetch_progress
        self.interval = interval
        self.timer_factory = timer_factory or interval_timer_factory()
        self.on_terminal = on_terminal

        self.state = PollerState.IDLE
        self.job_id: str | None = None
        self._timer: Timer | None = None
        self._lock = threading.RLock()

    def arm(self, job_id: str) -> None:
        """Bind the remote job id and start the recurring timer."""
        with self._lock:
            if self.state != PollerState.IDLE:
                raise RuntimeError(f"Poller already used (state={self.state.value})")
            self.state = PollerState.ARMED
            self.job_id = job_id
            self.job.start_polling(job_id)
            self._timer = self.timer_factory(self.interval, self.tick)
            self.state = PollerState.POLLING
            self._timer.start()
        logger.info("Polling job %s every %.2fs", job_id, self.interval)

    def tick(self) -> None:
        """Issue one progress request and apply its outcome."""
        with self._lock:
            if self.state != PollerState.POLLING:
                return
            job_id = self.job_id

        try:
            report = self.fetch_progress(job_id)
        except PollingError as exc:
            self._finish(PollerState.FAILED, error=str(exc))
            return
        except Exception as exc:
            logger.error(f"Progress request for {job_id} crashed: {exc}", exc_info=True)
            self._finish(PollerState.FAILED, error=f"Failed to fetch progress: {exc}")
            return

        with self._lock:
            if self.state != PollerState.POLLING:
                logger.debug("Dropping late progress %s for job %s", report.progress, job_id)
                return
            try:
                progress = self.job.record_progress(report.progress)
            except Exception as exc:
                logger.error("Unusable progress %r for job %s", report.progress, job_id, exc_info=True)
                self._finish(PollerState.FAILED, error=f"Failed to fetch progress: {exc}")
                return
            logger.debug("Job %s progress %s%%", job_id, progress)

            if report.progress >= 100:
                if report.result_url:
                    self._finish(PollerState.DONE, result_ref=report.result_url)
                else:
                    self._finish(
                        PollerState.FAILED,
                        error="The service finished the job without a result location.",
                    )

    def _finish(self, state: PollerState, result_ref: str | None = None, error: str | None = None) -> bool:
        with self._lock:
            if self.state != PollerState.POLLING:
                return False
            self.state = state
            self._release_timer()
            if state == PollerState.DONE:
                self.job.complete(result_ref)
            else:
                self.job.fail(error or "Failed to fetch progress.")

        if self.on_terminal is not None:
            self.on_terminal(self)
        return True

    def _release_timer(self) -> None:
        timer, self._timer = self._timer, None
        if timer is not None:
            timer.stop()

    def cancel(self) -> None:
        """Stop polling. Idempotent; does not notify the remote service."""
        with self._lock:
            if self.state in (PollerState.IDLE, PollerState.ARMED, PollerState.POLLING):
                self.state = PollerState.CANCELLED
                logger.info("Cancelled polling for job %s", self.job_id)
            self._release_timer()
