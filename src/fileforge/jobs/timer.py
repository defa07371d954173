"""Recurring timer driving progress ticks without blocking the caller.

For licensing see accompanying LICENSE file.
Copyright (C) 2025 Apple Inc. All Rights Reserved.
"""

import logging
import threading
from time import monotonic
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class Timer(Protocol):
    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class IntervalTimer(threading.Thread):
    """Background thread invoking `callback` every `interval` seconds.

    With `overlap=True` ticks follow the wall clock: each callback runs on its
    own short-lived thread, so a slow callback never delays the next tick and
    several may be in flight at once. With `overlap=False` the next tick is
    scheduled only after the previous callback returned.
    """

    def __init__(self, interval: float, callback: Callable[[], None], overlap: bool = True):
        super().__init__(daemon=True, name="fileforge-poll-timer")
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.interval = interval
        self.callback = callback
        self.overlap = overlap

        self._stop_event = threading.Event()

    def stop(self):
        """Signal the timer to stop. Safe to call repeatedly or before start."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def _fire(self):
        if self._stop_event.is_set():
            return
        try:
            self.callback()
        except Exception as e:
            logger.error(f"Timer callback failed: {e}", exc_info=True)

    def run(self):
        """Main timer loop."""
        next_deadline = monotonic() + self.interval
        while not self._stop_event.wait(max(0.0, next_deadline - monotonic())):
            if self.overlap:
                threading.Thread(target=self._fire, daemon=True, name="fileforge-poll-tick").start()
                next_deadline += self.interval
                # Do not burst to catch up after the process was suspended.
                now = monotonic()
                if next_deadline < now:
                    next_deadline = now + self.interval
            else:
                self._fire()
                next_deadline = monotonic() + self.interval


def interval_timer_factory(overlap: bool = True) -> TimerFactory:
    def factory(interval: float, callback: Callable[[], None]) -> Timer:
        return IntervalTimer(interval, callback, overlap=overlap)

    return factory
