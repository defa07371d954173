import io
from typing import List

import pytest
from PIL import Image

from fileforge.jobs.errors import PollingError
from fileforge.jobs.files import SelectedFile
from fileforge.jobs.poller import ProgressReport

MIB = 1024 * 1024


def make_image_bytes(width: int, height: int, format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 30, 30)).save(buffer, format=format)
    return buffer.getvalue()


def make_image(name: str = "photo.png", width: int = 64, height: int = 48) -> SelectedFile:
    format = "JPEG" if name.lower().endswith((".jpg", ".jpeg")) else "PNG"
    return SelectedFile.from_bytes(name, make_image_bytes(width, height, format))


def make_pdf(name: str = "doc.pdf", size_bytes: int = None) -> SelectedFile:
    data = b"%PDF-1.4\n%%EOF\n"
    return SelectedFile(
        name=name,
        data=data,
        size_bytes=len(data) if size_bytes is None else size_bytes,
        mime_type="application/pdf",
    )


class ManualTimer:
    """Timer double: never fires on its own, ticks are driven by the test."""

    def __init__(self, interval, callback):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.stop_calls = 0

    def start(self):
        self.started = True

    def stop(self):
        self.stop_calls += 1

    @property
    def stopped(self):
        return self.stop_calls > 0

    def fire(self):
        self.callback()


class ManualTimerFactory:
    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, interval, callback):
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


class FakeTransport:
    """In-memory stand-in for the remote service."""

    def __init__(self, task_id="task-1", progress=None, result=b"result-bytes"):
        self.task_id = task_id
        self.progress = list(progress or [])
        self.result = result
        self.submissions = []
        self.progress_requests = []
        self.fetched = []
        self.submit_error = None
        self.fetch_error = None

    def submit(self, endpoint, fields, files):
        self.submissions.append((endpoint, list(fields), list(files)))
        if self.submit_error is not None:
            raise self.submit_error
        return self.task_id

    def fetch_progress(self, task_id):
        self.progress_requests.append(task_id)
        item = self.progress.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, tuple):
            return ProgressReport(progress=item[0], result_url=item[1])
        return ProgressReport(progress=item)

    def fetch_result(self, result_url):
        self.fetched.append(result_url)
        if self.fetch_error is not None:
            raise self.fetch_error
        return self.result


@pytest.fixture
def timers():
    return ManualTimerFactory()


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def polling_failure():
    return PollingError("Failed to fetch progress: connection reset")
