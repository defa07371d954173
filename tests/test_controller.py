import dataclasses

import pytest

from fileforge.jobs.controller import JobController
from fileforge.jobs.job import JobStatus
from fileforge.jobs.operations import JobKind
from fileforge.jobs.options import ExtractPdfOptions
from fileforge.jobs.retriever import ResultRetriever
from fileforge.jobs.submitter import JobSubmitter

from conftest import MIB, FakeTransport, make_image, make_pdf

RESULT_URL = "https://cdn.example/results/photo.jpg"


def controller_for(kind, transport, timers, tmp_path):
    return JobController(
        kind,
        JobSubmitter(transport),
        transport.fetch_progress,
        ResultRetriever(transport, tmp_path),
        timer_factory=timers,
    )


def test_compress_image_runs_to_completion(tmp_path, timers):
    transport = FakeTransport(progress=[20, 55, (100, RESULT_URL)])
    controller = controller_for(JobKind.COMPRESS_IMAGE, transport, timers, tmp_path)
    photo = dataclasses.replace(make_image("photo.jpg"), size_bytes=5 * MIB)
    seen = []
    controller.subscribe(seen.append)

    assert controller.select([photo])
    snapshot = controller.run()
    assert snapshot.status == JobStatus.POLLING
    assert snapshot.id == "task-1"

    for _ in range(3):
        timers.last.fire()

    snapshot = controller.snapshot()
    assert snapshot.status == JobStatus.COMPLETED
    assert snapshot.progress == 100
    assert snapshot.result_ref == RESULT_URL
    assert [s.progress for s in seen if s.status == JobStatus.POLLING] == [0, 20, 55, 100]
    assert seen[0].status == JobStatus.VALIDATED
    assert seen[-1].status == JobStatus.COMPLETED

    endpoint, fields, files = transport.submissions[0]
    assert endpoint == "/image/compress"
    assert fields == [("quality", "75"), ("preserve_format", "true")]
    assert files == [("upload", ("photo.jpg", photo.data, "image/jpeg"))]


def test_oversized_pdf_is_rejected_before_any_job(tmp_path, timers, transport):
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)

    result = controller.select([make_pdf("scan.pdf", size_bytes=30 * MIB)])

    assert not result
    assert "exceeds 25MB limit" in str(controller.error)
    assert controller.job is None
    assert controller.run() is None
    assert transport.submissions == []


def test_merge_needs_two_files_then_keeps_order(tmp_path, timers, transport):
    controller = controller_for(JobKind.MERGE_PDF, transport, timers, tmp_path)

    controller.select([make_pdf("first.pdf")])
    assert controller.run() is None
    assert str(controller.error) == "Cannot merge: at least 2 files required."
    assert transport.submissions == []

    controller.select([make_pdf("second.pdf")])
    assert controller.run().status == JobStatus.POLLING

    _, _, files = transport.submissions[0]
    assert [(field, name) for field, (name, _, _) in files] == [("files", "first.pdf"), ("files", "second.pdf")]


def test_merge_order_follows_reordering(tmp_path, timers, transport):
    controller = controller_for(JobKind.MERGE_PDF, transport, timers, tmp_path)
    controller.select([make_pdf("a.pdf"), make_pdf("b.pdf"), make_pdf("c.pdf")])

    controller.collection.begin_drag(2)
    controller.collection.drop(0)
    controller.run()

    _, _, files = transport.submissions[0]
    assert [name for _, (name, _, _) in files] == ["c.pdf", "a.pdf", "b.pdf"]


def test_invalid_page_range_is_not_submitted(tmp_path, timers, transport):
    controller = controller_for(JobKind.EXTRACT_PDF, transport, timers, tmp_path)
    controller.select([make_pdf()])
    controller.options = ExtractPdfOptions(start_page=5, end_page=3)

    assert controller.run() is None
    assert str(controller.error) == "Invalid page range: end page must be ≥ start page."
    assert transport.submissions == []
    assert timers.timers == []


def test_single_file_kind_replaces_selection(tmp_path, timers, transport):
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)

    controller.select([make_pdf("one.pdf")])
    controller.select([make_pdf("two.pdf"), make_pdf("three.pdf")])

    assert [item.name for item in controller.inputs] == ["two.pdf"]


def test_submission_failure_fails_job_without_polling(tmp_path, timers, transport):
    transport.submit_error = RuntimeError("503 Service Unavailable")
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)
    controller.select([make_pdf()])

    snapshot = controller.run()

    assert snapshot.status == JobStatus.FAILED
    assert "503 Service Unavailable" in snapshot.error_message
    assert snapshot.id is None
    assert timers.timers == []


def test_polling_failure_is_reported(tmp_path, timers, polling_failure):
    transport = FakeTransport(progress=[40, polling_failure])
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)
    controller.select([make_pdf()])
    controller.run()

    timers.last.fire()
    timers.last.fire()

    snapshot = controller.snapshot()
    assert snapshot.status == JobStatus.FAILED
    assert snapshot.progress == 40
    assert snapshot.error_message == "Failed to fetch progress: connection reset"
    assert timers.last.stopped


def test_reset_cancels_polling_and_clears_state(tmp_path, timers):
    transport = FakeTransport(progress=[30])
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)
    controller.select([make_pdf()])
    controller.run()

    controller.reset()
    timers.last.fire()

    assert timers.last.stopped
    assert transport.progress_requests == []
    assert controller.job is None
    assert controller.status == JobStatus.IDLE
    assert controller.inputs == []
    assert controller.error is None


def test_rerun_ignores_the_previous_poller(tmp_path, timers):
    transport = FakeTransport(progress=[40])
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)
    controller.select([make_pdf()])
    controller.run()
    first_job = controller.job
    seen = []
    controller.subscribe(seen.append)

    controller.run()
    first_timer, second_timer = timers.timers
    first_timer.fire()
    assert transport.progress_requests == []

    second_timer.fire()
    assert controller.snapshot().progress == 40
    assert first_job.progress == 0
    assert controller.job is not first_job
    assert all(s.progress in (0, 40) for s in seen)


def test_download_saves_result(tmp_path, timers):
    transport = FakeTransport(progress=[(100, RESULT_URL)], result=b"jpeg-bytes")
    controller = controller_for(JobKind.COMPRESS_IMAGE, transport, timers, tmp_path)
    controller.select([make_image("photo.jpg")])
    controller.run()
    timers.last.fire()

    path = controller.download()

    assert path == tmp_path / "photo_compressed.jpg"
    assert path.read_bytes() == b"jpeg-bytes"
    assert transport.fetched == [RESULT_URL]
    assert controller.notice is None


def test_download_failure_keeps_job_completed(tmp_path, timers):
    transport = FakeTransport(progress=[(100, RESULT_URL)])
    transport.fetch_error = RuntimeError("404 Not Found")
    controller = controller_for(JobKind.COMPRESS_IMAGE, transport, timers, tmp_path)
    controller.select([make_image("photo.jpg")])
    controller.run()
    timers.last.fire()

    assert controller.download() is None
    assert controller.notice == "Failed to download the file: 404 Not Found"
    assert controller.status == JobStatus.COMPLETED

    transport.fetch_error = None
    assert controller.download() is not None


def test_download_before_completion(tmp_path, timers, transport):
    controller = controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path)

    assert controller.download() is None
    assert controller.notice == "No result available yet."


def test_resize_submits_solver_dimensions(tmp_path, timers):
    transport = FakeTransport(progress=[(100, "https://cdn.example/r.png")])
    controller = controller_for(JobKind.RESIZE_IMAGE, transport, timers, tmp_path)
    controller.select([make_image("photo.png", 64, 48)])

    controller.dimensions.set_width(32)
    controller.run()
    timers.last.fire()

    _, fields, _ = transport.submissions[0]
    assert fields == [("width", "32"), ("height", "24"), ("maintain_aspect_ratio", "true")]
    assert controller.download().name == "photo_32x24.png"


def test_convert_rejects_same_format(tmp_path, timers, transport):
    controller = controller_for(JobKind.CONVERT_IMAGE, transport, timers, tmp_path)
    controller.select([make_image("photo.png")])

    controller.options.target_format = "png"
    assert controller.run() is None
    assert str(controller.error) == "The image is already in PNG format."

    controller.options.target_format = "webp"
    assert controller.run().status == JobStatus.POLLING
    assert transport.submissions[0][1] == [("target_format", "webp")]


def test_context_manager_releases_timer(tmp_path, timers, transport):
    with controller_for(JobKind.COMPRESS_PDF, transport, timers, tmp_path) as controller:
        controller.select([make_pdf()])
        controller.run()

    assert timers.last.stopped
    assert controller.status == JobStatus.POLLING


def test_unset_page_number_is_rejected_not_raised(tmp_path, timers, transport):
    controller = controller_for(JobKind.EXTRACT_PDF, transport, timers, tmp_path)
    controller.select([make_pdf()])
    controller.options = ExtractPdfOptions(start_page=1, end_page=None)

    assert controller.run() is None
    assert str(controller.error) == "Please enter valid page numbers."
    assert transport.submissions == []
