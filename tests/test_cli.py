import pytest
from click.testing import CliRunner

from fileforge import cli
from fileforge.cli import common
from fileforge.client import config_manager
from fileforge.client.config_manager import ConfigManager
from fileforge.jobs.controller import JobController
from fileforge.jobs.retriever import ResultRetriever
from fileforge.jobs.submitter import JobSubmitter

from conftest import FakeTransport, make_image_bytes


class ImmediateTimer:
    """Fires back to back on start until the poller releases it."""

    def __init__(self, interval, callback):
        self.callback = callback
        self.stopped = False

    def start(self):
        while not self.stopped:
            self.callback()

    def stop(self):
        self.stopped = True


@pytest.fixture
def config(tmp_path, monkeypatch):
    monkeypatch.setattr(config_manager, "DEFAULT_API_SERVER", "")
    manager = ConfigManager(tmp_path / "config.json")
    manager.set_output_directory(tmp_path / "out")
    monkeypatch.setattr(common, "get_config_manager", lambda: manager)
    monkeypatch.setattr(cli.config, "get_config_manager", lambda: manager)
    monkeypatch.setattr(common.logging_utils, "configure", lambda *args, **kwargs: None)
    return manager


@pytest.fixture
def service(monkeypatch, config):
    transport = FakeTransport(progress=[50, (100, "https://cdn.example/out")], result=b"processed")

    def create_controller(kind, config_manager=None):
        return JobController(
            kind,
            JobSubmitter(transport),
            transport.fetch_progress,
            ResultRetriever(transport, config_manager.get_output_directory),
            timer_factory=ImmediateTimer,
        )

    monkeypatch.setattr(common, "create_controller", create_controller)
    return transport


def test_merge_pdf_downloads_result(tmp_path, service):
    first = tmp_path / "first.pdf"
    second = tmp_path / "second.pdf"
    first.write_bytes(b"%PDF-1.4 one")
    second.write_bytes(b"%PDF-1.4 two")

    result = CliRunner().invoke(
        cli.main_cli, ["merge-pdf", str(first), str(second), "--server", "https://api.example"]
    )

    assert result.exit_code == 0, result.output
    saved = tmp_path / "out" / "merged.pdf"
    assert str(saved) in result.output
    assert saved.read_bytes() == b"processed"
    _, _, files = service.submissions[0]
    assert [name for _, (name, _, _) in files] == ["first.pdf", "second.pdf"]


def test_resize_with_preset(tmp_path, service):
    photo = tmp_path / "photo.png"
    photo.write_bytes(make_image_bytes(1920, 1080))

    result = CliRunner().invoke(
        cli.main_cli,
        ["resize-image", str(photo), "--preset", "youtube thumbnail", "--no-download", "--server", "https://api.example"],
    )

    assert result.exit_code == 0, result.output
    assert "https://cdn.example/out" in result.output
    _, fields, _ = service.submissions[0]
    assert fields == [("width", "1280"), ("height", "720"), ("maintain_aspect_ratio", "true")]


def test_validation_error_exits_nonzero(tmp_path, service):
    document = tmp_path / "doc.pdf"
    document.write_bytes(b"%PDF-1.4")

    result = CliRunner().invoke(
        cli.main_cli,
        ["extract-pdf", str(document), "-s", "5", "-e", "3", "--server", "https://api.example"],
    )

    assert result.exit_code != 0
    assert "Invalid page range" in result.output
    assert service.submissions == []


def test_missing_server_is_a_usage_error(tmp_path, service):
    document = tmp_path / "doc.pdf"
    document.write_bytes(b"%PDF-1.4")

    result = CliRunner().invoke(cli.main_cli, ["compress-pdf", str(document)])

    assert result.exit_code == 2
    assert "API server is not configured" in result.output


def test_config_set_and_show(config):
    runner = CliRunner()

    result = runner.invoke(cli.main_cli, ["config", "set", "poll_mode", "settled"])
    assert result.exit_code == 0, result.output
    assert config.get_poll_mode() == "settled"

    result = runner.invoke(cli.main_cli, ["config", "show"])
    assert "poll_mode = settled" in result.output


def test_config_set_rejects_bad_value(config):
    result = CliRunner().invoke(cli.main_cli, ["config", "set", "poll_interval", "-1"])

    assert result.exit_code == 2


def test_formats_lists_recommended_first():
    result = CliRunner().invoke(cli.main_cli, ["formats", "png"])

    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert "(recommended)" in lines[0]
    assert not any(line.startswith("png ") for line in lines)
