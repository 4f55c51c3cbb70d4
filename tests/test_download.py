import io
from unittest import mock

import pytest
from rich.console import Console

from vulncheck_cli import download as dl


def _quiet_console():
    return Console(file=io.StringIO())


class _FakeResponse:
    def __init__(self, status, chunks, length=None):
        self.status_code = status
        self._chunks = chunks
        self.headers = {} if length is None else {"Content-Length": str(length)}
        self.closed = False

    def iter_content(self, chunk_size=1):
        yield from self._chunks

    def close(self):
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def test_writer_returns_chunk_length_and_counts():
    writer = dl.ProgressWriter(total=100)
    assert writer.write(b"abc") == 3
    assert writer.write(b"defg") == 4
    assert writer.downloaded == 7


def test_writer_reports_increasing_ratios_ending_at_one():
    ratios = []
    writer = dl.ProgressWriter(total=6, on_progress=ratios.append)
    for chunk in (b"ab", b"cd", b"ef"):
        writer.write(chunk)
    assert len(ratios) == 3
    assert ratios == sorted(ratios)
    assert ratios[-1] == 1.0


def test_writer_without_total_reports_nothing():
    ratios = []
    writer = dl.ProgressWriter(total=0, on_progress=ratios.append)
    writer.write(b"data")
    assert ratios == []
    assert writer.downloaded == 4


def test_progress_partial_update():
    bar = dl.Progress(4, console=_quiet_console())
    try:
        bar.update(2)
        assert bar.current == 2
        assert bar.percent == 0.5
        assert bar.closed is False
    finally:
        bar.close()


def test_progress_clamps_and_closes_at_total():
    bar = dl.Progress(5, console=_quiet_console())
    bar.update(9)
    assert bar.current == 5
    assert bar.percent == 1.0
    assert bar.closed is True


def test_progress_update_after_close_raises():
    with dl.Progress(3, console=_quiet_console()) as bar:
        bar.update(3)
    with pytest.raises(RuntimeError):
        bar.update(1)


def test_download_writes_body(tmp_path):
    chunks = [b"hello ", b"world"]
    body = b"".join(chunks)
    fake = _FakeResponse(200, chunks, length=len(body))
    target = tmp_path / "backup.zip"
    with mock.patch("requests.get", return_value=fake) as get:
        dl.download("https://example.com/backup.zip", str(target))
    assert target.read_bytes() == body
    assert get.call_args.args[0] == "https://example.com/backup.zip"
    assert fake.closed is True


def test_download_bad_status_raises(tmp_path):
    fake = _FakeResponse(404, [], length=10)
    target = tmp_path / "missing.zip"
    with mock.patch("requests.get", return_value=fake):
        with pytest.raises(dl.DownloadError, match="receiving status of 404"):
            dl.download("https://example.com/missing.zip", str(target))
    assert not target.exists()


def test_download_without_length_raises(tmp_path):
    fake = _FakeResponse(200, [b"abc"])
    target = tmp_path / "unknown.zip"
    with mock.patch("requests.get", return_value=fake):
        with pytest.raises(dl.DownloadError, match="can't parse content length"):
            dl.download("https://example.com/unknown.zip", str(target))
    assert not target.exists()


def test_download_connection_failure_raises(tmp_path):
    import requests

    with mock.patch("requests.get", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(dl.DownloadError, match="refused"):
            dl.download("https://example.com/a.zip", str(tmp_path / "a.zip"))