"""File downloads and progress bars shown while work is under way."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import requests
from rich import progress as rich_progress
from rich.console import Console

BAR_START_COLOR = "#6667AB"
BAR_END_COLOR = "#34D399"
CHUNK_SIZE = 32 * 1024


class DownloadError(Exception):
    """Raised when a download cannot be started or completed."""


@dataclass
class ProgressWriter:
    """Counts bytes passing through and reports the completed fraction."""

    total: int
    on_progress: Callable[[float], None] | None = None
    downloaded: int = 0

    def write(self, chunk: bytes) -> int:
        """Record a chunk of data; return its length."""
        self.downloaded += len(chunk)
        if self.total > 0 and self.on_progress is not None:
            self.on_progress(self.downloaded / self.total)
        return len(chunk)


def _columns() -> tuple[rich_progress.ProgressColumn, ...]:
    return (
        rich_progress.BarColumn(
            complete_style=BAR_START_COLOR,
            finished_style=BAR_END_COLOR,
        ),
        rich_progress.TaskProgressColumn(),
    )


class Progress:
    """A progress bar counting up to a fixed total; it closes once the total is reached."""

    def __init__(self, total: int, console: Console | None = None) -> None:
        self.total = total
        self.current = 0
        self.percent = 0.0
        self._closed = False
        self._bar = rich_progress.Progress(*_columns(), console=console)
        self._task = self._bar.add_task("", total=float(total) if total > 0 else None)
        self._bar.start()

    @property
    def closed(self) -> bool:
        """Whether the bar has finished."""
        return self._closed

    def update(self, value: int) -> None:
        """Move the bar to ``value``, never past the total."""
        if self._closed:
            raise RuntimeError("progress is closed")
        self.current = min(value, self.total)
        self.percent = self.current / self.total if self.total > 0 else 1.0
        self._bar.update(self._task, completed=self.current)
        if self.current >= self.total:
            self.close()

    def close(self) -> None:
        """Stop drawing the bar."""
        if not self._closed:
            self._closed = True
            self._bar.stop()

    def __enter__(self) -> Progress:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _content_length(response: requests.Response) -> int:
    raw = response.headers.get("Content-Length")
    try:
        return int(raw) if raw is not None else -1
    except ValueError:
        return -1


def download(url: str, filename: str) -> None:
    """Download ``url`` into ``filename`` while showing a progress bar."""
    try:
        response = requests.get(url, stream=True)
    except requests.RequestException as exc:
        raise DownloadError(str(exc)) from exc

    with response:
        if response.status_code != 200:
            raise DownloadError(
                f"receiving status of {response.status_code} for url: {url}"
            )

        total = _content_length(response)
        if total <= 0:
            raise DownloadError("can't parse content length, aborting download")

        try:
            target = open(filename, "wb")
        except OSError as exc:
            raise DownloadError(f"could not create file: {exc}") from exc

        with target, Progress(total) as bar:

            def report(_ratio: float) -> None:
                if not bar.closed:
                    bar.update(min(writer.downloaded, total))

            writer = ProgressWriter(total, report)
            try:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        target.write(chunk)
                        writer.write(chunk)
            except (requests.RequestException, OSError) as exc:
                raise DownloadError(f"Error downloading: {exc}") from exc