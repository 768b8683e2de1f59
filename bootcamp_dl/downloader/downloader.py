"""Staged package downloader.

Streams a package to a stable path with a percentage progress line. A file
already present at the destination is taken as a finished download, which
lets an interrupted run be restarted without fetching again.

Usage:
    with HTTPClient() as client:
        downloader = StagedDownloader(client)
        downloader.download(url, Path("BC-041-12345/BootCampSupport.pkg"))
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol, TextIO

import requests

from ..common.errors import MissingContentLengthError, NetworkError
from ..common.http_client import HTTPClient

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    def update(self, percent: str) -> None: ...

    def complete(self) -> None: ...


class ConsoleProgress:
    """Single overwriting progress line on a text stream."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self.stream = stream or sys.stdout

    def update(self, percent: str) -> None:
        self.stream.write(f"\rDownloading: {percent}%")
        self.stream.flush()

    def complete(self) -> None:
        self.stream.write("\nDownload complete!\n")
        self.stream.flush()


@dataclass
class DownloadResult:
    """Outcome of a single download call."""

    path: Path
    skipped: bool = False
    bytes_written: int = 0
    total_bytes: int = 0

    def to_dict(self) -> dict:
        return {
            "path": str(self.path),
            "skipped": self.skipped,
            "bytes_written": self.bytes_written,
            "total_bytes": self.total_bytes,
        }


def format_percent(downloaded: int, total: int) -> str:
    """downloaded / total as a percentage with two decimals."""
    return f"{downloaded / total * 100:.2f}"


class StagedDownloader:
    """Length-aware streaming downloader, idempotent by file presence."""

    def __init__(
        self,
        client: HTTPClient,
        chunk_size: int = 64 * 1024,
        progress: ProgressReporter | None = None,
    ) -> None:
        self.client = client
        self.chunk_size = chunk_size
        self.progress = progress or ConsoleProgress()

    def download(self, url: str, destination: Path) -> DownloadResult:
        """Stream url to destination unless destination already exists.

        Raises:
            MissingContentLengthError: No usable Content-Length header.
            NetworkError: Request or stream failure. A partial file stays
                on disk.
            OSError: The destination directory or file cannot be written.
        """
        destination = Path(destination)
        if destination.exists():
            logger.info("Already downloaded: %s", destination)
            return DownloadResult(path=destination, skipped=True)

        logger.info("Downloading to: %s", destination)
        resp = self.client.get(url, stream=True)
        try:
            total = self._content_length(resp, url)
            destination.parent.mkdir(parents=True, exist_ok=True)
            downloaded = self._stream_to_file(resp, destination, total, url)
        finally:
            resp.close()

        self.progress.complete()
        logger.info("Downloaded %d bytes from %s", downloaded, url)
        return DownloadResult(
            path=destination,
            bytes_written=downloaded,
            total_bytes=total,
        )

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    @staticmethod
    def _content_length(resp: requests.Response, url: str) -> int:
        header = resp.headers.get("Content-Length")
        try:
            total = int(header) if header else 0
        except ValueError:
            total = 0
        if total <= 0:
            raise MissingContentLengthError(f"No content length provided for {url}", url=url)
        return total

    def _stream_to_file(
        self,
        resp: requests.Response,
        destination: Path,
        total: int,
        url: str,
    ) -> int:
        downloaded = 0
        try:
            with open(destination, "wb") as f:
                for chunk in resp.iter_content(chunk_size=self.chunk_size):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)
                    self.progress.update(format_percent(downloaded, total))
        except (requests.RequestException, OSError) as exc:
            raise NetworkError(
                f"Download of {url} interrupted after {downloaded} bytes: {exc}",
                url=url,
            ) from exc
        return downloaded
