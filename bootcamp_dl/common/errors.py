"""Error types raised by the catalog resolution pipeline."""

from __future__ import annotations


class BootCampError(Exception):
    """Base class for all fetcher errors."""


class ParseError(BootCampError):
    """The catalog document is malformed or lacks a Products mapping."""


class NetworkError(BootCampError):
    """A fetch failed before or while reading the response."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class MissingContentLengthError(NetworkError):
    """The server did not report a Content-Length for a streamed download."""


class EmptyInputError(BootCampError, ValueError):
    """A ranking operation was handed an empty candidate sequence."""


class ExternalToolError(BootCampError):
    """An external unpack command exited unsuccessfully."""

    def __init__(self, command: str, diagnostic_output: str = "") -> None:
        super().__init__(f"{command} failed: {diagnostic_output.strip() or 'no output'}")
        self.command = command
        self.diagnostic_output = diagnostic_output
