# Common utilities and shared modules
"""
Shared components used by every pipeline stage:
- Error hierarchy
- Project configuration
- Logging configuration
- HTTP client
"""

from .config import Settings, settings, PROJECT_ROOT
from .errors import (
    BootCampError,
    EmptyInputError,
    ExternalToolError,
    MissingContentLengthError,
    NetworkError,
    ParseError,
)
from .http_client import HTTPClient
from .logging import setup_logging

__all__ = [
    "Settings",
    "settings",
    "PROJECT_ROOT",
    "BootCampError",
    "EmptyInputError",
    "ExternalToolError",
    "MissingContentLengthError",
    "NetworkError",
    "ParseError",
    "HTTPClient",
    "setup_logging",
]
