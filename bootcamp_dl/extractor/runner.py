"""External command runner used by the extraction pipeline."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandResult:
    """Exit status of an external command plus its captured stderr."""

    success: bool
    diagnostic_output: str = ""


class CommandRunner(Protocol):
    def invoke(self, command: str, args: list[str]) -> CommandResult: ...


class SubprocessRunner:
    """Runs commands with subprocess, capturing stdout and stderr."""

    def invoke(self, command: str, args: list[str]) -> CommandResult:
        logger.debug("Running: %s %s", command, " ".join(args))
        try:
            proc = subprocess.run(
                [command, *args],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            # Executable missing or not runnable
            return CommandResult(success=False, diagnostic_output=str(exc))
        return CommandResult(success=proc.returncode == 0, diagnostic_output=proc.stderr or "")
