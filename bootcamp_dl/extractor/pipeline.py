"""Extraction pipeline — installer package to Windows support DMG.

Stages (each skipped when its output is already on disk):
  1. Expand:   pkgutil --expand <package> <work_dir>/pkg
  2. Payload:  tar -xz -C <work_dir> -f <work_dir>/pkg/Payload
  3. Locate:   first *.dmg under <work_dir> → <cwd>/BootcampSupportSoftware.dmg

A failing command is logged and the next stage still runs; whether a DMG
ends up at the output path is the only thing that decides success.
pkgutil only exists on macOS, so on any other platform nothing runs and
the downloaded package is left for manual extraction.
"""

from __future__ import annotations

import logging
import os
import re
import shutil
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from ..common.config import ExtractSettings
from ..common.errors import ExternalToolError
from .runner import CommandRunner, SubprocessRunner

logger = logging.getLogger(__name__)

SUPPORTED_PLATFORM = "darwin"


@dataclass
class StageOutcome:
    """What happened to one stage: ran | skipped | failed."""

    name: str
    status: str
    detail: str = ""

    def to_dict(self) -> dict:
        return {"name": self.name, "status": self.status, "detail": self.detail}


@dataclass
class ExtractionResult:
    """Result of an extraction run."""

    skipped_platform: bool = False
    stages: list[StageOutcome] = field(default_factory=list)
    artifact_path: Path | None = None
    cleaned_up: bool = False

    @property
    def success(self) -> bool:
        return self.artifact_path is not None and self.artifact_path.exists()

    def stage(self, name: str) -> StageOutcome | None:
        return next((s for s in self.stages if s.name == name), None)

    def to_dict(self) -> dict:
        return {
            "skipped_platform": self.skipped_platform,
            "stages": [s.to_dict() for s in self.stages],
            "artifact_path": str(self.artifact_path) if self.artifact_path else None,
            "cleaned_up": self.cleaned_up,
        }


def find_artifact(root: Path, pattern: str | re.Pattern[str]) -> Path | None:
    """First file under root whose name matches pattern (sorted walk)."""
    regex = re.compile(pattern) if isinstance(pattern, str) else pattern
    if not root.is_dir():
        return None
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames.sort()
        for name in sorted(filenames):
            if regex.search(name):
                return Path(dirpath) / name
    return None


class ExtractionPipeline:
    """Three-stage, restartable unpack of a support-software package."""

    def __init__(
        self,
        settings: ExtractSettings | None = None,
        runner: CommandRunner | None = None,
        platform: str | None = None,
    ) -> None:
        self.settings = settings or ExtractSettings()
        self.runner = runner or SubprocessRunner()
        self.platform = platform or sys.platform
        self._artifact_re = re.compile(self.settings.artifact_pattern)

    @property
    def supported(self) -> bool:
        return self.platform == SUPPORTED_PLATFORM

    def extract(
        self,
        package_path: Path,
        work_dir: Path,
        output_path: Path,
        confirm_cleanup: Callable[[], bool] | None = None,
    ) -> ExtractionResult:
        """Run all stages.

        Args:
            package_path: Downloaded installer package.
            work_dir: Directory the package lives in; receives the
                expanded container and payload tree.
            output_path: Where the located DMG is moved to.
            confirm_cleanup: Asked once the DMG is in place; returning
                True deletes work_dir recursively.

        Returns:
            ExtractionResult; skipped_platform=True when not on macOS.
        """
        if not self.supported:
            logger.info(
                "To extract the Boot Camp support software automatically, run this on a Mac. "
                "The package was left at %s for manual extraction.",
                package_path,
            )
            return ExtractionResult(skipped_platform=True)

        logger.info("Extracting Boot Camp support software...")
        result = ExtractionResult()
        expanded_dir = work_dir / self.settings.expanded_dirname

        # Stage 1: expand the installer container
        if expanded_dir.exists():
            result.stages.append(StageOutcome("expand", "skipped", f"{expanded_dir} exists"))
        else:
            result.stages.append(self._run_stage(
                "expand",
                "pkgutil",
                ["--expand", str(package_path), str(expanded_dir)],
                "Extracted .pkg, moving onto payload extraction...",
            ))

        # Stage 2: decompress the payload into work_dir
        if output_path.exists() or find_artifact(work_dir, self._artifact_re):
            result.stages.append(StageOutcome("payload", "skipped", "artifact already present"))
        else:
            payload = expanded_dir / self.settings.payload_name
            result.stages.append(self._run_stage(
                "payload",
                "tar",
                ["-xz", "-C", str(work_dir), "-f", str(payload)],
                "Extracted payload, finding Boot Camp Windows DMG...",
            ))

        # Stage 3: locate and relocate the DMG
        result.stages.append(self._locate(work_dir, output_path, result))

        if result.success and confirm_cleanup is not None and confirm_cleanup():
            shutil.rmtree(work_dir, ignore_errors=False)
            result.cleaned_up = True
            logger.info("Removed working directory %s", work_dir)

        logger.info("Done!")
        return result

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _run_stage(
        self,
        name: str,
        command: str,
        args: list[str],
        success_message: str,
    ) -> StageOutcome:
        outcome = self.runner.invoke(command, args)
        if outcome.success:
            logger.info(success_message)
            return StageOutcome(name, "ran")
        error = ExternalToolError(command, outcome.diagnostic_output)
        logger.error("Stage %s: %s", name, error)
        return StageOutcome(name, "failed", error.diagnostic_output.strip())

    def _locate(self, work_dir: Path, output_path: Path, result: ExtractionResult) -> StageOutcome:
        found = find_artifact(work_dir, self._artifact_re)

        if output_path.exists():
            result.artifact_path = output_path
            return StageOutcome("locate", "skipped", f"{output_path} exists")

        if found is None:
            logger.error("No file matching %s under %s", self.settings.artifact_pattern, work_dir)
            return StageOutcome("locate", "failed", "artifact not found")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(found), str(output_path))
        result.artifact_path = output_path
        logger.info("Moved %s -> %s", found, output_path)
        return StageOutcome("locate", "ran", str(found))
