"""Extractor module — turns the downloaded package into the support DMG."""

from .pipeline import ExtractionPipeline, ExtractionResult, StageOutcome, find_artifact
from .runner import CommandResult, CommandRunner, SubprocessRunner

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ExtractionPipeline",
    "ExtractionResult",
    "StageOutcome",
    "SubprocessRunner",
    "find_artifact",
]
