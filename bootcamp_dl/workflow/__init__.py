"""Workflow module — prompting adapters and end-to-end orchestration."""

from .pipeline import RunResult, SupportSoftwarePipeline
from .prompts import ConsolePrompter, OverridePrompter, Prompter, ScriptedPrompter

__all__ = [
    "ConsolePrompter",
    "OverridePrompter",
    "Prompter",
    "RunResult",
    "ScriptedPrompter",
    "SupportSoftwarePipeline",
]
