"""Prompting adapters.

The workflow asks four questions; where the answers come from is up to
the Prompter handed to it. ConsolePrompter reads a terminal,
ScriptedPrompter replays answers given up front (CLI flags, tests).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol


class Prompter(Protocol):
    def ask_model(self, default: str) -> str | None: ...

    def confirm_manual_choice(self) -> bool: ...

    def ask_key(self) -> str | None: ...

    def confirm_cleanup(self) -> bool: ...


class ConsolePrompter:
    """Interactive prompts on stdin/stdout."""

    def __init__(self, input_func: Callable[[str], str] = input) -> None:
        self._input = input_func

    def _ask(self, message: str) -> str | None:
        try:
            return self._input(message).strip()
        except EOFError:
            return None

    def _confirm(self, message: str) -> bool:
        answer = self._ask(f"{message} [y/N] ")
        return (answer or "").lower() in ("y", "yes")

    def ask_model(self, default: str) -> str | None:
        answer = self._ask(f"Enter your Mac model (e.g. {default}) [{default}]: ")
        if answer is None:
            return None
        return answer or default

    def confirm_manual_choice(self) -> bool:
        return self._confirm("Do you want to choose which Boot Camp support software to download?")

    def ask_key(self) -> str | None:
        return self._ask("Enter the key of the Boot Camp support software you want to download: ") or None

    def confirm_cleanup(self) -> bool:
        return self._confirm("Do you want to delete the extracted files?")


@dataclass
class ScriptedPrompter:
    """Fixed answers, no terminal interaction."""

    model: str | None = None
    manual: bool = False
    key: str | None = None
    cleanup: bool = False

    def ask_model(self, default: str) -> str | None:
        return self.model

    def confirm_manual_choice(self) -> bool:
        return self.manual

    def ask_key(self) -> str | None:
        return self.key

    def confirm_cleanup(self) -> bool:
        return self.cleanup


@dataclass
class OverridePrompter:
    """Answers from flags where given, otherwise asks the fallback prompter."""

    fallback: Prompter
    model: str | None = None
    manual: bool = False
    key: str | None = None
    cleanup: bool | None = None

    def ask_model(self, default: str) -> str | None:
        return self.model or self.fallback.ask_model(default)

    def confirm_manual_choice(self) -> bool:
        return bool(self.manual or self.key) or self.fallback.confirm_manual_choice()

    def ask_key(self) -> str | None:
        return self.key or self.fallback.ask_key()

    def confirm_cleanup(self) -> bool:
        if self.cleanup is not None:
            return self.cleanup
        return self.fallback.confirm_cleanup()
