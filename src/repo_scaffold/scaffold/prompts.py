"""Interactive prompts.

The workflow only depends on the `Prompter` protocol so tests can script the
answers.
"""

from __future__ import annotations

from typing import Protocol

from rich.console import Console
from rich.prompt import Prompt


class Prompter(Protocol):
    def choose(self, message: str, choices: dict[str, str], *, default: str | None = None) -> str:
        """Present `choices` (key -> label) and return the selected key."""
        ...

    def ask_text(self, message: str) -> str: ...


class RichPrompter:
    """`Prompter` backed by `rich.prompt`."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def choose(self, message: str, choices: dict[str, str], *, default: str | None = None) -> str:
        keys = list(choices)
        if not keys:
            raise ValueError("choices must not be empty")

        self.console.print(f"\n> {message}")
        for idx, key in enumerate(keys, 1):
            self.console.print(f"{idx}. [bold]{choices[key]}[/]")

        default_index = keys.index(default) + 1 if default in choices else 1
        answer = Prompt.ask(
            "Enter the number of your choice",
            console=self.console,
            choices=[str(i) for i in range(1, len(keys) + 1)],
            default=str(default_index),
        )
        return keys[int(answer) - 1]

    def ask_text(self, message: str) -> str:
        return Prompt.ask(message, console=self.console).strip()
