"""Console output: colored messages and a spinner around long steps."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from rich.console import Console


class ConsoleReporter:
    """Progress and log reporter for the interactive command.

    `step()` owns the spinner for the duration of a block; the spinner is
    stopped on every exit path, including propagated exceptions.
    """

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def info(self, message: str = "") -> None:
        self.console.print(message, highlight=False)

    def success(self, message: str = "") -> None:
        self.console.print(message, style="green", highlight=False)

    def warning(self, message: str = "") -> None:
        self.console.print(message, style="yellow", highlight=False)

    def error(self, message: str = "") -> None:
        self.console.print(message, style="red", highlight=False)

    @contextmanager
    def step(self, text: str, done: str | None = None) -> Iterator[None]:
        status = self.console.status(f"[cyan]{text}[/cyan]")
        status.start()
        try:
            yield
        except BaseException:
            status.stop()
            self.console.print(f"[red]✖[/red] {text}", highlight=False)
            raise
        status.stop()
        self.console.print(f"[green]✔[/green] {done or text}", highlight=False)
