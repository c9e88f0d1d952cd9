"""
Console logger for CLI commands.

Progress messages are shown only in verbose mode; errors always print.
"""

from __future__ import annotations

from rich.console import Console


class CliLogger:
    """Styled console messages for one named CLI component."""

    def __init__(self, name: str, verbose: bool = False, console: Console | None = None) -> None:
        self.name = name
        self.verbose = verbose
        self.console = console or Console(stderr=True)

    def info(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[dim]\\[{self.name}][/dim] {message}")

    def warn(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[yellow]\\[{self.name}] {message}[/yellow]")

    def success(self, message: str) -> None:
        if self.verbose:
            self.console.print(f"[green]\\[{self.name}] {message}[/green]")

    def error(self, message: str) -> None:
        self.console.print(f"[red]\\[{self.name}] {message}[/red]")


def get_logger(name: str, verbose: bool = False) -> CliLogger:
    return CliLogger(name, verbose)
