from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

_T = TypeVar("_T")

console = Console()
err_console = Console(stderr=True)


def spinner_enabled() -> bool:
    return os.getenv("ELEVX_SPINNER", "1") == "1" and err_console.is_terminal


def setup_logging(verbose: bool = False) -> None:
    """Route ``elevx`` loggers to stderr through rich."""
    root = logging.getLogger("elevx")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.handlers.clear()
    handler = RichHandler(console=err_console, show_path=False, rich_tracebacks=verbose)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    root.propagate = False


@dataclass(frozen=True)
class WaitSpinner:
    message: str

    def run(self, fn: Callable[[], _T]) -> _T:
        if not spinner_enabled():
            return fn()

        with Progress(
            SpinnerColumn(style="bright_magenta"),
            TextColumn("[bold bright_cyan]{task.description}[/bold bright_cyan]"),
            transient=True,
            console=err_console,
        ) as prog:
            task_id = prog.add_task(self.message, total=None)
            try:
                return fn()
            finally:
                prog.update(task_id, completed=1)


def print_error(message: str, *, hint: str | None = None) -> None:
    err_console.print(Text(message, style="bold red"))
    if hint:
        err_console.print(Text(hint, style="dim"))


def render_doctor(report: dict[str, object]) -> None:
    table = Table(show_header=False, box=None, pad_edge=False)
    table.add_column(style="bold cyan")
    table.add_column()
    for key in sorted(report):
        value = report[key]
        if isinstance(value, (list, tuple)):
            value = ", ".join(str(item) for item in value) or "(none)"
        table.add_row(key, str(value))
    console.print(table)
