# src/dynatable/core/logging.py
"""Console logging built on rich.

All modules share the single `log` instance:

    from dynatable.core.logging import log, color_palette

    log.section("Registering Tables")
    log.info(f"Serving {color_palette['model']('User')}")
"""

import os
import time
from contextlib import contextmanager
from enum import IntEnum
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table


class LogLevel(IntEnum):
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


def _style(style: str) -> Callable[[Any], str]:
    return lambda value: f"[{style}]{escape(str(value))}[/{style}]"


color_palette: Dict[str, Callable[[Any], str]] = {
    "model": _style("bold cyan"),
    "field": _style("green"),
    "direction": _style("magenta"),
    "count": _style("yellow"),
    "path": _style("blue"),
    "error": _style("bold red"),
}


class Logger:
    """Level-filtered logger that renders rich markup to the console."""

    def __init__(self, console: Optional[Console] = None, level: LogLevel = LogLevel.INFO):
        self.console = console or Console(stderr=True)
        self.level = level
        self._indent = 0

    def set_level(self, level: LogLevel | str | int) -> None:
        if isinstance(level, str):
            level = LogLevel[level.upper()]
        self.level = LogLevel(level)

    def _emit(self, level: LogLevel, prefix: str, message: str) -> None:
        if level < self.level:
            return
        self.console.print(f"{'  ' * self._indent}{prefix} {message}", highlight=False)

    def debug(self, message: str) -> None:
        self._emit(LogLevel.DEBUG, "[dim]DEBUG[/dim]", message)

    def info(self, message: str) -> None:
        self._emit(LogLevel.INFO, "[blue]INFO[/blue]", message)

    def success(self, message: str) -> None:
        self._emit(LogLevel.INFO, "[green]✓[/green]", message)

    def warn(self, message: str) -> None:
        self._emit(LogLevel.WARNING, "[yellow]WARN[/yellow]", message)

    def error(self, message: str) -> None:
        self._emit(LogLevel.ERROR, "[bold red]ERROR[/bold red]", message)

    def section(self, title: str) -> None:
        if self.level <= LogLevel.INFO:
            self.console.rule(f"[bold]{escape(title)}[/bold]")

    @contextmanager
    def indented(self) -> Iterator[None]:
        self._indent += 1
        try:
            yield
        finally:
            self._indent -= 1

    @contextmanager
    def timed(self, label: str) -> Iterator[None]:
        start = time.perf_counter()
        try:
            yield
        finally:
            elapsed = time.perf_counter() - start
            self.debug(f"{label} took {elapsed * 1000:.2f}ms")

    def table(self, headers: Sequence[str], rows: List[Sequence[Any]]) -> None:
        if self.level > LogLevel.INFO:
            return
        table = Table(*headers, box=None, padding=(0, 1))
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        self.console.print(table)


log = Logger(level=LogLevel[os.getenv("DYNATABLE_LOG_LEVEL", "INFO").upper()])
