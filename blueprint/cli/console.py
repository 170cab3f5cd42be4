"""Rich rendering for the blueprint CLI: log records and the task spinner."""

from __future__ import annotations

import logging
import threading
import time

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.spinner import Spinner
from rich.style import Style
from rich.text import Text

from blueprint.config import Task
from blueprint.config.types import DEFAULT_COLOR
from blueprint.dispatch import TaskOutcome

console = Console()
stderr_console = Console(stderr=True)

REFRESH_PER_SECOND = 12.5

_OUTCOME_STYLES = {
    TaskOutcome.SUCCESS: ("✔", "green"),
    TaskOutcome.FAILED: ("✖", "red"),
    TaskOutcome.IGNORED: ("!", "yellow"),
    TaskOutcome.RECOVERED: ("↺", "cyan"),
}


# Records carry task commands and paths, so markup is opt-in per record.
MARKUP = {"markup": True}


def setup_logging(level: str | int = "INFO", verbose: bool = False) -> None:
    if verbose:
        threshold = logging.DEBUG
    elif isinstance(level, str):
        threshold = logging.getLevelName(level.upper())
        if not isinstance(threshold, int):
            threshold = logging.INFO
    else:
        threshold = level

    handler = RichHandler(console=stderr_console, markup=False, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(threshold)


def safe_color(color: str) -> str:
    try:
        Style.parse(color)
    except StyleSyntaxError:
        return DEFAULT_COLOR
    return color


def colored(text: str, color: str) -> str:
    """Wrap ``text`` in Rich markup for ``color``, escaping the text itself."""
    style = safe_color(color)
    return f"[{style}]{escape(text)}[/{style}]"


class ConsoleProgressSink:
    """Spinner for the running task that can also print its output.

    Output lines are printed above the spinner. Writes and refreshes share
    one lock so a refresh never lands inside a line.
    """

    def __init__(self, target: Console | None = None) -> None:
        self.console = target or console
        self._lock = threading.RLock()
        self._live: Live | None = None
        self._last_refresh = 0.0

    def start(self, task: Task) -> None:
        label = Text(task.name, style=safe_color(task.color))
        self.console.print(Text.assemble(label, f": {task.command}"), soft_wrap=True)

        with self._lock:
            self._live = Live(
                Spinner("dots", text=label),
                console=self.console,
                transient=True,
                refresh_per_second=REFRESH_PER_SECOND,
            )
            self._live.start()

    def write_line(self, text: str) -> None:
        with self._lock:
            self.console.print(Text(text), soft_wrap=True)

    def tick(self) -> None:
        now = time.monotonic()
        with self._lock:
            if self._live is None or now - self._last_refresh < 1 / REFRESH_PER_SECOND:
                return
            self._last_refresh = now
            self._live.refresh()

    def close(self) -> None:
        with self._lock:
            if self._live is not None:
                self._live.stop()
                self._live = None

    def finish(self, task: Task, outcome: TaskOutcome) -> None:
        self.close()

        mark, style = _OUTCOME_STYLES[outcome]
        self.console.print(
            Text.assemble(
                (f"[{mark}] ", style),
                Text(task.name, style=safe_color(task.color)),
                (f" ({outcome.value})", style),
            ),
            soft_wrap=True,
        )
