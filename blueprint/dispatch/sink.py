from __future__ import annotations

import threading
from typing import Protocol, TextIO

from blueprint.config import Task

from .types import TaskOutcome


class ProgressSink(Protocol):
    """Receives progress and interleaved output for the task in flight."""

    def start(self, task: Task) -> None: ...

    def write_line(self, text: str) -> None: ...

    def tick(self) -> None: ...

    def finish(self, task: Task, outcome: TaskOutcome) -> None: ...

    def close(self) -> None:
        """Release any display held for an unfinished task."""
        ...


class NullSink:
    def start(self, task: Task) -> None:
        pass

    def write_line(self, text: str) -> None:
        pass

    def tick(self) -> None:
        pass

    def finish(self, task: Task, outcome: TaskOutcome) -> None:
        pass

    def close(self) -> None:
        pass


class StreamSink:
    """Plain-text sink for non-interactive output."""

    def __init__(self, stream: TextIO) -> None:
        self.stream = stream
        self._lock = threading.Lock()

    def start(self, task: Task) -> None:
        self.write_line(f"{task.name}: {task.command}")

    def write_line(self, text: str) -> None:
        with self._lock:
            self.stream.write(text.rstrip("\n") + "\n")

    def tick(self) -> None:
        with self._lock:
            self.stream.flush()

    def finish(self, task: Task, outcome: TaskOutcome) -> None:
        self.write_line(f"{task.name} ({outcome.value})")

    def close(self) -> None:
        self.tick()
