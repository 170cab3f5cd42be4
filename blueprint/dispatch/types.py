from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TaskOutcome(Enum):
    SUCCESS = "success"
    FAILED = "fail"
    IGNORED = "ignored"
    RECOVERED = "recovered"


@dataclass(frozen=True)
class TaskResult:
    task_id: str
    command: str
    returncode: int
    output: str
    duration_s: float
    fallback: TaskResult | None = None
    ignored: bool = False

    @property
    def succeeded(self) -> bool:
        return self.returncode == 0

    @property
    def outcome(self) -> TaskOutcome:
        if self.succeeded:
            return TaskOutcome.SUCCESS
        if self.ignored:
            return TaskOutcome.IGNORED
        if self.fallback is not None and self.fallback.succeeded:
            return TaskOutcome.RECOVERED
        return TaskOutcome.FAILED


@dataclass(frozen=True)
class RunResult:
    order: list[str]
    results: dict[str, TaskResult]
    failures: list[str]
    ignored: list[str]
    recovered: list[str]
    skipped: list[str]

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    @property
    def task_count(self) -> int:
        return len(self.results)

    @property
    def stopped_early(self) -> bool:
        return bool(self.skipped)
