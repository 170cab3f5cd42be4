from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import replace
from typing import Iterable, Sequence

from blueprint.config import ErrorHandler, Task, TaskList

from .sink import NullSink, ProgressSink
from .types import RunResult, TaskOutcome, TaskResult

# Return code used when the shell itself could not be spawned.
SPAWN_FAILED = 127

logger = logging.getLogger(__name__)


class Dispatcher:
    def __init__(
        self,
        sink: ProgressSink | None = None,
        catalog: TaskList | None = None,
    ):
        self.sink = sink or NullSink()
        self.catalog = catalog

    def run(self, tasks: Sequence[Task]) -> RunResult:
        order = [task.id for task in tasks]
        if len(set(order)) != len(order):
            duplicates = sorted({tid for tid in order if order.count(tid) > 1})
            raise ValueError(f"Task ids must be unique in a run: {', '.join(duplicates)}")

        lookup = self._lookup(tasks)
        results: dict[str, TaskResult] = {}
        failures: list[str] = []
        ignored: list[str] = []
        recovered: list[str] = []
        skipped: list[str] = []

        try:
            for position, task in enumerate(tasks):
                self.sink.start(task)
                result = self._execute(task.id, task.command)

                if not result.succeeded:
                    result = self._handle_failure(task, result, lookup)

                results[task.id] = result
                outcome = result.outcome
                self.sink.finish(task, outcome)

                match outcome:
                    case TaskOutcome.IGNORED:
                        ignored.append(task.id)
                    case TaskOutcome.RECOVERED:
                        recovered.append(task.id)
                    case TaskOutcome.FAILED:
                        failures.append(task.id)
                        policy = task.error_policy
                        if policy is not None and policy.kind is ErrorHandler.EXIT:
                            skipped = order[position + 1 :]
                            logger.debug(
                                "Task %s failed with an exit handler, skipping %d tasks",
                                task.id,
                                len(skipped),
                            )
                            break
        finally:
            self.sink.close()

        return RunResult(order, results, failures, ignored, recovered, skipped)

    def _lookup(self, tasks: Iterable[Task]) -> dict[str, Task]:
        source = self.catalog if self.catalog is not None else tasks
        return {task.id: task for task in source}

    def _handle_failure(
        self, task: Task, result: TaskResult, lookup: dict[str, Task]
    ) -> TaskResult:
        policy = task.error_policy
        if policy is None:
            return result

        match policy.kind:
            case ErrorHandler.EXIT:
                return result
            case ErrorHandler.IGNORE:
                return replace(result, ignored=True)
            case ErrorHandler.COMMAND:
                assert policy.target is not None
                self.sink.write_line(f"{task.id} failed, running: {policy.target}")
                fallback = self._execute(task.id, policy.target)
                return replace(result, fallback=fallback)
            case ErrorHandler.TASK:
                assert policy.target is not None
                fallback_task = lookup.get(policy.target)
                if fallback_task is None:
                    logger.error(
                        "Task %s falls back to unknown task %s", task.id, policy.target
                    )
                    return result
                self.sink.write_line(
                    f"{task.id} failed, running task: {fallback_task.id}"
                )
                fallback = self._execute(fallback_task.id, fallback_task.command)
                return replace(result, fallback=fallback)
            case _:
                raise AssertionError("Unreachable")

    def _execute(self, task_id: str, command: str) -> TaskResult:
        logger.debug("Dispatching %s: %s", task_id, command)
        lines: list[str] = []
        start = time.monotonic()

        try:
            process = subprocess.Popen(
                command,
                shell=True,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                stdin=subprocess.DEVNULL,
                text=True,
                encoding="utf-8",
                errors="replace",
                bufsize=1,
            )
        except OSError as exc:
            logger.error("Could not start %s: %s", task_id, exc)
            return TaskResult(
                task_id, command, SPAWN_FAILED, str(exc), time.monotonic() - start
            )

        with process:
            assert process.stdout is not None
            for line in process.stdout:
                lines.append(line)
                self.sink.write_line(line.rstrip("\n"))
                self.sink.tick()
            returncode = process.wait()

        duration = time.monotonic() - start
        logger.debug("Task %s exited with %d after %.3fs", task_id, returncode, duration)

        return TaskResult(task_id, command, returncode, "".join(lines), duration)
