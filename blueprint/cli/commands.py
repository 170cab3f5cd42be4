from __future__ import annotations

import argparse
import logging
import sys

from blueprint.config import ConfigError, Task, TaskList, load_tasklist, resolve_path
from blueprint.dispatch import Dispatcher, ProgressSink, RunResult, StreamSink

from .args import build_parser
from .console import MARKUP, ConsoleProgressSink, colored, setup_logging

logger = logging.getLogger(__name__)


def run_cli(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level, verbose=args.verbose)

    try:
        return cmd_run(args)

    except ConfigError as exc:
        logger.error(str(exc))
        return 2

    except KeyboardInterrupt:
        return 130


def main() -> None:
    sys.exit(run_cli())


def cmd_run(args: argparse.Namespace) -> int:
    path = resolve_path(args.paths)
    tasklist = load_tasklist(path)

    title = f"{colored(tasklist.name, 'blue')} " if tasklist.name else ""
    logger.info(
        f"Blueprint {title}started from {colored(str(path), 'blue')}, "
        f"found {tasklist.task_count} tasks.",
        extra=MARKUP,
    )

    plan = tasklist.constrain(tasks=args.tasks, from_=args.from_, to=args.to)
    _report_constraint(tasklist, plan)

    if not plan:
        logger.warning("No tasks selected, nothing to run.")
        return 0

    if args.list:
        for task in plan:
            print(task.describe(), end="")
        return 0

    sink: ProgressSink = StreamSink(sys.stdout) if args.plain else ConsoleProgressSink()
    rr = Dispatcher(sink, catalog=tasklist).run(plan)
    _report_result(rr)
    return 1 if rr.failure_count else 0


def naive_pluralise(word: str, count: int) -> str:
    return f"{word}s" if count != 1 else word


def _report_constraint(tasklist: TaskList, plan: list[Task]) -> None:
    if len(plan) >= tasklist.task_count:
        return

    ids = ", ".join(colored(task.id, task.color) for task in plan)
    logger.info(
        f"Task list has been constrained to {len(plan)} "
        f"{naive_pluralise('task', len(plan))}: {ids}",
        extra=MARKUP,
    )


def _report_result(rr: RunResult) -> None:
    summary = f"Ran {rr.task_count} {naive_pluralise('task', rr.task_count)}"

    if rr.recovered:
        summary += f", {len(rr.recovered)} recovered"
    if rr.ignored:
        summary += f", {len(rr.ignored)} ignored"
    if rr.skipped:
        summary += f", {len(rr.skipped)} skipped"

    if rr.failure_count:
        logger.error(
            f"{summary}, {rr.failure_count} failed: {', '.join(rr.failures)}"
        )
    else:
        logger.info(f"{summary}, all succeeded.")
