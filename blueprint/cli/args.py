from __future__ import annotations

import argparse

from blueprint import __version__


def _id_list(value: str) -> list[str]:
    return [part.strip() for part in value.split(",") if part.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="blueprint",
        description="Run the shell tasks declared in a blueprint file, in order.",
    )

    parser.add_argument(
        "paths",
        nargs="*",
        help="Path to the task specification (default: ./.blueprint)",
    )
    parser.add_argument(
        "--tasks",
        type=_id_list,
        default=None,
        metavar="ID,ID,...",
        help="Run only these tasks, in file order",
    )
    parser.add_argument(
        "--from",
        dest="from_",
        default=None,
        metavar="ID",
        help="Start the run at this task",
    )
    parser.add_argument(
        "--to",
        default=None,
        metavar="ID",
        help="End the run at this task (inclusive)",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the selected tasks without running them",
    )
    parser.add_argument(
        "--plain",
        action="store_true",
        help="Stream plain output instead of the spinner",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser
