from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Sequence

import pydantic
import yaml

from .schema import BlueprintDocument, TaskEntry
from .types import (
    DEFAULT_COLOR,
    ErrorHandler,
    ErrorPolicy,
    NoTaskSpecError,
    Task,
    TaskList,
    TooManyPathsError,
    ValidationError,
)

DEFAULT_PATH = "./.blueprint"

logger = logging.getLogger(__name__)

_LINE_ENDINGS = re.compile(r"\r\n?")

Loc = tuple[int | str, ...]


def resolve_path(paths: Sequence[str | Path]) -> Path:
    if len(paths) > 1:
        raise TooManyPathsError([str(p) for p in paths])

    path = Path(paths[0] if paths else DEFAULT_PATH).expanduser()

    if not path.exists():
        raise NoTaskSpecError(str(path))

    return path


def load_tasklist(path: str | Path) -> TaskList:
    pure_path = Path(path).expanduser()

    if not pure_path.exists() or not pure_path.is_file():
        raise NoTaskSpecError(str(pure_path))

    try:
        raw_text = pure_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError(1, 1, "/", f"{pure_path} is not valid UTF-8") from exc

    text = normalise_line_endings(raw_text)
    root, document = _parse(text)
    tasklist = _build_tasklist(root, document)

    logger.debug("Loaded %d tasks from %s", tasklist.task_count, pure_path)
    return tasklist


def normalise_line_endings(text: str) -> str:
    return _LINE_ENDINGS.sub("\n", text)


def _parse(text: str) -> tuple[yaml.Node | None, BlueprintDocument]:
    try:
        root = yaml.compose(text, Loader=yaml.SafeLoader)
        raw = yaml.safe_load(text)
    except yaml.MarkedYAMLError as exc:
        mark = exc.problem_mark or exc.context_mark
        line, column = (mark.line + 1, mark.column + 1) if mark else (1, 1)
        raise ValidationError(line, column, "/", exc.problem or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise ValidationError(1, 1, "/", str(exc)) from exc

    try:
        document = BlueprintDocument.model_validate(raw)
    except pydantic.ValidationError as exc:
        first = exc.errors()[0]
        raise _error_at(root, first["loc"], first["msg"]) from exc

    return root, document


def _build_tasklist(root: yaml.Node | None, document: BlueprintDocument) -> TaskList:
    seen: set[str] = set()
    for position, entry in enumerate(document.tasks):
        if entry.id in seen:
            raise _error_at(
                root, ("tasks", position, "id"), f"Duplicate task id '{entry.id}'"
            )
        seen.add(entry.id)

    tasks = []
    for position, entry in enumerate(document.tasks):
        policy = ErrorPolicy.parse(entry.error) if entry.error is not None else None

        if policy is not None and policy.kind is ErrorHandler.TASK:
            if policy.target == entry.id:
                raise _error_at(
                    root,
                    ("tasks", position, "error"),
                    f"Task '{entry.id}' cannot fall back to itself",
                )
            if policy.target not in seen:
                raise _error_at(
                    root,
                    ("tasks", position, "error"),
                    f"Error handler references unknown task '{policy.target}'",
                )

        tasks.append(_build_task(entry, policy))

    return TaskList(tasks=tuple(tasks), name=document.name or "")


def _build_task(entry: TaskEntry, policy: ErrorPolicy | None) -> Task:
    return Task(
        id=entry.id,
        command=entry.command,
        name=entry.name or entry.command,
        description=entry.description or "",
        color=entry.color or DEFAULT_COLOR,
        error_policy=policy,
    )


def _error_at(root: yaml.Node | None, loc: Loc, message: str) -> ValidationError:
    line, column = _locate(root, loc)
    return ValidationError(line, column, _format_path(loc), message)


def _locate(root: yaml.Node | None, loc: Loc) -> tuple[int, int]:
    """Map a validation location onto the closest YAML node's position.

    When a key is missing the position of the enclosing node is used.
    """
    if root is None:
        return 1, 1

    node: Any = root
    for part in loc:
        child = None
        if isinstance(node, yaml.MappingNode):
            for key, value in node.value:
                if getattr(key, "value", None) == part:
                    child = value
                    break
        elif isinstance(node, yaml.SequenceNode) and isinstance(part, int):
            if 0 <= part < len(node.value):
                child = node.value[part]

        if child is None:
            break
        node = child

    return node.start_mark.line + 1, node.start_mark.column + 1


def _format_path(loc: Loc) -> str:
    return "/" + "/".join(str(part) for part in loc)
