from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence

DEFAULT_COLOR = "blue"


class ConfigError(Exception):
    def __init__(self, *args: object) -> None:
        super().__init__(*args)


class TooManyPathsError(ConfigError):
    """More than one task specification path was given."""

    summary = "Too many task specification paths were specified!"

    def __init__(self, paths: Sequence[str]) -> None:
        self.paths = list(paths)
        super().__init__(
            f"{self.summary} Multiple paths {','.join(self.paths)} were given. "
            "Please pass only one."
        )


class NoTaskSpecError(ConfigError):
    """The task specification does not exist or is not a file."""

    summary = "Task specification was not found!"

    def __init__(self, path: str) -> None:
        self.path = str(path)
        super().__init__(f"{self.summary} {self.path} does not exist.")


class InvalidTaskError(ConfigError):
    """A task id given as a run constraint is not in the task list."""

    summary = "Task ID is invalid!"

    def __init__(self, id: str | None) -> None:
        self.id = id
        super().__init__(f"{self.summary} {id} was not found in given blueprint.")


class ValidationError(ConfigError):
    """The task specification failed validation.

    Only the first problem found is reported; ``line`` and ``column`` are
    1-based and ``path`` is the schema path of the offending node, e.g.
    ``/tasks/1/command``.
    """

    summary = "Blueprint configuration was malformed!"

    def __init__(self, line: int, column: int, path: str, message: str) -> None:
        self.line = line
        self.column = column
        self.path = path
        self.message = message
        super().__init__(
            f"{self.summary} At {line}:{column} ({path}): {message.rstrip('.')}."
        )


class ErrorHandler(Enum):
    EXIT = "exit"
    IGNORE = "ignore"
    COMMAND = "command"
    TASK = "task"


@dataclass(frozen=True)
class ErrorPolicy:
    kind: ErrorHandler
    target: str | None = None

    @classmethod
    def parse(cls, raw: str) -> ErrorPolicy:
        """Parse ``exit``, ``ignore``, ``command: <shell>`` or ``task: <id>``."""
        head, sep, tail = raw.strip().partition(":")
        keyword = head.strip().lower()

        try:
            kind = ErrorHandler(keyword)
        except ValueError:
            expected = ", ".join(h.value for h in ErrorHandler)
            raise ValueError(
                f"Unknown error handler '{keyword}', expected one of: {expected}"
            ) from None

        target = tail.strip() if sep else ""

        match kind:
            case ErrorHandler.COMMAND | ErrorHandler.TASK:
                if len(target) < 1:
                    raise ValueError(
                        f"Error handler '{kind.value}' needs a target, "
                        f"e.g. '{kind.value}: <{kind.value}>'"
                    )
                return cls(kind, target)
            case _:
                if sep:
                    raise ValueError(
                        f"Error handler '{kind.value}' does not take a target"
                    )
                return cls(kind)

    def __str__(self) -> str:
        if self.target is None:
            return self.kind.value
        return f"{self.kind.value}: {self.target}"


@dataclass(frozen=True)
class Task:
    id: str
    command: str
    name: str = ""
    description: str = ""
    color: str = DEFAULT_COLOR
    error_policy: ErrorPolicy | None = None

    def __post_init__(self) -> None:
        if not self.name:
            object.__setattr__(self, "name", self.command)
        if self.description is None:
            object.__setattr__(self, "description", "")
        if not self.color:
            object.__setattr__(self, "color", DEFAULT_COLOR)

    def describe(self) -> str:
        on_error = str(self.error_policy) if self.error_policy else ""
        return (
            "-------------------------\n"
            f"Task ID: {self.id}\n"
            f"Name: {self.name}\n"
            f"Description: {self.description}\n"
            f"Command: {self.command}\n"
            f"Color: {self.color}\n"
            f"On Error: {on_error}\n"
        )


@dataclass(frozen=True)
class TaskList:
    tasks: tuple[Task, ...]
    name: str = ""
    _index: dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "tasks", tuple(self.tasks))
        if self.name is None:
            object.__setattr__(self, "name", "")

        index: dict[str, int] = {}
        for position, task in enumerate(self.tasks):
            if task.id in index:
                raise ValueError(f"Duplicate task id: {task.id}")
            index[task.id] = position
        object.__setattr__(self, "_index", index)

    def __iter__(self) -> Iterator[Task]:
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    @property
    def task_count(self) -> int:
        return len(self.tasks)

    def ids(self) -> list[str]:
        return [task.id for task in self.tasks]

    def is_known_id(self, id: str | None) -> bool:
        if not id:
            return False
        return id in self._index

    def index_of(self, id: str) -> int:
        if not self.is_known_id(id):
            raise InvalidTaskError(id)
        return self._index[id]

    def get_task(self, id: str) -> Task:
        return self.tasks[self.index_of(id)]

    def constrain(
        self,
        tasks: Sequence[str] | None = None,
        from_: str | None = None,
        to: str | None = None,
    ) -> list[Task]:
        """Select the tasks to run.

        Precedence, highest first:
          1. an explicit list of ids, returned in file order;
          2. an inclusive range given by ``from_`` and/or ``to``;
          3. every task.

        Each rule is evaluated against the full task list. A range whose
        start sits after its end selects nothing.
        """
        if tasks:
            return self._extract_tasks(tasks)

        if from_ is not None or to is not None:
            return self._extract_range(from_, to)

        return list(self.tasks)

    def describe(self) -> str:
        return f"Task: {self.name}\n" + "".join(task.describe() for task in self.tasks)

    def _extract_tasks(self, ids: Sequence[str]) -> list[Task]:
        for id in ids:
            if not self.is_known_id(id):
                raise InvalidTaskError(id)

        wanted = set(ids)
        return [task for task in self.tasks if task.id in wanted]

    def _extract_range(self, from_: str | None, to: str | None) -> list[Task]:
        if from_ is not None and not self.is_known_id(from_):
            raise InvalidTaskError(from_)
        if to is not None and not self.is_known_id(to):
            raise InvalidTaskError(to)

        start = 0 if from_ is None else self._index[from_]
        end = len(self.tasks) - 1 if to is None else self._index[to]

        return list(self.tasks[start : end + 1])
