# tests/test_tasklist.py
from __future__ import annotations

import pytest

from blueprint.config.types import InvalidTaskError, Task, TaskList


def _tasklist(count: int = 7) -> TaskList:
    tasks = tuple(
        Task(id=f"task{n}", command=f"echo {n}") for n in range(1, count + 1)
    )
    return TaskList(tasks=tasks, name="numbers")


def _ids(tasks: list[Task]) -> list[str]:
    return [task.id for task in tasks]


# -------------------------
# No constraint
# -------------------------


def test_no_constraint_returns_file_order() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain()) == [f"task{n}" for n in range(1, 8)]


def test_no_constraint_returns_a_new_list() -> None:
    tl = _tasklist()
    result = tl.constrain()
    result.clear()
    assert tl.task_count == 7


def test_empty_explicit_list_without_bounds_returns_everything() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(tasks=[])) == tl.ids()


# -------------------------
# Explicit subset
# -------------------------


def test_explicit_subset_is_returned_in_file_order() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(tasks=["task5", "task1", "task7"])) == [
        "task1",
        "task5",
        "task7",
    ]


def test_explicit_subset_ignores_repeated_ids() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(tasks=["task2", "task2"])) == ["task2"]


def test_explicit_subset_unknown_id_names_the_offender() -> None:
    tl = _tasklist()
    with pytest.raises(InvalidTaskError) as excinfo:
        tl.constrain(tasks=["task1", "task9"])
    assert excinfo.value.id == "task9"
    assert "task9" in str(excinfo.value)


def test_explicit_subset_reports_first_unknown_id_only() -> None:
    tl = _tasklist()
    with pytest.raises(InvalidTaskError) as excinfo:
        tl.constrain(tasks=["task8", "task1", "task9"])
    assert excinfo.value.id == "task8"


# -------------------------
# Range subset
# -------------------------


def test_range_is_inclusive() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(from_="task2", to="task5")) == [
        "task2",
        "task3",
        "task4",
        "task5",
    ]


def test_range_open_end() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(from_="task2")) == [f"task{n}" for n in range(2, 8)]


def test_range_open_start() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(to="task5")) == [f"task{n}" for n in range(1, 6)]


def test_range_single_task() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(from_="task4", to="task4")) == ["task4"]


def test_range_from_after_to_selects_nothing() -> None:
    tl = _tasklist()
    assert tl.constrain(from_="task5", to="task2") == []


def test_range_with_empty_explicit_list_uses_range() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(tasks=[], from_="task6")) == ["task6", "task7"]


@pytest.mark.parametrize(
    "kwargs, offender",
    [
        ({"from_": "task0"}, "task0"),
        ({"to": "task8"}, "task8"),
        ({"from_": "task0", "to": "task8"}, "task0"),
        ({"from_": "task1", "to": "task8"}, "task8"),
    ],
)
def test_range_unknown_bound_raises(kwargs: dict[str, str], offender: str) -> None:
    tl = _tasklist()
    with pytest.raises(InvalidTaskError) as excinfo:
        tl.constrain(**kwargs)
    assert excinfo.value.id == offender


# -------------------------
# Precedence
# -------------------------


def test_explicit_list_wins_over_range() -> None:
    tl = _tasklist()
    result = tl.constrain(
        from_="task3", to="task5", tasks=["task1", "task2", "task3", "task4"]
    )
    assert _ids(result) == ["task1", "task2", "task3", "task4"]


def test_explicit_list_wins_even_when_range_is_invalid() -> None:
    tl = _tasklist()
    assert _ids(tl.constrain(tasks=["task7"], from_="nope")) == ["task7"]


# -------------------------
# Id helpers
# -------------------------


@pytest.mark.parametrize("candidate", ["", None, "task8", "TASK1"])
def test_is_known_id_rejects(candidate: str | None) -> None:
    assert _tasklist().is_known_id(candidate) is False


def test_is_known_id_accepts_declared_ids() -> None:
    tl = _tasklist()
    assert all(tl.is_known_id(id) for id in tl.ids())


def test_index_of_and_get_task() -> None:
    tl = _tasklist()
    assert tl.index_of("task3") == 2
    assert tl.get_task("task3").command == "echo 3"
    with pytest.raises(InvalidTaskError):
        tl.get_task("missing")


def test_duplicate_ids_are_rejected_on_construction() -> None:
    with pytest.raises(ValueError):
        TaskList(tasks=(Task("a", "true"), Task("a", "false")))


def test_describe_lists_every_task() -> None:
    text = _tasklist(2).describe()
    assert text.startswith("Task: numbers\n")
    assert "Task ID: task1" in text
    assert "Task ID: task2" in text
