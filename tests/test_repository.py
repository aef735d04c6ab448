from __future__ import annotations

from datetime import datetime

from flowly.domain.enums import Priority, TaskStatus
from flowly.domain.filters import ELIGIBLE_FOR_RECURRENCE, TaskFilters
from flowly.infra.repository import TaskRepository


def _task(repo: TaskRepository, **overrides):
    data = {
        "title": "Task",
        "status": TaskStatus.TODO.value,
        "priority": Priority.MEDIUM.value,
        "list_id": "list-1",
        "owner_id": "user-1",
    }
    data.update(overrides)
    return repo.create_task(data)


def test_create_task_assigns_id_and_defaults(repo: TaskRepository) -> None:
    task = _task(repo, title="Write report")
    repo.commit()

    assert task.id
    assert task.recurrence_interval == 1
    assert task.recurrence_rule is None
    assert task.created_at is not None
    assert repo.get_task(task.id).title == "Write report"


def test_find_eligible_tasks(repo: TaskRepository) -> None:
    eligible = _task(
        repo,
        title="Eligible",
        status="DONE",
        recurrence_rule="daily",
        next_due_at=datetime(2024, 1, 1),
    )
    _task(repo, title="Not done", recurrence_rule="daily", next_due_at=datetime(2024, 1, 1))
    _task(repo, title="No rule", status="DONE", next_due_at=datetime(2024, 1, 1))
    _task(repo, title="No next", status="DONE", recurrence_rule="daily")
    repo.commit()

    found = repo.find_tasks(ELIGIBLE_FOR_RECURRENCE)

    assert [t.id for t in found] == [eligible.id]


def test_find_tasks_includes_ordered_subtasks(repo: TaskRepository) -> None:
    task = _task(repo)
    repo.create_subtasks([
        {"task_id": task.id, "title": "second", "completed": True, "sort_order": 1},
        {"task_id": task.id, "title": "first", "completed": False, "sort_order": 0},
    ])
    repo.commit()

    [found] = repo.find_tasks(TaskFilters(), include_subtasks=True)

    assert [s.title for s in found.subtasks] == ["first", "second"]
    assert [s.order for s in found.subtasks] == [0, 1]
    assert found.subtasks[1].completed is True


def test_find_tasks_filters_by_owner_and_search(repo: TaskRepository) -> None:
    _task(repo, title="Buy milk", owner_id="alice")
    _task(repo, title="Buy bread", owner_id="bob")
    _task(repo, title="Call mom", owner_id="alice", notes="about milk")
    repo.commit()

    found = repo.find_tasks(TaskFilters(owner_id="alice", search="milk"))

    assert sorted(t.title for t in found) == ["Buy milk", "Call mom"]


def test_update_task_returns_none_for_missing(repo: TaskRepository) -> None:
    assert repo.update_task("missing", {"title": "x"}) is None


def test_rollback_discards_uncommitted_writes(repo: TaskRepository) -> None:
    kept = _task(repo, title="Kept")
    repo.commit()

    _task(repo, title="Dropped")
    repo.update_task(kept.id, {"title": "Renamed"})
    repo.rollback()

    titles = [t.title for t in repo.find_tasks(TaskFilters())]
    assert titles == ["Kept"]


def test_delete_task_removes_subtasks(repo: TaskRepository) -> None:
    task = _task(repo)
    repo.create_subtasks([{"task_id": task.id, "title": "s", "completed": False, "sort_order": 0}])
    repo.commit()

    repo.delete_task(task.id)
    repo.commit()

    assert repo.get_task(task.id) is None
    assert repo.count_subtasks(task.id) == 0
