from __future__ import annotations

from datetime import datetime
from enum import Enum

from flowly.domain.entities import TaskEntity
from flowly.domain.enums import Priority, TaskStatus
from flowly.domain.filters import TaskFilters
from flowly.domain.recurrence import resolve_interval
from flowly.infra.repository import TaskRepository

RECURRENCE_FIELDS = ("recurrence_rule", "recurrence_interval", "next_due_at")


class TaskService:
    def __init__(self, repo: TaskRepository) -> None:
        self._repo = repo

    def list_tasks(self, filters: TaskFilters) -> list[TaskEntity]:
        return self._repo.find_tasks(filters)

    def get_task(self, task_id: str) -> TaskEntity | None:
        return self._repo.get_task(task_id, include_subtasks=True)

    def create_task(self, data: dict) -> TaskEntity:
        normalized = self._normalize_data(data)
        if not normalized.get("title") or not normalized.get("list_id"):
            raise ValueError("Title and list_id are required")

        rule = normalized.get("recurrence_rule") or None
        due_at = normalized.get("due_at")
        normalized.update({
            "status": TaskStatus.TODO.value,
            "priority": normalized.get("priority") or Priority.MEDIUM.value,
            "recurrence_rule": rule,
            "recurrence_interval": resolve_interval(normalized.get("recurrence_interval")),
            # The first occurrence is scheduled on its own due date.
            "next_due_at": due_at if rule and due_at else None,
        })
        try:
            task = self._repo.create_task(normalized)
            self._repo.commit()
        except Exception:
            self._repo.rollback()
            raise
        return task

    def update_task(self, task_id: str, data: dict) -> TaskEntity | None:
        normalized = self._normalize_data(data)
        status = normalized.get("status")
        if status == TaskStatus.DONE.value and "completed_at" not in normalized:
            normalized["completed_at"] = datetime.utcnow()
        if status and status != TaskStatus.DONE.value:
            normalized["completed_at"] = None

        if "recurrence_rule" in normalized:
            normalized["recurrence_rule"] = normalized["recurrence_rule"] or None
        if "recurrence_interval" in normalized:
            normalized["recurrence_interval"] = resolve_interval(normalized["recurrence_interval"])

        try:
            task = self._repo.update_task(task_id, normalized)
            if task:
                self._repo.commit()
        except Exception:
            self._repo.rollback()
            raise
        return task

    def delete_task(self, task_id: str) -> None:
        try:
            self._repo.delete_task(task_id)
            self._repo.commit()
        except Exception:
            self._repo.rollback()
            raise

    def mark_done(self, task_id: str) -> TaskEntity | None:
        return self.update_task(task_id, {"status": TaskStatus.DONE})

    def stop_recurring(self, task_id: str) -> TaskEntity | None:
        return self.update_task(task_id, {field: None for field in RECURRENCE_FIELDS})

    def add_subtask(self, task_id: str, title: str) -> int:
        if not self._repo.get_task(task_id):
            raise LookupError(f"task {task_id} not found")
        try:
            order = self._repo.count_subtasks(task_id)
            created = self._repo.create_subtasks([
                {"task_id": task_id, "title": title, "completed": False, "sort_order": order}
            ])
            self._repo.commit()
        except Exception:
            self._repo.rollback()
            raise
        return created

    def _normalize_data(self, data: dict) -> dict:
        """Unwrap enums and reject unknown status or priority values before any write."""
        normalized = dict(data)
        for key, value in normalized.items():
            if isinstance(value, Enum):
                normalized[key] = value.value
        if normalized.get("status"):
            normalized["status"] = TaskStatus(normalized["status"]).value
        if normalized.get("priority"):
            normalized["priority"] = Priority(normalized["priority"]).value
        return normalized
