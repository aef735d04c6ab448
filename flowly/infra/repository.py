from __future__ import annotations

from typing import Optional

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, selectinload

from flowly.domain.entities import SubtaskEntity, TaskEntity
from flowly.domain.enums import Priority, TaskStatus
from flowly.domain.filters import TaskFilters

from .models import SubtaskModel, TaskModel


def _to_subtask_entity(model: SubtaskModel) -> SubtaskEntity:
    return SubtaskEntity(
        id=model.id,
        task_id=model.task_id,
        title=model.title,
        completed=model.completed,
        order=model.sort_order,
    )


def _to_entity(model: TaskModel, include_subtasks: bool = False) -> TaskEntity:
    subtasks: tuple[SubtaskEntity, ...] = ()
    if include_subtasks:
        subtasks = tuple(_to_subtask_entity(sub) for sub in model.subtasks)
    return TaskEntity(
        id=model.id,
        title=model.title,
        notes=model.notes,
        status=TaskStatus(model.status),
        priority=Priority(model.priority),
        list_id=model.list_id,
        owner_id=model.owner_id,
        due_at=model.due_at,
        recurrence_rule=model.recurrence_rule,
        recurrence_interval=model.recurrence_interval,
        next_due_at=model.next_due_at,
        created_at=model.created_at,
        updated_at=model.updated_at,
        completed_at=model.completed_at,
        subtasks=subtasks,
    )


def _apply_filters(stmt, filters: TaskFilters) -> object:
    if filters.status is not None:
        stmt = stmt.where(TaskModel.status == TaskStatus(filters.status).value)
    if filters.list_id:
        stmt = stmt.where(TaskModel.list_id == filters.list_id)
    if filters.owner_id:
        stmt = stmt.where(TaskModel.owner_id == filters.owner_id)

    if filters.recurring is True:
        stmt = stmt.where(TaskModel.recurrence_rule.is_not(None))
    elif filters.recurring is False:
        stmt = stmt.where(TaskModel.recurrence_rule.is_(None))

    if filters.scheduled is True:
        stmt = stmt.where(TaskModel.next_due_at.is_not(None))
    elif filters.scheduled is False:
        stmt = stmt.where(TaskModel.next_due_at.is_(None))

    if filters.search:
        pattern = f"%{filters.search}%"
        stmt = stmt.where(
            or_(
                TaskModel.title.ilike(pattern),
                TaskModel.notes.ilike(pattern),
            )
        )

    return stmt


class TaskRepository:
    """Task store bound to a single session.

    Writes are flushed, not committed: callers decide where a unit of work
    ends with ``commit()`` or ``rollback()``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_tasks(self, filters: TaskFilters, include_subtasks: bool = False) -> list[TaskEntity]:
        stmt = select(TaskModel)
        stmt = _apply_filters(stmt, filters)
        if include_subtasks:
            stmt = stmt.options(selectinload(TaskModel.subtasks))
        stmt = stmt.order_by(
            TaskModel.next_due_at.is_(None),
            TaskModel.next_due_at.asc(),
            TaskModel.created_at.asc(),
        )
        return [
            _to_entity(task, include_subtasks)
            for task in self._session.scalars(stmt)
        ]

    def get_task(self, task_id: str, include_subtasks: bool = False) -> Optional[TaskEntity]:
        task = self._session.get(TaskModel, task_id)
        return _to_entity(task, include_subtasks) if task else None

    def create_task(self, data: dict) -> TaskEntity:
        task = TaskModel(**data)
        self._session.add(task)
        self._session.flush()
        self._session.refresh(task)
        return _to_entity(task)

    def create_subtasks(self, rows: list[dict]) -> int:
        if not rows:
            return 0
        self._session.add_all([SubtaskModel(**row) for row in rows])
        self._session.flush()
        return len(rows)

    def count_subtasks(self, task_id: str) -> int:
        return self._session.scalar(
            select(func.count())
            .select_from(SubtaskModel)
            .where(SubtaskModel.task_id == task_id)
        ) or 0

    def update_task(self, task_id: str, data: dict) -> Optional[TaskEntity]:
        task = self._session.get(TaskModel, task_id)
        if not task:
            return None
        for key, value in data.items():
            setattr(task, key, value)
        self._session.flush()
        self._session.refresh(task)
        return _to_entity(task)

    def delete_task(self, task_id: str) -> None:
        task = self._session.get(TaskModel, task_id)
        if not task:
            return
        self._session.delete(task)
        self._session.flush()

    def commit(self) -> None:
        self._session.commit()

    def rollback(self) -> None:
        self._session.rollback()
