from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .enums import Priority, TaskStatus


@dataclass(frozen=True)
class SubtaskEntity:
    id: str | None
    task_id: str
    title: str
    completed: bool
    order: int


@dataclass(frozen=True)
class TaskEntity:
    id: str | None
    title: str
    notes: str | None
    status: TaskStatus
    priority: Priority
    list_id: str
    owner_id: str
    due_at: Optional[datetime]
    recurrence_rule: str | None
    recurrence_interval: int
    next_due_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None
    subtasks: tuple[SubtaskEntity, ...] = ()
