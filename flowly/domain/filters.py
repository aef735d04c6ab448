from __future__ import annotations

from dataclasses import dataclass

from .enums import TaskStatus


@dataclass(frozen=True)
class TaskFilters:
    status: TaskStatus | None = None
    list_id: str | None = None
    owner_id: str | None = None
    # True: only tasks with a rule; False: only tasks without one; None: any.
    recurring: bool | None = None
    scheduled: bool | None = None
    search: str | None = None


ELIGIBLE_FOR_RECURRENCE = TaskFilters(
    status=TaskStatus.DONE,
    recurring=True,
    scheduled=True,
)
