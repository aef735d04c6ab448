"""Batch job that spawns the next occurrence of completed recurring tasks.

Meant to be run periodically (systemd timer, cron). Runs must not overlap:
nothing here locks, so two concurrent runs could both pick up a task before
either clears its recurrence fields.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Protocol

from sqlalchemy.orm import sessionmaker

from flowly.domain.entities import TaskEntity
from flowly.domain.enums import TaskStatus
from flowly.domain.filters import ELIGIBLE_FOR_RECURRENCE, TaskFilters
from flowly.domain.recurrence import advance, resolve_interval
from flowly.infra.db import SessionLocal
from flowly.infra.repository import TaskRepository

logger = logging.getLogger(__name__)


class RecurrenceStore(Protocol):
    def find_tasks(self, filters: TaskFilters, include_subtasks: bool = False) -> list[TaskEntity]: ...

    def create_task(self, data: dict) -> TaskEntity: ...

    def create_subtasks(self, rows: list[dict]) -> int: ...

    def update_task(self, task_id: str, data: dict) -> TaskEntity | None: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...


@dataclass(frozen=True)
class RecurrenceSummary:
    found: int = 0
    created: int = 0
    errors: int = 0
    failed_task_ids: tuple[str, ...] = field(default_factory=tuple)


class RecurrenceProcessor:
    def __init__(
        self,
        store: RecurrenceStore,
        clock: Callable[[], datetime] = datetime.utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    def run(self) -> RecurrenceSummary:
        logger.info("Starting recurring task processing")

        # A failure here is fatal for the whole run and propagates.
        tasks = self._store.find_tasks(ELIGIBLE_FOR_RECURRENCE, include_subtasks=True)
        logger.info("Found %d completed recurring tasks to process", len(tasks))

        created = 0
        failed: list[str] = []
        for task in tasks:
            try:
                new_task = self._spawn_next(task)
                self._store.commit()
            except Exception:
                self._store.rollback()
                logger.exception("Error processing task %s", task.id)
                failed.append(str(task.id))
                continue
            created += 1
            logger.info(
                'Created new recurring task: "%s" due %s',
                new_task.title,
                new_task.due_at.isoformat() if new_task.due_at else "-",
            )

        summary = RecurrenceSummary(
            found=len(tasks),
            created=created,
            errors=len(failed),
            failed_task_ids=tuple(failed),
        )
        logger.info("Completed: %d tasks created, %d errors", summary.created, summary.errors)
        return summary

    def _spawn_next(self, task: TaskEntity) -> TaskEntity:
        rule = task.recurrence_rule
        interval = resolve_interval(task.recurrence_interval)
        current_due_at = task.next_due_at or task.due_at or self._clock()

        new_due_at = advance(current_due_at, rule, interval)
        new_next_due_at = advance(new_due_at, rule, interval)

        new_task = self._store.create_task({
            "title": task.title,
            "notes": task.notes,
            "priority": task.priority.value,
            "status": TaskStatus.TODO.value,
            "list_id": task.list_id,
            "owner_id": task.owner_id,
            "due_at": new_due_at,
            "recurrence_rule": task.recurrence_rule,
            "recurrence_interval": interval,
            "next_due_at": new_next_due_at,
        })

        self._store.create_subtasks([
            {
                "task_id": new_task.id,
                "title": subtask.title,
                "completed": False,
                "sort_order": index,
            }
            for index, subtask in enumerate(task.subtasks)
        ])

        cleared = self._store.update_task(task.id, {"recurrence_rule": None, "next_due_at": None})
        if cleared is None:
            raise LookupError(f"task {task.id} disappeared while it was being processed")
        return new_task


def process_recurring_tasks(session_factory: sessionmaker = SessionLocal) -> RecurrenceSummary:
    """Run the processor on one session that is closed whatever happens."""
    with session_factory() as session:
        return RecurrenceProcessor(TaskRepository(session)).run()

