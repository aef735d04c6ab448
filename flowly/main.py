"""Entry point for the recurring task job.

Usage: flowly-recurring
Or via systemd timer / cron once a day.
"""
from __future__ import annotations

import logging
import sys

from flowly.infra.db import dispose_engine, init_db
from flowly.infra.logging import setup_logging
from flowly.services.recurrence_processor import process_recurring_tasks

logger = logging.getLogger(__name__)


def main() -> int:
    setup_logging()
    try:
        init_db()
        summary = process_recurring_tasks()
    except Exception:  # noqa: BLE001
        logger.exception("Fatal error in recurring task processing")
        return 1
    finally:
        dispose_engine()

    if summary.failed_task_ids:
        logger.warning("Tasks left for the next run: %s", ", ".join(summary.failed_task_ids))
    return 0


if __name__ == "__main__":
    sys.exit(main())
