from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from flowly.config import SETTINGS, PROJECT_ROOT

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _file_handler(formatter: logging.Formatter) -> logging.Handler:
    log_dir = PROJECT_ROOT / SETTINGS.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        log_dir / SETTINGS.log_file, maxBytes=2_000_000, backupCount=3
    )
    handler.setFormatter(formatter)
    return handler


def setup_logging(level: str | None = None) -> None:
    """Console logging always; the rotating file only when LOG_TO_FILE is on.

    Under a systemd timer stdout already lands in the journal, so the file
    handler can be switched off there.
    """
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)

    handlers: list[logging.Handler] = [console_handler]
    if SETTINGS.log_to_file:
        handlers.insert(0, _file_handler(formatter))

    logging.basicConfig(
        level=(level or SETTINGS.log_level).upper(),
        handlers=handlers,
        force=True,
    )
