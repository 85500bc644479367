"""
Logging for the back-office service.

Records go to stdout and to ``<LOG_DIR>/dealership_<date>.log``. SQL statement
logging is left to the engine's ``echo`` flag (``SQL_DEBUG``).
"""

import logging
import sys
from datetime import date
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-7s [%(name)s] %(message)s"


def setup_logging(log_level: str = "INFO", log_dir: str = "logs") -> None:
    """Attach the console and file handlers to the root logger, replacing any present"""
    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    formatter = logging.Formatter(LOG_FORMAT)

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(
        log_path / f"dealership_{date.today():%Y%m%d}.log",
        encoding="utf-8"
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(level)
    for handler in (logging.StreamHandler(sys.stdout), file_handler):
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    root_logger.info(f"Logging to {log_path.resolve()} at {logging.getLevelName(level)}")


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
