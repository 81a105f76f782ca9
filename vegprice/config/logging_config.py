# vegprice/config/logging_config.py

"""Log file per collector run or server start.

Collection is normally triggered by cron or ``--every``, so nobody watches
the console.  Every launch therefore writes ``logs/run_<timestamp>.log``
holding the full DEBUG trail of the ``vegprice.*`` loggers (fetch retries,
skipped sheets, appended dates, rejected API queries), while stderr only
shows warnings and failures.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from vegprice.config.settings import Settings

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(logs_dir: Path | None = None) -> Path:
    """Attach the run-file and stderr handlers to the ``vegprice`` logger.

    Safe to call more than once: later calls keep the handlers from the
    first call and only return a fresh file name.

    Args:
        logs_dir: Where the run file goes; ``Settings.LOGS_DIR`` by default.

    Returns:
        Path of this run's log file.
    """
    target_dir: Path = logs_dir or Settings.LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / f"run_{datetime.now():%Y%m%d_%H%M%S}.log"

    app_logger = logging.getLogger("vegprice")
    app_logger.setLevel(logging.DEBUG)
    if app_logger.handlers:
        return log_file

    # Run file: everything, with source location for post-mortems
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT)
    )

    # stderr: only what an operator must act on
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    app_logger.addHandler(file_handler)
    app_logger.addHandler(console_handler)
    app_logger.info("Logging to %s", log_file)
    return log_file
