# storefront/config/logging_config.py

"""Per-run timestamped logging configuration for storefront.

Each launch (TUI or CLI) creates a dedicated log file inside ``logs/``,
named with the launch timestamp (e.g. ``logs/run_20261018_153045.log``).
All ``storefront.*`` loggers route through this file handler, so the
store, the API client and the presentation layer share one per-run log.

Backend failures are logged with full tracebacks; the console only sees
WARNING and above (INFO with ``--verbose``) so CLI output stays readable.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from storefront.config.settings import Settings

# Reusable format strings --------------------------------------------------

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(console_level: int = logging.WARNING) -> Path:
    """Initialise the root ``storefront`` logger for the current run.

    Args:
        console_level: Threshold for the stderr handler.  The run file
            always records DEBUG and above.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    # --- Project logger: every storefront.* module inherits from it ---------
    root_logger = logging.getLogger("storefront")
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (tests, TUI relaunch) keep the first handlers
    if root_logger.handlers:
        return log_file

    # --- Run file (DEBUG+): store mutations, HTTP calls, tracebacks ---------
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )

    # --- Stderr: stdout stays reserved for CLI JSON and tables --------------
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info(
        "Logging initialised for %s, log file: %s",
        Settings.API_BASE_URL,
        log_file,
    )

    return log_file
