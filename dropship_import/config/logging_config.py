# dropship_import/config/logging_config.py

"""Per-run logging for imports and health checks.

Every CLI invocation writes one log file to ``Settings.LOGS_DIR``. The
file name starts with the kind of run, for example
``import_20261019_153045.log`` or ``health_20261019_153045.log``. One
bulk import therefore keeps all of its proxy attempts, per-field misses
and merge decisions in a single file. HTTP client libraries log only
warnings, so their connection chatter stays out of the file.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from dropship_import.config.settings import Settings

PROJECT_LOGGER = "dropship_import"

# Third-party loggers capped at WARNING
QUIET_LOGGERS: tuple[str, ...] = ("curl_cffi", "cloudscraper", "urllib3")

_FILE_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(funcName)s:%(lineno)d | "
    "%(message)s"
)
_STDERR_FORMAT = "%(levelname)s %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def log_file_for(run_label: str, started: datetime | None = None) -> Path:
    """Return the log path for a run of kind *run_label*."""
    stamp = (started or datetime.now()).strftime("%Y%m%d_%H%M%S")
    return Settings.LOGS_DIR / f"{run_label}_{stamp}.log"


def setup_logging(run_label: str = "run") -> Path:
    """Attach the per-run file and stderr handlers to the project logger.

    A second call does not add more handlers. It returns the path that
    would have been used for this label.
    """
    log_file = log_file_for(run_label)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    project_logger = logging.getLogger(PROJECT_LOGGER)
    project_logger.setLevel(logging.DEBUG)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if project_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt=_DATE_FORMAT))

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))

    project_logger.addHandler(file_handler)
    project_logger.addHandler(stderr_handler)

    project_logger.info("[%s] Logging to %s", run_label, log_file)
    return log_file
