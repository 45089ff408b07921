# =============================================================================
# REALM BEOBACHTER - LOGGING CONFIGURATION
# =============================================================================
#
# Console output is the primary channel: one summary line per tick and one
# line per fired notification. A file copy goes to logs/notifier/.
#
# =============================================================================

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("urllib3", "requests")


def _get_project_root() -> Path:
    """Get the project root directory."""
    # This file is at shared/logging_config.py
    return Path(__file__).parent.parent


def _get_log_dir() -> Path:
    """Get the notifier log directory."""
    return _get_project_root() / "logs" / "notifier"


def _resolve_level(level: Union[int, str]) -> int:
    """Accept both logging constants and names like "DEBUG"."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        return logging.INFO
    return resolved


def setup_logging(
    level: Union[int, str] = logging.INFO,
    console_output: bool = True,
    file_output: bool = False,
    log_dir: Optional[Path] = None,
) -> Optional[Path]:
    """
    Configure the root logger for the notifier process.

    Args:
        level: Logging level (constant or name)
        console_output: Whether to log to stdout
        file_output: Whether to also log to a timestamped file
        log_dir: Override for the log directory

    Returns:
        Path of the log file, or None if file output is disabled
    """
    level = _resolve_level(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root.handlers.clear()

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        root.addHandler(console_handler)

    log_file = None
    if file_output:
        target_dir = log_dir or _get_log_dir()
        target_dir.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = target_dir / f"notifier_{timestamp}.log"

        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging initialized (level={logging.getLevelName(level)}, file={log_file})"
    )
    return log_file
