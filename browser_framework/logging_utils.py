"""Consistent logging setup for browser test runs."""

import logging
import sys
import threading
import time
from pathlib import Path
from typing import Optional

from .config import LoggingSettings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LEVELS = {
    "verbose": logging.DEBUG,
    "debug": logging.DEBUG,
    "information": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
    "critical": logging.CRITICAL,
}

_configured = False
_setup_lock = threading.Lock()
_handlers: list = []


def level_from_name(name: str) -> int:
    """Map a configured level name to a logging level (unknown names give INFO)."""
    return LEVELS.get(str(name).strip().lower(), logging.INFO)


def resolve_log_path(log_path: str) -> Path:
    """Substitute the {Date} placeholder in the configured log path."""
    return Path(log_path.replace("{Date}", time.strftime("%Y%m%d")))


def setup_logging(logging_settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure the root logger once per process.

    Configures:
    - Console output with timestamps and logger names
    - Optional file sink at the configured path (directory created on demand)
    - Level from the configured name

    Later calls are no-ops.

    Args:
        logging_settings: Logging section of the configuration (defaults apply when None)
    """
    global _configured
    if _configured:
        return
    with _setup_lock:
        if _configured:
            return
        if logging_settings is None:
            logging_settings = LoggingSettings(log_to_file=False)

        root = logging.getLogger()
        root.setLevel(level_from_name(logging_settings.level))
        formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(formatter)
        root.addHandler(console)
        _handlers.append(console)

        if logging_settings.log_to_file:
            log_file = resolve_log_path(logging_settings.log_path)
            try:
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file, encoding="utf-8")
                file_handler.setFormatter(formatter)
                root.addHandler(file_handler)
                _handlers.append(file_handler)
            except OSError as e:
                root.warning(f"Could not open log file {log_file}, logging to console only: {e}")

        _configured = True
        logging.getLogger(__name__).info("Logger initialized successfully")


def is_configured() -> bool:
    return _configured


def get_logger(name: str) -> logging.Logger:
    """Return a named logger, configuring logging with defaults on first use."""
    if not _configured:
        setup_logging()
    return logging.getLogger(name)


def reset_logging() -> None:
    """Remove the handlers installed by setup_logging (used by tests)."""
    global _configured
    with _setup_lock:
        root = logging.getLogger()
        for handler in _handlers:
            root.removeHandler(handler)
            handler.close()
        _handlers.clear()
        _configured = False
