"""
Logging Configuration
=====================
Console (coloured when attached to a terminal) plus an optional daily log file.

Levels used across the service:
    DEBUG   — parse stage transitions, id collisions, digest sizes
    INFO    — header mappings, parse summaries, requests, analysis provider
    WARNING — skipped rows, rejected uploads, remote analysis fallbacks
"""
import logging
import os
import sys
from datetime import datetime
from typing import Optional, Union

from app.core.config import LOG_DIR, LOG_LEVEL, LOG_TO_FILE

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers that must reach the root handlers
_PROPAGATED = ("app", "main", "uvicorn", "uvicorn.error", "uvicorn.access")
# httpx logs every request at INFO
_QUIETED = ("httpx", "httpcore")


class ColoredFormatter(logging.Formatter):
    """Level-coloured formatter; falls back to plain text when colour is off."""

    COLORS = {
        logging.DEBUG: "\x1b[36m",
        logging.INFO: "\x1b[32m",
        logging.WARNING: "\x1b[33m",
        logging.ERROR: "\x1b[31m",
        logging.CRITICAL: "\x1b[31;1m",
    }
    RESET = "\x1b[0m"

    def __init__(self, use_color: bool = True) -> None:
        super().__init__(LOG_FORMAT, datefmt=DATE_FORMAT)
        self.use_color = use_color

    def format(self, record):
        message = super().format(record)
        color = self.COLORS.get(record.levelno)
        if not self.use_color or not color:
            return message
        return f"{color}{message}{self.RESET}"


def _resolve_level(level: Union[int, str, None]) -> int:
    if level is None:
        level = LOG_LEVEL
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        return resolved if isinstance(resolved, int) else logging.INFO
    return level


def setup_logging(
    level: Union[int, str, None] = None,
    log_dir: Optional[str] = LOG_DIR,
    log_to_file: bool = LOG_TO_FILE,
) -> None:
    """
    Configure the root logger once for the whole process.

    Parameters
    ----------
    level : int | str | None
        Logging level or its name. Defaults to LOG_LEVEL from the environment.
    log_dir : str | None
        Directory for ``defects_YYYYMMDD.log``.
    log_to_file : bool
        Disable to log to the console only.
    """
    resolved = _resolve_level(level)
    root_logger = logging.getLogger()

    # Re-running setup (e.g. uvicorn reload) must not duplicate output
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(resolved)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(ColoredFormatter(use_color=sys.stderr.isatty()))
    root_logger.addHandler(console_handler)

    if log_to_file and log_dir:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.FileHandler(
            os.path.join(log_dir, f"defects_{datetime.now().strftime('%Y%m%d')}.log"),
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(file_handler)

    for name in _PROPAGATED:
        named = logging.getLogger(name)
        named.setLevel(resolved)
        named.propagate = True
    for name in _QUIETED:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))

    root_logger.info(
        "Logging initialized at %s (file: %s)",
        logging.getLevelName(resolved),
        os.path.join(log_dir, "") if log_to_file and log_dir else "off",
    )
