"""Logging configuration for the media sync.

Console output carries the human-readable progress lines; a JSONL file
keeps structured sync events for later inspection.
"""

import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

__all__ = [
    "setup_logging",
    "get_logger",
    "log_sync_event",
    "LOG_DIR",
]

LOG_DIR = Path.cwd() / "logs"


class JSONLFileHandler(logging.Handler):
    """Handler that appends structured JSONL entries, one file per day."""

    def __init__(self, log_dir: Path, prefix: str = "sync"):
        super().__init__()
        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.prefix = prefix

    def _get_log_file(self) -> Path:
        today = datetime.now().strftime("%Y%m%d")
        return self.log_dir / f"{self.prefix}_{today}.jsonl"

    def emit(self, record: logging.LogRecord) -> None:
        try:
            entry = {
                "timestamp": datetime.now().isoformat(),
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
            }
            if hasattr(record, "event_type"):
                entry["event_type"] = record.event_type
            if hasattr(record, "extra_data"):
                entry.update(record.extra_data)

            with open(self._get_log_file(), "a", encoding="utf-8") as f:
                f.write(json.dumps(entry, ensure_ascii=False, default=str) + "\n")
        except Exception:
            self.handleError(record)


class ColoredConsoleHandler(logging.StreamHandler):
    """Console handler with colored level names on a terminal."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "CRITICAL": "\033[35m",   # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        if hasattr(self.stream, "isatty") and self.stream.isatty():
            color = self.COLORS.get(record.levelname, "")
            if color:
                text = f"{color}{text}{self.RESET}"
        return text


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self.max_level


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Set up logging for the sync.

    Progress goes to stdout; warnings and errors go to stderr.

    Args:
        level: Console logging level (default: INFO)
        log_to_file: Whether to log to a JSONL file
        log_to_console: Whether to log to the console
        log_dir: Custom log directory (default: ./logs)

    Returns:
        Configured ``mediasync`` logger
    """
    logger = logging.getLogger("mediasync")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()

    if log_to_console:
        console_format = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s", datefmt="%H:%M:%S")

        out_handler = ColoredConsoleHandler(sys.stdout)
        out_handler.setLevel(level)
        out_handler.addFilter(_MaxLevelFilter(logging.WARNING))
        out_handler.setFormatter(console_format)
        logger.addHandler(out_handler)

        err_handler = ColoredConsoleHandler(sys.stderr)
        err_handler.setLevel(max(level, logging.WARNING))
        err_handler.setFormatter(console_format)
        logger.addHandler(err_handler)

    if log_to_file:
        file_handler = JSONLFileHandler(log_dir or LOG_DIR)
        file_handler.setLevel(logging.DEBUG)
        logger.addHandler(file_handler)

    return logger


def get_logger(name: str = "mediasync") -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Logger name (will be prefixed with 'mediasync.')
    """
    if name == "mediasync":
        return logging.getLogger("mediasync")
    return logging.getLogger(f"mediasync.{name}")


def log_sync_event(
    event_type: str,
    data: Dict[str, Any],
    level: int = logging.DEBUG,
    logger_name: str = "mediasync",
) -> None:
    """Log a structured sync event.

    Events default to DEBUG so they land in the JSONL file without
    duplicating the console progress lines.

    Args:
        event_type: Type of event (e.g., 'sync_start', 'product_missing')
        data: Event-specific data
        level: Log level
        logger_name: Logger to use
    """
    logger = get_logger(logger_name)
    if not logger.isEnabledFor(level):
        return

    record = logger.makeRecord(
        logger.name,
        level,
        "(sync)",
        0,
        data.get("message") or event_type,
        (),
        None,
    )
    record.event_type = event_type
    record.extra_data = {k: v for k, v in data.items() if k != "message"}

    logger.handle(record)
