"""
Logging configuration for cryptonorm.

Log records may carry structured fields (exchange, source, count, ...)
attached with ``extra=log_fields(...)``. The JSON formatter emits them as
top-level keys; the text formatter appends them as ``key=value`` pairs.
"""
import dataclasses
import json
import logging
import logging.handlers
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..core.config import LoggingConfig

FIELDS_ATTR = "extra_fields"


def log_fields(**fields: Any) -> dict[str, dict[str, Any]]:
    """Build the ``extra`` argument of a logging call."""
    return {FIELDS_ATTR: fields}


def record_fields(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, FIELDS_ATTR, None) or {}


class NanosecondFormatter(logging.Formatter):
    """
    Text formatter with nanosecond timestamps and trailing structured fields.
    """

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.fromtimestamp(record.created).strftime(datefmt or "%Y-%m-%d %H:%M:%S")
        nanos = int((record.created % 1) * 1_000_000_000)
        return f"{stamp}.{nanos:09d}"

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = record_fields(record)
        if fields:
            line += " | " + " ".join(f"{k}={v}" for k, v in fields.items())
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "timestamp_ms": int(record.created * 1000),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Structured fields never overwrite the fixed keys
        for key, value in record_fields(record).items():
            entry.setdefault(key, value)

        return json.dumps(entry, default=str)


def setup_logging(config: Optional[LoggingConfig] = None, **overrides: Any) -> logging.Logger:
    """
    Configure the root logger.

    Args:
        config: Logging section of the system configuration (defaults if None)
        **overrides: Individual LoggingConfig fields, e.g. ``json_format=True``

    Returns:
        Root logger instance
    """
    config = dataclasses.replace(config or LoggingConfig(), **overrides)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.level.upper()))
    root_logger.handlers.clear()

    if config.json_format:
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = NanosecondFormatter(fmt=config.format, datefmt=config.date_format)

    # stdout carries command output
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if config.file_path:
        log_path = Path(config.file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            filename=log_path,
            maxBytes=config.max_file_size_mb * 1024 * 1024,
            backupCount=config.backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # One line per request otherwise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Get a named logger."""
    return logging.getLogger(name)
