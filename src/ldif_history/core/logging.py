"""
Logging utilities for ldif-history.

Provides human-readable and JSON-structured formatters that carry the
run identifier, so every line of one backup run can be traced together.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional


PACKAGE_LOGGER = "ldif_history"

_CONTEXT_FIELDS = ["run_id", "snapshot_dir", "attempt", "entry_count"]


class StructuredFormatter(logging.Formatter):
    """
    Formatter that outputs JSON-structured log lines.

    Each log line includes:
    - Standard log fields (timestamp, level, message, logger)
    - Run context fields if present (run_id, snapshot_dir, attempt, entry_count)
    """

    def __init__(self, include_timestamp: bool = True):
        super().__init__()
        self.include_timestamp = include_timestamp

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record as JSON."""
        log_entry = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat()

        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_entry[field] = value

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class HumanReadableFormatter(logging.Formatter):
    """
    Formatter that outputs human-readable log lines with run context.

    Format: TIMESTAMP [LEVEL] LOGGER - MESSAGE [run_id=X]
    """

    def __init__(self, include_timestamp: bool = True):
        if include_timestamp:
            fmt = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
        else:
            fmt = "[%(levelname)s] %(name)s - %(message)s"
        super().__init__(fmt, datefmt="%Y-%m-%d %H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        run_id = getattr(record, "run_id", None)
        if run_id is not None:
            return f"{base} [run_id={run_id}]"
        return base


def configure_logging(
    level: int = logging.INFO,
    structured: bool = False,
    include_timestamp: bool = True,
) -> logging.Logger:
    """
    Configure the package logger.

    Only one handler is attached; calling this again just updates the level.

    Args:
        level: Logging level (default: INFO)
        include_timestamp: Whether to include timestamp in log messages
        structured: If True, output JSON-structured logs; if False, human-readable

    Returns:
        The configured package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stderr)

        if structured:
            formatter = StructuredFormatter(include_timestamp=include_timestamp)
        else:
            formatter = HumanReadableFormatter(include_timestamp=include_timestamp)

        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for handler in package_logger.handlers:
        handler.setLevel(level)

    return package_logger


class RunLoggerAdapter(logging.LoggerAdapter):
    """
    LoggerAdapter that stamps every record with the current run id.

    Example:
        >>> log = RunLoggerAdapter(logging.getLogger(__name__), run_id="abc")
        >>> log.info("Read %d entries", 12)
    """

    def __init__(self, logger: logging.Logger, run_id: Optional[str] = None, **extra):
        context = {"run_id": run_id, **extra}
        super().__init__(logger, {k: v for k, v in context.items() if v is not None})

    def process(self, msg, kwargs):
        extra = dict(self.extra)
        extra.update(kwargs.get("extra") or {})
        kwargs["extra"] = extra
        return msg, kwargs
