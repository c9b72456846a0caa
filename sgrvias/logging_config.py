"""Logging setup

Structured JSON for Cloud Logging, plain text for terminals.

Usage:
    from sgrvias.logging_config import setup_logging
    setup_logging()

Environment:
    LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
    LOG_FORMAT: "json" or "text" (default: json on Cloud Run, text elsewhere)
    K_SERVICE / CLOUD_RUN_JOB: set automatically on Cloud Run
"""

import json
import logging
import os
from datetime import datetime, timezone

FORMAT_JSON = "json"
FORMAT_TEXT = "text"

# Third-party loggers capped at INFO (Firestore gRPC transport, HTTP pools)
QUIET_LOGGERS = ("google", "grpc", "urllib3")

_TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class CloudLoggingFormatter(logging.Formatter):
    """One JSON object per line, in the structured-log shape Cloud Logging parses

    `severity` sets the entry level and `logging.googleapis.com/sourceLocation`
    links the entry to the emitting line. Anything passed as
    `extra={"extra_fields": {...}}` is merged into the payload.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict = {
            "severity": record.levelname if record.levelno in _SEVERITIES else "DEFAULT",
            "message": record.getMessage(),
            "logger": record.name,
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="milliseconds"
            ),
            "logging.googleapis.com/sourceLocation": {
                "file": record.pathname,
                "line": record.lineno,
                "function": record.funcName,
            },
        }
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            entry.update(extra_fields)
        return json.dumps(entry, ensure_ascii=False, default=str)


_SEVERITIES = frozenset(
    (logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL)
)


def _output_format() -> str:
    requested = os.getenv("LOG_FORMAT", "").strip().lower()
    if requested in (FORMAT_JSON, FORMAT_TEXT):
        return requested
    if os.getenv("K_SERVICE") or os.getenv("CLOUD_RUN_JOB"):
        return FORMAT_JSON
    return FORMAT_TEXT


def setup_logging() -> None:
    """Install a single stderr handler on the root logger (safe to call again)"""
    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler()
    if _output_format() == FORMAT_JSON:
        handler.setFormatter(CloudLoggingFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.INFO))
