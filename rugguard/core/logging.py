"""Structured JSON logging configuration.

Provides:
  - JSON-formatted log output for staging and production
  - Human-readable colored output for development
  - Request ID and transaction hash correlation
"""

from __future__ import annotations

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

_EXTRA_KEYS = (
    "duration_ms",
    "status_code",
    "method",
    "path",
    "chain_id",
    "tx_hash",
    "analyzer",
    "findings",
    "detected",
)


class JSONFormatter(logging.Formatter):
    """Structured JSON log formatter for production."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.pathname:
            log_entry["module"] = record.module
            log_entry["function"] = record.funcName
            log_entry["line"] = record.lineno

        if hasattr(record, "request_id"):
            log_entry["request_id"] = record.request_id

        if record.exc_info and record.exc_info[1]:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else "Unknown",
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        for key in _EXTRA_KEYS:
            if hasattr(record, key):
                log_entry[key] = getattr(record, key)

        return json.dumps(log_entry, default=str)


class DevFormatter(logging.Formatter):
    """Colored human-readable formatter for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, "")
        ts = datetime.now(timezone.utc).strftime("%H:%M:%S")
        prefix = f"{color}{ts} [{record.levelname:>8s}]{self.RESET}"
        msg = record.getMessage()

        req_id = getattr(record, "request_id", None)
        if req_id:
            msg = f"[{req_id[:8]}] {msg}"

        tx_hash = getattr(record, "tx_hash", None)
        if tx_hash:
            msg = f"{msg} (tx {tx_hash[:10]})"

        base = f"{prefix} {record.name}: {msg}"
        if record.exc_info and record.exc_info[1]:
            base += "\n" + self.formatException(record.exc_info)
        return base


def setup_logging(
    env: str = "development",
    log_level: str = "INFO",
    stream: TextIO | None = None,
) -> None:
    """Configure logging for the application.

    Args:
        env: Application environment (development/staging/production)
        log_level: Minimum log level
        stream: Output stream, stdout by default
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    root.handlers.clear()

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if env in ("staging", "production"):
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(DevFormatter())

    root.addHandler(handler)

    # Quiet noisy libraries
    for noisy in ("uvicorn.access", "httpcore", "httpx", "asyncio"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("uvicorn.error").setLevel(logging.INFO)


class RequestLogFilter(logging.Filter):
    """Filter that adds request context to log records."""

    def __init__(self, request_id: str = "", tx_hash: str = "") -> None:
        super().__init__()
        self.request_id = request_id
        self.tx_hash = tx_hash

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = self.request_id  # type: ignore[attr-defined]
        if not hasattr(record, "tx_hash"):
            record.tx_hash = self.tx_hash  # type: ignore[attr-defined]
        return True
