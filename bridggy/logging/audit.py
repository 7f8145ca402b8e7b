"""Structured JSON logging for the Bridggy client.

The library only emits records on the ``bridggy`` logger. Applications
opt in to JSON-line output with :func:`setup_logging`; otherwise records
flow through whatever handlers the host application configured.
"""

import json
import logging
import sys
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

from bridggy.config.settings import get_settings
from bridggy.security.headers import HEADER_TOKEN

LOGGER_NAME = "bridggy"

# Set by request_scope() for the duration of one fetch(); correlates the
# exchange, retry and proxy-error entries that call produced
request_id_var: ContextVar[str] = ContextVar("request_id", default="")

# audit_data keys whose values are credentials and must never reach a sink
REDACTED_KEYS = frozenset({"token", "proxy_token", "access_token", HEADER_TOKEN})
REDACTED = "[redacted]"


class JSONFormatter(logging.Formatter):
    """Formats log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": request_id_var.get(""),
        }
        # Merge any extra fields passed via `extra={}` kwarg
        for key, value in getattr(record, "audit_data", {}).items():
            log_entry[key] = REDACTED if key in REDACTED_KEYS else value
        return json.dumps(log_entry, default=str)


def setup_logging() -> None:
    """Configure the client logger with JSON output."""
    settings = get_settings()

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    logger.handlers.clear()

    formatter = JSONFormatter()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if settings.audit_log_file:
        file_handler = logging.FileHandler(settings.audit_log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger (avoids duplicate output)
    logger.propagate = False


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


@contextmanager
def request_scope() -> Iterator[str]:
    """Tag every record logged during one fetch() with a fresh request id.

    The previous id is restored on exit, so nested or sequential fetches in
    the same task never leak their id into the caller's context.
    """
    token = request_id_var.set(generate_request_id())
    try:
        yield request_id_var.get()
    finally:
        request_id_var.reset(token)


class RequestTimer:
    """Context manager to measure request latency."""

    def __init__(self):
        self.start_time: float = 0
        self.elapsed_ms: float = 0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args):
        self.elapsed_ms = round((time.perf_counter() - self.start_time) * 1000, 2)
