"""Structured Logging - JSON formatter, setup, and per-request access logging.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (user_id, error_code, path, method, status_code, duration_ms, operation)
      surfaced when present
    - JSON format in production, human-readable text otherwise
    - setup_logging is idempotent: re-running replaces its own handler instead of stacking

Design Decisions:
    - JSONFormatter on stdlib logging, no extra logging dependency
    - Access logging as plain ASGI-level HTTP middleware registered in main.py
"""

import logging
import json
import time
from datetime import datetime, timezone
from typing import Awaitable, Callable

from fastapi import Request, Response

EXTRA_FIELDS = (
    "user_id", "error_code", "path", "method",
    "status_code", "duration_ms", "operation",
)

_HANDLER_NAME = "ministry"

access_logger = logging.getLogger("ministry.access")


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging in production."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging for the application."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s - %(message)s",
        ))
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler


async def log_requests(
    request: Request, call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """HTTP middleware: one access line per request with status and latency."""
    start = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start) * 1000, 2)
    access_logger.info(
        f"{request.method} {request.url.path} {response.status_code} {duration_ms}ms",
        extra={
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )
    return response
