"""Structured logging configuration.

Provides JSON log formatting when ``json_logs`` is enabled (default),
otherwise a concise human formatter. Fields: timestamp, level, msg, logger,
request_id, path, method, status, duration_ms.

Example:
    Configure once at application startup:
        >>> from geoapi.core import config, logging_setup
        >>> logging_setup.configure_logging(config.get_settings())
"""

from __future__ import annotations

import json
import logging
import sys
import time
import uuid
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    import fastapi

    from geoapi.core import config

_REQUEST_FIELDS = ("request_id", "path", "method", "status", "duration_ms")


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        for attr in _REQUEST_FIELDS:
            if hasattr(record, attr):
                base[attr] = getattr(record, attr)
        if record.exc_info and record.exc_info[0] is not None:
            base["exc_type"] = record.exc_info[0].__name__
        return json.dumps(base, ensure_ascii=False)


class PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        parts = [
            self.formatTime(record, datefmt="%H:%M:%S"),
            record.levelname[0],
            record.name + ":",
            record.getMessage(),
        ]
        if hasattr(record, "request_id"):
            parts.append(f"rid={record.request_id}")
        if hasattr(record, "path"):
            parts.append(f"path={record.path}")
        if hasattr(record, "status"):
            parts.append(f"status={record.status}")
        return " ".join(parts)


def configure_logging(settings: config.Settings) -> None:
    """Install a single stdout handler on the root logger.

    Idempotent: later calls are no-ops so that building several apps in
    one process (tests) does not stack handlers.

    Args:
        settings: Application settings providing ``log_level`` and
            ``json_logs``.
    """
    if getattr(configure_logging, "_configured", False):
        return
    root = logging.getLogger()
    root.setLevel(settings.log_level.upper())
    for handler in list(root.handlers):
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JsonFormatter() if settings.json_logs else PlainFormatter()
    )
    root.addHandler(handler)
    configure_logging._configured = True  # type: ignore[attr-defined]


async def logging_middleware(
    request: fastapi.Request,
    call_next: Callable[[fastapi.Request], Awaitable[fastapi.Response]],
) -> fastapi.Response:
    """Log the start and end of every HTTP request with a short request id."""
    rid = uuid.uuid4().hex[:8]
    start = time.perf_counter()
    request.state.request_id = rid
    logger = logging.getLogger("geoapi.request")
    logger.info(
        "request.start",
        extra={
            "request_id": rid,
            "path": request.url.path,
            "method": request.method,
        },
    )
    status: int | None = None
    try:
        response = await call_next(request)
        status = response.status_code
        return response
    finally:
        logger.info(
            "request.end",
            extra={
                "request_id": rid,
                "path": request.url.path,
                "method": request.method,
                "status": status,
                "duration_ms": round(
                    (time.perf_counter() - start) * 1000.0, 2
                ),
            },
        )
