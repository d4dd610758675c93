# logging_utils.py
# Structured JSON logging for boarding-intel (one JSON object per line)

import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

# Per-document correlation id (set by the pipeline for every parse call)
_document_id: ContextVar[Optional[str]] = ContextVar("document_id", default=None)

SERVICE_NAME = os.getenv("SERVICE_NAME", "boardingintel")
ENV = os.getenv("APP_ENV", "dev")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Optional file sink (e.g. for Promtail); stdout only when unset
LOG_FILE = os.getenv("LOG_FILE", "")

# Built-in LogRecord fields that must never be overwritten
_RESERVED_LOG_FIELDS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}


class JSONLogFormatter(logging.Formatter):
    """
    Format log records as single-line JSON.

    Each log line looks like:
        {
            "ts": "...",
            "level": "INFO",
            "logger": "boardingintel.pipeline",
            "service": "boardingintel",
            "env": "dev",
            "message": "...",
            "document_id": "...",
            ... plus all structured fields ...
        }
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "service": SERVICE_NAME,
            "env": ENV,
            "message": record.getMessage(),
        }

        did = _document_id.get()
        if did:
            payload["document_id"] = did

        for key, value in record.__dict__.items():
            if key.startswith("_"):
                continue
            if key in payload or key in _RESERVED_LOG_FIELDS:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def configure_logging(level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """
    Configure root logging once for the whole process.
    Output -> JSON to stdout (or `stream`), plus LOG_FILE when it is set.
    """
    root = logging.getLogger()

    if getattr(root, "_boardingintel_configured", False):
        return

    root.setLevel(level or LOG_LEVEL)

    formatter = JSONLogFormatter()

    stream_handler = logging.StreamHandler(stream or sys.stdout)
    stream_handler.setFormatter(formatter)
    root.addHandler(stream_handler)

    if LOG_FILE:
        try:
            log_dir = os.path.dirname(LOG_FILE)
            if log_dir:
                os.makedirs(log_dir, exist_ok=True)

            file_handler = logging.FileHandler(LOG_FILE)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            # Keep stdout logging only
            root.error(f"Failed to set up file logging: {e}")

    root._boardingintel_configured = True  # type: ignore[attr-defined]


def new_document_id() -> str:
    did = uuid.uuid4().hex
    _document_id.set(did)
    return did


def set_document_id(did: Optional[str]) -> None:
    _document_id.set(did)


def get_document_id() -> Optional[str]:
    return _document_id.get()


def log_event(
    logger: logging.Logger,
    event: str,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    """
    Structured logging helper.

    Ensures fields never collide with LogRecord built-ins.
    Automatically rewrites:
        filename → field_filename
        module   → field_module
        etc.
    """
    safe_fields: Dict[str, Any] = {}

    for key, value in fields.items():
        if key in _RESERVED_LOG_FIELDS:
            safe_fields[f"field_{key}"] = value
        else:
            safe_fields[key] = value

    logger.log(level, event, extra={"event": event, **safe_fields})


class PipelineLogger:
    """Thin logger wrapper carrying per-document stage timers."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)
        self.timers: Dict[str, float] = {}

    def info(self, msg, *args, **kwargs):
        self.logger.info(msg, *args, **kwargs)

    def error(self, msg, *args, **kwargs):
        self.logger.error(msg, *args, **kwargs)

    def warning(self, msg, *args, **kwargs):
        self.logger.warning(msg, *args, **kwargs)

    def debug(self, msg, *args, **kwargs):
        self.logger.debug(msg, *args, **kwargs)

    def _key(self, name: str) -> str:
        did = _document_id.get() or "global"
        return f"{did}:{name}"

    def start_timer(self, name: str) -> None:
        self.timers[self._key(name)] = time.perf_counter()

    def end_timer(self, name: str) -> float:
        start = self.timers.pop(self._key(name), None)
        if start is None:
            return 0.0
        return time.perf_counter() - start

    def log_attempt(self, backend: str, outcome: str, elapsed: float, **fields: Any) -> None:
        log_event(
            self.logger,
            "backend_attempt",
            backend=backend,
            outcome=outcome,
            duration_ms=int(elapsed * 1000),
            **fields,
        )


def get_logger(name: str) -> PipelineLogger:
    return PipelineLogger(f"boardingintel.{name}")
