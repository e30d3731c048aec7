from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any

from app.context import get_correlation_id, get_security_context


_BASE_RECORD_KEYS = set(logging.makeLogRecord({}).__dict__.keys())
_STRUCTURED_FIELDS = {
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error",
    "entity_type",
    "user_id",
    "session_id",
    "cleared_by",
}
_MAX_ERROR_LENGTH = 500


def _current_actor() -> str | None:
    ctx = get_security_context()
    if ctx is None or ctx.principal is None:
        return None
    return ctx.principal.identity


class RequestContextFilter(logging.Filter):
    """Stamps records with the correlation id and acting principal of the current request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        if not getattr(record, "actor", None):
            record.actor = _current_actor()
        return True


_DEFAULT_RECORD_FACTORY = logging.getLogRecordFactory()


def _record_factory(*args: Any, **kwargs: Any) -> logging.LogRecord:
    record = _DEFAULT_RECORD_FACTORY(*args, **kwargs)
    if not getattr(record, "correlation_id", None):
        record.correlation_id = get_correlation_id()
    return record


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None),
            "actor": getattr(record, "actor", None),
        }

        fields = {
            key: value
            for key, value in record.__dict__.items()
            if key in _STRUCTURED_FIELDS and key not in _BASE_RECORD_KEYS
        }
        if record.exc_info:
            fields["exception"] = self.formatException(record.exc_info)

        error_value = fields.get("error")
        if isinstance(error_value, str):
            fields["error"] = error_value[:_MAX_ERROR_LENGTH]

        payload["fields"] = fields
        return json.dumps(payload, default=str)


def configure_logging() -> None:
    root_logger = logging.getLogger()
    if getattr(root_logger, "_hockeypickup_configured", False):
        return

    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JsonLogFormatter())
    handler.addFilter(RequestContextFilter())

    root_logger.handlers.clear()
    root_logger.filters.clear()
    root_logger.setLevel(level)
    logging.setLogRecordFactory(_record_factory)
    root_logger.addHandler(handler)
    root_logger._hockeypickup_configured = True  # type: ignore[attr-defined]
