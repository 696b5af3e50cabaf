"""JSON logger utility for the resources env hook.

Mirrors the structured logger used by the pipeline Lambdas: a JSON formatter
plus an adapter that merges bound context (stage, region, stack, function)
with per-call ``extra`` fields.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict

_CONTEXT_FIELDS = ("stage", "region", "stack", "function")


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        payload: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "timestamp": record.created,
        }
        for field in _CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value:
                payload[field] = value
        for field in ("missing", "keys", "path", "count"):
            value = getattr(record, field, None)
            if value is not None:
                payload[field] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class _Adapter(logging.LoggerAdapter):
    def process(self, msg: Any, kwargs: Dict[str, Any]):  # type: ignore[override]
        extra = self.extra.copy() if isinstance(self.extra, dict) else {}
        if "extra" in kwargs and isinstance(kwargs["extra"], dict):
            extra.update(kwargs["extra"])
        kwargs["extra"] = extra
        return msg, kwargs

    def bind(self, **context: Any) -> "_Adapter":
        extra = self.extra.copy() if isinstance(self.extra, dict) else {}
        extra.update({k: v for k, v in context.items() if v is not None})
        return _Adapter(self.logger, extra)


def get_logger(name: str, **context: Any) -> _Adapter:
    """Return a JSON-formatted logger adapter bound to the given context."""
    base = logging.getLogger(name)
    if not base.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(_JsonFormatter())
        base.addHandler(handler)
    level = os.environ.get("RESOURCES_ENV_LOG_LEVEL", "INFO").upper()
    base.setLevel(getattr(logging, level, logging.INFO))
    return _Adapter(base, {k: v for k, v in context.items() if v is not None})
