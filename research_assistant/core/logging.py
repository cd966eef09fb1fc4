"""Centralized logging configuration.

Logs are JSON objects written to stdout, one per line:
- Prompts, source texts and model replies are never logged
- Correlation fields come from `extra=` and are all optional
"""

from __future__ import annotations

import json
import logging
import logging.config
import os
from datetime import UTC, datetime
from typing import Any


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

_OPTIONAL_FIELDS = (
    "request_id",
    "status_code",
    "duration_ms",
    "route",
    "upstream_status",
    "upstream_message",
)


class JsonFormatter(logging.Formatter):
    """Render a record as JSON without requiring any particular `extra` keys.

    Third-party loggers (uvicorn, httpx) emit records without our correlation
    fields, so every lookup falls back to None.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "method": getattr(record, "method", getattr(record, "http_method", None)),
            "path": getattr(record, "path", getattr(record, "request_path", None)),
        }
        for field in _OPTIONAL_FIELDS:
            payload[field] = getattr(record, field, None)

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def setup_logging() -> None:
    """Configure application logging (JSON to stdout)."""

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {
                    "()": "research_assistant.core.logging.JsonFormatter",
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                }
            },
            "root": {
                "level": LOG_LEVEL,
                "handlers": ["default"],
            },
        }
    )
