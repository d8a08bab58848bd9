"""
JSON logging for the finance tracker API.

Each record carries `timestamp`, `level`, `logger`, `message` and `service`,
plus the active trace/span ids and whatever `extra` the caller passed.
Credential-like extras are masked before they are written.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "finance-tracker-api"

REDACTED = "***"
SENSITIVE_FIELDS = frozenset({"password", "password_hash", "token", "authorization"})


class OTelJSONFormatter(jsonlogger.JsonFormatter):
    """JSON formatter that tags records with the service name and current span."""

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("service", SERVICE_NAME)

        span = trace.get_current_span()
        if span != trace.INVALID_SPAN:
            ctx = span.get_span_context()
            if ctx.is_valid:
                log_record["trace_id"] = trace.format_trace_id(ctx.trace_id)
                log_record["span_id"] = trace.format_span_id(ctx.span_id)

        for key in SENSITIVE_FIELDS.intersection(log_record):
            log_record[key] = REDACTED

        if "level" in log_record:
            log_record["level"] = log_record["level"].upper()
        else:
            log_record["level"] = record.levelname


def build_formatter() -> OTelJSONFormatter:
    return OTelJSONFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s",
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
    )


def setup_logging(level: str = "INFO") -> None:
    """Route every logger through a single JSON handler on stdout."""
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # Reloads would otherwise stack handlers
    for existing in root_logger.handlers[:]:
        root_logger.removeHandler(existing)

    root_logger.addHandler(handler)

    # The request middleware already logs one line per request
    logging.getLogger("uvicorn.access").disabled = True
    logging.getLogger("sqlalchemy.engine").setLevel("WARNING")
    logging.getLogger("httpx").setLevel("WARNING")
