"""Structured logging for the gateway.

Services log through ``get_logger(__name__)`` and pass context as keyword
fields. Those fields pass through ``RedactionFilter`` before any handler
formats them, so phone numbers and pair codes never reach the log stream
in clear.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import IO, Any

# Set per request by the correlation middleware
correlation_id_ctx: ContextVar[str | None] = ContextVar("correlation_id", default=None)

# Field name -> redaction style
MASKED_FIELDS = {"number": "tail", "code": "full"}
VISIBLE_DIGITS = 4


def mask_value(value: Any, style: str) -> str:
    """Mask a sensitive value, keeping the last digits for ``tail`` style."""
    text = str(value)
    if style == "tail" and len(text) > VISIBLE_DIGITS:
        return "*" * (len(text) - VISIBLE_DIGITS) + text[-VISIBLE_DIGITS:]
    return "*" * len(text)


class RedactionFilter(logging.Filter):
    """Masks sensitive keyword fields on every record it sees."""

    def filter(self, record: logging.LogRecord) -> bool:
        fields = getattr(record, "extra_fields", None)
        if fields:
            record.extra_fields = {
                key: mask_value(value, MASKED_FIELDS[key])
                if key in MASKED_FIELDS and value is not None
                else value
                for key, value in fields.items()
            }
        return True


def _base_fields(record: logging.LogRecord, service_name: str) -> dict[str, Any]:
    data: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": record.levelname,
        "service": service_name,
        "logger": record.name,
        "message": record.getMessage(),
    }
    correlation_id = correlation_id_ctx.get()
    if correlation_id:
        data["correlation_id"] = correlation_id
    return data


class JsonFormatter(logging.Formatter):
    """One JSON object per line: base fields, keyword fields, then exception text."""

    def __init__(self, service_name: str = "pairgate"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        data = _base_fields(record, self.service_name)
        data.update(getattr(record, "extra_fields", None) or {})
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        if record.levelno >= logging.ERROR:
            data["location"] = f"{record.pathname}:{record.lineno} ({record.funcName})"
        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Single-line ``time level [correlation] message key=value`` output for local runs."""

    def __init__(self, service_name: str = "pairgate"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        data = _base_fields(record, self.service_name)
        line = (
            f"{data['timestamp'][:19]} {record.levelname:<7} "
            f"[{data.get('correlation_id', '-')}] {data['message']}"
        )
        fields = getattr(record, "extra_fields", None)
        if fields:
            line += " " + " ".join(f"{k}={v}" for k, v in fields.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(
    log_format: str = "json",
    log_level: str = "INFO",
    service_name: str = "pairgate",
    stream: IO[str] | None = None,
) -> None:
    """Install a single redacting stream handler on the root logger.

    Args:
        log_format: 'json' for structured logging, anything else for text
        log_level: Logging level name; unknown names fall back to INFO
        service_name: Service name stamped on every line
        stream: Output stream, stdout by default
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.addFilter(RedactionFilter())
    if log_format.lower() == "json":
        handler.setFormatter(JsonFormatter(service_name=service_name))
    else:
        handler.setFormatter(TextFormatter(service_name=service_name))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


class StructuredLogger:
    """Thin wrapper turning keyword arguments into ``record.extra_fields``."""

    def __init__(self, name: str):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, msg: str, fields: dict[str, Any], exc_info: bool = False) -> None:
        extra = {"extra_fields": fields} if fields else None
        self._logger.log(level, msg, extra=extra, exc_info=exc_info)

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, fields)

    def error(self, msg: str, **fields: Any) -> None:
        self._log(logging.ERROR, msg, fields)

    def exception(self, msg: str, **fields: Any) -> None:
        """Log at ERROR with the active exception's traceback."""
        self._log(logging.ERROR, msg, fields, exc_info=True)


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(name)
