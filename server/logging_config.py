"""
Logging setup for the Presidente server.

Two output styles share one set of context fields:
- production: one JSON object per line (JSONFormatter)
- anything else: coloured single-line text (DevelopmentFormatter)

Context (connection, room, match, seat) comes from context variables set
by the WebSocket endpoint, or from `extra=` / ContextLogger on a call.
"""

import json
import logging
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

connection_id_var: ContextVar[Optional[str]] = ContextVar("connection_id", default=None)
room_code_var: ContextVar[Optional[str]] = ContextVar("room_code", default=None)
match_id_var: ContextVar[Optional[str]] = ContextVar("match_id", default=None)

_CONTEXT_VARS = {
    "connection_id": connection_id_var,
    "room_code": room_code_var,
    "match_id": match_id_var,
}
_RECORD_ONLY_FIELDS = ("seat",)

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("uvicorn.access", "uvicorn.error", "websockets", "asyncio")


def _collect_context(record: logging.LogRecord) -> dict:
    """Context variables overlaid with any context passed on the record."""
    context = {name: var.get() for name, var in _CONTEXT_VARS.items()}
    for name in (*_CONTEXT_VARS, *_RECORD_ONLY_FIELDS):
        value = getattr(record, name, None)
        if value is not None:
            context[name] = value
    return {k: v for k, v in context.items() if v is not None}


class JSONFormatter(logging.Formatter):
    """One JSON document per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_collect_context(record),
        }
        if record.levelno >= logging.ERROR:
            entry["where"] = f"{record.pathname}:{record.lineno} in {record.funcName}"
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """Coloured text with short context tags, for a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    @staticmethod
    def _tag(name: str, value) -> str:
        # ids are uuids; eight characters is enough to tell them apart
        if name.endswith("_id"):
            value = str(value)[:8]
        return f"{name.split('_')[0]}={value}"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        level = f"{color}{record.levelname:8}{self.RESET if color else ''}"
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]

        tags = [self._tag(k, v) for k, v in _collect_context(record).items()]
        where = f" [{' '.join(tags)}]" if tags else ""

        line = f"{clock} {level} {record.name}{where} - {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str = "INFO", environment: str = "development") -> None:
    """
    Install a single stdout handler on the root logger.

    Args:
        level: Level name; unknown names fall back to INFO.
        environment: "production" selects JSON output.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        JSONFormatter() if environment == "production" else DevelopmentFormatter()
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).info(f"Logging ready ({environment}, {level.upper()})")


class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that stamps fixed context onto every record.

    Usage:
        logger = get_logger(__name__)
        logger.with_context(room_code="ABCD", seat=2).info("Seat skipped")
    """

    def __init__(self, logger: logging.Logger, extra: Optional[dict] = None):
        super().__init__(logger, dict(extra or {}))

    def with_context(self, **context) -> "ContextLogger":
        """A copy of this adapter with more context fields."""
        return ContextLogger(self.logger, {**self.extra, **context})

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Context-aware logger for a module."""
    return ContextLogger(logging.getLogger(name))
