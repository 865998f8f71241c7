"""
Structured logging for the POS engine.

Every log call takes a short message plus keyword context::

    logger.info("Order paid", order_id="ORD-1A2B", method="CASH")

The context travels on the record as ``record.context``. Production writes
one JSON object per line; other environments get a coloured single line.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pos_shared.config.settings import settings

# Records emitted from inside StructuredLogger report the caller's frame.
_CALLER_STACKLEVEL = 3


def _context(record: logging.LogRecord) -> dict[str, Any]:
    return getattr(record, "context", None) or {}


class JSONLineFormatter(logging.Formatter):
    """One JSON document per record, for log shipping."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "env": settings.environment,
        }
        context = _context(record)
        if context:
            entry["context"] = context
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        if settings.debug:
            entry["at"] = f"{record.pathname}:{record.lineno} in {record.funcName}"
        return json.dumps(entry, default=str, ensure_ascii=False)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output for a terminal."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[2;36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[1;31m",
        logging.CRITICAL: "\033[1;35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        line = f"{clock} {color}{record.levelname[:4]}{self.RESET} [{record.name}] {record.getMessage()}"

        context = _context(record)
        if context:
            line += "  " + " ".join(f"{key}={value!r}" for key, value in context.items())
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class StructuredLogger(logging.Logger):
    """
    Logger whose level methods accept keyword context.

    ``exc_info`` keeps its stdlib meaning on every level; any other keyword
    becomes part of the record context.
    """

    def _log_context(self, level: int, msg: str, args: tuple, context: dict[str, Any]) -> None:
        if not self.isEnabledFor(level):
            return
        exc_info = context.pop("exc_info", None)
        self._log(
            level,
            msg,
            args,
            exc_info=exc_info,
            extra={"context": context or None},
            stacklevel=_CALLER_STACKLEVEL,
        )

    def debug(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.DEBUG, msg, args, context)

    def info(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.INFO, msg, args, context)

    def warning(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.WARNING, msg, args, context)

    def error(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.ERROR, msg, args, context)

    def critical(self, msg: str, *args: Any, **context: Any) -> None:
        self._log_context(logging.CRITICAL, msg, args, context)


logging.setLoggerClass(StructuredLogger)

# Library loggers that are too chatty at INFO.
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "httpx": logging.WARNING,
}


def setup_logging() -> None:
    """Install the handler for the current environment. Safe to call more than once."""
    level = logging.DEBUG if settings.debug else logging.INFO
    formatter = JSONLineFormatter() if settings.environment == "production" else ConsoleFormatter()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name, quiet_level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> StructuredLogger:
    """``logging.getLogger`` typed as the structured logger."""
    return logging.getLogger(name)  # type: ignore[return-value]


def mask_guest_name(name: str | None) -> str:
    """Guest names are personal data: keep the first two characters only ("Zhang Wei" -> "Zh***")."""
    if not name or not name.strip():
        return "<no-guest>"
    return f"{name.strip()[:2]}***"


api_logger = get_logger("pos_api")
orders_logger = get_logger("pos_api.orders")
kitchen_logger = get_logger("pos_api.kitchen")
billing_logger = get_logger("pos_api.billing")
ktv_logger = get_logger("pos_api.ktv")

# Default external collaborators write here.
audit_logger = get_logger("pos.audit")
printer_logger = get_logger("pos.printer")
