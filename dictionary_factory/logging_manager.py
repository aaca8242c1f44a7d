"""Logging setup for dictionary-factory.

Records go to two handlers on the ``dictionary_factory`` logger: a rotating
JSON file under ``DICTIONARY_FACTORY_LOG_DIR`` (default ``./log``) and a terse
console stream. Batch and term identifiers set through :func:`log_context`
are attached to every record emitted inside the block, including records from
child loggers such as ``dictionary_factory.pipeline``.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Dict, Iterator, Optional

LOGGER_NAME = "dictionary_factory"
DEFAULT_LOG_LEVEL = logging.INFO
LOG_DIR = Path(
    os.environ.get("DICTIONARY_FACTORY_LOG_DIR")
    or Path(__file__).resolve().parent.parent / "log"
)
LOG_FILE = LOG_DIR / "dictionary_factory.log"

# Structured fields lifted to the top level of each JSON line.
CONTEXT_FIELDS: tuple[str, ...] = ("batch_id", "term", "event", "stage")

_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime", "taskName", "console_suppress"}

_context: contextvars.ContextVar[Dict[str, object]] = contextvars.ContextVar(
    "dictionary_factory_log_context", default={}
)
_logger: Optional[logging.Logger] = None


class JSONLogFormatter(logging.Formatter):
    """One JSON object per record; unknown ``extra`` keys land under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        payload: Dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extra: Dict[str, object] = {}
        for key, value in vars(record).items():
            if key in CONTEXT_FIELDS:
                if value is not None:
                    payload[key] = value
            elif key not in _STANDARD_ATTRS:
                extra[key] = value
        if extra:
            payload["extra"] = extra
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """``LEVEL [term] message`` lines for the terminal."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401
        term = getattr(record, "term", None)
        prefix = f"{record.levelname:<7} "
        if term:
            prefix += f"[{term}] "
        line = prefix + record.getMessage()
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


class LogContextFilter(logging.Filter):
    """Copy the active :func:`log_context` values onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        for key, value in _context.get().items():
            setattr(record, key, value)
        return True


class ConsoleSuppressFilter(logging.Filter):
    """Keep records logged with ``console_suppress=True`` out of the terminal."""

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: D401
        return not getattr(record, "console_suppress", False)


def _build_logger(level: int) -> logging.Logger:
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    context_filter = LogContextFilter()

    LOG_DIR.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        LOG_FILE, maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    file_handler.setFormatter(JSONLogFormatter())
    file_handler.addFilter(context_filter)

    console = logging.StreamHandler()
    console.setFormatter(ConsoleFormatter())
    console.addFilter(context_filter)
    console.addFilter(ConsoleSuppressFilter())

    logger.addHandler(file_handler)
    logger.addHandler(console)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return the project logger, or its child ``name``."""
    global _logger
    if _logger is None:
        _logger = _build_logger(DEFAULT_LOG_LEVEL)
    return _logger.getChild(name) if name else _logger


def configure_logging_level(debug_enabled: bool = False, log_level: Optional[int] = None) -> int:
    """Set the logger and handler level; ``log_level`` wins over ``debug_enabled``."""
    if log_level is None:
        log_level = logging.DEBUG if debug_enabled else DEFAULT_LOG_LEVEL
    logger = get_logger()
    logger.setLevel(log_level)
    for handler in logger.handlers:
        handler.setLevel(log_level)
    return log_level


def console_info(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    (logger_obj or get_logger()).info(message, *args)


def console_warning(
    message: str, *args: object, logger_obj: Optional[logging.Logger] = None
) -> None:
    (logger_obj or get_logger()).warning(message, *args)


def console_error(message: str, *args: object, logger_obj: Optional[logging.Logger] = None) -> None:
    (logger_obj or get_logger()).error(message, *args)


def get_log_context() -> Dict[str, object]:
    return dict(_context.get())


@contextlib.contextmanager
def log_context(**values: object) -> Iterator[None]:
    """Add ``values`` (``None`` entries skipped) to records logged inside the block."""
    merged = dict(_context.get())
    merged.update({key: value for key, value in values.items() if value is not None})
    token = _context.set(merged)
    try:
        yield
    finally:
        _context.reset(token)
