"""
Structured logging for the IPX cache.

Log calls take keyword fields (``logger.info("Cache hit", path=path)``).
The request being served and the cache operation in progress are carried in
contextvars and attached to every record. Console output goes through rich;
an optional log file receives JSON lines.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Generator

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

ROOT_LOGGER = "ipxcache"

_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_operation_var: ContextVar[str | None] = ContextVar("operation", default=None)


def get_request_id() -> str | None:
    return _request_id_var.get()


def get_operation() -> str | None:
    return _operation_var.get()


def set_request_id(request_id: str | None) -> None:
    """Tag subsequent records in this context with the caller's request ID."""
    _request_id_var.set(request_id)


def _context_fields() -> dict[str, str]:
    """Current context as record fields, omitting unset values."""
    fields = {"request_id": get_request_id(), "operation": get_operation()}
    return {k: v for k, v in fields.items() if v}


@contextmanager
def log_context(
    request_id: str | None = None,
    operation: str | None = None,
) -> Generator[None, None, None]:
    """Set request_id and/or operation for the duration of the block."""
    tokens = []
    if request_id is not None:
        tokens.append((_request_id_var, _request_id_var.set(request_id)))
    if operation is not None:
        tokens.append((_operation_var, _operation_var.set(operation)))

    try:
        yield
    finally:
        for var, token in reversed(tokens):
            var.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per line: level, logger, message, context, fields."""

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context_fields(),
        }

        fields = getattr(record, "fields", None)
        if fields:
            log_obj["extra"] = fields

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, default=str)


class ContextRichHandler(RichHandler):
    """Rich handler that prefixes the level with request and operation."""

    def get_level_text(self, record: logging.LogRecord) -> Text:
        level_text = super().get_level_text(record)
        context = _context_fields()
        if not context:
            return level_text

        text = level_text.copy()
        if "request_id" in context:
            text.append(f" {context['request_id'][:8]}", style="dim")
        if "operation" in context:
            text.append(f" {context['operation']}", style="cyan")
        return text


class ContextLogger:
    """Logger wrapper turning keyword arguments into structured fields."""

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    def _log(self, level: int, msg: str, exc_info: bool = False, **fields: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(
            level,
            msg,
            exc_info=exc_info,
            extra={"fields": {**_context_fields(), **fields}},
        )

    def debug(self, msg: str, **fields: Any) -> None:
        self._log(logging.DEBUG, msg, **fields)

    def info(self, msg: str, **fields: Any) -> None:
        self._log(logging.INFO, msg, **fields)

    def warning(self, msg: str, **fields: Any) -> None:
        self._log(logging.WARNING, msg, **fields)

    def error(self, msg: str, exc_info: bool = False, **fields: Any) -> None:
        self._log(logging.ERROR, msg, exc_info=exc_info, **fields)


_console: Console | None = None
_setup_done: bool = False


def get_console() -> Console:
    """Get the shared stderr console."""
    global _console
    if _console is None:
        _console = Console(stderr=True)
    return _console


def setup_logging(
    log_level: str = "INFO",
    log_file: Path | None = None,
    console_output: bool = True,
) -> None:
    """Configure the ``ipxcache`` logger.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: JSON-lines file receiving every record. None disables it.
        console_output: Whether to log to the rich console.
    """
    global _setup_done

    level = getattr(logging, log_level.upper())
    cache_logger = logging.getLogger(ROOT_LOGGER)
    cache_logger.setLevel(level)

    for handler in cache_logger.handlers:
        handler.close()
    cache_logger.handlers.clear()

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(JSONFormatter())
        file_handler.setLevel(logging.DEBUG)
        cache_logger.addHandler(file_handler)

    if console_output:
        rich_handler = ContextRichHandler(
            console=get_console(),
            show_time=True,
            show_path=False,
            rich_tracebacks=True,
            markup=False,
        )
        rich_handler.setLevel(level)
        cache_logger.addHandler(rich_handler)

    # Records also reach the host application's handlers
    cache_logger.propagate = True

    logging.getLogger("aiosqlite").setLevel(logging.WARNING)

    _setup_done = True


def get_logger(name: str) -> ContextLogger:
    """Get a context-aware logger under the ``ipxcache`` namespace."""
    if not _setup_done:
        setup_logging()

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    return ContextLogger(logging.getLogger(name))
