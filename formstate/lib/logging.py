"""Logging utilities for formstate.

Every engine logs through a ``FormLogger`` bound to its form name, so records
can be filtered per form. ``setup_logging`` configures console (and optional
file) output in plain text or JSON lines.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

__all__ = [
    "setup_logging",
    "JSONFormatter",
    "FormLogger",
    "get_form_logger",
]

# Context keys promoted to top-level JSON fields
CONTEXT_KEYS = ("form", "field")

_RESERVED_ATTRS = frozenset(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
}


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Example output:
        {"ts": "2025-01-15T10:30:00.123Z", "level": "DEBUG",
         "logger": "formstate.engine.form", "form": "signup",
         "msg": "Evaluating email (trigger_matched)"}

    ``form`` and ``field`` are lifted to the top level; any other ``extra=``
    attributes go under ``"extra"``.
    """

    def __init__(self, exclude_fields: Optional[Iterable[str]] = None) -> None:
        super().__init__()
        self.exclude_fields = frozenset(exclude_fields or ())

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
        }
        extra: Dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in self.exclude_fields:
                continue
            if key in CONTEXT_KEYS:
                entry[key] = value
            else:
                extra[key] = value

        entry["msg"] = record.getMessage()
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class FormLogger:
    """Wraps a stdlib logger and attaches form context to every record.

    Example:
        logger = get_form_logger("formstate.engine.form", form="signup")
        logger.bind(field="email").debug("Evaluating")
        # record.form == "signup", record.field == "email"
    """

    def __init__(self, name: str, context: Optional[Dict[str, Any]] = None) -> None:
        self._logger = logging.getLogger(name)
        self._context: Dict[str, Any] = dict(context or {})

    @property
    def name(self) -> str:
        return self._logger.name

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    def set_context(self, **kwargs: Any) -> None:
        self._context.update(kwargs)

    def clear_context(self) -> None:
        self._context.clear()

    def bind(self, **kwargs: Any) -> "FormLogger":
        """Child logger with extra context; this logger is left unchanged."""
        return FormLogger(self.name, {**self._context, **kwargs})

    def log(self, level: int, msg: str, *args: Any, **kwargs: Any) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {**(kwargs.pop("extra", None) or {}), **self._context}
        self._logger.log(level, msg, *args, extra=extra, **kwargs)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.log(logging.DEBUG, msg, *args, **kwargs)


def get_form_logger(name: str, **context: Any) -> FormLogger:
    return FormLogger(name, context)


def setup_logging(
    verbose: bool = False,
    json_format: bool = False,
    log_file: Optional[str] = None,
    level: Optional[str] = None,
) -> None:
    """Configure the root logger for CLI use.

    Existing root handlers are replaced, so calling this twice does not
    duplicate output.

    Args:
        verbose: Log at DEBUG regardless of ``level``
        json_format: Emit JSON lines instead of plain text
        log_file: Also write records to this file
        level: Level name such as "INFO"; unknown names fall back to INFO
    """
    if verbose:
        resolved = logging.DEBUG
    else:
        resolved = logging.getLevelName((level or "INFO").upper())
        if not isinstance(resolved, int):
            resolved = logging.INFO

    formatter: logging.Formatter
    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-7s %(name)s: %(message)s", datefmt="%H:%M:%S"
        )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.setLevel(resolved)
    for handler in handlers:
        handler.setLevel(resolved)
        handler.setFormatter(formatter)
        root.addHandler(handler)
