"""
DecoderCore Structured Logger
==============================

:class:`DecoderLogger` binds a stdlib logger under the ``decodercore``
namespace to one component. Records go to stderr through Rich and,
optionally, to a rotating file as plain text or JSON lines.

References:
    - Python logging HOWTO. https://docs.python.org/3/howto/logging.html
    - Rich library. https://github.com/Textualize/rich
"""

from __future__ import annotations

import json
import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Iterator

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

LOGGER_NAMESPACE = "decodercore"

_LOG_THEME = Theme(
    {
        "log.level.debug": "dim cyan",
        "log.level.info": "bold bright_blue",
        "log.level.warning": "bold yellow",
        "log.level.error": "bold red",
    }
)

_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_RECORD_KWARGS = frozenset({"exc_info", "stack_info", "stacklevel"})


class _JSONLinesFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message,
    then ``component``, ``operation`` and ``extra`` when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for attr in ("component", "operation"):
            value = getattr(record, attr, None)
            if value is not None:
                entry[attr] = value
        fields = getattr(record, "fields", None)
        if fields:
            entry["extra"] = fields
        if record.exc_info and record.exc_info[1] is not None:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


@dataclass
class Timer:
    """Elapsed-time holder yielded by :meth:`DecoderLogger.timed`."""

    started: float

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started


class DecoderLogger:
    """Component logger with an operation scope and structured fields.

    Keyword arguments beyond the stdlib ones end up in the record's
    ``extra`` object in JSON output::

        log = DecoderLogger("match_index", log_file="decoder.log", json_logs=True)
        with log.operation("load"):
            log.info("Indexed %d records", count, source=url)
    """

    def __init__(
        self,
        component: str,
        *,
        log_level: str = "WARNING",
        log_file: str | Path | None = None,
        json_logs: bool = False,
        max_bytes: int = 10_485_760,
        backup_count: int = 5,
        console_output: bool = True,
    ) -> None:
        self._component = component
        self._operation: str | None = None
        level = getattr(logging, log_level.upper(), logging.INFO)

        self._logger = logging.getLogger(f"{LOGGER_NAMESPACE}.{component}")
        self._logger.setLevel(level)
        self._logger.propagate = False

        for handler in list(self._logger.handlers):
            self._logger.removeHandler(handler)
            handler.close()

        if console_output:
            self._logger.addHandler(
                RichHandler(
                    level=level,
                    console=Console(theme=_LOG_THEME, stderr=True),
                    show_path=False,
                    rich_tracebacks=True,
                    markup=False,
                )
            )

        if log_file:
            path = Path(log_file)
            path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(
                _JSONLinesFormatter()
                if json_logs
                else logging.Formatter(_TEXT_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S%z")
            )
            self._logger.addHandler(file_handler)

    @property
    def underlying(self) -> logging.Logger:
        return self._logger

    @contextmanager
    def operation(self, name: str) -> Iterator[DecoderLogger]:
        """Tag records logged inside the block with ``operation=name``."""
        previous, self._operation = self._operation, name
        try:
            yield self
        finally:
            self._operation = previous

    @contextmanager
    def timed(self, label: str) -> Iterator[Timer]:
        """Log start and completion of *label* at DEBUG with the elapsed time."""
        timer = Timer(time.perf_counter())
        self.debug("Started: %s", label)
        try:
            yield timer
        finally:
            self.debug("Completed: %s (%.3f sec)", label, timer.elapsed)

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.DEBUG, msg, args, kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.INFO, msg, args, kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self._log(logging.ERROR, msg, args, kwargs)

    def _log(self, level: int, msg: str, args: tuple, kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        passthrough = {k: kwargs.pop(k) for k in list(kwargs) if k in _RECORD_KWARGS}
        extra = {
            "component": self._component,
            "operation": self._operation,
            "fields": kwargs,
        }
        passthrough.setdefault("stacklevel", 3)
        self._logger.log(level, msg, *args, extra=extra, **passthrough)
