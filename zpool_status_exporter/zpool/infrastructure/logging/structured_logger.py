"""
Structured JSON logger used by the exporter services.

Records go to stderr; stdout is reserved for `--oneshot-test-print` output.
"""
import json
import logging
import sys
from typing import Dict, Any, Optional
from datetime import datetime, timezone
from ...core.interfaces.logger_interface import ILogger

_RESERVED_ATTRS = frozenset({
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'stack_info',
    'exc_info', 'exc_text', 'message', 'timestamp', 'taskName',
})


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class StructuredLogger(ILogger):
    """ILogger writing one JSON object per record."""

    def __init__(self, name: str = "zpool_status_exporter", level: str = "INFO"):
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(getattr(logging, level.upper()))

        if not self.logger.handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(handler)

        # Prevent duplicate logs through the root handler
        self.logger.propagate = False

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, extra)

    def critical(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.CRITICAL, message, extra)

    def exception(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self._log(logging.ERROR, message, extra, exc_info=True)

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False) -> None:
        """Internal logging method with structured context."""
        if not self.logger.isEnabledFor(level):
            return

        record = self.logger.makeRecord(
            name=self.name,
            level=level,
            fn="",
            lno=0,
            msg=message,
            args=(),
            exc_info=sys.exc_info() if exc_info else None
        )
        for key, value in (extra or {}).items():
            setattr(record, key, value)
        record.timestamp = _utc_now()

        self.logger.handle(record)


class StructuredFormatter(logging.Formatter):
    """Formats log records as compact JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": getattr(record, 'timestamp', None) or _utc_now(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in log_entry:
                continue
            try:
                json.dumps(value)
                log_entry[key] = value
            except (TypeError, ValueError):
                log_entry[key] = str(value)

        return json.dumps(log_entry, ensure_ascii=False, separators=(',', ':'))


class ContextLogger(StructuredLogger):
    """Logger with persistent context added to every message (e.g. the service name)."""

    def __init__(self, name: str = "zpool_status_exporter", level: str = "INFO",
                 context: Optional[Dict[str, Any]] = None):
        super().__init__(name, level)
        self.context = context or {}

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False) -> None:
        merged_extra = self.context.copy()
        if extra:
            merged_extra.update(extra)

        super()._log(level, message, merged_extra, exc_info)
