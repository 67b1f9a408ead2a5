"""
tzlookup Observability

Structured logging for tzlookup components. Every record carries the layer
that produced it, an optional operation name and duration, an error code, and
free-form keyword context.

    ┌─────────────────────────────────────────────────────────┐
    │                    Application Code                      │
    │  logger.warning("Skipping invalid zone", zone_id=x)     │
    └───────────────────────┬─────────────────────────────────┘
                            │
    ┌───────────────────────▼─────────────────────────────────┐
    │                        TzLogger                          │
    │        layer, operation, duration, structured data       │
    └───────────────────────┬─────────────────────────────────┘
                            │
    ┌───────────────────────▼─────────────────────────────────┐
    │            StructuredHandler  │  TextHandler             │
    └─────────────────────────────────────────────────────────┘

Copyright (c) 2026 Momentum. All rights reserved.
"""

from __future__ import annotations

import functools
import json
import logging
import sys
import threading
import time
import traceback
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, TypeVar

ROOT_LOGGER_NAME = "tzlookup"


class LogLevel(Enum):
    """Log severity levels."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class TzLayer(Enum):
    """tzlookup layers for categorization."""
    PARSER = "parser"
    REGISTRY = "registry"
    FINDER = "finder"
    CONFIG = "config"
    CLI = "cli"


@dataclass
class LogEvent:
    """Structured log event."""
    timestamp: str
    level: str
    logger: str
    message: str
    layer: str = ""
    operation: str = ""
    duration_ms: Optional[float] = None
    error_code: str = ""
    context: Dict[str, Any] = field(default_factory=dict)
    exception: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, excluding empty values."""
        d = asdict(self)
        return {k: v for k, v in d.items() if v is not None and v != "" and v != {}}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), default=str)

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> "LogEvent":
        event = cls(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname.lower(),
            logger=record.name,
            message=record.getMessage(),
            layer=getattr(record, "layer", ""),
            operation=getattr(record, "operation", ""),
            duration_ms=getattr(record, "duration_ms", None),
            error_code=getattr(record, "error_code", ""),
            context=getattr(record, "context", {}),
        )
        if record.exc_info:
            event.exception = "".join(traceback.format_exception(*record.exc_info))
        return event


class StructuredHandler(logging.Handler):
    """Logging handler that outputs one JSON object per line."""

    def __init__(self, stream: Any = None):
        super().__init__()
        self.stream = stream or sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.stream.write(LogEvent.from_record(record).to_json() + "\n")
            self.stream.flush()
        except Exception:
            self.handleError(record)


class TextHandler(logging.Handler):
    """Logging handler for humans: ``level layer: message key=value``."""

    def __init__(self, stream: Any = None):
        super().__init__()
        self.stream = stream or sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        try:
            event = LogEvent.from_record(record)
            line = f"{event.level.upper()} {event.layer or event.logger}: {event.message}"
            if event.context:
                line += " " + " ".join(f"{k}={v}" for k, v in event.context.items())
            if event.exception:
                line += "\n" + event.exception.rstrip()
            self.stream.write(line + "\n")
            self.stream.flush()
        except Exception:
            self.handleError(record)


_configure_lock = threading.Lock()


def configure_logging(
    level: str = LogLevel.WARNING.value,
    fmt: str = "json",
    stream: Any = None,
) -> logging.Logger:
    """
    Install a single handler on the ``tzlookup`` logger.

    Calling again replaces the previous handler, so the level and format can
    follow configuration changes.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    with _configure_lock:
        for existing in list(root.handlers):
            if isinstance(existing, (StructuredHandler, TextHandler)):
                root.removeHandler(existing)
        handler: logging.Handler = TextHandler(stream) if fmt == "text" else StructuredHandler(stream)
        root.addHandler(handler)
        root.setLevel(getattr(logging, LogLevel(level).value.upper()))
    return root


class TzLogger:
    """
    Structured logger for tzlookup components.

    Records go to ``tzlookup.<layer>.<name>`` and propagate to whatever handler
    configure_logging() installed on the ``tzlookup`` logger.
    """

    def __init__(self, name: str, layer: TzLayer):
        self.name = name
        self.layer = layer
        self._logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{layer.value}.{name}")

    def _log(
        self,
        level: int,
        message: str,
        operation: str = "",
        error_code: str = "",
        duration_ms: Optional[float] = None,
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        extra = {
            "layer": self.layer.value,
            "operation": operation,
            "error_code": error_code,
            "duration_ms": duration_ms,
            "context": context,
        }
        self._logger.log(level, message, extra=extra, exc_info=exc_info)

    def debug(self, message: str, **context: Any) -> None:
        self._log(logging.DEBUG, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(logging.INFO, message, **context)

    def warning(self, message: str, **context: Any) -> None:
        self._log(logging.WARNING, message, **context)

    def error(
        self,
        message: str,
        error_code: str = "",
        exc_info: bool = False,
        **context: Any,
    ) -> None:
        self._log(logging.ERROR, message, error_code=error_code, exc_info=exc_info, **context)

    def operation(
        self,
        name: str,
        duration_ms: float,
        success: bool = True,
        **context: Any,
    ) -> None:
        """Log an operation completion."""
        level = logging.DEBUG if success else logging.WARNING
        status = "completed" if success else "failed"
        self._log(
            level,
            f"Operation {name} {status}",
            operation=name,
            duration_ms=duration_ms,
            **context,
        )


_loggers: Dict[str, TzLogger] = {}
_loggers_lock = threading.Lock()


def get_logger(name: str, layer: TzLayer) -> TzLogger:
    """Get a logger for a tzlookup component."""
    key = f"{layer.value}.{name}"
    with _loggers_lock:
        logger = _loggers.get(key)
        if logger is None:
            logger = TzLogger(name, layer)
            _loggers[key] = logger
        return logger


T = TypeVar("T")


def timed_operation(
    logger: TzLogger,
    operation_name: str,
) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Decorator for timing and logging operations."""
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            start = time.monotonic()
            success = True
            try:
                return func(*args, **kwargs)
            except Exception:
                success = False
                raise
            finally:
                duration_ms = (time.monotonic() - start) * 1000
                logger.operation(operation_name, duration_ms, success)
        return wrapper
    return decorator
