"""
Structured Logging for dcfail.

This module provides a logging infrastructure that supports context binding,
a specialized logger for classified connection failures, and consistent
formatting across the package.

Architecture Context
--------------------
All modules should import get_logger() from here rather than using Python's
logging directly:

    # Good - uses dcfail's structured logging
    from dcfail.core.logging import get_logger
    logger = get_logger(__name__)

    # Avoid - bypasses our structure
    import logging
    logger = logging.getLogger(__name__)

Logger Types
------------
**StructuredLogger**
    Base logger with context binding support. Allows attaching key-value pairs
    that appear in all subsequent log messages:

        logger = get_logger(__name__)
        logger.bind(apn="internet")
        logger.info("Setup requested")  # includes apn=internet

**FailCauseLogger**
    Records classified data-call failures for one connection. Event-loggable
    causes are logged at WARNING, everything else at DEBUG:

        flog = FailCauseLogger(apn="ims")
        flog.record(classify(0x1A))
        flog.summary()

Design Decisions
----------------
1. **Context binding**: Avoids repetitive passing of IDs to every log call.
2. **Loggability from policy**: FailCauseLogger asks is_event_loggable()
   rather than keeping its own list.
3. **Lazy initialization**: Loggers configured on first use, not import.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from rich.logging import RichHandler

from dcfail.core.fail_cause import FailCauseReport


@dataclass
class LogConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    date_format: str = "%Y-%m-%d %H:%M:%S"
    file_path: Optional[Path] = None
    console: bool = True


class StructuredLogger:
    """
    Structured logger with context support.

    Provides consistent logging across the application with
    support for structured fields and context tracking.
    """

    def __init__(self, name: str, config: Optional[LogConfig] = None) -> None:
        self.logger = logging.getLogger(name)
        self.config = config or LogConfig()
        self._context: dict[str, Any] = {}
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger."""
        level = getattr(logging, self.config.level.upper(), logging.INFO)
        self.logger.setLevel(level)

        # Remove existing handlers
        for handler in self.logger.handlers:
            handler.close()
        self.logger.handlers.clear()

        if self.config.console:
            # RichHandler has its own formatting
            console_handler = RichHandler(
                show_time=True,
                show_path=False,
                markup=False,
                rich_tracebacks=True,
            )
            console_handler.setLevel(level)
            self.logger.addHandler(console_handler)

        if self.config.file_path:
            self.config.file_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(self.config.file_path)
            file_handler.setLevel(level)
            file_handler.setFormatter(
                logging.Formatter(self.config.format, datefmt=self.config.date_format)
            )
            self.logger.addHandler(file_handler)

    def reconfigure(self, config: LogConfig) -> None:
        """Swap in a new configuration, keeping bound context."""
        self.config = config
        self._setup_logger()

    def bind(self, **kwargs: Any) -> "StructuredLogger":
        """Attach fields to every subsequent message."""
        self._context.update(kwargs)
        return self

    def unbind(self, *keys: str) -> "StructuredLogger":
        """Drop previously bound fields."""
        for key in keys:
            self._context.pop(key, None)
        return self

    def _format_message(self, message: str, **kwargs: Any) -> str:
        """Format message with context and extra fields."""
        fields = {**self._context, **kwargs}
        if fields:
            field_str = " | ".join(f"{k}={v}" for k, v in fields.items())
            return f"{message} | {field_str}"
        return message

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self.logger.debug(self._format_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self.logger.info(self._format_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self.logger.warning(self._format_message(message, **kwargs))

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self.logger.error(self._format_message(message, **kwargs))

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log exception with traceback."""
        self.logger.exception(self._format_message(message, **kwargs))


# Module-level logger factory
_loggers: dict[str, StructuredLogger] = {}


class _ConfigHolder:
    """Holds default logging configuration."""

    _config: LogConfig = LogConfig()

    @classmethod
    def get_config(cls) -> LogConfig:
        """Get the default config."""
        return cls._config

    @classmethod
    def set_config(cls, config: LogConfig) -> None:
        """Set the default config."""
        cls._config = config


def get_logger(name: str, config: Optional[LogConfig] = None) -> StructuredLogger:
    """
    Get or create a structured logger.

    Args:
        name: Logger name (typically __name__).
        config: Optional logging configuration. Defaults to the config set
            by configure_logging().

    Returns:
        Configured StructuredLogger instance.
    """
    if name not in _loggers:
        _loggers[name] = StructuredLogger(name, config or _ConfigHolder.get_config())
    return _loggers[name]


def configure_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    console: bool = True,
) -> None:
    """
    Configure global logging settings.

    Loggers already handed out by get_logger() pick up the new settings.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional file path for log output.
        console: Whether to log to console.
    """
    config = LogConfig(
        level=level,
        file_path=log_file,
        console=console,
    )

    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    _ConfigHolder.set_config(config)

    for structured in _loggers.values():
        structured.reconfigure(config)


class FailCauseLogger:
    """
    Specialized logger for classified data-call failures.

    Keeps per-connection counts so the connection manager can log a summary
    when it gives up or tears the connection down.
    """

    def __init__(self, apn: str, connection_id: Optional[str] = None) -> None:
        self.apn = apn
        self.connection_id = connection_id
        self.logger = get_logger("dcfail.connection")
        self._failures = 0
        self._permanent = 0
        self._last: Optional[FailCauseReport] = None

    @property
    def last_report(self) -> Optional[FailCauseReport]:
        return self._last

    def _fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {"apn": self.apn}
        if self.connection_id is not None:
            fields["connection_id"] = self.connection_id
        return fields

    def record(self, report: FailCauseReport) -> None:
        """Log one classified failure."""
        self._failures += 1
        if report.permanent:
            self._permanent += 1
        self._last = report

        fields = {
            **self._fields(),
            "code": report.code,
            "cause": report.cause.name,
            "category": report.category.value,
            "permanent": report.permanent,
            "restart_radio": report.restart_radio,
        }
        if report.event_loggable:
            self.logger.warning("Data call failed", **fields)
        else:
            self.logger.debug("Data call failed", **fields)

        if not report.recognized:
            self.logger.debug(
                "Unrecognized fail cause code", **self._fields(), code=report.code
            )

    def summary(self) -> None:
        """Log totals for this connection."""
        self.logger.info(
            "Data call failure summary",
            **self._fields(),
            failures=self._failures,
            permanent=self._permanent,
            last_cause=self._last.cause.name if self._last else None,
        )
