"""Structured logging for PerfLite hosts and the command line.

The parsing engine never logs on its own. Soft failures go to a
``DiagnosticSink`` and ``StructlogSink`` forwards them into the logging
configured here. Every event passes through secret redaction before it is
rendered: stack text captured in browsers routinely carries tokens in
script URLs.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Mapping, MutableMapping
from enum import StrEnum
from functools import lru_cache
from pathlib import Path
from typing import TYPE_CHECKING, Any, cast

import structlog
from structlog.typing import WrappedLogger

from perflite.utils.sanitize import get_redactor

if TYPE_CHECKING:
    from perflite.config.schema import LoggingConfig


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogEventNames:
    """Event names used across PerfLite."""

    # CLI lifecycle
    CLI_STARTING = "cli_starting"
    CONFIG_NOT_FOUND = "configuration_file_not_found"
    CONFIG_INVALID = "configuration_invalid"
    INPUT_READ_ERROR = "input_read_error"
    INTERRUPTED = "interrupted"

    # Parsing
    STACK_PARSED = "stack_parsed"

    # Diagnostic sink events
    NUMERIC_FIELD_DEGRADED = "numeric_field_degraded"
    DIGIT_RUN_OVERFLOW = "digit_run_overflow"
    SERIALIZATION_FAILED = "serialization_failed"
    SCAN_STRATEGY_SELECTED = "scan_strategy_selected"


def sanitize_log_value(value: Any) -> Any:
    """Redact secrets from a log value, descending into containers.

    Strings are redacted, mappings and sequences are rebuilt with their
    items redacted, and anything else is returned unchanged.
    """
    if isinstance(value, str):
        return get_redactor().redact(value)
    if isinstance(value, Mapping):
        return {key: sanitize_log_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(sanitize_log_value(item) for item in value)
    return value


def secret_sanitizer(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor redacting every value of an event."""
    for key, value in event_dict.items():
        event_dict[key] = sanitize_log_value(value)
    return event_dict


@lru_cache(maxsize=1)
def _package_version() -> str | None:
    try:
        from perflite._version import __version__
    except (ImportError, RuntimeError):
        return None
    return __version__


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Tag every event with the service name and package version."""
    event_dict["service"] = "perflite"
    version = _package_version()
    if version is not None:
        event_dict["version"] = version
    return event_dict


def _renderer(log_format: LogFormat) -> Any:
    if log_format == LogFormat.JSON:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(
        colors=sys.stderr.isatty(),
        exception_formatter=structlog.dev.plain_traceback,
    )


def _file_handler(file_path: Path | str, level: int) -> logging.Handler | None:
    path = Path(file_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except OSError as e:
        logging.getLogger("perflite.logging").warning("Could not open log file %s: %s", path, e)
        return None
    handler.setLevel(level)
    return handler


def configure_logging(
    level: LogLevel | str = LogLevel.INFO,
    log_format: LogFormat | str = LogFormat.JSON,
    file_path: Path | str | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structlog and the stdlib handlers it writes through.

    Output goes to stderr so that stdout stays free for parse results.

    Args:
        level: Minimum level to emit
        log_format: ``json`` for log shipping, ``console`` for terminals
        file_path: Log file, used when ``file_enabled`` is set
        file_enabled: Also write events to ``file_path``
    """
    level = LogLevel(level.upper()) if isinstance(level, str) else level
    log_format = LogFormat(log_format.lower()) if isinstance(log_format, str) else log_format
    numeric_level = getattr(logging, level.value)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            add_context_processor,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            secret_sanitizer,
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(log_format),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    handlers: list[logging.Handler] = [console]

    if file_enabled and file_path:
        handler = _file_handler(file_path, numeric_level)
        if handler is not None:
            handlers.append(handler)

    logging.basicConfig(format="%(message)s", level=numeric_level, handlers=handlers, force=True)


def configure_from_config(
    config: LoggingConfig,
    level: LogLevel | str | None = None,
) -> None:
    """Apply the ``logging`` section of a PerfLite configuration.

    Args:
        config: Logging section
        level: Level overriding the configured one (e.g. from ``--debug``)
    """
    configure_logging(
        level=level or config.level,
        log_format=config.format,
        file_path=config.file.path,
        file_enabled=config.file.enabled,
    )


def get_logger(name: str | None = None) -> WrappedLogger:
    return cast(WrappedLogger, structlog.get_logger(name))


def bind_context(**kwargs: Any) -> None:
    """Bind variables to every later event in this context.

    Example:
        bind_context(input_file="errors.log")
        log.info("stack_parsed")  # includes input_file
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
