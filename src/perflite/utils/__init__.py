"""Utility functions and helpers.

This module provides supporting utilities for PerfLite:
- errors: Exception hierarchy
- diagnostics: Injectable diagnostic sinks
- sanitize: Secret redaction
- logging: Structured logging with secret sanitization
- metrics: In-process metrics collection
"""

from perflite.utils.diagnostics import CollectingSink, DiagnosticSink, StructlogSink
from perflite.utils.errors import ExportError, PerfliteError, RedactionError, StrategyError
from perflite.utils.logging import (
    LogFormat,
    LogLevel,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    unbind_context,
)
from perflite.utils.metrics import Counter, Histogram, MetricsRegistry, Timer, get_metrics
from perflite.utils.sanitize import SecretRedactor, sanitize_stack

__all__ = [
    # Diagnostics
    "CollectingSink",
    "DiagnosticSink",
    "StructlogSink",
    # Errors
    "ExportError",
    "PerfliteError",
    "RedactionError",
    "StrategyError",
    # Logging
    "LogFormat",
    "LogLevel",
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "unbind_context",
    # Metrics
    "Counter",
    "Histogram",
    "MetricsRegistry",
    "Timer",
    "get_metrics",
    # Sanitizing
    "SecretRedactor",
    "sanitize_stack",
]
