"""Injectable diagnostic sink.

Core components degrade silently on malformed input. Hosts that want to
observe those degradations pass a sink; with no sink configured nothing is
reported and nothing is logged.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

import structlog


@runtime_checkable
class DiagnosticSink(Protocol):
    """Receiver for soft-failure reports from the parsing engine."""

    def report(self, event: str, **details: Any) -> None:
        """Record a single diagnostic event."""
        ...


class StructlogSink:
    """Diagnostic sink that forwards events to a structlog logger.

    Example:
        parser = StackParser(sink=StructlogSink())
        parser.parse(text)  # degraded fields are logged at debug level
    """

    def __init__(self, logger: Any | None = None, level: str = "debug") -> None:
        """Initialize the sink.

        Args:
            logger: structlog logger to write to (defaults to this module's)
            level: Log method name used for every event
        """
        self._log = logger if logger is not None else structlog.get_logger("perflite.diagnostics")
        self._level = level

    def report(self, event: str, **details: Any) -> None:
        getattr(self._log, self._level)(event, **details)


class CollectingSink:
    """Diagnostic sink that keeps events in memory.

    Useful for hosts that batch diagnostics and for tests.
    """

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def report(self, event: str, **details: Any) -> None:
        self.events.append((event, details))

    def names(self) -> list[str]:
        """Return the event names in the order they were reported."""
        return [name for name, _ in self.events]

    def clear(self) -> None:
        self.events.clear()
