"""In-process metrics for hosts that embed PerfLite.

Tracks how much work the error parser does (errors, frames, tagged frames,
sanitized stacks), how well its cache performs, and how long parses take.
The numeric scanner and stack parser are not instrumented; they are meant
to be called in tight loops.

``MetricsRegistry.to_prometheus_format`` renders everything in the
Prometheus text exposition format.
"""

from __future__ import annotations

import bisect
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from threading import Lock
from typing import Any

LabelKey = tuple[tuple[str, str], ...]


class MetricType(StrEnum):
    """Types of metrics."""

    COUNTER = "counter"
    HISTOGRAM = "histogram"


@dataclass
class MetricValue:
    """One exported sample."""

    name: str
    type: MetricType
    value: float
    labels: dict[str, str] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    help_text: str = ""


def _label_key(labels: dict[str, str] | None) -> LabelKey:
    return tuple(sorted(labels.items())) if labels else ()


def _format_labels(key: LabelKey, extra: tuple[tuple[str, str], ...] = ()) -> str:
    pairs = key + extra
    if not pairs:
        return ""
    return "{" + ",".join(f'{name}="{value}"' for name, value in pairs) + "}"


def _format_bound(bound: float) -> str:
    return "+Inf" if bound == float("inf") else repr(bound)


class Counter:
    """A monotonically increasing, optionally labelled count.

    Example:
        frames = Counter("perflite_frames_extracted_total", "Frames extracted")
        frames.inc(12)
    """

    def __init__(self, name: str, help_text: str = "") -> None:
        self.name = name
        self.help_text = help_text
        self._values: dict[LabelKey, float] = defaultdict(float)
        self._lock = Lock()

    def inc(self, value: float = 1, labels: dict[str, str] | None = None) -> None:
        """Add ``value`` to the count.

        Raises:
            ValueError: If value is negative
        """
        if value < 0:
            raise ValueError("Counter can only increase")
        with self._lock:
            self._values[_label_key(labels)] += value

    def get(self, labels: dict[str, str] | None = None) -> float:
        with self._lock:
            return self._values.get(_label_key(labels), 0)

    def get_all(self) -> list[MetricValue]:
        with self._lock:
            items = list(self._values.items())
        return [
            MetricValue(
                name=self.name,
                type=MetricType.COUNTER,
                value=value,
                labels=dict(key),
                help_text=self.help_text,
            )
            for key, value in items
        ]

    def render(self) -> list[str]:
        """Prometheus exposition lines for this counter."""
        lines = [f"# TYPE {self.name} counter"]
        if self.help_text:
            lines.insert(0, f"# HELP {self.name} {self.help_text}")
        with self._lock:
            items = sorted(self._values.items())
        lines.extend(f"{self.name}{_format_labels(key)} {value}" for key, value in items)
        return lines


class Histogram:
    """Distribution of observed values over fixed upper bounds.

    Bucket counts are kept per bound rather than cumulatively; rendering
    accumulates them the way Prometheus expects.

    Example:
        duration = Histogram("perflite_parse_duration_seconds", "Parse time")
        duration.observe(0.0003)
    """

    # Parsing one stack typically takes tens to hundreds of microseconds
    DEFAULT_BUCKETS = (0.0001, 0.00025, 0.0005, 0.001, 0.0025, 0.005, 0.01, 0.05, 0.1, float("inf"))

    def __init__(
        self,
        name: str,
        help_text: str = "",
        buckets: tuple[float, ...] | None = None,
    ) -> None:
        self.name = name
        self.help_text = help_text
        self._buckets = tuple(sorted(buckets or self.DEFAULT_BUCKETS))
        if self._buckets[-1] != float("inf"):
            self._buckets += (float("inf"),)
        self._observations: dict[LabelKey, list[float]] = defaultdict(list)
        self._lock = Lock()

    @property
    def buckets(self) -> tuple[float, ...]:
        return self._buckets

    def observe(self, value: float, labels: dict[str, str] | None = None) -> None:
        with self._lock:
            self._observations[_label_key(labels)].append(value)

    def _values(self, labels: dict[str, str] | None) -> list[float]:
        with self._lock:
            return list(self._observations.get(_label_key(labels), ()))

    def get_stats(self, labels: dict[str, str] | None = None) -> dict[str, float]:
        """Return count, sum, min, max and mean of the observations."""
        values = self._values(labels)
        if not values:
            return {"count": 0, "sum": 0, "min": 0, "max": 0, "mean": 0}
        total = sum(values)
        return {
            "count": len(values),
            "sum": total,
            "min": min(values),
            "max": max(values),
            "mean": total / len(values),
        }

    def get_buckets(self, labels: dict[str, str] | None = None) -> dict[float, int]:
        """Count observations per bucket; each lands in the smallest bound holding it."""
        counts = dict.fromkeys(self._buckets, 0)
        for value in self._values(labels):
            counts[self._buckets[bisect.bisect_left(self._buckets, value)]] += 1
        return counts

    def render(self) -> list[str]:
        """Prometheus exposition lines, with cumulative ``_bucket`` series."""
        lines = [f"# TYPE {self.name} histogram"]
        if self.help_text:
            lines.insert(0, f"# HELP {self.name} {self.help_text}")

        with self._lock:
            keys = sorted(self._observations) or [()]
        for key in keys:
            labels = dict(key)
            running = 0
            for bound, count in self.get_buckets(labels).items():
                running += count
                le = _format_labels(key, (("le", _format_bound(bound)),))
                lines.append(f"{self.name}_bucket{le} {running}")
            stats = self.get_stats(labels)
            lines.append(f"{self.name}_sum{_format_labels(key)} {stats['sum']}")
            lines.append(f"{self.name}_count{_format_labels(key)} {stats['count']}")
        return lines


class MetricsRegistry:
    """Process-wide set of PerfLite metrics.

    Example:
        registry = MetricsRegistry.get_instance()
        registry.errors_parsed.inc()
        print(registry.to_prometheus_format())
    """

    _instance: MetricsRegistry | None = None
    _lock = Lock()

    def __init__(self) -> None:
        self.errors_parsed = Counter(
            "perflite_errors_parsed_total",
            "Errors parsed by the error parser (cache misses)",
        )
        self.frames_extracted = Counter(
            "perflite_frames_extracted_total",
            "Stack frames extracted from parsed errors",
        )
        self.frames_tagged = Counter(
            "perflite_frames_tagged_total",
            "Frames attributed to a framework",
        )
        self.cache_hits = Counter(
            "perflite_cache_hits_total",
            "Parsed-error cache hits",
        )
        self.cache_misses = Counter(
            "perflite_cache_misses_total",
            "Parsed-error cache misses",
        )
        self.stacks_sanitized = Counter(
            "perflite_stacks_sanitized_total",
            "Stacks passed through secret redaction",
        )
        self.parse_duration = Histogram(
            "perflite_parse_duration_seconds",
            "Time spent parsing one error, excluding cache hits",
        )
        self._start_time = time.time()

    @classmethod
    def get_instance(cls) -> MetricsRegistry:
        """Get the shared registry, creating it on first use."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        """Drop the shared registry so the next lookup starts from zero."""
        with cls._lock:
            cls._instance = None

    def get_uptime_seconds(self) -> float:
        return time.time() - self._start_time

    def counters(self) -> tuple[Counter, ...]:
        return (
            self.errors_parsed,
            self.frames_extracted,
            self.frames_tagged,
            self.cache_hits,
            self.cache_misses,
            self.stacks_sanitized,
        )

    def get_all_metrics(self) -> dict[str, Any]:
        """Snapshot of every metric as plain values."""
        return {
            "uptime_seconds": self.get_uptime_seconds(),
            "errors": {
                "parsed": self.errors_parsed.get(),
                "sanitized": self.stacks_sanitized.get(),
            },
            "frames": {
                "extracted": self.frames_extracted.get(),
                "tagged": self.frames_tagged.get(),
            },
            "cache": {
                "hits": self.cache_hits.get(),
                "misses": self.cache_misses.get(),
            },
            "parse_duration": self.parse_duration.get_stats(),
        }

    def to_prometheus_format(self) -> str:
        """Render all metrics in the Prometheus text exposition format."""
        lines: list[str] = []
        for counter in self.counters():
            lines.extend(counter.render())
        lines.extend(self.parse_duration.render())
        lines.append("# HELP perflite_uptime_seconds Seconds since the registry was created")
        lines.append("# TYPE perflite_uptime_seconds gauge")
        lines.append(f"perflite_uptime_seconds {self.get_uptime_seconds()}")
        return "\n".join(lines)


def get_metrics() -> MetricsRegistry:
    return MetricsRegistry.get_instance()


class Timer:
    """Context manager observing elapsed wall time into a histogram.

    The observation is recorded even when the block raises.

    Example:
        with Timer(metrics.parse_duration) as timer:
            parser.parse(stack)
        timer.duration  # seconds
    """

    def __init__(self, histogram: Histogram, labels: dict[str, str] | None = None) -> None:
        self._histogram = histogram
        self._labels = labels
        self._start: float | None = None
        self.duration: float | None = None

    def __enter__(self) -> Timer:
        self._start = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        if self._start is not None:
            self.duration = time.perf_counter() - self._start
            self._histogram.observe(self.duration, labels=self._labels)
