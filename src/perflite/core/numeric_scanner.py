"""Digit-run extraction from stack text.

``NumericScanner`` finds every maximal run of ASCII digits in a buffer and
parses it as an unsigned 64-bit integer. Two interchangeable strategies do
the scanning:

- ``BatchStrategy`` classifies every whole 16-byte chunk at once with
  numpy, then finds all run edges in one pass over the flattened mask, so
  runs crossing chunk boundaries need no state carried between chunks.
  Python only touches each run once. The tail that does not fill a chunk
  is finished byte by byte.
- ``ScalarStrategy`` classifies one byte at a time.

Both strategies feed the same run collector, so they return identical
results for every input. Runs that overflow 64 bits are skipped.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Protocol

import numpy as np

from perflite.models.frame import MAX_UINT64
from perflite.utils.diagnostics import DiagnosticSink
from perflite.utils.errors import StrategyError

CHUNK_SIZE = 16

_ZERO = 0x30  # b"0"
_NINE = 0x39  # b"9"
_MAX_DIGITS = len(str(MAX_UINT64))


class ScanStrategy(Protocol):
    """A way of turning a byte buffer into digit-run values."""

    name: str

    def extract(self, data: bytes, sink: DiagnosticSink | None = None) -> list[int]:
        """Return the value of every digit run in ``data``, left to right."""
        ...


class _RunCollector:
    """Parses delimited digit runs and accumulates their values."""

    def __init__(self, data: bytes, sink: DiagnosticSink | None) -> None:
        self._data = data
        self._sink = sink
        self.numbers: list[int] = []

    def emit(self, start: int, end: int) -> None:
        digits = self._data[start:end].lstrip(b"0")
        if len(digits) > _MAX_DIGITS or (digits and int(digits) > MAX_UINT64):
            if self._sink is not None:
                self._sink.report("digit_run_overflow", offset=start, length=end - start)
            return
        self.numbers.append(int(digits) if digits else 0)


def _scan_bytes(
    data: bytes,
    start: int,
    end: int,
    run_start: int | None,
    collector: _RunCollector,
) -> int | None:
    """Classify ``data[start:end]`` byte by byte.

    Returns:
        Offset where a still-open run began, or None
    """
    for offset in range(start, end):
        if _ZERO <= data[offset] <= _NINE:
            if run_start is None:
                run_start = offset
        elif run_start is not None:
            collector.emit(run_start, offset)
            run_start = None
    return run_start


class ScalarStrategy:
    """Byte-at-a-time digit classification."""

    name = "scalar"

    def extract(self, data: bytes, sink: DiagnosticSink | None = None) -> list[int]:
        collector = _RunCollector(data, sink)
        run_start = _scan_bytes(data, 0, len(data), None, collector)
        if run_start is not None:
            collector.emit(run_start, len(data))
        return collector.numbers


class BatchStrategy:
    """Chunked, vectorized digit classification.

    Example:
        BatchStrategy().extract(b"at f (/a/b.js:10:15)")  # [10, 15]
    """

    name = "batch"

    def __init__(self, chunk_size: int = CHUNK_SIZE) -> None:
        if chunk_size < 1:
            raise StrategyError(f"Chunk size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size

    def extract(self, data: bytes, sink: DiagnosticSink | None = None) -> list[int]:
        collector = _RunCollector(data, sink)
        size = len(data)
        # Only whole chunks are read as vectors; the remainder goes to the byte scan
        full = size - size % self.chunk_size

        run_start: int | None = None
        if full:
            run_start = self._scan_chunks(data, full, collector)

        run_start = _scan_bytes(data, full, size, run_start, collector)
        if run_start is not None:
            collector.emit(run_start, size)
        return collector.numbers

    def _scan_chunks(self, data: bytes, full: int, collector: _RunCollector) -> int | None:
        chunks = np.frombuffer(data, dtype=np.uint8, count=full).reshape(-1, self.chunk_size)
        mask = ((chunks >= _ZERO) & (chunks <= _NINE)).ravel().astype(np.int8)

        # Run edges alternate: +1 at a run's first digit, -1 just past its last
        edges = np.flatnonzero(np.diff(mask, prepend=0, append=0)).tolist()
        starts, ends = edges[0::2], edges[1::2]

        run_start: int | None = None
        if ends and ends[-1] == full:
            # May continue into the tail
            run_start = starts.pop()
            ends.pop()

        for start, end in zip(starts, ends, strict=True):
            collector.emit(start, end)
        return run_start


STRATEGIES: dict[str, type[ScalarStrategy] | type[BatchStrategy]] = {
    ScalarStrategy.name: ScalarStrategy,
    BatchStrategy.name: BatchStrategy,
}

# Runs straddling chunk boundaries, ending on them, and overflowing
_PROBE = (
    b"at f (/a/b.js:10:15)\n"
    + b"x" * 11
    + b"1234567 8" * 3
    + b" 18446744073709551615:18446744073709551616"
)


@lru_cache(maxsize=1)
def batch_supported() -> bool:
    """Check once whether the vectorized scan agrees with the byte scan here.

    Only correctness is checked. Timing a short probe at import time is
    noise; the batch scan does per-run rather than per-byte Python work, so
    it is the faster path on any buffer longer than a chunk.
    """
    try:
        return BatchStrategy().extract(_PROBE) == ScalarStrategy().extract(_PROBE)
    except (TypeError, ValueError):
        return False


def select_strategy(name: str = "auto", sink: DiagnosticSink | None = None) -> ScanStrategy:
    """Build a scan strategy by name.

    Args:
        name: ``"auto"``, ``"batch"`` or ``"scalar"``
        sink: Optional sink notified of the selection

    Returns:
        The strategy instance

    Raises:
        StrategyError: If the name is unknown
    """
    key = name.lower()
    if key == "auto":
        key = BatchStrategy.name if batch_supported() else ScalarStrategy.name

    strategy_cls = STRATEGIES.get(key)
    if strategy_cls is None:
        raise StrategyError(
            f"Unknown scan strategy {name!r}; expected one of auto, {', '.join(STRATEGIES)}"
        )

    if sink is not None:
        sink.report("scan_strategy_selected", requested=name, strategy=key)
    return strategy_cls()


def _to_bytes(text: str | bytes | None) -> bytes:
    if not text:
        return b""
    if isinstance(text, bytes):
        return text
    # Lone surrogates never encode to ASCII digits
    return text.encode("utf-8", errors="surrogatepass")


class NumericScanner:
    """Extracts unsigned integers from stack text.

    Example:
        scanner = NumericScanner()
        scanner.extract_numbers("at f (/a/b.js:10:15)")  # [10, 15]
    """

    def __init__(
        self,
        strategy: ScanStrategy | str | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            strategy: Strategy instance or name (defaults to ``"auto"``)
            sink: Optional receiver for overflow reports
        """
        if strategy is None or isinstance(strategy, str):
            strategy = select_strategy(strategy or "auto", sink)
        self._strategy = strategy
        self._sink = sink

    @property
    def strategy(self) -> ScanStrategy:
        return self._strategy

    def extract_numbers(self, text: str | bytes | None) -> list[int]:
        """Return every digit run in ``text`` as an integer, left to right."""
        data = _to_bytes(text)
        if not data:
            return []
        return self._strategy.extract(data, self._sink)
