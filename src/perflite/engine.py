"""Process-wide entry points for the parsing engine.

The parser and scanner are built on first use and shared by every later
call; the scan strategy is chosen once, from ``PERFLITE_SCANNER__STRATEGY``
when set.
"""

from __future__ import annotations

from functools import lru_cache

from perflite.config.schema import PerfliteConfig
from perflite.core.line_column import LineColumnExtractor
from perflite.core.numeric_scanner import NumericScanner
from perflite.core.stack_parser import StackParser
from perflite.models.frame import StackFrame


@lru_cache(maxsize=1)
def default_parser() -> StackParser:
    return StackParser()


@lru_cache(maxsize=1)
def default_scanner() -> NumericScanner:
    return NumericScanner(strategy=PerfliteConfig().scanner.strategy)


@lru_cache(maxsize=1)
def default_extractor() -> LineColumnExtractor:
    return LineColumnExtractor(scanner=default_scanner())


def parse(text: str | None) -> list[StackFrame]:
    """Parse stack text into frames. Never raises on text input."""
    return default_parser().parse(text)


def extract_numbers(text: str | bytes | None) -> list[int]:
    """Every digit run in ``text`` as an unsigned integer, left to right."""
    return default_scanner().extract_numbers(text)


def extract_line_column_pairs(text: str | bytes | None) -> list[tuple[int, int]]:
    """Adjacent-number ``(line, column)`` candidates from ``text``."""
    return default_extractor().extract_line_column_pairs(text)


def reset_defaults() -> None:
    """Forget the shared instances so the next call rebuilds them."""
    default_parser.cache_clear()
    default_scanner.cache_clear()
    default_extractor.cache_clear()
