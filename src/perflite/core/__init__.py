"""Core parsing components.

This module exports the parsing engine classes:
- FormatMatcher: Matches single lines against the known frame conventions
- StackParser: Turns stack text into ordered frames
- NumericScanner: Extracts digit runs with batch or scalar scanning
- LineColumnExtractor: Pairs adjacent numbers as line/column candidates
- FrameworkTagger: Attributes frames to frameworks
- ErrorParser: Error-level parsing with sanitizing and caching
"""

from perflite.core.error_parser import ErrorParser
from perflite.core.export import export_frames, export_frames_bytes, frame_to_record
from perflite.core.formats import DEFAULT_RULES, FormatMatcher, FormatRule
from perflite.core.frameworks import FRAMEWORK_TAGS, FrameworkTagger
from perflite.core.line_column import LineColumnExtractor
from perflite.core.numeric_scanner import (
    BatchStrategy,
    NumericScanner,
    ScalarStrategy,
    select_strategy,
)
from perflite.core.stack_parser import StackParser

__all__ = [
    "DEFAULT_RULES",
    "FRAMEWORK_TAGS",
    "BatchStrategy",
    "ErrorParser",
    "FormatMatcher",
    "FormatRule",
    "FrameworkTagger",
    "LineColumnExtractor",
    "NumericScanner",
    "ScalarStrategy",
    "StackParser",
    "export_frames",
    "export_frames_bytes",
    "frame_to_record",
    "select_strategy",
]
