"""PerfLite: JavaScript error stack parsing engine."""

from perflite._version import __version__
from perflite.core import (
    ErrorParser,
    FormatMatcher,
    FrameworkTagger,
    LineColumnExtractor,
    NumericScanner,
    StackParser,
    export_frames,
)
from perflite.engine import extract_line_column_pairs, extract_numbers, parse
from perflite.models import AnnotatedFrame, ParsedError, StackFrame

__all__ = [
    "__version__",
    # Call contracts
    "parse",
    "extract_numbers",
    "extract_line_column_pairs",
    # Components
    "ErrorParser",
    "FormatMatcher",
    "FrameworkTagger",
    "LineColumnExtractor",
    "NumericScanner",
    "StackParser",
    "export_frames",
    # Models
    "AnnotatedFrame",
    "ParsedError",
    "StackFrame",
]
