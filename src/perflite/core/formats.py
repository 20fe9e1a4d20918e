"""Stack-frame conventions recognized by the parser.

Each convention is a ``FormatRule``: a compiled pattern plus a builder
that turns a match into a ``StackFrame``. ``FormatMatcher`` tries the rules
in a fixed priority order and stops at the first match:

1. ``bracketed``     V8 / Node.js: ``at name (location)``
2. ``at_sign_path``  SpiderMonkey / JavaScriptCore: ``name@path/to/file:line:column``
3. ``at_sign_bare``  Same shape with a bare file name: ``name@file.js:line:column``

Lines matching none of the rules are not frames; they are ignored rather
than reported.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass

from perflite.models.frame import ANONYMOUS, MAX_UINT64, StackFrame
from perflite.utils.diagnostics import DiagnosticSink

FrameBuilder = Callable[[re.Match[str], DiagnosticSink | None], StackFrame]


@dataclass(frozen=True)
class FormatRule:
    """One recognized stack-frame convention."""

    name: str
    pattern: re.Pattern[str]
    build: FrameBuilder

    def apply(self, line: str, sink: DiagnosticSink | None = None) -> StackFrame | None:
        """Build a frame from ``line`` or return None if the rule does not match."""
        match = self.pattern.match(line)
        if match is None:
            return None
        return self.build(match, sink)


def parse_uint(text: str | None, field: str, sink: DiagnosticSink | None = None) -> int:
    """Parse an unsigned 64-bit field, degrading to 0 on failure.

    Args:
        text: Captured text (may be None or empty)
        field: Field name used in diagnostics
        sink: Optional diagnostic sink

    Returns:
        The parsed value, or 0 if the text is not a valid unsigned integer
    """
    if text and text.isascii() and text.isdigit():
        value = int(text)
        if value <= MAX_UINT64:
            return value
        reason = "overflow"
    else:
        reason = "not_a_number"

    if sink is not None:
        sink.report("numeric_field_degraded", field=field, value=text, reason=reason)
    return 0


def _function_name(raw: str | None) -> str:
    name = (raw or "").strip()
    return name or ANONYMOUS


# ``eval at <fn> (<origin>), <anonymous>:l:c`` - origin may itself be an eval
EVAL_ORIGIN = re.compile(r"^eval at\s+.+?\s+\((?P<location>.*)\)(?:,\s*[^()]*)?$")


def resolve_eval_origin(location: str) -> str:
    """Strip ``eval at`` wrappers down to the innermost script location."""
    match = EVAL_ORIGIN.match(location)
    while match is not None:
        location = match.group("location")
        match = EVAL_ORIGIN.match(location)
    return location


# A line or column segment; path segments always carry one of "/\." or a space
POSITION_FIELD = re.compile(r"[^\s/\\.]+")


def split_location(
    location: str,
    sink: DiagnosticSink | None = None,
) -> tuple[str, int, int]:
    """Split a ``path:line:column`` location.

    At most two trailing colon-separated segments are taken as positions,
    and only while they look like position fields rather than path pieces.
    The path keeps every other colon verbatim (``webpack-internal:///``,
    ``C:\\``, ``http://localhost:3000/``). A single position is the line;
    the column is then 0. A location with no position is all file name.

    Returns:
        Tuple of (file_name, line_number, column_number)
    """
    file_name = location
    positions: list[str] = []
    while len(positions) < 2:
        head, separator, tail = file_name.rpartition(":")
        if not separator or not POSITION_FIELD.fullmatch(tail):
            break
        positions.insert(0, tail)
        file_name = head

    if not positions:
        return location, 0, 0

    line_number = parse_uint(positions[0], "line_number", sink)
    if len(positions) == 1:
        return file_name, line_number, 0
    return file_name, line_number, parse_uint(positions[1], "column_number", sink)


def _build_bracketed(match: re.Match[str], sink: DiagnosticSink | None) -> StackFrame:
    location = resolve_eval_origin(match.group("location").strip())
    file_name, line_number, column_number = split_location(location, sink)
    return StackFrame(
        function_name=_function_name(match.group("name")),
        file_name=file_name,
        line_number=line_number,
        column_number=column_number,
    )


def _build_at_sign(match: re.Match[str], sink: DiagnosticSink | None) -> StackFrame:
    return StackFrame(
        function_name=_function_name(match.group("name")),
        file_name=match.group("file"),
        line_number=parse_uint(match.group("line"), "line_number", sink),
        column_number=parse_uint(match.group("column"), "column_number", sink),
    )


BRACKETED = FormatRule(
    name="bracketed",
    pattern=re.compile(r"^\s*at\s+(?:(?P<name>.*?)\s+)?\((?P<location>.+)\)\s*$"),
    build=_build_bracketed,
)

AT_SIGN_PATH = FormatRule(
    name="at_sign_path",
    pattern=re.compile(
        r"^\s*(?P<name>[^@]*)@(?P<file>[^@]*/[^@]*):(?P<line>\d+):(?P<column>\d+)\s*$"
    ),
    build=_build_at_sign,
)

AT_SIGN_BARE = FormatRule(
    name="at_sign_bare",
    pattern=re.compile(
        r"^\s*(?P<name>[^@]*)@(?P<file>[^@/:]+):(?P<line>\d+):(?P<column>\d+)\s*$"
    ),
    build=_build_at_sign,
)

# Priority order: first match wins
DEFAULT_RULES: tuple[FormatRule, ...] = (BRACKETED, AT_SIGN_PATH, AT_SIGN_BARE)


class FormatMatcher:
    """Matches single lines against an ordered set of format rules.

    The rule set is immutable after construction, so one matcher may be
    shared by any number of parsers and threads.

    Example:
        matcher = FormatMatcher()
        frame = matcher.match("    at render (/src/App.js:10:15)")
    """

    def __init__(self, rules: tuple[FormatRule, ...] | None = None) -> None:
        self._rules = tuple(rules) if rules is not None else DEFAULT_RULES

    @property
    def rules(self) -> tuple[FormatRule, ...]:
        return self._rules

    def match_rule(
        self,
        line: str,
        sink: DiagnosticSink | None = None,
    ) -> tuple[FormatRule, StackFrame] | None:
        """Return the first rule matching ``line`` and the frame it built."""
        for rule in self._rules:
            frame = rule.apply(line, sink)
            if frame is not None:
                return rule, frame
        return None

    def match(self, line: str, sink: DiagnosticSink | None = None) -> StackFrame | None:
        """Normalize one line into a frame, or None if no convention matches."""
        result = self.match_rule(line, sink)
        return result[1] if result is not None else None

    def identify(self, line: str) -> str | None:
        """Name of the convention ``line`` is written in, if any."""
        for rule in self._rules:
            if rule.pattern.match(line):
                return rule.name
        return None
