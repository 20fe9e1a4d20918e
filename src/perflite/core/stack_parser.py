"""Parser for JavaScript error stacks.

This module implements the StackParser class that turns free-form stack
text from V8, SpiderMonkey and JavaScriptCore into an ordered list of
``StackFrame`` records. It supports:
- ``at name (file:line:column)`` frames, including anonymous and eval frames
- ``name@path:line:column`` frames
- ``name@file:line:column`` frames with bare file names
- Mixed conventions within one input

Parsing is line oriented and total: lines that are not frames are skipped,
unparsable numbers become 0, and no input string makes ``parse`` raise.
"""

from __future__ import annotations

from collections.abc import Iterator
from itertools import islice

from perflite.core.formats import FormatMatcher
from perflite.models.frame import StackFrame
from perflite.utils.diagnostics import DiagnosticSink

_DEFAULT_MATCHER = FormatMatcher()


class StackParser:
    """Parser for JavaScript stack traces.

    Responsibilities:
    - Split input into lines and match each against the known conventions
    - Preserve input order; never reorder or deduplicate frames
    - Degrade per field, never per call

    The parser holds no per-call state. Build one and reuse it.

    Example:
        parser = StackParser()
        for frame in parser.parse(error_stack):
            print(frame.function_name, frame.location)
    """

    def __init__(
        self,
        matcher: FormatMatcher | None = None,
        sink: DiagnosticSink | None = None,
    ) -> None:
        """Initialize the StackParser.

        Args:
            matcher: Format matcher to use (defaults to the shared built-in rules)
            sink: Optional receiver for per-field degradation reports
        """
        self._matcher = matcher if matcher is not None else _DEFAULT_MATCHER
        self._sink = sink

    @property
    def matcher(self) -> FormatMatcher:
        return self._matcher

    def iter_frames(self, text: str | None) -> Iterator[StackFrame]:
        """Yield frames lazily, in input order.

        Args:
            text: Stack text (may be empty or None)

        Yields:
            StackFrame for every line matching a known convention
        """
        if not text:
            return

        for line in text.splitlines():
            frame = self._matcher.match(line, self._sink)
            if frame is not None:
                yield frame

    def parse(self, text: str | None, max_frames: int | None = None) -> list[StackFrame]:
        """Parse stack text into frames.

        Args:
            text: Stack text (may be empty or None)
            max_frames: Keep at most this many frames (outermost frames dropped)

        Returns:
            Frames in the order their lines appear in ``text``
        """
        frames = self.iter_frames(text)
        if max_frames is not None:
            return list(islice(frames, max(max_frames, 0)))
        return list(frames)

    def contains_stack(self, text: str | None) -> bool:
        """Check if text contains at least one recognizable frame."""
        return next(self.iter_frames(text), None) is not None
