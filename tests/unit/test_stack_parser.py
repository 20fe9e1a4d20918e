"""Tests for StackParser functionality."""

import pytest

from perflite.core.formats import FormatMatcher
from perflite.core.stack_parser import StackParser
from perflite.models.frame import StackFrame
from perflite.utils.diagnostics import CollectingSink


@pytest.fixture
def parser() -> StackParser:
    """Create a StackParser instance."""
    return StackParser()


class TestStackParserScenarios:
    """Tests for the documented input/output scenarios."""

    def test_bracketed_frame_after_header(self, parser: StackParser) -> None:
        """Test a header line followed by one V8 frame."""
        frames = parser.parse("Error: e\n    at f (/a/b.js:10:15)")
        assert frames == [StackFrame("f", "/a/b.js", 10, 15)]

    def test_at_sign_frame(self, parser: StackParser) -> None:
        """Test a single at-sign frame."""
        frames = parser.parse("f@/a/b.js:20:5")
        assert frames == [StackFrame("f", "/a/b.js", 20, 5)]

    def test_plain_text(self, parser: StackParser) -> None:
        """Test that ordinary text yields no frames."""
        assert parser.parse("not a stack trace") == []

    def test_empty_input(self, parser: StackParser) -> None:
        """Test that empty and None input yield no frames."""
        assert parser.parse("") == []
        assert parser.parse(None) == []

    def test_mixed_conventions_with_garbage(
        self,
        parser: StackParser,
        mixed_stack: str,
    ) -> None:
        """Test three conventions interleaved with garbage lines."""
        frames = parser.parse(mixed_stack)
        assert frames == [
            StackFrame("first", "/app/one.js", 1, 2),
            StackFrame("second", "/app/two.js", 3, 4),
            StackFrame("third", "three.js", 5, 6),
        ]


class TestStackParserBehaviour:
    """Tests for ordering, limits and totality."""

    def test_chrome_fixture(self, parser: StackParser, chrome_stack: str) -> None:
        """Test a realistic V8 stack."""
        frames = parser.parse(chrome_stack)
        assert [frame.function_name for frame in frames] == [
            "Component",
            "Router",
            "Provider",
            "processTicksAndRejections",
            "async Promise.all",
        ]
        assert frames[1].file_name == "/node_modules/react-router/index.js"
        assert frames[3].file_name == "node:internal/process/task_queues"

    def test_firefox_fixture(self, parser: StackParser, firefox_stack: str) -> None:
        """Test a realistic SpiderMonkey stack."""
        frames = parser.parse(firefox_stack)
        assert len(frames) == 4
        assert frames[0] == StackFrame(
            "render", "https://example.com/static/js/main.chunk.js", 120, 17
        )
        assert frames[2].function_name == "<anonymous>"
        assert frames[3].file_name == "debugger eval code"

    def test_order_preserved(self, parser: StackParser) -> None:
        """Test that output follows input order without deduplication."""
        text = "\n".join(
            [
                "    at c (/c.js:3:3)",
                "    at a (/a.js:1:1)",
                "    at c (/c.js:3:3)",
                "b@/b.js:2:2",
            ]
        )
        frames = parser.parse(text)
        assert [frame.function_name for frame in frames] == ["c", "a", "c", "b"]

    def test_windows_line_endings(self, parser: StackParser) -> None:
        """Test CRLF input."""
        frames = parser.parse("Error: x\r\n    at f (/a.js:1:2)\r\n    at g (/b.js:3:4)\r\n")
        assert [frame.line_number for frame in frames] == [1, 3]

    def test_max_frames(self, parser: StackParser, chrome_stack: str) -> None:
        """Test that max_frames keeps the innermost frames."""
        frames = parser.parse(chrome_stack, max_frames=2)
        assert [frame.function_name for frame in frames] == ["Component", "Router"]

    def test_max_frames_zero(self, parser: StackParser, chrome_stack: str) -> None:
        """Test that a zero limit yields nothing."""
        assert parser.parse(chrome_stack, max_frames=0) == []

    def test_iter_frames_is_lazy(self, parser: StackParser) -> None:
        """Test that iter_frames yields one frame at a time."""
        frames = parser.iter_frames("    at f (/a.js:1:2)\n    at g (/b.js:3:4)")
        assert next(frames).function_name == "f"
        assert next(frames).function_name == "g"
        with pytest.raises(StopIteration):
            next(frames)

    def test_contains_stack(self, parser: StackParser, chrome_stack: str) -> None:
        """Test stack detection."""
        assert parser.contains_stack(chrome_stack) is True
        assert parser.contains_stack("just words") is False
        assert parser.contains_stack("") is False

    def test_reusable_across_calls(self, parser: StackParser) -> None:
        """Test that one parser serves many calls with identical results."""
        text = "Error: e\n    at f (/a/b.js:10:15)"
        assert parser.parse(text) == parser.parse(text) == parser.parse(text)

    @pytest.mark.parametrize(
        "text",
        [
            "\x00\x01\x02",
            "at",
            "at ()",
            "@",
            "@:1:2",
            "    at f (:::)",
            "    at f (/a.js:-1:-2)",
            "f@/a.js:1:2:3:4",
            "\ud800 at f (/a.js:1:2)",
            "(" * 1000 + ")" * 1000,
            "at " * 500,
        ],
    )
    def test_never_raises(self, parser: StackParser, text: str) -> None:
        """Test that malformed input never raises and positions stay valid."""
        frames = parser.parse(text)
        for frame in frames:
            assert isinstance(frame.line_number, int)
            assert isinstance(frame.column_number, int)
            assert frame.line_number >= 0
            assert frame.column_number >= 0

    def test_negative_numbers_degrade(self, parser: StackParser) -> None:
        """Test that signed positions become 0 and are reported."""
        sink = CollectingSink()
        frames = StackParser(sink=sink).parse("    at f (/a.js:-1:-2)")
        assert frames == [StackFrame("f", "/a.js", 0, 0)]
        assert sink.names() == ["numeric_field_degraded", "numeric_field_degraded"]

    def test_custom_matcher(self) -> None:
        """Test that a parser can be built on a restricted rule set."""
        matcher = FormatMatcher(rules=FormatMatcher().rules[1:])
        parser = StackParser(matcher=matcher)
        assert parser.parse("    at f (/a.js:1:2)\nf@/a.js:1:2") == [
            StackFrame("f", "/a.js", 1, 2)
        ]
        assert parser.matcher is matcher

    def test_without_sink_is_silent(self, parser: StackParser) -> None:
        """Test that degradation without a sink just returns zeros."""
        frames = parser.parse("    at f (/a.js:x:y)")
        assert frames == [StackFrame("f", "/a.js", 0, 0)]
