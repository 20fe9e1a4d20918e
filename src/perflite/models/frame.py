"""Data models for JavaScript stack frames."""

from dataclasses import dataclass

ANONYMOUS = "<anonymous>"

# Largest value a line or column number may take; larger digit runs are
# treated as unparsable.
MAX_UINT64 = 0xFFFFFFFFFFFFFFFF


@dataclass(frozen=True)
class StackFrame:
    """A single call site recovered from stack-trace text.

    A line or column of 0 means "unknown"; it is not distinguishable from a
    real index of 0.
    """

    function_name: str
    file_name: str
    line_number: int = 0
    column_number: int = 0

    @property
    def is_anonymous(self) -> bool:
        return self.function_name == ANONYMOUS

    @property
    def has_position(self) -> bool:
        """True if both the line and the column were recovered."""
        return self.line_number > 0 and self.column_number > 0

    @property
    def location(self) -> str:
        """``file:line:column`` rendering of the frame position."""
        return f"{self.file_name}:{self.line_number}:{self.column_number}"


@dataclass(frozen=True)
class AnnotatedFrame:
    """A stack frame paired with the framework it was attributed to."""

    frame: StackFrame
    framework: str | None = None

    @property
    def is_framework(self) -> bool:
        return self.framework is not None
