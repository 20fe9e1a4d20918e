"""Data models for parsed JavaScript errors."""

from dataclasses import dataclass, field

from .frame import AnnotatedFrame, StackFrame


@dataclass(frozen=True)
class ParsedError:
    """An error with its stack text broken down into frames."""

    name: str  # e.g., "TypeError"
    message: str  # e.g., "Cannot read properties of undefined"
    stack: str  # Stack text that was parsed (after sanitizing, if enabled)
    frames: tuple[StackFrame, ...]
    timestamp: float  # Seconds since the epoch
    source: str = "local"
    annotated_frames: tuple[AnnotatedFrame, ...] = field(default=())

    @property
    def top_frame(self) -> StackFrame | None:
        """The frame where the error was thrown (first frame), if any."""
        return self.frames[0] if self.frames else None

    @property
    def frameworks(self) -> tuple[str, ...]:
        """Distinct framework labels seen in the stack, in first-seen order."""
        seen: dict[str, None] = {}
        for annotated in self.annotated_frames:
            if annotated.framework is not None:
                seen.setdefault(annotated.framework, None)
        return tuple(seen)

    @property
    def signature(self) -> str:
        """
        Signature for grouping similar errors.

        Format: 'Name: message @ file:line:column' of the top frame.
        """
        top = self.top_frame
        if top is None:
            return f"{self.name}: {self.message}"
        return f"{self.name}: {self.message} @ {top.location}"
