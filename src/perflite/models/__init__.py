"""Data models and transfer objects."""

from .error import ParsedError
from .frame import ANONYMOUS, MAX_UINT64, AnnotatedFrame, StackFrame

__all__ = [
    # Frame models
    "ANONYMOUS",
    "MAX_UINT64",
    "StackFrame",
    "AnnotatedFrame",
    # Error models
    "ParsedError",
]
