"""Exception hierarchy for PerfLite.

The parsing and scanning contracts never raise on text input; these
exceptions cover programming and configuration errors only.
"""


class PerfliteError(Exception):
    """Base exception for all PerfLite errors."""


class StrategyError(PerfliteError):
    """Unknown or unusable numeric scan strategy requested."""


class ExportError(PerfliteError):
    """Frames could not be serialized for the host boundary."""


class RedactionError(PerfliteError):
    """Raised when secret redaction fails."""
