"""Configuration loading and validation."""

from .loader import load_config
from .schema import (
    FileLoggingConfig,
    FrameworkConfig,
    LoggingConfig,
    ParserConfig,
    PerfliteConfig,
    ScannerConfig,
)

__all__ = [
    # Loader
    "load_config",
    # Root config
    "PerfliteConfig",
    # Sections
    "ParserConfig",
    "ScannerConfig",
    "FrameworkConfig",
    "LoggingConfig",
    "FileLoggingConfig",
]
