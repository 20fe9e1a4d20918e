"""Pydantic models for configuration schema."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ParserConfig(BaseModel):
    """Error parser configuration."""

    max_stack_depth: int | None = Field(None, ge=1, description="Keep at most N frames")
    sanitize: bool = False
    cache_size: int = Field(50, ge=0, le=100_000, description="Parsed-error cache entries")


class ScannerConfig(BaseModel):
    """Numeric scanner configuration."""

    strategy: Literal["auto", "batch", "scalar"] = "auto"

    @field_validator("strategy", mode="before")
    @classmethod
    def normalize_strategy(cls, v: object) -> object:
        """Accept strategy names in any case."""
        return v.lower() if isinstance(v, str) else v


class FrameworkConfig(BaseModel):
    """Framework attribution configuration."""

    enabled: bool = False
    extra_tags: dict[str, str] = {}

    @field_validator("extra_tags")
    @classmethod
    def validate_extra_tags(cls, v: dict[str, str]) -> dict[str, str]:
        """Reject empty fragments and labels."""
        for fragment, label in v.items():
            if not fragment.strip() or not label.strip():
                raise ValueError(f"Invalid framework tag {fragment!r} -> {label!r}")
        return v


class FileLoggingConfig(BaseModel):
    """File logging configuration."""

    enabled: bool = False
    path: Path = Path("/var/log/perflite/perflite.log")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    format: Literal["json", "console"] = "json"
    file: FileLoggingConfig = FileLoggingConfig()


class PerfliteConfig(BaseSettings):
    """Root configuration for PerfLite."""

    parser: ParserConfig = ParserConfig()
    scanner: ScannerConfig = ScannerConfig()
    frameworks: FrameworkConfig = FrameworkConfig()
    logging: LoggingConfig = LoggingConfig()

    model_config = SettingsConfigDict(
        env_prefix="PERFLITE_",
        env_nested_delimiter="__",
    )
