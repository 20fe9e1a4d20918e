"""Configuration loader: YAML file, ``${VAR}`` substitution, environment.

Precedence, highest first: values in the YAML file, ``PERFLITE_*``
environment variables (``PERFLITE_PARSER__SANITIZE=true``), built-in
defaults.
"""

import os
import re
from pathlib import Path

import yaml

from .schema import PerfliteConfig

# ${NAME} or ${NAME:-fallback}
_ENV_REFERENCE = re.compile(r"\$\{(?P<name>[^}:]+)(?::-(?P<default>[^}]*))?\}")


def substitute_env_vars(text: str) -> str:
    """
    Expand ``${NAME}`` and ``${NAME:-fallback}`` references.

    Args:
        text: Raw configuration text

    Returns:
        Text with every reference replaced by its value

    Raises:
        ValueError: If a variable without a fallback is not set
    """

    def expand(match: re.Match[str]) -> str:
        name = match.group("name").strip()
        value = os.environ.get(name)
        if value is not None:
            return value
        if match.group("default") is not None:
            return match.group("default")
        raise ValueError(f"Environment variable {name} not found")

    return _ENV_REFERENCE.sub(expand, text)


def load_config(path: Path | None = None) -> PerfliteConfig:
    """
    Build the configuration from an optional YAML file and the environment.

    Args:
        path: YAML file; without one only the environment and defaults apply

    Returns:
        Validated PerfliteConfig

    Raises:
        FileNotFoundError: If ``path`` does not exist
        ValueError: If a referenced variable is missing, the file is not a
            mapping, or sections contradict each other
        ValidationError: If values do not match the schema
    """
    values: dict[str, object] = {}

    if path is not None:
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {path}")

        document = yaml.safe_load(substitute_env_vars(path.read_text(encoding="utf-8")))
        if document is None:
            document = {}
        if not isinstance(document, dict):
            raise ValueError(f"Configuration root must be a mapping: {path}")
        values = document

    config = PerfliteConfig(**values)
    validate_config(config)
    return config


def validate_config(config: PerfliteConfig) -> None:
    """
    Check rules that span more than one section.

    Raises:
        ValueError: If sections contradict each other
    """
    frameworks = config.frameworks
    if frameworks.extra_tags and not frameworks.enabled:
        raise ValueError("frameworks.extra_tags set but framework tagging is disabled")

    log_file = config.logging.file
    if log_file.enabled and log_file.path.is_dir():
        raise ValueError(f"logging.file.path is a directory: {log_file.path}")
