"""Tests for configuration loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from perflite.config.loader import load_config, substitute_env_vars, validate_config
from perflite.config.schema import (
    FrameworkConfig,
    ParserConfig,
    PerfliteConfig,
    ScannerConfig,
)


class TestSubstituteEnvVars:
    """Test environment variable substitution."""

    def test_substitute_single_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting a single environment variable."""
        monkeypatch.setenv("TEST_VAR", "test_value")
        assert substitute_env_vars("Value is ${TEST_VAR}") == "Value is test_value"

    def test_substitute_multiple_vars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test substituting multiple environment variables."""
        monkeypatch.setenv("VAR1", "value1")
        monkeypatch.setenv("VAR2", "value2")
        assert substitute_env_vars("${VAR1} and ${VAR2}") == "value1 and value2"

    def test_missing_env_var_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that missing environment variables raise ValueError."""
        monkeypatch.delenv("MISSING", raising=False)
        with pytest.raises(ValueError, match="Environment variable MISSING not found"):
            substitute_env_vars("Value is ${MISSING}")

    def test_fallback_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test ``${NAME:-fallback}`` references."""
        monkeypatch.delenv("UNSET_FOR_TEST", raising=False)
        monkeypatch.setenv("SET_FOR_TEST", "real")
        assert substitute_env_vars("${UNSET_FOR_TEST:-scalar}") == "scalar"
        assert substitute_env_vars("${UNSET_FOR_TEST:-}") == ""
        assert substitute_env_vars("${SET_FOR_TEST:-other}") == "real"

    def test_no_substitution_needed(self) -> None:
        """Test text without environment variables passes through unchanged."""
        assert substitute_env_vars("plain text without vars") == "plain text without vars"


class TestSchema:
    """Test section models."""

    def test_defaults(self) -> None:
        """Test the default configuration."""
        config = PerfliteConfig()
        assert config.parser.max_stack_depth is None
        assert config.parser.sanitize is False
        assert config.parser.cache_size == 50
        assert config.scanner.strategy == "auto"
        assert config.frameworks.enabled is False
        assert config.logging.format == "json"

    def test_strategy_case_insensitive(self) -> None:
        """Test that strategy names are normalized."""
        assert ScannerConfig(strategy="SCALAR").strategy == "scalar"

    def test_unknown_strategy(self) -> None:
        """Test that unknown strategies are rejected."""
        with pytest.raises(ValidationError):
            ScannerConfig(strategy="simd")

    def test_depth_must_be_positive(self) -> None:
        """Test the stack depth bound."""
        with pytest.raises(ValidationError):
            ParserConfig(max_stack_depth=0)

    def test_negative_cache_size(self) -> None:
        """Test the cache size bound."""
        with pytest.raises(ValidationError):
            ParserConfig(cache_size=-1)

    def test_blank_framework_tag(self) -> None:
        """Test that blank tag entries are rejected."""
        with pytest.raises(ValidationError, match="Invalid framework tag"):
            FrameworkConfig(enabled=True, extra_tags={"node_modules/x/": "  "})

    def test_environment_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test nested settings from the environment."""
        monkeypatch.setenv("PERFLITE_PARSER__SANITIZE", "true")
        monkeypatch.setenv("PERFLITE_SCANNER__STRATEGY", "batch")
        config = PerfliteConfig()
        assert config.parser.sanitize is True
        assert config.scanner.strategy == "batch"


class TestLoadConfig:
    """Test loading YAML files."""

    def test_no_path_uses_defaults(self) -> None:
        """Test that no path yields the default configuration."""
        assert load_config().parser.cache_size == 50

    def test_load_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test a complete file with substitution."""
        monkeypatch.setenv("STACK_DEPTH_FOR_TEST", "25")
        path = tmp_path / "config.yaml"
        path.write_text(
            "parser:\n"
            "  max_stack_depth: ${STACK_DEPTH_FOR_TEST}\n"
            "  sanitize: true\n"
            "scanner:\n"
            "  strategy: scalar\n"
            "frameworks:\n"
            "  enabled: true\n"
            "  extra_tags:\n"
            "    node_modules/acme/: Acme\n"
        )
        config = load_config(path)
        assert config.parser.max_stack_depth == 25
        assert config.parser.sanitize is True
        assert config.scanner.strategy == "scalar"
        assert config.frameworks.extra_tags == {"node_modules/acme/": "Acme"}

    def test_file_overrides_environment(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """Test that file values win and the environment fills the gaps."""
        monkeypatch.setenv("PERFLITE_SCANNER__STRATEGY", "batch")
        monkeypatch.setenv("PERFLITE_PARSER__SANITIZE", "true")
        path = tmp_path / "config.yaml"
        path.write_text("scanner:\n  strategy: scalar\n")
        config = load_config(path)
        assert config.scanner.strategy == "scalar"
        assert config.parser.sanitize is True

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test that an empty file yields defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path).scanner.strategy == "auto"

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nope.yaml")

    def test_non_mapping_root(self, tmp_path: Path) -> None:
        """Test that a list root is rejected."""
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ValueError, match="must be a mapping"):
            load_config(path)

    def test_invalid_values(self, tmp_path: Path) -> None:
        """Test that schema violations surface as ValidationError."""
        path = tmp_path / "config.yaml"
        path.write_text("parser:\n  cache_size: -5\n")
        with pytest.raises(ValidationError):
            load_config(path)


class TestValidateConfig:
    """Test cross-field validation."""

    def test_tags_without_tagging(self) -> None:
        """Test that extra tags require tagging to be enabled."""
        config = PerfliteConfig.model_validate(
            {"frameworks": {"enabled": False, "extra_tags": {"x/": "X"}}}
        )
        with pytest.raises(ValueError, match="tagging is disabled"):
            validate_config(config)

    def test_log_path_is_directory(self, tmp_path: Path) -> None:
        """Test that a directory log path is rejected."""
        config = PerfliteConfig.model_validate(
            {"logging": {"file": {"enabled": True, "path": str(tmp_path)}}}
        )
        with pytest.raises(ValueError, match="is a directory"):
            validate_config(config)

    def test_valid(self) -> None:
        """Test that the defaults validate."""
        validate_config(PerfliteConfig())
