"""
Unit tests for setup configuration loading.
"""

import pytest

from sealsetup.config import SetupConfig, load_config, load_config_file
from sealsetup.core.exceptions import ConfigError, InvalidInputError
from sealsetup.workflow import WorkflowReporter


class TestSetupConfig:
    """Tests for SetupConfig defaults and merging."""

    def test_defaults(self):
        config = SetupConfig()

        assert config.version == "latest"
        assert config.cache is True
        assert config.token == ""
        assert (config.owner, config.repo) == ("seal-runtime", "seal")
        assert config.wants_latest

    def test_merge_ignores_none_and_unknown(self):
        config = SetupConfig().merge({"version": None, "cache": False, "bogus": 1})

        assert config.version == "latest"
        assert config.cache is False


class TestLoadConfigFile:
    """Tests for YAML configuration files."""

    def test_load(self, tmp_path):
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("version: v1.2.0\ncache: false\n")

        assert load_config_file(config_file) == {
            "version": "v1.2.0",
            "cache": False,
        }

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("")

        assert load_config_file(config_file) == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("version: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config_file(config_file)

    def test_unknown_key(self, tmp_path):
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("versoin: v1\n")

        with pytest.raises(ConfigError, match="versoin"):
            load_config_file(config_file)

    def test_tool_is_not_configurable(self, tmp_path):
        """Test the installed binary name cannot be overridden."""
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("tool: other\n")

        with pytest.raises(ConfigError, match="tool"):
            load_config_file(config_file)

    def test_non_boolean_cache(self, tmp_path):
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("cache: maybe\n")

        with pytest.raises(ConfigError, match="boolean"):
            load_config_file(config_file)


class TestLoadConfig:
    """Tests for layered configuration."""

    def test_defaults_without_inputs(self):
        assert load_config(WorkflowReporter(environ={})) == SetupConfig()

    def test_inputs(self):
        reporter = WorkflowReporter(
            environ={
                "INPUT_TOKEN": "secret",
                "INPUT_VERSION": "  v1.2.0  ",
                "INPUT_CACHE": "false",
            }
        )

        config = load_config(reporter)

        assert config.token == "secret"
        assert config.version == "v1.2.0"
        assert config.cache is False

    def test_blank_version_means_latest(self):
        reporter = WorkflowReporter(environ={"INPUT_VERSION": "   "})

        assert load_config(reporter).version == "latest"

    def test_invalid_cache_input(self):
        reporter = WorkflowReporter(environ={"INPUT_CACHE": "nope"})

        with pytest.raises(InvalidInputError):
            load_config(reporter)

    def test_precedence(self, tmp_path):
        """Test file < inputs < command-line overrides."""
        config_file = tmp_path / "seal.yaml"
        config_file.write_text("version: v1.0.0\ncache: false\nowner: fork\n")
        reporter = WorkflowReporter(environ={"INPUT_VERSION": "v1.1.0"})

        config = load_config(
            reporter, config_file=config_file, overrides={"version": "v1.2.0"}
        )

        assert config.version == "v1.2.0"
        assert config.cache is False
        assert config.owner == "fork"
