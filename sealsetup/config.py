"""
Setup configuration.

Configuration is layered, lowest precedence first:
1. Built-in defaults
2. Optional YAML configuration file
3. Action inputs (INPUT_* environment variables)
4. Command-line flags

Example configuration file:

    version: v1.2.0
    cache: false
    owner: seal-runtime
    repo: seal
"""

import logging
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from sealsetup.core.exceptions import ConfigError
from sealsetup.workflow import WorkflowReporter

logger = logging.getLogger(__name__)

LATEST = "latest"

# The one binary this action installs; names release assets, cache entries
# and the executable inside the archive
TOOL_NAME = "seal"

# Config file key -> SetupConfig field
_FILE_KEYS = {
    "token": "token",
    "version": "version",
    "cache": "cache",
    "owner": "owner",
    "repo": "repo",
}


@dataclass(frozen=True)
class SetupConfig:
    """
    Settings for one setup run.

    Attributes:
        token: Credential for registry queries and downloads
        version: Requested version ('latest' or an explicit tag)
        cache: Whether to store the installed tool in the tool cache
        owner: Owner of the repository publishing releases
        repo: Repository publishing releases
    """

    token: str = ""
    version: str = LATEST
    cache: bool = True
    owner: str = "seal-runtime"
    repo: str = "seal"

    @property
    def wants_latest(self) -> bool:
        return self.version == LATEST

    def merge(self, overrides: Dict[str, Any]) -> "SetupConfig":
        """Return a copy with non-None overrides applied."""
        known = {f.name for f in fields(self)}
        values = {k: v for k, v in overrides.items() if k in known and v is not None}
        return replace(self, **values)


def load_config_file(config_file: Path) -> Dict[str, Any]:
    """
    Load setup settings from a YAML file.

    Args:
        config_file: Path to YAML configuration file

    Returns:
        Dictionary of SetupConfig field overrides

    Raises:
        ConfigError: If the file is missing, unparsable or has unknown keys
    """
    if not config_file.exists():
        raise ConfigError(f"Configuration file not found: {config_file}")

    logger.debug(f"Loading configuration from {config_file}")

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML: {e}")
        raise ConfigError(f"Invalid YAML in {config_file}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration must be a mapping: {config_file}")

    unknown = sorted(set(data) - set(_FILE_KEYS))
    if unknown:
        raise ConfigError(f"Unknown configuration keys: {', '.join(unknown)}")

    overrides = {_FILE_KEYS[key]: value for key, value in data.items()}
    if "cache" in overrides and not isinstance(overrides["cache"], bool):
        raise ConfigError("Configuration key 'cache' must be a boolean")
    if "version" in overrides and overrides["version"] is not None:
        overrides["version"] = str(overrides["version"]).strip()

    return overrides


def load_config(
    reporter: WorkflowReporter,
    config_file: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
) -> SetupConfig:
    """
    Build the configuration for a run.

    Args:
        reporter: Source of action inputs
        config_file: Optional YAML configuration file
        overrides: Command-line overrides (None values are ignored)

    Raises:
        ConfigError: If the file or an input is invalid
    """
    config = SetupConfig()

    if config_file is not None:
        config = config.merge(load_config_file(config_file))

    inputs: Dict[str, Any] = {
        "token": reporter.get_input("token") or None,
        "version": reporter.get_input("version") or None,
    }
    if reporter.get_input("cache"):
        inputs["cache"] = reporter.get_boolean_input("cache")
    config = config.merge(inputs)

    if overrides:
        config = config.merge(overrides)

    if not config.version:
        config = replace(config, version=LATEST)

    return config
