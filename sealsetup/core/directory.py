"""
Directory locations used by SealSetup.

On a CI runner the tool cache and scratch space are provided by the runner
through RUNNER_TOOL_CACHE and RUNNER_TEMP. Outside a runner they fall back to:

    Tool cache (~/.sealsetup/tool-cache or %USERPROFILE%\\.sealsetup\\tool-cache):
        <tool>/<version>/<arch>/   : Cached tool directories
        <tool>/<version>/<arch>.complete : Completion marker
        lock/                      : Lock file for cache writes

    Temp (system temp dir / sealsetup):
        Downloads and extraction scratch directories
"""

import os
import tempfile
import uuid
from pathlib import Path

from sealsetup.core.exceptions import ToolCacheError


def get_global_dir() -> Path:
    """
    Get the platform-specific SealSetup home directory.

    Returns:
        - Windows: %USERPROFILE%\\.sealsetup
        - Linux/macOS: ~/.sealsetup
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise ToolCacheError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine tool cache directory."
            )
        return Path(user_profile) / ".sealsetup"
    return Path.home() / ".sealsetup"


def get_tool_cache_dir() -> Path:
    """Get the tool cache root (RUNNER_TOOL_CACHE when running on a runner)."""
    runner_cache = os.environ.get("RUNNER_TOOL_CACHE")
    if runner_cache:
        return Path(runner_cache)
    return get_global_dir() / "tool-cache"


def get_temp_dir() -> Path:
    """Get the scratch directory root (RUNNER_TEMP when running on a runner)."""
    runner_temp = os.environ.get("RUNNER_TEMP")
    if runner_temp:
        return Path(runner_temp)
    return Path(tempfile.gettempdir()) / "sealsetup"


def new_temp_path() -> Path:
    """
    Get a fresh, unique path under the temp root.

    The path itself is not created; its parent is.
    """
    temp_dir = get_temp_dir()
    temp_dir.mkdir(parents=True, exist_ok=True)
    return temp_dir / str(uuid.uuid4())
