"""
Core functionality for SealSetup.

This package contains the host, transfer, archive and cache modules the
installer builds on.
"""

from .platform import (
    HostInfo,
    detect_host,
    get_architecture,
    get_platform,
    clear_host_cache,
)

from .tool_cache import (
    ToolCache,
    clean_version,
)

from .exceptions import (
    SealSetupError,
    UnsupportedPlatformError,
    RegistryQueryError,
    UnsupportedReleaseAssetError,
    DownloadError,
    ArchiveExtractionError,
    InsecureArchiveError,
    ToolCacheError,
    ConfigError,
    InvalidInputError,
)

__all__ = [
    "HostInfo",
    "detect_host",
    "get_architecture",
    "get_platform",
    "clear_host_cache",
    "ToolCache",
    "clean_version",
    "SealSetupError",
    "UnsupportedPlatformError",
    "RegistryQueryError",
    "UnsupportedReleaseAssetError",
    "DownloadError",
    "ArchiveExtractionError",
    "InsecureArchiveError",
    "ToolCacheError",
    "ConfigError",
    "InvalidInputError",
]
