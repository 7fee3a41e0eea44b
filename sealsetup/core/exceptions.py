"""
Centralized exception hierarchy for SealSetup.

Every fatal condition of a setup run is one of these types. They keep their
structured attributes until the CLI boundary flattens them into the single
failure message reported to the workflow.
"""

from typing import Optional


# ============================================================================
# Base Exceptions
# ============================================================================


class SealSetupError(Exception):
    """Base exception for all SealSetup errors."""

    pass


# ============================================================================
# Resolution Exceptions
# ============================================================================


class UnsupportedPlatformError(SealSetupError):
    """Raised when the host operating system is not supported."""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unsupported platform {platform}!")


class RegistryQueryError(SealSetupError):
    """Raised when the release registry does not return a successful response."""

    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class UnsupportedReleaseAssetError(SealSetupError):
    """Raised when no release asset matches the host platform and architecture."""

    def __init__(self, platform: str, arch: str):
        self.platform = platform
        self.arch = arch
        super().__init__(
            f"Unsupported release for platform {platform} with architecture {arch}"
        )


# ============================================================================
# Transfer and Filesystem Exceptions
# ============================================================================


class DownloadError(SealSetupError):
    """Raised when a file download fails."""

    pass


class ArchiveExtractionError(SealSetupError):
    """Failed to extract an archive."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


class ToolCacheError(SealSetupError):
    """Raised when the tool cache cannot be read or written."""

    pass


# ============================================================================
# Configuration Exceptions
# ============================================================================


class ConfigError(SealSetupError):
    """Raised when a configuration file cannot be loaded."""

    pass


class InvalidInputError(ConfigError):
    """Raised when an action input has an invalid value."""

    pass
