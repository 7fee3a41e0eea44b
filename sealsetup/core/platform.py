"""
Host platform detection for SealSetup.

Maps the host operating system and CPU architecture onto the labels used in
seal release asset names (e.g. 'seal-v1.2.0-linux-x64.tar.gz').

Usage:
    from sealsetup.core.platform import detect_host

    host = detect_host()
    print(f"Platform: {host.platform}")
    print(f"Architecture: {host.arch}")
    print(f"Asset suffix: {host.asset_suffix()}")
"""

import functools
import platform
import sys
from dataclasses import dataclass
from typing import Optional

from sealsetup.core.exceptions import UnsupportedPlatformError

WINDOWS = "windows"
MACOS = "macos-darwin"
LINUX = "linux"

# Host OS identifier (sys.platform) -> release platform label
_PLATFORM_MAP = {
    "win32": WINDOWS,
    "linux": LINUX,
    "darwin": MACOS,
}


@dataclass(frozen=True)
class HostInfo:
    """
    Platform information for the current run.

    Attributes:
        platform: Release platform label ('windows', 'macos-darwin', 'linux')
        arch: CPU architecture ('x64', 'arm64', 'x86', 'arm', ...)
    """

    platform: str
    arch: str

    @property
    def is_windows(self) -> bool:
        return self.platform == WINDOWS

    @property
    def archive_extension(self) -> str:
        """
        Archive extension used by releases for this platform.

        Returns:
            'zip' on Windows, 'tar.gz' everywhere else
        """
        return "zip" if self.is_windows else "tar.gz"

    def asset_suffix(self) -> str:
        """
        Get the '<platform>-<arch>' fragment used to match release assets.

        Example:
            >>> HostInfo('linux', 'x64').asset_suffix()
            'linux-x64'
        """
        return f"{self.platform}-{self.arch}"

    def __str__(self) -> str:
        return self.asset_suffix()


def get_platform(os_identifier: Optional[str] = None) -> str:
    """
    Map a host OS identifier to a release platform label.

    Args:
        os_identifier: Raw OS identifier (defaults to sys.platform)

    Returns:
        One of 'windows', 'macos-darwin', 'linux'

    Raises:
        UnsupportedPlatformError: If the identifier is not win32, linux or darwin
    """
    if os_identifier is None:
        os_identifier = sys.platform

    try:
        return _PLATFORM_MAP[os_identifier]
    except KeyError:
        raise UnsupportedPlatformError(os_identifier) from None


def get_architecture(machine: Optional[str] = None) -> str:
    """
    Detect CPU architecture.

    Args:
        machine: Raw machine name (defaults to platform.machine())

    Returns:
        Normalized architecture: 'x64', 'arm64', 'x86', 'arm', or the
        lower-cased machine name when unknown
    """
    if machine is None:
        machine = platform.machine()
    machine = machine.lower()

    if machine in ("x86_64", "amd64", "x64"):
        return "x64"
    elif machine in ("aarch64", "arm64"):
        return "arm64"
    elif machine in ("i386", "i686", "x86"):
        return "x86"
    elif machine.startswith("arm"):
        return "arm"
    else:
        return machine


@functools.lru_cache(maxsize=1)
def detect_host() -> HostInfo:
    """
    Detect the current host platform.

    This function is cached - it only runs detection once per process.

    Raises:
        UnsupportedPlatformError: If the host OS is not supported
    """
    return HostInfo(platform=get_platform(), arch=get_architecture())


def clear_host_cache() -> None:
    """Clear the cached host detection result (used by tests)."""
    detect_host.cache_clear()
