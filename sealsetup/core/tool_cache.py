"""
Tool cache for installed tool directories.

Cached tools live under the cache root using the same layout as the hosted
runner tool cache, so entries written by other setup actions are found and
entries written here are visible to them:

    <root>/<tool>/<version>/<arch>/           cached directory
    <root>/<tool>/<version>/<arch>.complete   completion marker

An entry only counts as present once its completion marker exists.
"""

import logging
import re
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout

from sealsetup.core.directory import get_tool_cache_dir
from sealsetup.core.exceptions import ToolCacheError
from sealsetup.core.filesystem import recursive_copy, safe_rmtree
from sealsetup.core.platform import get_architecture

logger = logging.getLogger(__name__)

# Semantic Versioning 2.0.0 (https://semver.org)
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-((?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
    r"(?:\.(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*))*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


def clean_version(version: str) -> str:
    """
    Normalize a version string for use as a cache key.

    Only a leading 'v' or '=' is stripped, and only when what remains is a
    valid semantic version. Every other tag is used verbatim, so two distinct
    tags never share a key.

    Example:
        >>> clean_version('v1.2.0')
        '1.2.0'
        >>> clean_version('v0.0.5-rc1')
        '0.0.5-rc1'
        >>> clean_version('v1.0.0.post1')
        'v1.0.0.post1'
    """
    version = version.strip()
    candidate = version.lstrip("=v")
    if _SEMVER_RE.match(candidate):
        return candidate
    return version


class ToolCache:
    """
    Key-value cache mapping (tool, version, arch) to a local directory.

    Example:
        >>> cache = ToolCache()
        >>> cache.find('seal', 'v1.2.0') is None
        True
        >>> cache.cache_dir(Path('/tmp/extracted'), 'seal', 'v1.2.0')
        PosixPath('/home/user/.sealsetup/tool-cache/seal/1.2.0/x64')
    """

    def __init__(self, root: Optional[Path] = None, lock_timeout: int = 30):
        """
        Initialize tool cache.

        Args:
            root: Cache root directory (default: runner tool cache)
            lock_timeout: Timeout in seconds for acquiring the cache lock
        """
        self.root = Path(root) if root is not None else get_tool_cache_dir()
        self.lock_path = self.root / "lock" / "cache.lock"
        self.lock_timeout = lock_timeout

        logger.debug(f"Initialized tool cache at {self.root}")

    def tool_path(self, tool: str, version: str, arch: Optional[str] = None) -> Path:
        """Get the directory a (tool, version, arch) entry is stored in."""
        arch = arch or get_architecture()
        return self.root / tool / clean_version(version) / arch

    def _marker_path(self, tool_path: Path) -> Path:
        return tool_path.parent / f"{tool_path.name}.complete"

    @contextmanager
    def _lock(self):
        """
        Context manager for cache write locking.

        Raises:
            ToolCacheError: If lock cannot be acquired within timeout
        """
        self.lock_path.parent.mkdir(parents=True, exist_ok=True)
        lock = FileLock(self.lock_path, timeout=self.lock_timeout)
        try:
            with lock:
                yield
        except Timeout as e:
            raise ToolCacheError(
                f"Could not acquire tool cache lock within {self.lock_timeout}s"
            ) from e

    def find(
        self, tool: str, version: str, arch: Optional[str] = None
    ) -> Optional[Path]:
        """
        Look up a cached tool directory.

        Args:
            tool: Tool name (e.g. 'seal')
            version: Concrete version (e.g. 'v1.2.0')
            arch: Architecture (default: host architecture)

        Returns:
            Cached directory, or None on a cache miss

        Raises:
            ValueError: If tool or version is empty
        """
        if not tool:
            raise ValueError("Tool name cannot be empty")
        if not version:
            raise ValueError("Version cannot be empty")

        path = self.tool_path(tool, version, arch)
        if path.is_dir() and self._marker_path(path).exists():
            logger.debug(f"Found {tool} {version} in cache: {path}")
            return path

        logger.debug(f"{tool} {version} not found in cache")
        return None

    def cache_dir(
        self, source: Path, tool: str, version: str, arch: Optional[str] = None
    ) -> Path:
        """
        Copy a directory into the cache.

        An existing entry for the same key is replaced.

        Args:
            source: Directory to cache
            tool: Tool name
            version: Concrete version
            arch: Architecture (default: host architecture)

        Returns:
            Path of the cached directory

        Raises:
            ToolCacheError: If the source is not a directory or copying fails
        """
        source = Path(source)
        if not source.is_dir():
            raise ToolCacheError(f"Source is not a directory: {source}")

        dest = self.tool_path(tool, version, arch)
        marker = self._marker_path(dest)

        logger.debug(f"Caching {source} as {dest}")

        with self._lock():
            marker.unlink(missing_ok=True)
            try:
                safe_rmtree(dest, require_prefix=self.root)
                recursive_copy(source, dest)
            except Exception as e:
                raise ToolCacheError(f"Failed to cache {tool} {version}: {e}") from e
            marker.touch()

        return dest
