"""
Seal resolver-installer.

Resolves a requested version to a downloadable release, consults the tool
cache, downloads and extracts the archive, fixes up the install directory and
publishes it on PATH.

Usage:
    from sealsetup.config import SetupConfig
    from sealsetup.installer import SealInstaller

    result = SealInstaller(SetupConfig(version="v1.2.0")).run()
    print(result.path, result.version, result.cache_hit)
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple

from sealsetup.config import TOOL_NAME, SetupConfig
from sealsetup.core.download import DownloadProgress, download_tool
from sealsetup.core.exceptions import UnsupportedReleaseAssetError
from sealsetup.core.filesystem import extract_tar, extract_zip, make_executable
from sealsetup.core.platform import HostInfo, detect_host
from sealsetup.core.tool_cache import ToolCache
from sealsetup.registry import Release, ReleaseAsset, ReleaseRegistry
from sealsetup.workflow import WorkflowReporter

logger = logging.getLogger(__name__)

DEFAULT_SERVER_URL = "https://github.com"


@dataclass(frozen=True)
class ResolvedRelease:
    """A concrete version and the URL of its archive for this host."""

    version: str
    download_url: str


@dataclass(frozen=True)
class InstallResult:
    """Outcome of a successful run."""

    path: Path
    version: str
    cache_hit: bool


# ============================================================================
# Version-specific extraction layouts
# ============================================================================


def _nested_under_file_name(extracted: Path, file_name: str) -> Path:
    return extracted / file_name


# (version substring, adjustment) pairs; the first match wins.
# v0.0.5 archives contain a directory named after the archive itself.
VERSION_PATH_ADJUSTMENTS: List[Tuple[str, Callable[[Path, str], Path]]] = [
    ("v0.0.5", _nested_under_file_name),
]


def adjust_extracted_path(extracted: Path, version: str, file_name: str) -> Path:
    """
    Get the directory holding the binary inside an extracted archive.

    Args:
        extracted: Directory the archive was extracted into
        version: Requested version string
        file_name: Archive file name

    Returns:
        Adjusted directory for releases with a known irregular layout,
        otherwise the extracted directory unchanged
    """
    for pattern, adjust in VERSION_PATH_ADJUSTMENTS:
        if pattern in version:
            return adjust(extracted, file_name)
    return extracted


# ============================================================================
# Resolution
# ============================================================================


def build_file_name(tool: str, version: str, host: HostInfo) -> str:
    """
    Get the archive name for a release.

    Example:
        >>> build_file_name('seal', 'v1.2.0', HostInfo('linux', 'x64'))
        'seal-v1.2.0-linux-x64.tar.gz'
    """
    return f"{tool}-{version}-{host.platform}-{host.arch}.{host.archive_extension}"


def build_download_url(
    owner: str,
    repo: str,
    version: str,
    file_name: str,
    server_url: Optional[str] = None,
) -> str:
    """
    Get the conventional release download URL for an archive.

    Args:
        owner: Repository owner
        repo: Repository name
        version: Release tag
        file_name: Archive file name
        server_url: Server base URL (default: GITHUB_SERVER_URL or github.com)
    """
    server_url = (
        server_url or os.environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL
    ).rstrip("/")
    return f"{server_url}/{owner}/{repo}/releases/download/{version}/{file_name}"


def select_asset(release: Release, host: HostInfo) -> ReleaseAsset:
    """
    Pick the release asset built for the host.

    Raises:
        UnsupportedReleaseAssetError: If no asset name contains '<platform>-<arch>'
    """
    suffix = host.asset_suffix()
    for asset in release.assets:
        if suffix in asset.name:
            return asset
    raise UnsupportedReleaseAssetError(host.platform, host.arch)


class SealInstaller:
    """
    Install a seal release onto PATH.

    Each call to run() performs one linear install with two early-return
    points, both at the cache lookup.
    """

    def __init__(
        self,
        config: SetupConfig,
        reporter: Optional[WorkflowReporter] = None,
        host: Optional[HostInfo] = None,
        cache: Optional[ToolCache] = None,
        registry: Optional[ReleaseRegistry] = None,
        server_url: Optional[str] = None,
    ):
        """
        Initialize installer.

        Args:
            config: Run configuration
            reporter: Workflow reporter for PATH and outputs
            host: Host platform (auto-detected if None)
            cache: Tool cache (runner tool cache if None)
            registry: Release registry client (created from config if None)
            server_url: Release download server base URL
        """
        self.config = config
        self.reporter = reporter or WorkflowReporter()
        self.host = host or detect_host()
        self.cache = cache or ToolCache()
        self.registry = registry or ReleaseRegistry(token=config.token or None)
        self.server_url = server_url

    def _fix_permissions(self, directory: Path):
        if not self.host.is_windows:
            make_executable(directory / TOOL_NAME)

    def _add_to_path(self, directory: Path):
        self.reporter.add_path(directory)
        logger.info(f"Added {TOOL_NAME} to PATH")

    def _log_progress(self, progress: DownloadProgress):
        logger.debug(f"Downloading {TOOL_NAME}: {progress}")

    def _report(self, result: InstallResult) -> InstallResult:
        self.reporter.set_output("cache-hit", result.cache_hit)
        self.reporter.set_output("path", str(result.path))
        self.reporter.set_output("version", result.version)
        return result

    def fetch_from_cache(self, version: str) -> Optional[InstallResult]:
        """
        Install from the tool cache if the version is cached.

        Args:
            version: Concrete version

        Returns:
            InstallResult on a cache hit, None on a miss
        """
        cached_path = self.cache.find(TOOL_NAME, version, self.host.arch)
        if cached_path is None:
            return None

        self._fix_permissions(cached_path)
        self._add_to_path(cached_path)
        return self._report(InstallResult(cached_path, version, cache_hit=True))

    def resolve_explicit(self, version: str) -> ResolvedRelease:
        """Resolve an explicit version by URL templating (no network access)."""
        file_name = build_file_name(TOOL_NAME, version, self.host)
        url = build_download_url(
            self.config.owner,
            self.config.repo,
            version,
            file_name,
            server_url=self.server_url,
        )
        return ResolvedRelease(version=version, download_url=url)

    def fetch_latest_release(self) -> Release:
        """
        Query the registry for the latest release.

        Raises:
            RegistryQueryError: If the query fails
        """
        logger.info(f"Retrieving latest release of {TOOL_NAME}")
        release = self.registry.get_latest_release(self.config.owner, self.config.repo)
        logger.info(f"Successfully retrieved latest release of {TOOL_NAME}")
        return release

    def download_and_extract(self, resolved: ResolvedRelease) -> Path:
        """
        Download the release archive and extract it.

        Returns:
            Directory containing the tool binary
        """
        logger.info(f"Downloading {TOOL_NAME} from {resolved.download_url}")
        archive = download_tool(
            resolved.download_url,
            token=self.config.token or None,
            progress_callback=self._log_progress,
        )
        logger.info(f"Successfully downloaded {TOOL_NAME}")

        if self.host.is_windows:
            extracted = extract_zip(archive)
        else:
            extracted = extract_tar(archive)
        logger.info(f"Extracted {TOOL_NAME}: {extracted}")

        # Layout quirks are keyed on the requested version, as is the file name
        file_name = build_file_name(TOOL_NAME, self.config.version, self.host)
        return adjust_extracted_path(extracted, self.config.version, file_name)

    def run(self) -> InstallResult:
        """
        Install the configured version.

        Returns:
            InstallResult for the installed or cached tool

        Raises:
            SealSetupError: On any fatal condition
        """
        if self.config.wants_latest:
            release = self.fetch_latest_release()
            cached = self.fetch_from_cache(release.tag_name)
            if cached:
                return cached
            asset = select_asset(release, self.host)
            resolved = ResolvedRelease(release.tag_name, asset.browser_download_url)
        else:
            cached = self.fetch_from_cache(self.config.version)
            if cached:
                return cached
            resolved = self.resolve_explicit(self.config.version)

        install_path = self.download_and_extract(resolved)
        self._fix_permissions(install_path)

        if self.config.cache:
            self.cache.cache_dir(install_path, TOOL_NAME, resolved.version, self.host.arch)
            logger.info(f"Cached {TOOL_NAME} for future workflows")

        self._add_to_path(install_path)
        logger.info(f"Successfully installed {TOOL_NAME}!")
        return self._report(InstallResult(install_path, resolved.version, cache_hit=False))
