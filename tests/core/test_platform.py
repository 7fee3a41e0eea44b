"""
Unit tests for the host platform detection module.
"""

import pytest
from unittest.mock import patch

from sealsetup.core.exceptions import UnsupportedPlatformError
from sealsetup.core.platform import (
    HostInfo,
    clear_host_cache,
    detect_host,
    get_architecture,
    get_platform,
)


class TestGetPlatform:
    """Tests for OS identifier mapping."""

    @pytest.mark.parametrize(
        "identifier,expected",
        [
            ("win32", "windows"),
            ("linux", "linux"),
            ("darwin", "macos-darwin"),
        ],
    )
    def test_supported_identifiers(self, identifier, expected):
        """Test each supported identifier maps to its platform label."""
        assert get_platform(identifier) == expected

    @pytest.mark.parametrize("identifier", ["freebsd13", "cygwin", "aix", ""])
    def test_unsupported_identifier_raises(self, identifier):
        """Test unknown identifiers fail with UnsupportedPlatformError."""
        with pytest.raises(UnsupportedPlatformError) as exc_info:
            get_platform(identifier)

        assert exc_info.value.platform == identifier
        assert f"Unsupported platform {identifier}!" == str(exc_info.value)

    def test_defaults_to_sys_platform(self):
        """Test the host identifier is read from sys.platform."""
        with patch("sealsetup.core.platform.sys.platform", "darwin"):
            assert get_platform() == "macos-darwin"


class TestGetArchitecture:
    """Tests for architecture normalization."""

    @pytest.mark.parametrize(
        "machine,expected",
        [
            ("x86_64", "x64"),
            ("AMD64", "x64"),
            ("aarch64", "arm64"),
            ("arm64", "arm64"),
            ("i686", "x86"),
            ("armv7l", "arm"),
            ("riscv64", "riscv64"),
        ],
    )
    def test_normalization(self, machine, expected):
        """Test machine names map to release architecture labels."""
        assert get_architecture(machine) == expected

    def test_defaults_to_platform_machine(self):
        """Test the host machine is read from platform.machine()."""
        with patch("sealsetup.core.platform.platform.machine", return_value="x86_64"):
            assert get_architecture() == "x64"


class TestHostInfo:
    """Tests for HostInfo."""

    def test_archive_extension_windows(self):
        """Test Windows releases are zip archives."""
        assert HostInfo("windows", "x64").archive_extension == "zip"

    @pytest.mark.parametrize("platform_label", ["linux", "macos-darwin"])
    def test_archive_extension_unix(self, platform_label):
        """Test non-Windows releases are gzip-compressed tarballs."""
        assert HostInfo(platform_label, "arm64").archive_extension == "tar.gz"

    def test_asset_suffix(self):
        """Test the asset matching fragment."""
        assert HostInfo("macos-darwin", "arm64").asset_suffix() == "macos-darwin-arm64"

    def test_is_windows(self):
        assert HostInfo("windows", "x64").is_windows
        assert not HostInfo("linux", "x64").is_windows


class TestDetectHost:
    """Tests for cached host detection."""

    def test_detect_host(self):
        """Test detection combines platform and architecture."""
        with patch("sealsetup.core.platform.sys.platform", "linux"), patch(
            "sealsetup.core.platform.platform.machine", return_value="aarch64"
        ):
            assert detect_host() == HostInfo("linux", "arm64")

    def test_detection_is_cached(self):
        """Test detection only runs once until the cache is cleared."""
        with patch(
            "sealsetup.core.platform.get_platform", return_value="linux"
        ) as mock_platform, patch(
            "sealsetup.core.platform.get_architecture", return_value="x64"
        ):
            detect_host()
            detect_host()
            assert mock_platform.call_count == 1

            clear_host_cache()
            detect_host()
            assert mock_platform.call_count == 2

    def test_unsupported_host_raises(self):
        """Test detection fails fast on an unsupported host."""
        with patch("sealsetup.core.platform.sys.platform", "sunos5"):
            with pytest.raises(UnsupportedPlatformError):
                detect_host()
