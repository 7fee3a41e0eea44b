"""
Release registry client.

Queries the GitHub REST API for release metadata (tag and asset list).
"""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

import requests
from requests.exceptions import RequestException

from sealsetup.core.download import auth_headers
from sealsetup.core.exceptions import RegistryQueryError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


@dataclass
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    browser_download_url: str


@dataclass
class Release:
    """A named release and its assets."""

    tag_name: str
    assets: List[ReleaseAsset] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Release":
        """
        Build a Release from a GitHub API release payload.

        Raises:
            RegistryQueryError: If the payload has no tag name or an asset
                is missing its name or download URL
        """
        tag_name = data.get("tag_name")
        if not tag_name:
            raise RegistryQueryError("Release has no tag name")

        try:
            assets = [
                ReleaseAsset(
                    name=asset["name"],
                    browser_download_url=asset["browser_download_url"],
                )
                for asset in data.get("assets") or []
            ]
        except KeyError as e:
            raise RegistryQueryError(f"Release asset is missing field {e}") from e
        except TypeError as e:
            raise RegistryQueryError(f"Malformed release asset: {e}") from e
        return cls(tag_name=tag_name, assets=assets)


class ReleaseRegistry:
    """GitHub releases API client."""

    def __init__(
        self,
        token: Optional[str] = None,
        api_url: Optional[str] = None,
        timeout: int = 30,
    ):
        """
        Initialize registry client.

        Args:
            token: Optional access token used for API requests
            api_url: API base URL (default: GITHUB_API_URL or api.github.com)
            timeout: Request timeout in seconds
        """
        self.token = token
        self.api_url = (
            api_url or os.environ.get("GITHUB_API_URL") or DEFAULT_API_URL
        ).rstrip("/")
        self.timeout = timeout

    def get_latest_release(self, owner: str, repo: str) -> Release:
        """
        Get the most recent release of a repository.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            Latest Release

        Raises:
            RegistryQueryError: If the request fails or does not return 200
        """
        url = f"{self.api_url}/repos/{owner}/{repo}/releases/latest"
        headers = {"Accept": "application/vnd.github+json"}
        headers.update(auth_headers(self.token))

        logger.debug(f"Fetching release info from: {url}")

        try:
            response = requests.get(url, headers=headers, timeout=self.timeout)
        except RequestException as e:
            raise RegistryQueryError(
                f"Failed to retrieve latest release: {e}"
            ) from e

        if response.status_code != 200:
            logger.debug(f"Registry responded with HTTP {response.status_code}")
            raise RegistryQueryError(
                "Failed to retrieve latest release", status=response.status_code
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RegistryQueryError(
                f"Invalid release payload from {url}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise RegistryQueryError(f"Invalid release payload from {url}")

        return Release.from_dict(data)
