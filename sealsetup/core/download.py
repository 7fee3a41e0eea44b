"""
Network download of release archives.

Streams a URL to local storage with progress reporting. Downloads run once:
a failed transfer raises DownloadError and is not retried.
"""

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

from sealsetup.core.directory import new_temp_path
from sealsetup.core.exceptions import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int
    percentage: float
    speed_bps: float  # bytes per second

    def __str__(self) -> str:
        """Format progress for display."""
        return format_progress(self)


def auth_headers(token: Optional[str]) -> dict:
    """
    Build request headers carrying an optional GitHub token.

    Args:
        token: Access token, or None/empty for anonymous requests
    """
    if not token:
        return {}
    return {"Authorization": f"token {token}"}


def download_tool(
    url: str,
    destination: Optional[Path] = None,
    token: Optional[str] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 60,
) -> Path:
    """
    Download a file from a URL.

    Args:
        url: URL to download from
        destination: Local path to save file (default: unique path in temp dir)
        token: Optional token sent as an Authorization header
        progress_callback: Optional callback for progress updates
        timeout: Socket timeout in seconds

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If the request fails or returns a non-success status
        ValueError: If URL is empty

    Example:
        >>> archive = download_tool(
        ...     "https://github.com/seal-runtime/seal/releases/download/v1.2.0/"
        ...     "seal-v1.2.0-linux-x64.tar.gz"
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination) if destination else new_temp_path()
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.debug(f"Downloading {url} to {destination}")

    try:
        response = requests.get(
            url,
            headers=auth_headers(token),
            stream=True,
            timeout=timeout,
            allow_redirects=True,
        )
    except RequestException as e:
        raise DownloadError(f"Failed to download {url}: {e}") from e

    with response:
        if response.status_code != 200:
            raise DownloadError(
                f"Unexpected HTTP response from {url}: {response.status_code}"
            )

        content_length = response.headers.get("content-length")
        total_size = int(content_length) if content_length else 0

        downloaded = 0
        start_time = time.time()
        last_progress_time = start_time

        try:
            with open(destination, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if not chunk:
                        continue
                    f.write(chunk)
                    downloaded += len(chunk)

                    # Report progress at most twice per second
                    current_time = time.time()
                    if progress_callback and (
                        current_time - last_progress_time >= 0.5
                        or downloaded == total_size
                    ):
                        elapsed = current_time - start_time
                        progress_callback(
                            DownloadProgress(
                                bytes_downloaded=downloaded,
                                total_bytes=total_size or downloaded,
                                percentage=(downloaded / total_size * 100)
                                if total_size > 0
                                else 0,
                                speed_bps=downloaded / elapsed if elapsed > 0 else 0,
                            )
                        )
                        last_progress_time = current_time
        except (RequestException, OSError) as e:
            destination.unlink(missing_ok=True)
            raise DownloadError(f"Failed to download {url}: {e}") from e

    logger.debug(f"Download complete: {destination} ({downloaded} bytes)")
    return destination


def format_progress(progress: DownloadProgress) -> str:
    """
    Format progress for display.

    Example:
        >>> progress = DownloadProgress(52428800, 104857600, 50.0, 1048576)
        >>> print(format_progress(progress))
        50.0/100.0 MB (50.0%) at 1.0 MB/s
    """
    mb_downloaded = progress.bytes_downloaded / 1024 / 1024
    mb_total = progress.total_bytes / 1024 / 1024
    speed_mbps = progress.speed_bps / 1024 / 1024

    if progress.percentage > 0:
        return (
            f"{mb_downloaded:.1f}/{mb_total:.1f} MB "
            f"({progress.percentage:.1f}%) "
            f"at {speed_mbps:.1f} MB/s"
        )
    else:
        # Unknown total size
        return f"{mb_downloaded:.1f} MB at {speed_mbps:.1f} MB/s"
