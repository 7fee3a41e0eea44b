"""
File system utilities for SealSetup.

This module provides the local file operations a setup run needs:
- Archive extraction (zip, gzip-compressed tar) with traversal protection
- Executable permission fixup
- Safe file operations (safe deletion, recursive copy)

Archive format is always chosen by the caller. Downloaded archives are stored
under random names, so their extension cannot be used to detect the format.
"""

import os
import shutil
import stat
import sys
import tarfile
import zipfile
from pathlib import Path
from typing import Optional, Union

from sealsetup.core.directory import new_temp_path
from sealsetup.core.exceptions import (
    ArchiveExtractionError,
    InsecureArchiveError,
    SealSetupError,
)

IS_WINDOWS = os.name == "nt"

# rwxr-xr-x
EXECUTABLE_MODE = (
    stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
)


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to parent.

    Args:
        path: Path to check
        parent: Potential parent path

    Example:
        >>> is_relative_to(Path('/a/b/c'), Path('/a'))
        True
        >>> is_relative_to(Path('/a/b/c'), Path('/x'))
        False
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def _prepare_destination(destination: Optional[Union[str, Path]]) -> Path:
    destination = Path(destination) if destination else new_temp_path()
    destination.mkdir(parents=True, exist_ok=True)
    return destination


def extract_zip(
    archive_path: Union[str, Path], destination: Optional[Union[str, Path]] = None
) -> Path:
    """
    Extract a ZIP archive.

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (default: fresh temp directory)

    Returns:
        Directory the archive was extracted into

    Raises:
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths
    """
    archive_path = Path(archive_path)
    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination = _prepare_destination(destination)

    try:
        with zipfile.ZipFile(archive_path, "r") as zf:
            members = zf.namelist()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member, destination)

            zf.extractall(destination)
    except InsecureArchiveError:
        raise
    except (zipfile.BadZipFile, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


def extract_tar(
    archive_path: Union[str, Path],
    destination: Optional[Union[str, Path]] = None,
    mode: str = "r:gz",
) -> Path:
    """
    Extract a tar archive (gzip-compressed by default).

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to (default: fresh temp directory)
        mode: tarfile open mode

    Returns:
        Directory the archive was extracted into

    Raises:
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths
    """
    archive_path = Path(archive_path)
    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination = _prepare_destination(destination)

    try:
        with tarfile.open(archive_path, mode) as tar:
            members = tar.getmembers()

            # Validate all paths first
            for member in members:
                _validate_archive_path(member.name, destination)

            # Extract with filter for security (Python 3.12+)
            # For older Python, we've already validated paths above
            if sys.version_info >= (3, 12):
                tar.extractall(destination, filter="data")
            else:
                tar.extractall(destination)
    except InsecureArchiveError:
        raise
    except (tarfile.TarError, OSError) as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e

    return destination


# ============================================================================
# Permissions
# ============================================================================


def make_executable(path: Union[str, Path]) -> None:
    """
    Set a file's mode to rwxr-xr-x.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    os.chmod(path, EXECUTABLE_MODE)


# ============================================================================
# Safe File Operations
# ============================================================================


def safe_rmtree(
    path: Union[str, Path], require_prefix: Optional[Union[str, Path]] = None
) -> None:
    """
    Safely remove a directory tree.

    Args:
        path: Directory to remove
        require_prefix: If specified, path must be under this directory

    Raises:
        ValueError: If path is not under require_prefix
        SealSetupError: If deletion fails
    """
    path = Path(path).resolve()

    if require_prefix is not None:
        require_prefix = Path(require_prefix).resolve()
        if not is_relative_to(path, require_prefix):
            raise ValueError(
                f"Refusing to delete '{path}': not under required prefix '{require_prefix}'"
            )

    if not path.exists():
        return

    if not path.is_dir():
        raise SealSetupError(f"Path is not a directory: {path}")

    try:
        if IS_WINDOWS:

            def handle_remove_readonly(func, path, exc):
                """Error handler for Windows read-only files."""
                if not os.access(path, os.W_OK):
                    os.chmod(path, stat.S_IWRITE)
                    func(path)
                else:
                    raise

            shutil.rmtree(path, onerror=handle_remove_readonly)
        else:
            shutil.rmtree(path)

    except OSError as e:
        raise SealSetupError(f"Failed to remove directory '{path}': {e}") from e


def recursive_copy(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """
    Recursively copy a directory tree, preserving file metadata.

    Raises:
        SealSetupError: If source is missing or not a directory
    """
    source = Path(source)
    destination = Path(destination)

    if not source.exists():
        raise SealSetupError(f"Source does not exist: {source}")

    if not source.is_dir():
        raise SealSetupError(f"Source is not a directory: {source}")

    destination.mkdir(parents=True, exist_ok=True)

    for item in source.rglob("*"):
        dest_item = destination / item.relative_to(source)

        if item.is_dir():
            dest_item.mkdir(parents=True, exist_ok=True)
        else:
            dest_item.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, dest_item)  # copy2 preserves mode bits
