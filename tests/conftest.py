"""
Pytest configuration and shared fixtures for SealSetup tests.
"""

import io
import tarfile
import zipfile
from pathlib import Path
from typing import Callable, Dict

import pytest

from sealsetup.core.platform import clear_host_cache
from sealsetup.core.tool_cache import ToolCache
from sealsetup.workflow import WorkflowReporter


@pytest.fixture(autouse=True)
def _reset_host_cache():
    """Make sure host detection never leaks between tests."""
    clear_host_cache()
    yield
    clear_host_cache()


@pytest.fixture
def runner_env(tmp_path, monkeypatch) -> Dict[str, Path]:
    """
    Simulate a workflow runner environment rooted in tmp_path.

    Returns:
        Mapping of the runner locations (temp, tool_cache, output, path)
    """
    locations = {
        "temp": tmp_path / "runner-temp",
        "tool_cache": tmp_path / "tool-cache",
        "output": tmp_path / "github_output",
        "path": tmp_path / "github_path",
    }
    locations["output"].touch()
    locations["path"].touch()

    monkeypatch.setenv("RUNNER_TEMP", str(locations["temp"]))
    monkeypatch.setenv("RUNNER_TOOL_CACHE", str(locations["tool_cache"]))
    monkeypatch.setenv("GITHUB_OUTPUT", str(locations["output"]))
    monkeypatch.setenv("GITHUB_PATH", str(locations["path"]))
    for name in ("INPUT_TOKEN", "INPUT_VERSION", "INPUT_CACHE", "RUNNER_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("GITHUB_SERVER_URL", raising=False)
    monkeypatch.delenv("GITHUB_API_URL", raising=False)
    monkeypatch.setenv("PATH", "/usr/bin")

    return locations


@pytest.fixture
def reporter(runner_env) -> WorkflowReporter:
    """Reporter writing to the simulated runner files."""
    return WorkflowReporter(stream=io.StringIO())


@pytest.fixture
def tool_cache(runner_env) -> ToolCache:
    """Tool cache rooted in the simulated runner tool cache."""
    return ToolCache(root=runner_env["tool_cache"])


def read_outputs(output_file: Path) -> Dict[str, str]:
    """Parse a GITHUB_OUTPUT file written with heredoc delimiters."""
    outputs = {}
    lines = output_file.read_text(encoding="utf-8").splitlines()
    i = 0
    while i < len(lines):
        name, delimiter = lines[i].split("<<", 1)
        value_lines = []
        i += 1
        while lines[i] != delimiter:
            value_lines.append(lines[i])
            i += 1
        outputs[name] = "\n".join(value_lines)
        i += 1
    return outputs


@pytest.fixture
def outputs_reader() -> Callable[[Path], Dict[str, str]]:
    return read_outputs


@pytest.fixture
def make_tar_gz() -> Callable[[Dict[str, bytes]], bytes]:
    """Factory building an in-memory .tar.gz from {member name: content}."""

    def _make(files: Dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with tarfile.open(fileobj=buffer, mode="w:gz") as tar:
            for name, content in files.items():
                info = tarfile.TarInfo(name)
                info.size = len(content)
                info.mode = 0o644
                tar.addfile(info, io.BytesIO(content))
        return buffer.getvalue()

    return _make


@pytest.fixture
def make_zip() -> Callable[[Dict[str, bytes]], bytes]:
    """Factory building an in-memory .zip from {member name: content}."""

    def _make(files: Dict[str, bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as zf:
            for name, content in files.items():
                zf.writestr(name, content)
        return buffer.getvalue()

    return _make
