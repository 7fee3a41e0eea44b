"""
Workflow runner integration.

Reads action inputs and publishes outputs, PATH additions and failures using
the GitHub Actions runner conventions:

- Inputs arrive as INPUT_<NAME> environment variables
- Outputs are appended to the file named by GITHUB_OUTPUT
- PATH additions are appended to the file named by GITHUB_PATH
- Failures are reported with an '::error::' workflow command

When the runner files are not available (e.g. local runs) the legacy
'::set-output' / '::add-path' commands are printed instead.
"""

import logging
import os
import sys
import uuid
from pathlib import Path
from typing import Any, Optional, TextIO

from sealsetup.core.exceptions import InvalidInputError

logger = logging.getLogger(__name__)

TRUE_VALUES = ("true", "True", "TRUE")
FALSE_VALUES = ("false", "False", "FALSE")


def _to_command_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class WorkflowReporter:
    """
    Input/output bridge to the workflow runner.

    Example:
        >>> reporter = WorkflowReporter()
        >>> version = reporter.get_input("version") or "latest"
        >>> reporter.set_output("version", "v1.2.0")
    """

    def __init__(self, environ: Optional[dict] = None, stream: Optional[TextIO] = None):
        """
        Initialize reporter.

        Args:
            environ: Environment mapping (default: os.environ)
            stream: Stream for workflow commands (default: sys.stdout)
        """
        self.environ = os.environ if environ is None else environ
        self.stream = stream or sys.stdout
        self.failed = False
        self.outputs: dict = {}

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def get_input(self, name: str, trim_whitespace: bool = True) -> str:
        """
        Get an action input value.

        Args:
            name: Input name as declared in action.yml
            trim_whitespace: Strip leading/trailing whitespace

        Returns:
            Input value, or an empty string when unset
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        value = self.environ.get(key, "")
        return value.strip() if trim_whitespace else value

    def get_boolean_input(self, name: str, default: Optional[bool] = None) -> bool:
        """
        Get a boolean action input.

        Accepts the YAML 1.2 core schema spellings only.

        Args:
            name: Input name
            default: Value used when the input is unset (None: unset is invalid)

        Raises:
            InvalidInputError: If the value is not a recognised boolean
        """
        value = self.get_input(name)
        if not value and default is not None:
            return default
        if value in TRUE_VALUES:
            return True
        if value in FALSE_VALUES:
            return False
        raise InvalidInputError(
            f'Input does not meet YAML 1.2 "Core Schema" specification: {name}\n'
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _issue(self, command: str, message: str = "", **properties):
        props = ",".join(f"{k}={_escape_data(str(v))}" for k, v in properties.items())
        head = f"::{command} {props}" if props else f"::{command}"
        self.stream.write(f"{head}::{_escape_data(message)}\n")
        self.stream.flush()

    def _append_file(self, env_name: str, content: str) -> bool:
        file_path = self.environ.get(env_name)
        if not file_path:
            return False
        with open(file_path, "a", encoding="utf-8") as f:
            f.write(content + "\n")
        return True

    def set_output(self, name: str, value: Any):
        """
        Publish an output value.

        Args:
            name: Output name as declared in action.yml
            value: Output value (booleans are written as 'true'/'false')
        """
        text = _to_command_value(value)
        self.outputs[name] = text

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        if self._append_file(
            "GITHUB_OUTPUT", f"{name}<<{delimiter}\n{text}\n{delimiter}"
        ):
            return

        self.stream.write("\n")
        self._issue("set-output", text, name=name)

    def add_path(self, path: Path):
        """
        Prepend a directory to PATH for this process and later workflow steps.
        """
        path_str = str(path)
        if not self._append_file("GITHUB_PATH", path_str):
            self._issue("add-path", path_str)
        self.environ["PATH"] = f"{path_str}{os.pathsep}{self.environ.get('PATH', '')}"

    def set_failed(self, message: str):
        """
        Report the run as failed.

        The caller is responsible for returning a non-zero exit code.
        """
        self.failed = True
        self._issue("error", message)

    def is_debug(self) -> bool:
        """Check if the runner has step debug logging enabled."""
        return self.environ.get("RUNNER_DEBUG") == "1"
