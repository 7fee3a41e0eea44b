"""
SealSetup CLI argument parser.

Runs one setup: inputs come from the action environment (INPUT_*), an optional
YAML file, and the flags below. This is the only place errors are turned into
the workflow failure message.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("sealsetup")
except Exception:
    __version__ = "0.1.0"

from sealsetup.config import load_config
from sealsetup.installer import SealInstaller
from sealsetup.workflow import WorkflowReporter

logger = logging.getLogger(__name__)


class CLI:
    """SealSetup command-line interface."""

    def __init__(self, reporter: Optional[WorkflowReporter] = None):
        """
        Initialize CLI with argument parser.

        Args:
            reporter: Workflow reporter (default: reads os.environ, writes stdout)
        """
        self.reporter = reporter or WorkflowReporter()
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="setup-seal",
            description="Install the seal runtime onto PATH",
            epilog="Flags override INPUT_* environment variables, which override --config",
        )

        parser.add_argument(
            "--version", action="version", version=f"SealSetup {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to YAML configuration file",
        )
        parser.add_argument(
            "--seal-version",
            dest="seal_version",
            metavar="VERSION",
            help="Version to install, e.g. v1.2.0 (default: latest)",
        )
        parser.add_argument(
            "--token",
            metavar="TOKEN",
            help="Token for release queries and downloads",
        )
        parser.add_argument(
            "--cache",
            dest="cache",
            action="store_true",
            default=None,
            help="Store the installed tool in the tool cache (default)",
        )
        parser.add_argument(
            "--no-cache",
            dest="cache",
            action="store_false",
            help="Do not store the installed tool in the tool cache",
        )
        parser.add_argument(
            "--owner",
            metavar="OWNER",
            help="Owner of the repository publishing releases (default: seal-runtime)",
        )
        parser.add_argument(
            "--repo",
            metavar="REPO",
            help="Repository publishing releases (default: seal)",
        )

        return parser

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """Parse command-line arguments."""
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, 1 for failure)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        try:
            config = load_config(
                self.reporter,
                config_file=parsed_args.config,
                overrides={
                    "version": parsed_args.seal_version.strip()
                    if parsed_args.seal_version
                    else None,
                    "token": parsed_args.token,
                    "cache": parsed_args.cache,
                    "owner": parsed_args.owner,
                    "repo": parsed_args.repo,
                },
            )
            SealInstaller(config, reporter=self.reporter).run()
            return 0
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            self.reporter.set_failed("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.debug("Setup failed", exc_info=True)
            self.reporter.set_failed(str(e))
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose or self.reporter.is_debug():
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            stream=sys.stdout,
            force=True,  # Reconfigure if already configured
        )


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
