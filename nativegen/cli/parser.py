"""
nativegen CLI argument parser.

This module implements the command-line interface for nativegen using argparse.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from nativegen import __version__
from nativegen.config.parser import DEFAULT_CONFIG_NAME
from nativegen.config.types import Architecture, PlatformType
from nativegen.generators import available_generators

logger = logging.getLogger(__name__)

DEFAULT_COMMAND = "gen"


class CLI:
    """nativegen command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="nativegen",
            description="nativegen - platform-native project generator",
            epilog=(
                f'Runs "{DEFAULT_COMMAND}" when no command is given. '
                'Use "nativegen FOLDER COMMAND --help" for command-specific help'
            ),
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"nativegen {__version__}"
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
            "--build",
            "-b",
            type=Path,
            metavar="FOLDER",
            help="Where to store the generated project files (default: current directory)",
        )
        parser.add_argument(
            "--config",
            "-c",
            metavar="FILE",
            default=DEFAULT_CONFIG_NAME,
            help=f"Name of the project file (default: {DEFAULT_CONFIG_NAME})",
        )
        parser.add_argument(
            "folder",
            type=Path,
            metavar="FOLDER",
            help="Input folder containing source files",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_gen_command(subparsers)
        self._add_check_command(subparsers)
        self._add_show_command(subparsers)

        return parser

    def _add_gen_command(self, subparsers):
        """Add 'gen' subcommand."""
        parser = subparsers.add_parser(
            "gen",
            help="Generate the project's build files",
            description="Generate build files for every applicable generator",
        )
        parser.add_argument(
            "--generator",
            "-g",
            action="append",
            choices=available_generators(),
            metavar="NAME",
            help=(
                "Only run this generator (can be used multiple times; "
                f"one of: {', '.join(available_generators())})"
            ),
        )

    def _add_check_command(self, subparsers):
        """Add 'check' subcommand."""
        parser = subparsers.add_parser(
            "check",
            help="Check whether the project's configuration is valid",
            description="Load the project and report configuration issues",
        )
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Treat warnings as errors",
        )

    def _add_show_command(self, subparsers):
        """Add 'show' subcommand."""
        parser = subparsers.add_parser(
            "show",
            help="Display the resolved project",
            description="Print the resolved project model as YAML",
        )
        parser.add_argument(
            "--target",
            "-t",
            action="append",
            metavar="NAME",
            help="Only show this target (can be used multiple times)",
        )
        parser.add_argument(
            "--profile",
            "-p",
            action="append",
            metavar="NAME",
            help="Only show this profile (can be used multiple times)",
        )
        parser.add_argument(
            "--platform",
            choices=[p.value for p in PlatformType if not p.is_wildcard],
            metavar="PLATFORM",
            help="Resolve settings for this platform",
        )
        parser.add_argument(
            "--architecture",
            "--arch",
            choices=[a.value for a in Architecture if not a.is_wildcard],
            metavar="ARCH",
            help="Resolve settings for this architecture",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parsed = self.parser.parse_args(args)
        if not parsed.command:
            parsed.command = DEFAULT_COMMAND
            parsed.generator = None
        return parsed

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        # Configure logging
        self._configure_logging(parsed_args)

        # Dispatch to command handler
        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "gen": "nativegen.cli.commands.gen",
            "check": "nativegen.cli.commands.check",
            "show": "nativegen.cli.commands.show",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        import importlib

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
