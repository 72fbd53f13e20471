#!/usr/bin/env python3
"""Command-line interface for connfs.

This module provides the CLI for inspecting and reading storage through
named connections:
- Argument parsing and validation
- Configuration loading (YAML file, CONNFS_* environment, arguments)
- Logging setup
- Subcommands: parse, native, ls, cat, exists

Example:
    >>> from connfs.cli import parse_arguments
    >>> args = parse_arguments(['--config', 'connfs.yaml', 'ls', 'pvfs://reports/'])
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from connfs.core.config import ConfigManager, ConfigSource
from connfs.core.constants import CONNFS_VERSION, ConfigKey
from connfs.core.errors import ConnFSError
from connfs.core.logging import Logger, set_logger
from connfs.core.validators import ValidationError
from connfs.uri.parser import parse_virtual_uri

DESCRIPTION = "connfs - Named-connection virtual file layer"

# Exit code of "exists" for a target that does not exist
EXIT_ABSENT = 2


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        args: Argument list to parse (defaults to sys.argv[1:])

    Returns:
        Parsed arguments namespace

    Raises:
        SystemExit: On invalid arguments or --help/--version
        CLIError: If validation fails
    """
    parser = argparse.ArgumentParser(
        prog="connfs",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show how a virtual URI is split
  connfs parse "pvfs://my connection/dir/file.txt"

  # Show the native URI behind a virtual URI
  connfs --config connfs.yaml native pvfs://reports/2024/q1.csv

  # List a folder, substituting ${env} in connection definitions
  connfs --config connfs.yaml --var env=prod ls pvfs://reports/

  # Print a file
  connfs --config connfs.yaml cat pvfs://reports/2024/q1.csv
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {CONNFS_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

    parser.add_argument(
        "--var",
        metavar="NAME=VALUE",
        action="append",
        dest="variables",
        default=[],
        help="Context variable (can be specified multiple times)",
    )

    # Logging options
    log_group = parser.add_argument_group("logging options")

    log_group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    log_group.add_argument(
        "--log-file",
        metavar="FILE",
        type=str,
        help="Also write logs to this file",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    for name, help_text in (
        ("parse", "Split a virtual URI into scheme, connection and path"),
        ("native", "Print the native URI behind a virtual URI"),
        ("ls", "List the children of a virtual folder"),
        ("cat", "Write the content of a virtual file to stdout"),
        ("exists", "Exit with 0 if the target exists, 2 otherwise"),
    ):
        command = subparsers.add_parser(name, help=help_text)
        command.add_argument("uri", metavar="URI", help="Virtual URI")

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    if args.config:
        config_path = Path(args.config)

        if not config_path.exists():
            raise CLIError(f"Configuration file does not exist: {args.config}")

        if not config_path.is_file():
            raise CLIError(f"Configuration path is not a file: {args.config}")

    for assignment in args.variables:
        name, separator, _ = assignment.partition("=")
        if not separator or not name.strip():
            raise CLIError(f"Invalid variable (expected NAME=VALUE): {assignment}")


def parse_variables(assignments: List[str]) -> Dict[str, str]:
    """
    Turn ``NAME=VALUE`` strings into a context dictionary.

    Later assignments of the same name win.
    """
    variables: Dict[str, str] = {}
    for assignment in assignments:
        name, _, value = assignment.partition("=")
        variables[name.strip()] = value
    return variables


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build the argument-level configuration.

    Returns:
        Configuration dictionary rooted at "connfs"
    """
    logging_config: Dict[str, Any] = {}
    if args.debug:
        logging_config["level"] = "DEBUG"
    if args.log_file:
        logging_config["file"] = args.log_file

    return {ConfigKey.ROOT: {ConfigKey.LOGGING: logging_config}} if logging_config else {}


def load_config(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Assemble the "connfs" configuration section.

    Precedence: defaults < file < environment < arguments.

    Raises:
        ConfigError: If the configuration file cannot be loaded
    """
    manager = ConfigManager(config_file=args.config)
    manager.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    return manager.get_all().get(ConfigKey.ROOT, {})


def setup_logging(args: argparse.Namespace, config: Dict[str, Any]) -> Logger:
    """
    Setup logging based on arguments and configuration.

    Args:
        args: Parsed arguments namespace
        config: The "connfs" configuration section

    Returns:
        Configured logger instance
    """
    logging_config = config.get(ConfigKey.LOGGING) or {}
    log_level = "DEBUG" if args.debug else logging_config.get("level", "INFO")
    log_file = args.log_file or logging_config.get("file")

    logger = Logger("connfs", level=log_level)

    if log_file:
        logger.add_handler(logger.create_file_handler(log_file))
        logger.debug("Logging to file", file=log_file)

    set_logger(logger)
    return logger


def cmd_parse(args: argparse.Namespace) -> int:
    parsed = parse_virtual_uri(args.uri)
    print(f"scheme: {parsed.scheme or '-'}")
    print(f"connection: {parsed.connection_name or '-'}")
    print(f"path: {parsed.path or '-'}")
    return 0


def run_command(args: argparse.Namespace, config: Dict[str, Any], logger: Logger) -> int:
    """
    Run a subcommand that needs the resolver.

    Returns:
        Exit code
    """
    from connfs.main import ConnFSMain

    variables = parse_variables(args.variables)

    with ConnFSMain(config, logger) as app:
        virtual_file = app.resolve(args.uri, variables)

        if args.command == "native":
            print(virtual_file.native_uri)
            return 0

        if args.command == "exists":
            found = virtual_file.exists()
            print("yes" if found else "no")
            return 0 if found else EXIT_ABSENT

        if args.command == "ls":
            for child in virtual_file.get_children():
                suffix = "/" if child.is_folder() else ""
                print(f"{child.original_uri}{suffix}")
            return 0

        if args.command == "cat":
            sys.stdout.buffer.write(virtual_file.read_bytes())
            sys.stdout.flush()
            return 0

    raise CLIError(f"Unknown command: {args.command}")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Handles argument parsing, configuration, logging setup and dispatches
    to the selected subcommand.
    """
    try:
        args = parse_arguments(argv)

        if args.command == "parse":
            return cmd_parse(args)

        config = load_config(args)
        logger = setup_logging(args, config)

        return run_command(args, config, logger)

    except CLIError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except (ConnFSError, ValidationError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130

    except Exception as e:
        print(f"Unexpected error: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
