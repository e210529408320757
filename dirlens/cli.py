#!/usr/bin/env python3
"""Command-line interface for dirlens.

This module provides the ``dirlens`` command:
- ``ls``: list a directory with icons, MIME types and sizes
- ``detect``: classify files by content
- ``tree``: print the classifier tree

Example:
    >>> from dirlens.cli import parse_arguments
    >>> args = parse_arguments(["ls", "/srv/project", "--recursive"])
"""

import argparse
import os
import sys
from typing import Any, Dict, List, Optional

from dirlens.core.constants import DIRLENS_VERSION, ConfigKey
from dirlens.core.errors import DirlensError
from dirlens.infrastructure.config_manager import ConfigError, ConfigManager, ConfigSource
from dirlens.infrastructure.logger import Logger, configure_logging
from dirlens.listing import Files, ListingOptions, list_directory
from dirlens.mime import default_tree, get_detector
from dirlens.render import ListingRenderer

DESCRIPTION = "dirlens - Directory listing with content classification"

SORTS = ("name", "size", "date")


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
    """
    parser = argparse.ArgumentParser(
        prog="dirlens",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # List the current directory
  dirlens ls

  # Whole subtree, hidden entries included, largest first
  dirlens ls ~/src -r -a --sort size --reverse

  # Classify files by content
  dirlens detect photo.bin archive.dat
        """,
    )

    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {DIRLENS_VERSION}",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        type=str,
        help="Configuration file path (YAML format)",
    )

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
        help="Also write log records to FILE",
    )

    commands = parser.add_subparsers(dest="command", metavar="COMMAND")
    commands.required = True

    # ls
    ls = commands.add_parser("ls", help="List a directory")
    ls.add_argument("directory", nargs="?", default=".", metavar="DIR", help="Directory to list")
    ls.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        default=None,
        help="List the whole subtree",
    )
    ls.add_argument(
        "-a",
        "--all",
        dest="include_hidden",
        action="store_true",
        default=None,
        help="Include entries whose name starts with '.'",
    )
    ls.add_argument(
        "--du",
        dest="disk_usage",
        action="store_true",
        default=None,
        help="Compute recursive directory sizes",
    )
    ls.add_argument(
        "-L",
        "--follow-symlinks",
        action="store_true",
        default=None,
        help="Descend into symlinked directories when recursive",
    )
    only = ls.add_mutually_exclusive_group()
    only.add_argument("--dirs-only", action="store_true", help="List directories only")
    only.add_argument("--files-only", action="store_true", help="List files only")
    ls.add_argument("--sort", choices=SORTS, default="name", help="Sort order (default: name)")
    ls.add_argument("--reverse", action="store_true", help="Reverse the sort order")
    ls.add_argument(
        "--format",
        metavar="TEMPLATE",
        type=str,
        help="Jinja2 line template; the entry is available as 'file'",
    )

    # detect
    detect = commands.add_parser("detect", help="Classify files by content")
    detect.add_argument("files", nargs="+", metavar="FILE", help="Files to classify")

    # tree
    commands.add_parser("tree", help="Print the classifier tree")

    parsed = parser.parse_args(args)

    _validate_arguments(parsed)

    return parsed


def _validate_arguments(args: argparse.Namespace) -> None:
    """
    Validate parsed arguments.

    Raises:
        CLIError: If validation fails
    """
    if args.config and not os.path.isfile(os.path.expanduser(args.config)):
        raise CLIError(f"Configuration file does not exist: {args.config}")

    if args.command == "ls":
        if not os.path.exists(args.directory):
            raise CLIError(f"Directory does not exist: {args.directory}")
        if not os.path.isdir(args.directory):
            raise CLIError(f"Not a directory: {args.directory}")


def build_config_from_args(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Build the CLI configuration layer from command-line arguments.

    Only options given on the command line are included, so lower layers
    (files, environment) still apply to everything else.
    """
    listing: Dict[str, Any] = {}
    if args.command == "ls":
        for key in (
            ConfigKey.RECURSIVE,
            ConfigKey.INCLUDE_HIDDEN,
            ConfigKey.DISK_USAGE,
            ConfigKey.FOLLOW_SYMLINKS,
        ):
            value = getattr(args, key)
            if value is not None:
                listing[key] = value
        if args.dirs_only:
            listing[ConfigKey.INCLUDE_FILES] = False
        if args.files_only:
            listing[ConfigKey.INCLUDE_FOLDERS] = False
        if args.format:
            listing[ConfigKey.FORMAT] = args.format

    config: Dict[str, Any] = {ConfigKey.LISTING: listing}
    if args.debug:
        config[ConfigKey.LOGGING] = {"level": "DEBUG"}
    if args.log_file:
        config.setdefault(ConfigKey.LOGGING, {})["file"] = args.log_file
    return {ConfigKey.ROOT: config}


def load_config(args: argparse.Namespace) -> ConfigManager:
    """
    Assemble the configuration for this invocation.

    Raises:
        ConfigError: If a configuration file is unreadable or invalid
    """
    config = ConfigManager()
    config.load_defaults()
    if args.config:
        config.load_file(args.config, ConfigSource.USER_CONFIG)
    config.load_dict(build_config_from_args(args), ConfigSource.CLI_ARGS)
    config.validate()
    return config


def setup_logging(config: ConfigManager) -> Logger:
    """Configure the global logger from the ``logging`` section."""
    logging_config = config.section(ConfigKey.LOGGING)
    return configure_logging(
        logging_config.get("level", "WARNING"),
        logging_config.get("file"),
    )


def sort_listing(files: Files, key: str, reverse: bool = False) -> Files:
    if key == "size":
        return files.sort_by_size(reverse)
    if key == "date":
        return files.sort_by_date(reverse)
    if reverse:
        return files.sort_by_name(reverse)
    return files


def run_ls(args: argparse.Namespace, config: ConfigManager) -> int:
    options = ListingOptions.from_config(config)
    listing = list_directory(args.directory, options)
    listing = sort_listing(listing, args.sort, args.reverse)

    template = config.get(f"{ConfigKey.ROOT}.{ConfigKey.LISTING}.{ConfigKey.FORMAT}")
    output = ListingRenderer(template).render(listing)
    if output:
        print(output)
    return 0


def run_detect(args: argparse.Namespace, logger: Logger) -> int:
    detector = get_detector()
    status = 0
    for path in args.files:
        try:
            mime, extension = detector.detect_file(path)
        except DirlensError as e:
            logger.error("Cannot classify file", path=path, error=e.message)
            print(f"{path}: {e.message}", file=sys.stderr)
            status = 1
            continue
        print(f"{path}: {mime} ({extension or '-'})")
    return status


def run_tree() -> int:
    print(default_tree().tree(), end="")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns:
        Exit status: 0 on success, 1 on error, 130 when interrupted
    """
    try:
        args = parse_arguments(argv)
        config = load_config(args)
        logger = setup_logging(config)

        if args.command == "ls":
            return run_ls(args, config)
        if args.command == "detect":
            return run_detect(args, logger)
        return run_tree()

    except (CLIError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    except DirlensError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
