"""Shared CLI utilities and argument parsers."""

import argparse
import logging

from ..config import (
    BackupOptions,
    ConfigError,
    find_config_file,
    load_config,
    merge_options,
)

logger = logging.getLogger(__name__)


def add_verbosity_args(parser: argparse.ArgumentParser) -> None:
    """Add verbosity-related arguments to a parser."""
    group = parser.add_argument_group("Output options")
    group.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )
    group.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-essential output",
    )
    group.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug output",
    )


def add_account_args(parser: argparse.ArgumentParser) -> None:
    """Add account arguments, they override the configuration file."""
    group = parser.add_argument_group("Account options")
    group.add_argument(
        "-u",
        "--username",
        help="Bitbucket username",
    )
    group.add_argument(
        "-p",
        "--password",
        help="Bitbucket user's password or app password",
    )
    group.add_argument(
        "--workspace",
        metavar="NAME",
        help="Back up the repositories of this workspace (default: username)",
    )
    group.add_argument(
        "-l",
        "--location",
        metavar="DIR",
        help="Local backup location",
    )
    group.add_argument(
        "-i",
        "--ignore",
        metavar="SLUG",
        action="append",
        help="Repository to ignore, may be specified several times",
    )
    group.add_argument(
        "-w",
        "--with-wiki",
        action="store_true",
        default=None,
        help="Also backup wiki",
    )


def get_log_level(args: argparse.Namespace) -> str:
    """Determine log level from parsed arguments.

    Args:
        args: Parsed command line arguments

    Returns:
        Log level string (DEBUG, INFO, WARNING, ERROR)
    """
    if getattr(args, "debug", False):
        return "DEBUG"
    elif getattr(args, "quiet", False):
        return "WARNING"
    elif getattr(args, "verbose", False):
        return "DEBUG"
    else:
        return "INFO"


def load_options(args: argparse.Namespace) -> BackupOptions:
    """Load the configuration file, if any, and apply command line overrides.

    Raises:
        ConfigError: If the configuration is invalid
    """
    options = BackupOptions()
    config_path = find_config_file(getattr(args, "config", None))
    if config_path is not None:
        logger.info("Loading configuration from: %s", config_path)
        options, warnings = load_config(config_path)
        for warning in warnings:
            logger.warning("Config: %s", warning)

    transport = None
    if getattr(args, "https", False):
        transport = "https"

    return merge_options(
        options,
        username=getattr(args, "username", None),
        password=getattr(args, "password", None),
        workspace=getattr(args, "workspace", None),
        location=getattr(args, "location", None),
        ignore=getattr(args, "ignore", None),
        with_wiki=getattr(args, "with_wiki", None),
        transport=transport,
        attempts=getattr(args, "attempts", None),
        bare=getattr(args, "bare", None),
        prune=getattr(args, "prune", None),
        dry_run=getattr(args, "dry_run", None),
        show_progress=getattr(args, "show_progress", None),
        verbose=True if getattr(args, "verbose", False) else None,
    )


def require_account(options: BackupOptions) -> None:
    """Make sure there is an account to list repositories for."""
    if not options.account:
        raise ConfigError("No username or workspace given (use --username)")
