"""CLI dispatcher routing to subcommand handlers."""

import argparse
import sys
from typing import Callable

from .common import add_account_args, add_verbosity_args


def create_subcommand_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="bitbucket-backup",
        description="Incremental backup of all repositories of a Bitbucket account",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    add_verbosity_args(parser)

    parser.add_argument(
        "-V",
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    parser.add_argument(
        "-c",
        "--config",
        metavar="FILE",
        help="Path to configuration file",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        description="Available commands (use 'command --help' for details)",
    )

    # run command
    run_parser = subparsers.add_parser(
        "run",
        help="Clone new and update existing repositories",
        description="Clone repositories missing locally and update the others",
    )
    add_account_args(run_parser)
    run_parser.add_argument(
        "-a",
        "--attempts",
        type=int,
        metavar="N",
        help="Number of attempts to make before giving up (default: 1)",
    )
    run_parser.add_argument(
        "-b",
        "--bare",
        action="store_true",
        default=None,
        help="Clone bare repository (git only)",
    )
    run_parser.add_argument(
        "-P",
        "--prune",
        action="store_true",
        default=None,
        help="Prune repo on remote update (git only)",
    )
    run_parser.add_argument(
        "--https",
        action="store_true",
        help="Clone via https instead of ssh",
    )
    run_parser.add_argument(
        "-d",
        "--dry-run",
        action="store_true",
        default=None,
        help="Do nothing, just print commands",
    )
    run_parser.add_argument(
        "-s",
        "--show-progress",
        action="store_true",
        default=None,
        help="Show progress bar",
    )

    # list command
    list_parser = subparsers.add_parser(
        "list",
        help="Show remote repositories and what a run would do",
        description="List repositories of the account with their planned action",
    )
    add_account_args(list_parser)

    # config command with subcommands
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
        description="Validate, show or initialize configuration",
    )
    config_subs = config_parser.add_subparsers(dest="config_action")

    config_subs.add_parser(
        "validate",
        help="Validate configuration file",
    )

    config_subs.add_parser(
        "show",
        help="Show the settings a run would use",
    )

    init_parser = config_subs.add_parser(
        "init",
        help="Generate example configuration",
    )
    init_parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        help="Output file (default: stdout)",
    )
    init_parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Overwrite an existing output file",
    )

    return parser


def run_subcommand(args: argparse.Namespace) -> int:
    """Run the specified subcommand.

    Args:
        args: Parsed arguments

    Returns:
        Exit code
    """
    from .. import __version__

    if args.version:
        print(f"bitbucket-backup {__version__}")
        return 0

    if not args.command:
        print("No command specified. Use --help for usage information.")
        return 1

    # Route to appropriate command handler
    handlers: dict[str, Callable] = {
        "run": cmd_run,
        "list": cmd_list,
        "config": cmd_config,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        print(f"Unknown command: {args.command}")
        return 1


def cmd_run(args: argparse.Namespace) -> int:
    """Execute run command."""
    from .run import execute_run

    return execute_run(args)


def cmd_list(args: argparse.Namespace) -> int:
    """Execute list command."""
    from .list_cmd import execute_list

    return execute_list(args)


def cmd_config(args: argparse.Namespace) -> int:
    """Execute config command."""
    from .config_cmd import execute_config

    return execute_config(args)


def main(argv: list[str] | None = None) -> int:
    """Main entry point for bitbucket-backup CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = create_subcommand_parser()
    args = parser.parse_args(argv)

    return run_subcommand(args)
