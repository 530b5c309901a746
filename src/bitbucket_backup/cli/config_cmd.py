"""Config command: Check, show or create the configuration file."""

import argparse
import logging
from pathlib import Path

from ..__logger__ import create_logger
from ..config import BackupOptions, ConfigError, find_config_file, load_config
from ..config.loader import CONFIG_PATHS, generate_example_config
from .common import get_log_level

logger = logging.getLogger(__name__)


def execute_config(args: argparse.Namespace) -> int:
    """Execute the config command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    create_logger(get_log_level(args))

    actions = {
        "validate": _validate_config,
        "show": _show_config,
        "init": _init_config,
    }
    action = actions.get(getattr(args, "config_action", None))
    if action is None:
        print("Usage: bitbucket-backup config <validate|show|init>")
        return 1
    return action(args)


def _load(args: argparse.Namespace) -> tuple[Path, BackupOptions, list[str]] | None:
    """Find and load the configuration file, None if there is none."""
    config_path = find_config_file(getattr(args, "config", None))
    if config_path is None:
        print("No configuration file found.")
        print("Searched locations:")
        for path in CONFIG_PATHS:
            print(f"  {path}")
        return None
    options, warnings = load_config(config_path)
    return config_path, options, warnings


def _describe(options: BackupOptions) -> list[str]:
    """Settings a backup run would use, the password masked."""
    ignored = ", ".join(sorted(options.ignore)) or "(none)"
    return [
        f"Account: {options.account or '(none)'}",
        f"Username: {options.username or '(none)'}",
        f"Password: {'***' if options.password else '(none)'}",
        f"Location: {options.location or '(none)'}",
        f"Transport: {options.transport.value}",
        f"Wikis: {'yes' if options.with_wiki else 'no'}",
        f"Mirror clones: {'yes' if options.bare else 'no'}",
        f"Prune on update: {'yes' if options.prune else 'no'}",
        f"Attempts: {options.attempts} ({options.retry_delay:g}s apart)",
        f"Ignored: {ignored}",
        f"Lock file: {options.lock_file}",
    ]


def _validate_config(args: argparse.Namespace) -> int:
    """Load the configuration and report problems."""
    try:
        loaded = _load(args)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1
    if loaded is None:
        return 1

    config_path, options, warnings = loaded
    print(f"{config_path}: configuration is valid.")
    for warning in warnings:
        print(f"  warning: {warning}")
    print(f"  Account: {options.account or '(none)'}")
    print(f"  Ignored: {len(options.ignore)}")
    return 0


def _show_config(args: argparse.Namespace) -> int:
    """Print the effective settings of the configuration file."""
    try:
        loaded = _load(args)
    except ConfigError as e:
        print(f"Configuration error: {e}")
        return 1
    if loaded is None:
        return 1

    config_path, options, _ = loaded
    print(f"# {config_path}")
    for line in _describe(options):
        print(line)
    return 0


def _init_config(args: argparse.Namespace) -> int:
    """Write the example configuration to a file or stdout."""
    content = generate_example_config()

    output = getattr(args, "output", None)
    if not output:
        print(content)
        return 0

    path = Path(output).expanduser()
    if path.exists() and not getattr(args, "force", False):
        logger.error("%s already exists, use --force to overwrite it", path)
        return 1

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    except OSError as e:
        logger.error("Couldn't write %s: %s", path, e)
        return 1

    logger.info("Example configuration written to %s", path)
    return 0
