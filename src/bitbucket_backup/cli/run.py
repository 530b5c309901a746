"""Run command: Back up every repository of the account."""

import argparse
import logging

from rich.progress import BarColumn, MofNCompleteColumn, Progress, TimeElapsedColumn

from .. import __logger__, __util__
from ..__logger__ import create_logger
from ..config import BackupOptions, ConfigError
from ..core.operations import sync_repositories
from ..lock import instance_lock
from ..providers import BitbucketClient
from .common import get_log_level, load_options, require_account

logger = logging.getLogger(__name__)


def execute_run(args: argparse.Namespace) -> int:
    """Execute the run command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    # Initialize logger
    log_level = get_log_level(args)
    create_logger(log_level)

    try:
        options = load_options(args)
        require_account(options)
        if not options.location:
            raise ConfigError("No backup location given (use --location)")
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    try:
        with instance_lock(options.lock_file):
            _run(options)
    except __util__.AbortError as e:
        logger.error("%s", e)
        return 1

    return 0


def _run(options: BackupOptions) -> None:
    """List the account's repositories and back them up."""
    client = BitbucketClient(options.username, options.password)
    records = client.list_repositories(options.account)

    logger.info(
        "Backing up %d repositories of %s to %s",
        len(records),
        options.account,
        options.root,
    )

    if not options.show_progress:
        sync_repositories(options, records)
        return

    progress = Progress(
        "[progress.description]{task.description}",
        BarColumn(),
        MofNCompleteColumn(),
        TimeElapsedColumn(),
        console=__logger__.cons,
    )
    with progress:
        task_id = progress.add_task("Repositories", total=len(records))

        def advance(record):
            progress.update(task_id, advance=1, description=record.slug)

        sync_repositories(options, records, on_record=advance)
