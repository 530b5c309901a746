"""List command: Show remote repositories and what a run would do."""

import argparse
import logging

from .. import __util__
from ..__logger__ import create_logger
from ..config import ConfigError
from ..core.planning import plan_repositories
from ..providers import BitbucketClient
from .common import get_log_level, load_options, require_account

logger = logging.getLogger(__name__)


def execute_list(args: argparse.Namespace) -> int:
    """Execute the list command.

    Args:
        args: Parsed command line arguments

    Returns:
        Exit code
    """
    log_level = get_log_level(args)
    create_logger(log_level)

    try:
        options = load_options(args)
        require_account(options)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 1

    try:
        client = BitbucketClient(options.username, options.password)
        records = client.list_repositories(options.account)
    except __util__.AbortError as e:
        logger.error("%s", e)
        return 1

    print(f"Repositories of {options.account} ({len(records)}, most recently updated first)")
    print("=" * 60)

    if not options.location:
        for record in records:
            visibility = "private" if record.is_private else "public"
            print(
                f"{record.slug}  [{record.scm.value}, {visibility}]  "
                f"updated {record.updated_at:%Y-%m-%d %H:%M}"
            )
        return 0

    try:
        plans = plan_repositories(options, records)
    except __util__.AbortError as e:
        logger.error("%s", e)
        return 1

    for plan in plans:
        record = plan.record
        visibility = "private" if record.is_private else "public"
        print(f"{record.slug}  [{record.scm.value}, {visibility}]")
        if plan.skipped:
            print(f"  skipped: {plan.skipped}")
            continue
        for resource in plan.resources:
            print(
                f"  {resource.resource.value}: {resource.action.value} in {resource.workdir}"
            )

    return 0
