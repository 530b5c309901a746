"""Core backup operations for bitbucket-backup.

Walks the remote repository list and brings every local copy up to date,
one command at a time. The first error aborts the whole run.
"""

import dataclasses
import logging
import time
from typing import Callable, Iterable

from .. import __util__
from ..config import BackupOptions
from ..repository import RepositoryRecord, repository_dir
from .commands import build_command
from .execution import execute
from .planning import ResourcePlan, applicable_resources, plan_resource, skip_reason

logger = logging.getLogger(__name__)


def ensure_repository_dir(options: BackupOptions, record: RepositoryRecord) -> None:
    """Create <location>/<slug>, parents included.

    Raises:
        FilesystemError: If the directory can't be created
    """
    path = repository_dir(options.root, record.slug)
    if options.dry_run:
        if not path.is_dir():
            logger.info("Would create directory: %s", path)
        return

    try:
        path.mkdir(mode=0o775, parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Error creating directory %s: %s", path, e)
        raise __util__.FilesystemError(path, e)


def backup_repository(
    options: BackupOptions, record: RepositoryRecord
) -> list[ResourcePlan]:
    """Clone or update every applicable resource of one repository."""
    done = []

    ensure_repository_dir(options, record)

    for resource in applicable_resources(options, record):
        # Decided right before running, from what is on disk now
        plan = plan_resource(options, record, resource)
        command = build_command(options, record, plan.action, resource)
        logger.debug(
            "%s: %s %s in %s",
            record.slug,
            plan.action.value,
            resource.value,
            plan.workdir,
        )
        execute(options, command, plan.workdir)
        done.append(dataclasses.replace(plan, command=tuple(command)))

    return done


def sync_repositories(
    options: BackupOptions,
    records: Iterable[RepositoryRecord],
    on_record: Callable[[RepositoryRecord], None] | None = None,
) -> list[ResourcePlan]:
    """Back up repositories in the order given.

    Args:
        options: Backup options
        records: Remote repositories, usually most recently updated first
        on_record: Called with each record before it is processed

    Returns:
        Resources that were cloned or updated, in order

    Raises:
        AbortError: On the first failure, nothing after it is attempted
    """
    logger.info(__util__.log_heading(f"Started at {time.ctime()}"))
    if options.dry_run:
        logger.info("Dry run: commands are printed, not executed")

    done: list[ResourcePlan] = []
    skipped = 0

    for record in records:
        if on_record is not None:
            on_record(record)

        reason = skip_reason(options, record)
        if reason is not None:
            logger.debug("Skipping %s: %s", record.slug, reason)
            skipped += 1
            continue

        done.extend(backup_repository(options, record))

    logger.info(__util__.log_heading(f"Finished at {time.ctime()}"))
    logger.info(
        "%d resource(s) cloned or updated, %d repository(ies) skipped",
        len(done),
        skipped,
    )
    return done
