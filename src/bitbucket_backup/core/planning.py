"""Decide what has to happen to each repository and resource.

Decisions are derived from the filesystem every time, so a failed run can
simply be started again.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ..config import BackupOptions
from ..repository import (
    Action,
    RepositoryRecord,
    ResourceKind,
    repository_dir,
    resource_dir,
    resource_exists,
)

SKIP_NOT_REPOSITORY = "not a repository"
SKIP_IGNORED = "ignored"


@dataclass(frozen=True)
class ResourcePlan:
    """Action for one resource and the directory it runs in."""

    slug: str
    resource: ResourceKind
    action: Action
    workdir: Path
    command: tuple[str, ...] = ()


@dataclass
class RepositoryPlan:
    """Everything a run would do for one repository."""

    record: RepositoryRecord
    skipped: str | None = None
    resources: list[ResourcePlan] = field(default_factory=list)


def skip_reason(options: BackupOptions, record: RepositoryRecord) -> str | None:
    """Why a record isn't backed up, None if it is."""
    if not record.is_repository:
        return SKIP_NOT_REPOSITORY
    if record.slug in options.ignore:
        return SKIP_IGNORED
    return None


def applicable_resources(
    options: BackupOptions, record: RepositoryRecord
) -> list[ResourceKind]:
    """The repository itself, plus its wiki when it has one and wikis are wanted."""
    resources = [ResourceKind.REPOSITORY]
    if options.with_wiki and record.has_wiki:
        resources.append(ResourceKind.WIKI)
    return resources


def plan_resource(
    options: BackupOptions, record: RepositoryRecord, resource: ResourceKind
) -> ResourcePlan:
    """Clone into the repository directory if the resource folder is missing,
    update inside the resource folder otherwise.
    """
    root = options.root
    if resource_exists(root, record.slug, resource):
        action = Action.UPDATE
        workdir = resource_dir(root, record.slug, resource)
    else:
        action = Action.CLONE
        workdir = repository_dir(root, record.slug)
    return ResourcePlan(record.slug, resource, action, workdir)


def plan_repositories(
    options: BackupOptions, records: list[RepositoryRecord]
) -> list[RepositoryPlan]:
    """Plan a whole run without touching anything."""
    plans = []
    for record in records:
        reason = skip_reason(options, record)
        plan = RepositoryPlan(record=record, skipped=reason)
        if reason is None:
            plan.resources = [
                plan_resource(options, record, resource)
                for resource in applicable_resources(options, record)
            ]
        plans.append(plan)
    return plans
