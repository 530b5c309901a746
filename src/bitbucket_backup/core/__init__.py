"""Core backup operations for bitbucket-backup.

Reconciliation of the remote repository list with the local backup tree,
command building and command execution.
"""

from .commands import build_command
from .execution import execute
from .operations import backup_repository, sync_repositories
from .planning import RepositoryPlan, ResourcePlan, plan_repositories, plan_resource

__all__ = [
    "build_command",
    "execute",
    "backup_repository",
    "sync_repositories",
    "plan_repositories",
    "plan_resource",
    "RepositoryPlan",
    "ResourcePlan",
]
