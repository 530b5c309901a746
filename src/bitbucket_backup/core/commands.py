"""Build the git/hg command line for one resource of a repository."""

from ..__util__ import InvalidActionError, InvalidResourceKindError, UnsupportedScmError
from ..config import BackupOptions
from ..repository import Action, RepositoryRecord, ResourceKind, ScmKind
from ..transport import resolve_clone_url

WIKI_SUFFIX = "/wiki"


def _check_resource(resource) -> None:
    if resource not in (ResourceKind.REPOSITORY, ResourceKind.WIKI):
        raise InvalidResourceKindError(resource)


def _git_command(
    options: BackupOptions,
    action: Action,
    resource: ResourceKind,
    url: str,
) -> list[str]:
    if action is Action.CLONE:
        cmd = ["git", "clone"]
        if options.bare:
            cmd.append("--mirror")
        if resource is ResourceKind.WIKI:
            return cmd + [url + WIKI_SUFFIX, resource.value]
        return cmd + [url, resource.value]

    cmd = ["git", "remote", "update"]
    if options.prune:
        cmd.append("--prune")
    return cmd


def _hg_command(action: Action, resource: ResourceKind, url: str) -> list[str]:
    if action is Action.CLONE:
        if resource is ResourceKind.WIKI:
            # hg names the clone after the last path component: wiki
            return ["hg", "clone", url + WIKI_SUFFIX]
        return ["hg", "clone", url, resource.value]
    return ["hg", "pull", "-u"]


def build_command(
    options: BackupOptions,
    record: RepositoryRecord,
    action: Action,
    resource: ResourceKind,
) -> list[str]:
    """Return the argument vector bringing a resource up to date.

    Clones are meant to run in the repository directory and create the
    resource folder, updates run inside the resource folder. The clone URL
    is resolved for every action so credential and endpoint errors surface
    for existing copies too, updates then use the remote recorded in the copy.

    Raises:
        UnsupportedScmError: If the repository is neither git nor hg
        InvalidResourceKindError: If resource is neither repository nor wiki
        InvalidActionError: If action is neither clone nor update
        AbortError: Any error resolving the clone URL
    """
    if record.scm not in (ScmKind.GIT, ScmKind.MERCURIAL):
        raise UnsupportedScmError(record.scm)
    _check_resource(resource)
    if action not in (Action.CLONE, Action.UPDATE):
        raise InvalidActionError(action)

    url = resolve_clone_url(options, record)

    if record.scm is ScmKind.GIT:
        return _git_command(options, action, resource, url)
    return _hg_command(action, resource, url)
