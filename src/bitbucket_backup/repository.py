"""Remote repository records and the local layout derived from them.

Every repository owned by the account is mirrored below the backup root:

    <location>/<slug>/repository   working copy or mirror
    <location>/<slug>/wiki         wiki, when it has one and wikis are wanted

The presence of those directories is the only state kept between runs.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from .__util__ import (
    EndpointError,
    FilesystemError,
    InvalidRecordError,
    UnknownTransportError,
    UnsupportedScmError,
)

# Transport names Bitbucket uses for clone links
CLONE_TRANSPORTS = frozenset({"https", "ssh"})

# Only top-level repositories are backed up
REPOSITORY_TYPE = "repository"


class ScmKind(Enum):
    """Version control system behind a repository."""

    GIT = "git"
    MERCURIAL = "hg"


class ResourceKind(Enum):
    """Backed up resource of a repository, named after its folder."""

    REPOSITORY = "repository"
    WIKI = "wiki"


class Action(Enum):
    """What has to happen to bring a local resource up to date."""

    CLONE = "clone"
    UPDATE = "update"


def _parse_timestamp(value: str | None) -> datetime:
    if not value:
        return datetime.fromtimestamp(0, tz=timezone.utc)
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class RepositoryRecord:
    """One repository as listed by the remote account."""

    slug: str
    scm: ScmKind
    clone_endpoints: Mapping[str, str] = field(default_factory=dict, hash=False)
    is_private: bool = False
    has_wiki: bool = False
    resource_type: str = REPOSITORY_TYPE
    updated_at: datetime = field(
        default_factory=lambda: datetime.fromtimestamp(0, tz=timezone.utc)
    )
    name: str = ""
    full_name: str = ""

    def __post_init__(self):
        # Freeze the endpoint mapping along with the record
        object.__setattr__(
            self, "clone_endpoints", MappingProxyType(dict(self.clone_endpoints))
        )

    @property
    def is_repository(self) -> bool:
        return self.resource_type == REPOSITORY_TYPE

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "RepositoryRecord":
        """Build a record from a Bitbucket 2.0 repository object.

        Raises:
            UnsupportedScmError: If the repository isn't backed by git or hg
            UnknownTransportError: If a clone link has an unexpected name
            EndpointError: If a clone link has no URL
            InvalidRecordError: If the slug is missing or the update time
                can't be parsed
        """
        slug = data.get("slug")
        if not slug:
            raise InvalidRecordError("repository object without slug")

        try:
            scm = ScmKind(data.get("scm"))
        except ValueError:
            raise UnsupportedScmError(data.get("scm"))

        endpoints = {}
        for link in data.get("links", {}).get("clone", []):
            name = link.get("name", "")
            if name not in CLONE_TRANSPORTS:
                raise UnknownTransportError(name, slug)
            href = link.get("href")
            if not href:
                raise EndpointError(
                    f"clone link '{name}' of repository '{slug}' has no url"
                )
            endpoints[name] = href

        try:
            updated_at = _parse_timestamp(data.get("updated_on"))
        except (AttributeError, TypeError, ValueError) as e:
            raise InvalidRecordError(
                f"repository '{slug}' has an invalid update time: {e}"
            )

        return cls(
            slug=slug,
            scm=scm,
            clone_endpoints=endpoints,
            is_private=bool(data.get("is_private", False)),
            has_wiki=bool(data.get("has_wiki", False)),
            resource_type=data.get("type", REPOSITORY_TYPE),
            updated_at=updated_at,
            name=data.get("name", slug),
            full_name=data.get("full_name", ""),
        )


def sort_by_recent_update(records) -> list[RepositoryRecord]:
    """Most recently updated repositories first."""
    return sorted(records, key=lambda r: r.updated_at, reverse=True)


def repository_dir(location: Path | str, slug: str) -> Path:
    """Directory holding all resources of one repository."""
    return Path(location) / slug


def resource_dir(location: Path | str, slug: str, resource: ResourceKind) -> Path:
    """Conventional directory of one resource of a repository."""
    return repository_dir(location, slug) / resource.value


def resource_exists(location: Path | str, slug: str, resource: ResourceKind) -> bool:
    """Whether the resource has already been cloned.

    An existing directory counts as cloned, whatever its content. A regular
    file in its place counts as absent.

    Raises:
        FilesystemError: If the path can't be inspected
    """
    path = resource_dir(location, slug, resource)
    try:
        return path.is_dir()
    except OSError as e:
        raise FilesystemError(path, e)
