"""bitbucket-backup: bitbucket_backup/transport.py
Turn a repository record into the URL it gets cloned from.
"""

from urllib.parse import quote, urlsplit, urlunsplit

from .__util__ import EndpointError, MissingCredentialsError, UnknownTransportError
from .config import BackupOptions, Transport
from .repository import CLONE_TRANSPORTS, RepositoryRecord


def _embed_credentials(url: str, username: str, password: str) -> str:
    """Put username:password in place of any user info of an https URL."""
    try:
        parts = urlsplit(url)
    except ValueError as e:
        raise EndpointError(f"invalid https url '{url}': {e}")

    if not parts.scheme or not parts.netloc:
        raise EndpointError(f"invalid https url '{url}'")

    # Keep host and port exactly as given, drop existing user info
    host = parts.netloc.rpartition("@")[2]
    if not host:
        raise EndpointError(f"invalid https url '{url}': no host")

    userinfo = f"{quote(username, safe='')}:{quote(password, safe='')}"
    return urlunsplit((parts.scheme, f"{userinfo}@{host}", parts.path, "", ""))


def resolve_clone_url(options: BackupOptions, record: RepositoryRecord) -> str:
    """Return the URL a repository gets cloned from.

    SSH endpoints are returned as is, authentication is left to the SSH agent.
    HTTPS endpoints of private repositories get the configured credentials
    embedded, public ones are returned as is.

    Raises:
        UnknownTransportError: If the record has an endpoint we don't know
        EndpointError: If the endpoint for the configured transport is
            missing or malformed
        MissingCredentialsError: If a private repository is cloned over
            HTTPS without username or password
    """
    for name in record.clone_endpoints:
        if name not in CLONE_TRANSPORTS:
            raise UnknownTransportError(name, record.slug)

    transport = options.transport.value
    url = record.clone_endpoints.get(transport)
    if not url:
        raise EndpointError(
            f"repository '{record.slug}' has no '{transport}' clone endpoint"
        )

    if options.transport is Transport.SSH:
        return url

    if not record.is_private:
        return url

    if not options.username or not options.password:
        raise MissingCredentialsError(
            f"can't backup private repository '{record.slug}' "
            "without username or password"
        )

    return _embed_credentials(url, options.username, options.password)
