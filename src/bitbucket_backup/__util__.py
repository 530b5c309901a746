# pyright: standard

"""bitbucket-backup: bitbucket_backup/__util__.py
Common errors and helpers shared by the backup modules.
"""

import shlex
from pathlib import Path
from urllib.parse import urlsplit, urlunsplit

from .config.loader import ConfigError


class AbortError(Exception):
    """Raised when the backup run has to be aborted."""


class MissingCredentialsError(ConfigError, AbortError):
    """A private repository needs credentials that were not configured."""


class EndpointError(AbortError):
    """A repository clone endpoint is missing or malformed."""


class UnknownTransportError(EndpointError):
    """A clone endpoint uses a transport name we do not know about."""

    def __init__(self, name: str, slug: str = "") -> None:
        self.name = name
        self.slug = slug
        where = f" of repository '{slug}'" if slug else ""
        super().__init__(f"unknown repository url type{where}: '{name}'")


class UnsupportedScmError(AbortError):
    """The repository is backed by a version control system we can't drive."""

    def __init__(self, scm) -> None:
        self.scm = scm
        super().__init__(f"unexpected repository scheme: {scm}")


class InvalidResourceKindError(AbortError):
    """A resource other than the repository or its wiki was requested."""

    def __init__(self, resource) -> None:
        self.resource = resource
        super().__init__(f"unexpected resource kind: '{resource}'")


class InvalidActionError(AbortError):
    """An action other than clone or update was requested."""

    def __init__(self, action) -> None:
        self.action = action
        super().__init__(f"unknown action: {action!r}")


class InvalidRecordError(AbortError):
    """A repository object from the API lacks a field or has a bad value."""


class FilesystemError(AbortError):
    """Creating or inspecting a backup directory failed."""

    def __init__(self, path: Path | str, error: OSError) -> None:
        self.path = Path(path)
        self.error = error
        super().__init__(f"filesystem error on '{path}': {error}")


class CommandExecutionError(AbortError):
    """An external command kept failing after all attempts."""

    def __init__(
        self,
        command: list[str],
        cwd: Path | str,
        returncode: int | None,
        output: str = "",
        attempts: int = 1,
    ) -> None:
        self.command = list(command)
        self.cwd = Path(cwd)
        self.returncode = returncode
        self.output = output
        self.attempts = attempts
        if returncode is None:
            reason = "could not be started"
        else:
            reason = f"exited with status {returncode}"
        message = (
            f"command '{format_command(command)}' in '{cwd}' {reason}"
            f" after {attempts} attempt(s)"
        )
        if output.strip():
            message += f": {output.strip()}"
        super().__init__(message)


class LockAcquisitionError(AbortError):
    """Another backup run already holds the instance lock."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"couldn't acquire lock file '{path}': another backup is running")


def redact_credentials(value: str) -> str:
    """Mask the password embedded in a URL, other values pass through."""
    if "://" not in value:
        return value
    try:
        parts = urlsplit(value)
        password = parts.password
    except ValueError:
        return value
    if not password:
        return value
    userinfo, _, hostinfo = parts.netloc.rpartition("@")
    username = userinfo.split(":", 1)[0]
    return urlunsplit(parts._replace(netloc=f"{username}:***@{hostinfo}"))


def format_command(command: list[str]) -> str:
    """Render an argument vector the way a shell user would type it.

    Passwords embedded in clone URLs are masked.
    """
    return shlex.join(redact_credentials(arg) for arg in command)


def log_heading(caption: str) -> str:
    """Formatted heading for logging output sections."""
    return f"{'-' * 10} {caption} {'-' * 10}"
