"""Configuration schema definitions using dataclasses.

Defines the options a backup run is executed with, with sensible defaults.
"""

import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


DEFAULT_LOCK_FILE = str(Path(tempfile.gettempdir()) / "bitbucket-backup.lock")


class Transport(Enum):
    """Network protocol used to reach a repository."""

    SSH = "ssh"
    HTTPS = "https"


@dataclass(frozen=True)
class BackupOptions:
    """Process-wide options of a backup run, read-only once built.

    Attributes:
        username: Bitbucket user used for the API and private HTTPS clones
        password: Password or app password of that user
        location: Local backup root, every repository lands in <location>/<slug>
        workspace: Account whose repositories are listed (defaults to username)
        transport: Clone over SSH (keys handled by the agent) or HTTPS
        bare: Clone git repositories with --mirror
        prune: Prune stale refs when updating git repositories
        with_wiki: Also back up repository wikis
        attempts: Number of attempts per command before giving up
        retry_delay: Seconds to wait between two attempts
        ignore: Repository slugs to skip
        dry_run: Only print the commands that would run
        verbose: Log every command before running it, and every failure
        show_progress: Render a progress bar over the repositories
        lock_file: Path of the single-instance lock file
    """

    username: str = ""
    password: str = field(default="", repr=False)
    location: Optional[str] = None
    workspace: str = ""
    transport: Transport = Transport.SSH
    bare: bool = False
    prune: bool = False
    with_wiki: bool = False
    attempts: int = 1
    retry_delay: float = 1.0
    ignore: frozenset[str] = frozenset()
    dry_run: bool = False
    verbose: bool = False
    show_progress: bool = False
    lock_file: str = DEFAULT_LOCK_FILE

    @property
    def account(self) -> str:
        """Account whose repositories get backed up."""
        return self.workspace or self.username

    @property
    def root(self) -> Path:
        """Backup root as a path."""
        if not self.location:
            raise ValueError("backup location hasn't been set")
        return Path(self.location).expanduser()
