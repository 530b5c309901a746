"""Pytest configuration and shared fixtures."""

import logging
from datetime import datetime, timezone

import pytest

from bitbucket_backup.config import BackupOptions
from bitbucket_backup.repository import RepositoryRecord, ScmKind


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo create_logger so caplog sees package records."""
    yield
    logger = logging.getLogger("bitbucket_backup")
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def tmp_config_dir(tmp_path):
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def sample_config_toml():
    """Return a sample valid TOML configuration string."""
    return """
[account]
username = "alice"
password = "s3cret"
workspace = "team"

[backup]
location = "/srv/backup/bitbucket"
transport = "https"
attempts = 3
retry_delay = 0.5
with_wiki = true
ignore = ["scratch", "old-site"]
lock_file = "/tmp/test-bitbucket-backup.lock"

[git]
bare = true
prune = true
"""


@pytest.fixture
def minimal_config_toml():
    """Return a minimal valid TOML configuration string."""
    return """
[account]
username = "alice"

[backup]
location = "/srv/backup"
"""


@pytest.fixture
def config_file(tmp_config_dir, sample_config_toml):
    """Create a temporary config file with sample content."""
    config_path = tmp_config_dir / "config.toml"
    config_path.write_text(sample_config_toml)
    return config_path


@pytest.fixture
def minimal_config_file(tmp_config_dir, minimal_config_toml):
    """Create a temporary config file with minimal content."""
    config_path = tmp_config_dir / "minimal.toml"
    config_path.write_text(minimal_config_toml)
    return config_path


def make_record(
    slug="a",
    scm=ScmKind.GIT,
    is_private=False,
    has_wiki=False,
    resource_type="repository",
    updated_at=None,
    endpoints=None,
):
    """Build a repository record with Bitbucket style clone links."""
    if endpoints is None:
        endpoints = {
            "https": f"https://alice@bitbucket.org/alice/{slug}.git",
            "ssh": f"git@bitbucket.org:alice/{slug}.git",
        }
    return RepositoryRecord(
        slug=slug,
        scm=scm,
        clone_endpoints=endpoints,
        is_private=is_private,
        has_wiki=has_wiki,
        resource_type=resource_type,
        updated_at=updated_at or datetime(2024, 1, 1, tzinfo=timezone.utc),
        name=slug,
        full_name=f"alice/{slug}",
    )


@pytest.fixture
def record_factory():
    """Factory for repository records."""
    return make_record


@pytest.fixture
def backup_root(tmp_path):
    """Backup location inside the test's temporary directory."""
    root = tmp_path / "backup"
    root.mkdir()
    return root


@pytest.fixture
def options(backup_root, tmp_path):
    """Options pointing at the temporary backup root, no retry delay."""
    return BackupOptions(
        username="alice",
        password="s3cret",
        location=str(backup_root),
        retry_delay=0,
        lock_file=str(tmp_path / "test.lock"),
    )
