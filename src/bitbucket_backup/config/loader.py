"""TOML configuration loading and validation.

Handles config file discovery, parsing, and validation with helpful error messages.
"""

import dataclasses
import tomllib
from pathlib import Path
from typing import Any

from .schema import DEFAULT_LOCK_FILE, BackupOptions, Transport


class ConfigError(Exception):
    """Configuration loading or validation error."""

    pass


# Config file search paths in priority order
CONFIG_PATHS = [
    Path.home() / ".config" / "bitbucket-backup" / "config.toml",
    Path("/etc/bitbucket-backup/config.toml"),
]


def find_config_file(explicit_path: str | None = None) -> Path | None:
    """Find configuration file.

    Args:
        explicit_path: Explicitly specified config path (highest priority)

    Returns:
        Path to config file, or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigError(f"Config file not found: {explicit_path}")

    for path in CONFIG_PATHS:
        if path.exists():
            return path

    return None


def _get(section: str, data: dict[str, Any], key: str, kind, default):
    """Fetch a typed value from a config table."""
    if key not in data:
        return default
    value = data[key]
    # bool is an int subclass, don't let `attempts = true` slip through
    if isinstance(value, bool) and kind is not bool:
        raise ConfigError(f"[{section}] '{key}' must be of type {kind.__name__}")
    if kind is float and isinstance(value, int):
        value = float(value)
    if not isinstance(value, kind):
        raise ConfigError(f"[{section}] '{key}' must be of type {kind.__name__}")
    return value


def parse_transport(value: str) -> Transport:
    """Parse a transport name."""
    try:
        return Transport(str(value).lower())
    except ValueError:
        choices = ", ".join(t.value for t in Transport)
        raise ConfigError(f"Unknown transport '{value}' (expected one of: {choices})")


def _parse_account(data: dict[str, Any]) -> dict[str, Any]:
    """Parse account configuration from dict."""
    return {
        "username": _get("account", data, "username", str, ""),
        "password": _get("account", data, "password", str, ""),
        "workspace": _get("account", data, "workspace", str, ""),
    }


def _parse_backup(data: dict[str, Any]) -> dict[str, Any]:
    """Parse backup configuration from dict."""
    ignore = _get("backup", data, "ignore", list, [])
    if not all(isinstance(slug, str) for slug in ignore):
        raise ConfigError("[backup] 'ignore' must be a list of repository slugs")

    return {
        "location": _get("backup", data, "location", str, None),
        "transport": parse_transport(_get("backup", data, "transport", str, "ssh")),
        "attempts": _get("backup", data, "attempts", int, 1),
        "retry_delay": _get("backup", data, "retry_delay", float, 1.0),
        "with_wiki": _get("backup", data, "with_wiki", bool, False),
        "ignore": frozenset(ignore),
        "lock_file": _get("backup", data, "lock_file", str, DEFAULT_LOCK_FILE),
    }


def _parse_git(data: dict[str, Any]) -> dict[str, Any]:
    """Parse git specific configuration from dict."""
    return {
        "bare": _get("git", data, "bare", bool, False),
        "prune": _get("git", data, "prune", bool, False),
    }


def validate_options(options: BackupOptions) -> list[str]:
    """Validate options, raising on errors and returning a list of warnings."""
    if options.attempts < 1:
        raise ConfigError(f"attempts must be at least 1, got {options.attempts}")
    if options.retry_delay < 0:
        raise ConfigError(
            f"retry_delay must not be negative, got {options.retry_delay}"
        )

    warnings = []

    if options.transport is Transport.HTTPS and not (
        options.username and options.password
    ):
        warnings.append(
            "HTTPS transport without username and password: "
            "private repositories can't be cloned"
        )

    if not options.location:
        warnings.append("No backup location configured")

    if not options.account:
        warnings.append("No username or workspace configured")

    return warnings


def merge_options(options: BackupOptions, **overrides: Any) -> BackupOptions:
    """Return a copy of options with every override that is not None applied.

    Raises:
        ConfigError: If the resulting options are invalid
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if isinstance(changes.get("transport"), str):
        changes["transport"] = parse_transport(changes["transport"])
    if "ignore" in changes:
        changes["ignore"] = frozenset(options.ignore | set(changes["ignore"]))

    try:
        merged = dataclasses.replace(options, **changes)
    except TypeError as e:
        raise ConfigError(f"Invalid option: {e}")

    validate_options(merged)
    return merged


def load_config(path: Path | str) -> tuple[BackupOptions, list[str]]:
    """Load and validate configuration from TOML file.

    Args:
        path: Path to configuration file

    Returns:
        Tuple of (BackupOptions object, list of warnings)

    Raises:
        ConfigError: If config is invalid or cannot be parsed
    """
    path = Path(path)

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax: {e}")
    except OSError as e:
        raise ConfigError(f"Cannot read config file: {e}")

    sections = {}
    for name in ("account", "backup", "git"):
        section = data.get(name, {})
        if not isinstance(section, dict):
            raise ConfigError(f"[{name}] must be a table")
        sections[name] = section

    values: dict[str, Any] = {}
    values.update(_parse_account(sections["account"]))
    values.update(_parse_backup(sections["backup"]))
    values.update(_parse_git(sections["git"]))

    options = BackupOptions(**values)

    # Validate and collect warnings
    warnings = validate_options(options)

    unknown = sorted(set(data) - set(sections))
    for name in unknown:
        warnings.append(f"Unknown section [{name}] ignored")

    return options, warnings


def generate_example_config() -> str:
    """Generate example configuration file content."""
    return """# bitbucket-backup configuration
# See documentation for full options

[account]
username = "alice"
# App password, needed for the API and for private repositories over HTTPS
password = ""
# Back up another account or workspace instead of the user's own
# workspace = "my-team"

[backup]
location = "/srv/backup/bitbucket"
transport = "ssh"   # or "https"
attempts = 3        # Attempts per command before giving up
retry_delay = 1.0   # Seconds between attempts
with_wiki = true
ignore = []         # Repository slugs to skip
# lock_file = "/tmp/bitbucket-backup.lock"

[git]
bare = true         # Clone with --mirror
prune = true        # Prune stale refs on update
"""
