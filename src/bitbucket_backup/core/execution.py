"""Run external commands with bounded retries."""

import logging
import subprocess
import time
from pathlib import Path

from .. import __util__
from ..config import BackupOptions

logger = logging.getLogger(__name__)


def run_command(command: list[str], cwd: Path | str) -> subprocess.CompletedProcess:
    """Run command once in cwd, capturing stdout and stderr together."""
    return subprocess.run(
        command,
        cwd=cwd,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        stdin=subprocess.DEVNULL,
        check=False,
    )


def execute(options: BackupOptions, command: list[str], cwd: Path | str) -> None:
    """Execute command in cwd, retrying up to options.attempts times.

    In dry-run mode the command is only logged. There is no timeout, a
    hanging git or hg blocks the run.

    Args:
        options: Backup options (dry_run, verbose, attempts, retry_delay)
        command: Argument vector, first element is the executable
        cwd: Directory to run the command in

    Raises:
        CommandExecutionError: If every attempt failed
    """
    if not command:
        raise ValueError("No command given to execute")

    printable = __util__.format_command(command)

    if options.dry_run or options.verbose:
        logger.info("executing command '%s' in the '%s' directory", printable, cwd)
        if options.dry_run:
            return
    else:
        logger.debug("executing command '%s' in the '%s' directory", printable, cwd)

    attempts = max(1, options.attempts)
    returncode = None
    output = ""
    last_error: OSError | None = None

    for attempt in range(1, attempts + 1):
        try:
            result = run_command(command, cwd)
        except OSError as e:
            # Missing executable or working directory
            returncode, output, last_error = None, "", e
            error = str(e)
        else:
            if result.returncode == 0:
                return
            returncode = result.returncode
            output = (result.stdout or b"").decode("utf-8", errors="replace")
            last_error = None
            error = f"exit status {returncode}"

        if options.verbose:
            logger.warning(
                "#%d command '%s' failed with error '%s': '%s'",
                attempt,
                printable,
                error,
                output.strip(),
            )
        else:
            logger.debug("#%d command '%s' failed: %s", attempt, printable, error)

        if attempt < attempts:
            time.sleep(options.retry_delay)

    if last_error is not None:
        output = str(last_error)
    raise __util__.CommandExecutionError(
        command, cwd, returncode, output, attempts
    ) from last_error
