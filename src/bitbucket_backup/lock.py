# pyright: standard

"""bitbucket-backup: bitbucket_backup/lock.py
Make sure only one backup runs at a time.
"""

import contextlib
import logging
from pathlib import Path

from filelock import FileLock, Timeout

from . import __util__

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def instance_lock(path: Path | str):
    """Hold the single-instance lock for the duration of the block.

    Acquisition doesn't wait: if another backup holds the lock the run is
    aborted right away.

    Raises:
        LockAcquisitionError: If the lock is held by another process
    """
    lock = FileLock(str(path), timeout=0)
    try:
        lock.acquire()
    except Timeout as e:
        raise __util__.LockAcquisitionError(path) from e
    except OSError as e:
        logger.error("couldn't init lock file %s: %s", path, e)
        raise __util__.LockAcquisitionError(path) from e

    logger.debug("Acquired lock %s", path)
    try:
        yield lock
    finally:
        lock.release()
        logger.debug("Released lock %s", path)
