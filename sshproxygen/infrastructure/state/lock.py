"""
Advisory registry lock
"""
import fcntl
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from ...core.constants import REGISTRY_LOCK_SUFFIX
from ...core.exceptions import IoFailure
from ...core.logging import get_logger

logger = get_logger(__name__)


def lock_path_for(registry_path: Path) -> Path:
    """Sidecar lock file next to the registry"""
    registry_path = Path(registry_path)
    return registry_path.with_name(registry_path.name + REGISTRY_LOCK_SUFFIX)


@contextmanager
def registry_lock(registry_path: Path) -> Iterator[Path]:
    """
    Hold an exclusive flock for the duration of a read-modify-write cycle.

    The registry itself is replaced by rename on save, so the lock lives
    on a separate file that is never replaced. Blocks until the lock is
    available and releases it on every exit path.

    Raises:
        IoFailure: If the lock file cannot be opened
    """
    path = lock_path_for(registry_path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o600)
    except OSError as e:
        raise IoFailure(path, str(e)) from e

    try:
        logger.debug(f"Waiting for lock {path}")
        fcntl.flock(fd, fcntl.LOCK_EX)
        logger.debug(f"Acquired lock {path}")
        yield path
    finally:
        fcntl.flock(fd, fcntl.LOCK_UN)
        os.close(fd)
