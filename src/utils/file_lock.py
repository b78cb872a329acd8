import time
import logging
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

try:
    import msvcrt

    def _lock_file(handle):
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)

    def _unlock_file(handle):
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)

    PLATFORM = "windows"
except ImportError:
    try:
        import fcntl

        def _lock_file(handle):
            fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

        def _unlock_file(handle):
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)

        PLATFORM = "unix"
    except ImportError:
        PLATFORM = "unknown"

        def _lock_file(handle):
            pass

        def _unlock_file(handle):
            pass

        logger.warning("File locking not supported on this platform.")


class FileLockException(Exception):
    pass


def lock_path_for(target) -> Path:
    """Return the sidecar ``.lock`` path guarding ``target``."""
    target = Path(target)
    if target.suffix == ".lock":
        return target
    return target.with_name(target.name + ".lock")


@contextmanager
def file_lock(target, timeout=10, delay=0.1):
    """
    Hold an exclusive lock on ``<target>.lock`` for the duration of the block.

    The lock is advisory and only excludes other holders of the same lock
    file. Locks are not re-entrant: acquiring it twice from the same process
    blocks until ``timeout`` and raises FileLockException.

    Args:
        target: Path of the file being protected
        timeout: Maximum time to wait for the lock in seconds
        delay: Retry interval in seconds
    """
    lock_path = lock_path_for(target)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout

    while True:
        handle = open(lock_path, "a")
        try:
            _lock_file(handle)
            break
        except OSError:
            handle.close()
            if time.monotonic() >= deadline:
                raise FileLockException(f"Timeout waiting for lock: {lock_path}")
            time.sleep(delay)

    try:
        yield handle
    finally:
        try:
            _unlock_file(handle)
        except OSError as e:
            logger.warning(f"Failed to release lock {lock_path}: {e}")
        handle.close()
