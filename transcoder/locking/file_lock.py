import logging
from pathlib import Path
from typing import Optional
from filelock import FileLock, Timeout, BaseFileLock

log = logging.getLogger(__name__)


class ManagedFileLock:
    """
    Wrapper around filelock.FileLock guarding a critical section across processes.

    The lock file itself carries no data, it only serializes the callers.
    """

    def __init__(self, lock_file_path: Path, timeout: float):
        """
        Initialize a managed file lock.

        Args:
            lock_file_path: The file used as the OS level lock
            timeout: Maximum time to wait for lock acquisition (seconds)
        """
        self.lock_file_path = lock_file_path
        self.timeout = timeout
        self._lock: Optional[BaseFileLock] = None

    def acquire(self) -> None:
        """
        Acquire the lock with the specified timeout.

        Raises:
            Timeout: If lock cannot be acquired within timeout period
        """
        try:
            self._lock = FileLock(self.lock_file_path, timeout=self.timeout)
            self._lock.acquire()
            log.debug(f"Acquired lock {self.lock_file_path}")
        except Timeout:
            log.error(f"Failed to acquire lock {self.lock_file_path} within {self.timeout}s")
            raise

    def release(self) -> None:
        if self._lock and self._lock.is_locked:
            self._lock.release()
            log.debug(f"Released lock {self.lock_file_path}")

    def __enter__(self):
        """Context manager entry."""
        self.acquire()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.release()
        return False

    def is_locked(self) -> bool:
        """Check if the lock is currently held."""
        return self._lock is not None and self._lock.is_locked
