from transcoder.locking.job_lock_manager import JobLockManager
from transcoder.locking.file_lock import ManagedFileLock
from transcoder.locking.lock_state import LockState

__all__ = ["JobLockManager", "ManagedFileLock", "LockState"]
