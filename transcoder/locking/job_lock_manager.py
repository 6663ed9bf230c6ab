import hashlib
import logging
import time
from pathlib import Path
from typing import Optional

from transcoder import file_utils
from transcoder import json_serializer
from transcoder.config.lock_config import LockConfig
from transcoder.locking.file_lock import ManagedFileLock
from transcoder.locking.lock_state import LockState
from transcoder.model.job_lock_record import JobLockRecord
from transcoder.os_resources import os_resources_utils

log = logging.getLogger(__name__)


class JobLockManager:
    """
    Keeps track of which derivatives are being produced, using files in a shared directory.

    A job lock is a json file named after the derivative identity, holding the identity of
    the encoder process producing it. The lock is active while that process is alive.
    Every check-then-dispatch sequence must run inside guard(), which serializes callers
    across processes.
    """

    def __init__(
            self,
            lock_dir: Path,
            timeout: Optional[float] = None,
            stale_after_seconds: float = 0
    ):
        self.lock_dir = lock_dir
        self.timeout = timeout or LockConfig.DEFAULT_TIMEOUT
        self.stale_after_seconds = stale_after_seconds

    def lock_path(self, identity: str) -> Path:
        return self.lock_dir / f"{identity}{LockConfig.JOB_LOCK_SUFFIX}"

    def progress_path(self, identity: str) -> Path:
        return self.lock_dir / f"{identity}{LockConfig.PROGRESS_SUFFIX}"

    def guard(self, identity: str) -> ManagedFileLock:
        """
        Usage:
            with lock_manager.guard(identity):
                state, record = lock_manager.check(identity)
                ...
        """
        file_utils.ensure_directory(self.lock_dir)
        return ManagedFileLock(lock_file_path=self.guard_path(identity), timeout=self.timeout)

    def guard_path(self, identity: str) -> Path:
        # Fixed set of guard files shared by all identities, never deleted: a held flock file keeps its inode
        shard = hashlib.sha256(identity.encode("utf-8")).hexdigest()[:LockConfig.GUARD_SHARD_HEX_DIGITS]
        return self.lock_dir / f"{LockConfig.GUARD_PREFIX}{shard}{LockConfig.GUARD_SUFFIX}"

    def read_lock(self, identity: str) -> Optional[JobLockRecord]:
        """Returns None if there is no lock. Raises ValueError for unreadable locks."""
        lock_path = self.lock_path(identity)
        if not file_utils.check_file_exists(lock_path):
            return None
        return json_serializer.load_from_json(lock_path)

    def check(self, identity: str) -> tuple[LockState, Optional[JobLockRecord]]:
        try:
            record = self.read_lock(identity)
        except ValueError as e:
            log.warning(f"Unreadable job lock for {identity}, treating it as stale. Details: {e}")
            return LockState.STALE, None

        if record is None:
            return LockState.ABSENT, None

        if not os_resources_utils.is_process_alive(record.pid, record.process_create_time):
            log.info("Job lock is stale, its process has ended.")
            log.info("|-Derivative: %s", identity)
            log.info("|-PID: %s", record.pid)
            return LockState.STALE, record

        if self._is_hung(identity):
            log.warning("Job has not reported progress for too long. Terminating it.")
            log.warning("|-Derivative: %s", identity)
            log.warning("|-PID: %s", record.pid)
            log.warning("|-Threshold: %.1f seconds", self.stale_after_seconds)
            os_resources_utils.terminate_process_safely(record.pid)
            return LockState.STALE, record

        return LockState.ACTIVE, record

    def reclaim(self, identity: str) -> None:
        """Remove the lock and progress record of a job that is no longer running."""
        file_utils.delete_file(self.lock_path(identity))
        file_utils.delete_file(self.progress_path(identity))
        log.debug(f"Reclaimed job lock for {identity}")

    def write_lock(self, identity: str, record: JobLockRecord) -> Path:
        lock_path = self.lock_path(identity)
        json_serializer.serialize_to_json(record, lock_path)
        log.debug(f"Job lock written for {identity}: pid {record.pid}")
        return lock_path

    def _is_hung(self, identity: str) -> bool:
        if self.stale_after_seconds <= 0:
            return False

        heartbeat = file_utils.get_modification_time(self.progress_path(identity))
        if heartbeat is None:
            heartbeat = file_utils.get_modification_time(self.lock_path(identity))
        if heartbeat is None:
            return False

        return time.time() - heartbeat > self.stale_after_seconds
