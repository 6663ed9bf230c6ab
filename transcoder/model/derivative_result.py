from enum import Enum
from pathlib import Path
from typing import List, Optional

import psutil
from pydantic import BaseModel, Field

from transcoder.model.derivative_kind import DerivativeKind
from transcoder.os_resources import os_resources_utils


class JobStatus(str, Enum):
    NOT_FOUND = "source_not_found"  # source missing on disk
    DONE = "done"  # fresh derivative available
    PENDING = "pending"  # a job is running (or was just dispatched)
    ABSENT = "absent"  # no fresh derivative and no running job


class JobHandle(BaseModel):
    identity: str
    pid: int
    process_create_time: Optional[float] = None
    command: List[str] = Field(default_factory=list)
    output_path: Path
    lock_path: Path
    progress_path: Path

    def is_running(self) -> bool:
        return os_resources_utils.is_process_alive(self.pid, self.process_create_time)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the encoder process ends or the timeout expires.

        Returns True if the process is no longer running.
        """
        if not self.is_running():
            return True
        try:
            psutil.Process(self.pid).wait(timeout=timeout)
        except psutil.NoSuchProcess:
            return True
        except psutil.TimeoutExpired:
            return False
        return True


class DerivativeResult(BaseModel):
    kind: DerivativeKind
    status: JobStatus
    identity: Optional[str] = None
    output_path: Optional[Path] = None
    url: str = ""
    handle: Optional[JobHandle] = None

    @property
    def is_done(self) -> bool:
        return self.status == JobStatus.DONE
