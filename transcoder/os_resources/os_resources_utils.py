import logging
from typing import Optional

log = logging.getLogger(__name__)

import psutil

# Creation times are floats derived from boot time and clock ticks, compare loosely
CREATE_TIME_TOLERANCE_SECONDS = 0.01


def get_process_create_time(pid: int) -> float | None:
    try:
        return psutil.Process(pid).create_time()
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        log.debug(f"Could not read creation time of process {pid}")
        return None


def is_process_alive(pid: int, expected_create_time: Optional[float] = None) -> bool:
    """
    Check whether a process with the given identity is running.

    When the creation time is known, a process with the same pid but a different
    creation time is a reused pid and counts as not alive. Zombies count as not alive.
    """
    if pid <= 0:
        return False

    try:
        process = psutil.Process(pid)
        if process.status() == psutil.STATUS_ZOMBIE:
            return False
        if expected_create_time is not None:
            if abs(process.create_time() - expected_create_time) > CREATE_TIME_TOLERANCE_SECONDS:
                log.debug(f"Process {pid} exists but was started at a different time, pid was reused")
                return False
        return True
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        # Process exists but belongs to someone else
        return expected_create_time is None


def terminate_process_safely(pid: int) -> None:
    try:
        root_process = psutil.Process(pid)
        all_procs = root_process.children(recursive=True)
        all_procs.append(root_process)
    except psutil.NoSuchProcess:
        return

    # Graceful termination first (SIGTERM)
    for p in all_procs:
        try:
            p.terminate()
        except psutil.NoSuchProcess:
            pass

    gone, alive = psutil.wait_procs(all_procs, timeout=5)

    # Force kill any remaining alive processes (SIGKILL)
    for p in alive:
        try:
            p.kill()
        except psutil.NoSuchProcess:
            pass

    psutil.wait_procs(alive, timeout=2)
    log.info(f"Terminated process {pid} and {len(all_procs) - 1} child process(es)")
