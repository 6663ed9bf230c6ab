from enum import Enum


class LockState(Enum):
    ABSENT = "absent"  # No lock file
    ACTIVE = "active"  # Lock held by a live encoder process
    STALE = "stale"  # Holder is gone, hung past the threshold, or the lock is unreadable
