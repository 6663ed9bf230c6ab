class LockConfig:
    DEFAULT_TIMEOUT = 5.0
    JOB_LOCK_SUFFIX = ".lock"
    PROGRESS_SUFFIX = ".progress"
    GUARD_PREFIX = ".transcoder_guard_"
    GUARD_SUFFIX = ".lock"
    GUARD_SHARD_HEX_DIGITS = 2  # 256 guard files at most
