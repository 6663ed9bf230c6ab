import logging
from pathlib import Path

from transcoder import file_utils

log = logging.getLogger(__name__)


def is_reusable(source_path: Path, derivative_path: Path) -> bool:
    """
    A derivative is reusable when it exists and is not older than its source.

    Only modification times are compared: clock skew or metadata-only edits of the
    source can give a wrong answer.
    """
    if not file_utils.check_file_exists(derivative_path):
        return False

    derivative_mtime = file_utils.get_modification_time(derivative_path)
    source_mtime = file_utils.get_modification_time(source_path)
    if derivative_mtime is None or source_mtime is None:
        return False

    if derivative_mtime < source_mtime:
        log.info("Derivative is older than its source and will be regenerated.")
        log.info("|-Source: %s", source_path)
        log.info("|-Derivative: %s", derivative_path)
        return False

    return True
