import logging

log = logging.getLogger(__name__)

from pathlib import Path


def get_file_name_without_extension(file_path: Path) -> str:
    return file_path.stem


def check_file_exists(file_path: Path) -> bool:
    return file_path.is_file()


def check_directory_exists(dir_path: Path) -> bool:
    return dir_path.is_dir()


def ensure_directory(dir_path: Path) -> Path:
    if not dir_path.exists():
        log.info("Directory does not exist. Creating: %s", dir_path)
        dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path


def get_modification_time(file_path: Path) -> float | None:
    try:
        return file_path.stat().st_mtime
    except OSError as e:
        log.debug(f"Could not read modification time of {file_path}: {e}")
        return None


def delete_file(file_path: Path) -> bool:
    if file_path.is_file():
        try:
            file_path.unlink()
            log.debug(f"Deleted file: {file_path}")
            return True
        except OSError as e:
            log.error(f"Error deleting file {file_path}. Details: \n{e}")
            return False
    return False
