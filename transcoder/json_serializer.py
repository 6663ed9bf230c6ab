import logging
import os

from transcoder.model.job_lock_record import JobLockRecord

log = logging.getLogger(__name__)

from pathlib import Path


def serialize_to_json(lock_record: JobLockRecord, output_path: str | Path) -> None:
    p = Path(output_path)

    p.parent.mkdir(parents=True, exist_ok=True)

    # Write next to the target and swap in, so readers never see a partial record
    tmp_path = p.with_name(f"{p.name}.{os.getpid()}.tmp")
    json_string = lock_record.model_dump_json(indent=4)

    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(json_string)
        os.replace(tmp_path, p)
        log.debug(f"Json saved successfully: {p.resolve()}")
    except OSError:
        log.error(f"Error serializing json. Output path: {output_path}")
        if tmp_path.exists():
            tmp_path.unlink()
        raise


def load_from_json(input_path: str | Path) -> JobLockRecord:
    p = Path(input_path)

    if not p.is_file():
        raise FileNotFoundError(f"File not found for deserialization: {p.resolve()}")

    try:
        content = p.read_text(encoding="utf-8").strip()
    except OSError as e:
        raise ValueError(f"Error reading lock file. Input path: {input_path}. Exception: {e}")

    # Older lock files hold nothing but the pid
    if content.isdigit():
        return JobLockRecord(token="legacy", pid=int(content))

    try:
        return JobLockRecord.model_validate_json(content)
    except Exception as e:
        raise ValueError(f"Error loading json file. Input path: {input_path}. Exception: {e}")
