import logging
import shlex
import subprocess
import time
import uuid
from pathlib import Path
from typing import Any, Mapping, Optional

from filelock import Timeout

from transcoder import file_utils
from transcoder import freshness_checker
from transcoder.command_builder import build_command
from transcoder.config.app_config import TranscoderConfig
from transcoder.filename_encoder import encode_filename
from transcoder.locking.job_lock_manager import JobLockManager
from transcoder.locking.lock_state import LockState
from transcoder.model.derivative_kind import DerivativeKind
from transcoder.model.derivative_result import DerivativeResult, JobHandle, JobStatus
from transcoder.model.job_lock_record import JobLockRecord
from transcoder.option_resolver import coalesce_options
from transcoder.os_resources import os_resources_utils
from transcoder.source import resolve_source_path

log = logging.getLogger(__name__)


def derivative_url(config: TranscoderConfig, identity: str) -> str:
    return f"{config.output_url_prefix}{identity}"


class JobDispatcher:
    """
    Returns an existing derivative or starts producing it in the background.

    request() never waits for an encoder. A caller that gets PENDING asks again
    later with the same arguments, or waits on the returned JobHandle.
    """

    def __init__(self, config: TranscoderConfig, lock_manager: Optional[JobLockManager] = None):
        self.config = config
        self.lock_manager = lock_manager or JobLockManager(
            lock_dir=config.temp_dir,
            timeout=config.lock_timeout_seconds,
            stale_after_seconds=config.stale_lock_seconds,
        )

    def request(self, kind: DerivativeKind, source, options: Optional[Mapping[str, Any]] = None) -> DerivativeResult:
        return self._process(kind, source, options, dispatch=True)

    def status(self, kind: DerivativeKind, source, options: Optional[Mapping[str, Any]] = None) -> DerivativeResult:
        return self._process(kind, source, options, dispatch=False)

    def _process(self,
                 kind: DerivativeKind,
                 source,
                 options: Optional[Mapping[str, Any]],
                 dispatch: bool) -> DerivativeResult:
        source_path = resolve_source_path(source)
        if not file_utils.check_file_exists(source_path):
            log.warning(f"Source video not found: {source_path}")
            return DerivativeResult(kind=kind, status=JobStatus.NOT_FOUND)

        options = coalesce_options(kind, options, self.config)
        identity = encode_filename(source_path, options)
        output_path = self.config.output_dir / identity

        try:
            with self.lock_manager.guard(identity):
                # The lock is consulted first: a running job's partial output must not count as fresh
                state, record = self.lock_manager.check(identity)
                if state == LockState.ACTIVE:
                    log.info(f"Job already running for {identity} (pid {record.pid})")
                    return DerivativeResult(
                        kind=kind,
                        status=JobStatus.PENDING,
                        identity=identity,
                        output_path=output_path,
                        handle=self._handle_from_record(identity, record, output_path),
                    )
                if state == LockState.STALE:
                    self.lock_manager.reclaim(identity)

                if freshness_checker.is_reusable(source_path, output_path):
                    return DerivativeResult(
                        kind=kind,
                        status=JobStatus.DONE,
                        identity=identity,
                        output_path=output_path,
                        url=derivative_url(self.config, identity),
                    )

                if not dispatch:
                    return DerivativeResult(kind=kind, status=JobStatus.ABSENT, identity=identity,
                                            output_path=output_path)

                command = build_command(kind, self.config, source_path, options, output_path)
                file_utils.ensure_directory(self.config.output_dir)
                handle = self._spawn(identity, command, output_path)

        except Timeout:
            log.warning(f"Could not check the job lock for {identity} in time, reporting it as pending.")
            return DerivativeResult(kind=kind, status=JobStatus.PENDING, identity=identity, output_path=output_path)

        return DerivativeResult(
            kind=kind,
            status=JobStatus.PENDING,
            identity=identity,
            output_path=output_path,
            handle=handle,
        )

    def _spawn(self, identity: str, command: list[str], output_path: Path) -> Optional[JobHandle]:
        progress_path = self.lock_manager.progress_path(identity)

        log.info("Starting encoder job.")
        log.info("|-Derivative: %s", output_path)
        log.info("|-Progress: %s", progress_path)
        log.info("|-Command: %s", shlex.join(command))

        try:
            with open(progress_path, "ab") as progress_file:
                process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=progress_file,
                    stderr=subprocess.STDOUT,
                    start_new_session=True,
                )
        except OSError as e:
            log.error(f"Failed to start the encoder for {identity}. Details: {e}")
            file_utils.delete_file(progress_path)
            return None

        record = JobLockRecord(
            token=uuid.uuid4().hex,
            pid=process.pid,
            process_create_time=os_resources_utils.get_process_create_time(process.pid),
            created_at=time.time(),
            command=command,
        )

        try:
            lock_path = self.lock_manager.write_lock(identity, record)
        except OSError as e:
            log.error(f"Encoder started (pid {process.pid}) but its job lock could not be written: {e}")
            lock_path = self.lock_manager.lock_path(identity)

        return JobHandle(
            identity=identity,
            pid=record.pid,
            process_create_time=record.process_create_time,
            command=command,
            output_path=output_path,
            lock_path=lock_path,
            progress_path=progress_path,
        )

    def _handle_from_record(self, identity: str, record: JobLockRecord, output_path: Path) -> JobHandle:
        return JobHandle(
            identity=identity,
            pid=record.pid,
            process_create_time=record.process_create_time,
            command=record.command,
            output_path=output_path,
            lock_path=self.lock_manager.lock_path(identity),
            progress_path=self.lock_manager.progress_path(identity),
        )
