import json
import logging

log = logging.getLogger(__name__)

import subprocess
from typing import Any

from transcoder import file_utils
from transcoder.command_builder import build_probe_command
from transcoder.config.app_config import TranscoderConfig
from transcoder.source import resolve_source_path


def probe(config: TranscoderConfig, source) -> Any | None:
    """
    Run the prober on a source and return its json output as parsed.

    Returns None when the source does not exist, the prober cannot be run,
    or its output is not json.
    """
    source_path = resolve_source_path(source)
    if not file_utils.check_file_exists(source_path):
        log.warning(f"File not found, skipping probe: {source_path}")
        return None

    cmd = build_probe_command(config, source_path)

    log.info(f"Executing prober for {source_path}")

    try:
        result = subprocess.run(cmd, capture_output=True, check=False)
    except FileNotFoundError:
        log.error(f"Prober not found at '{config.prober_path}'. Please check the configuration.")
        return None
    except OSError as e:
        log.error(f"Could not run prober on {source_path}. Details: {e}")
        return None

    # Container tags are passed through as stored, they are not always utf-8
    stdout = _decode(result.stdout)

    if result.returncode != 0:
        log.warning(f"Prober exited with code {result.returncode} for {source_path}: {_decode(result.stderr).strip()}")

    if not stdout.strip():
        log.warning(f"Prober returned no output for {source_path}")
        return None

    try:
        probe_data = json.loads(stdout)
    except json.JSONDecodeError:
        log.warning(f"Prober returned unparseable json for {source_path}")
        return None

    log.debug(f"Probe result for {source_path}: {probe_data}")
    return probe_data


def _decode(output: bytes | str | None) -> str:
    if output is None:
        return ""
    if isinstance(output, str):
        return output
    return output.decode("utf-8", errors="replace")
