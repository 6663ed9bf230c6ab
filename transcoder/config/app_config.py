import logging
import os
import tempfile
import threading
import tomllib
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field

from transcoder import file_utils

log = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent.parent
CONFIG_FILE_NAME = "transcoder_config.toml"
CONFIG_PATH_ENV = "TRANSCODER_CONFIG"
ENV_PREFIX = "TRANSCODER_"

# Fields that may be overridden from the environment, with their parsers
_ENV_OVERRIDES = {
    "encoder_path": str,
    "prober_path": str,
    "prober_options": str,
    "output_dir": Path,
    "output_url_prefix": str,
    "temp_dir": Path,
    "lock_timeout_seconds": float,
    "stale_lock_seconds": float,
}


# Default values can be overridden in transcoder_config.toml
class TranscoderConfig(BaseModel):
    encoder_path: str = "ffmpeg"
    prober_path: str = "ffprobe"
    prober_options: str = "-v quiet -print_format json -show_format -show_streams"

    output_dir: Path
    output_url_prefix: str = ""
    temp_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()))

    # No built-in option defaults: a kind without configured defaults is a configuration error
    default_video_options: Optional[dict[str, Any]] = None
    default_thumbnail_options: Optional[dict[str, Any]] = None

    lock_timeout_seconds: float = 5.0
    stale_lock_seconds: float = 0  # 0 disables heartbeat based reclaiming


class ConfigManager:
    _instance: Optional[TranscoderConfig] = None
    _lock = threading.Lock()

    def __init__(self):
        raise RuntimeError("Constructor is not allowed. Use get_config() method.")

    @classmethod
    def get_config(cls) -> TranscoderConfig:
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    from transcoder.config.config_validator import ConfigValidator

                    config = ConfigManager.load_config()
                    ConfigValidator.validate(config)
                    cls._instance = config
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        with cls._lock:
            cls._instance = None

    @staticmethod
    def load_config(config_file: Optional[Path] = None) -> TranscoderConfig:
        from dotenv import load_dotenv, find_dotenv

        load_dotenv(find_dotenv(usecwd=True))

        if config_file is None:
            config_file = Path(os.getenv(CONFIG_PATH_ENV, BASE_DIR / CONFIG_FILE_NAME))

        if not file_utils.check_file_exists(config_file):
            raise FileNotFoundError("{} not found. Expected location: {}".format(CONFIG_FILE_NAME, config_file))

        with config_file.open("rb") as f:
            conf_data = tomllib.load(f)

        parameters = dict(conf_data.get("params", {}))
        parameters.update(_read_env_overrides())

        log.debug(f"Loaded configuration from {config_file}")
        return TranscoderConfig(**parameters)


def _read_env_overrides() -> dict[str, Any]:
    overrides = {}
    for field_name, parser in _ENV_OVERRIDES.items():
        raw_value = os.getenv(ENV_PREFIX + field_name.upper())
        if raw_value is None:
            continue
        try:
            overrides[field_name] = parser(raw_value)
        except ValueError as e:
            raise ValueError(f"Invalid value for {ENV_PREFIX + field_name.upper()}: {raw_value!r}") from e
        log.debug("Configuration override from environment: %s", field_name)
    return overrides
