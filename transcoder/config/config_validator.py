import logging

from transcoder import file_utils
from transcoder.config.app_config import TranscoderConfig
from transcoder.model.option_keys import FILE_SUFFIX

log = logging.getLogger(__name__)


class ConfigValidator:
    @staticmethod
    def validate(config: TranscoderConfig) -> None:
        if not config.encoder_path.strip():
            raise ValueError("Encoder path must not be empty.")
        if not config.prober_path.strip():
            raise ValueError("Prober path must not be empty.")
        if not file_utils.check_directory_exists(config.output_dir):
            log.warning(f"Output directory does not exist: {config.output_dir}. Will create it.")
            config.output_dir.mkdir(parents=True, exist_ok=True)
        if not file_utils.check_directory_exists(config.temp_dir):
            raise ValueError(f"Temporary directory does not exist: {config.temp_dir}")
        if config.output_url_prefix and not config.output_url_prefix.endswith("/"):
            log.warning("Output URL prefix does not end with '/'. Derivative URLs are plain concatenations.")
        if config.lock_timeout_seconds <= 0:
            raise ValueError("Invalid lock timeout in configuration. Expected: lock_timeout_seconds > 0.")
        if config.stale_lock_seconds < 0:
            raise ValueError("Invalid stale lock threshold in configuration. Expected: stale_lock_seconds >= 0.")
        for name, defaults in (
                ("default_video_options", config.default_video_options),
                ("default_thumbnail_options", config.default_thumbnail_options),
        ):
            if defaults is None:
                log.warning(f"{name} is not configured. Requests of that kind will fail.")
            elif not defaults.get(FILE_SUFFIX):
                log.warning(f"{name} has no '{FILE_SUFFIX}'. Derivatives will be written without an extension.")
