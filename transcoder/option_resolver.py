import logging
from typing import Any, Mapping, Optional

from transcoder.config.app_config import TranscoderConfig
from transcoder.exceptions import MissingDefaultsError
from transcoder.model.derivative_kind import DerivativeKind

log = logging.getLogger(__name__)


def is_requested(value: Any) -> bool:
    """Unset and empty values mean "not requested", never zero."""
    if value is None or value is False:
        return False
    if isinstance(value, bool):
        return True
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, (str, list, tuple, dict, set)):
        return len(value) > 0
    return True


def get_default_options(kind: DerivativeKind, config: TranscoderConfig) -> dict[str, Any]:
    if kind == DerivativeKind.VIDEO:
        defaults = config.default_video_options
    elif kind == DerivativeKind.THUMBNAIL:
        defaults = config.default_thumbnail_options
    else:
        raise ValueError(f"Unknown derivative kind: {kind}")

    if defaults is None:
        log.error(f"No default options configured for {kind.value}")
        raise MissingDefaultsError(kind.value)

    return dict(defaults)


def coalesce_options(kind: DerivativeKind,
                     options: Optional[Mapping[str, Any]],
                     config: TranscoderConfig) -> dict[str, Any]:
    merged = get_default_options(kind, config)
    # Caller keys win. Keys new to the defaults go after the default keys
    merged.update(options or {})
    return merged
