from transcoder.config.app_config import TranscoderConfig, ConfigManager
from transcoder.exceptions import TranscoderError, UnsupportedSourceLocationError, MissingDefaultsError
from transcoder.model.derivative_kind import DerivativeKind
from transcoder.model.derivative_result import DerivativeResult, JobHandle, JobStatus
from transcoder.source import LocalPathResolver, LocalVolumeAsset
from transcoder.transcoder import Transcoder

__version__ = "1.0.0"

__all__ = [
    "ConfigManager",
    "DerivativeKind",
    "DerivativeResult",
    "JobHandle",
    "JobStatus",
    "LocalPathResolver",
    "LocalVolumeAsset",
    "MissingDefaultsError",
    "Transcoder",
    "TranscoderConfig",
    "TranscoderError",
    "UnsupportedSourceLocationError",
]
