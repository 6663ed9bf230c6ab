import logging
from typing import Any, Mapping, Optional

from transcoder import prober
from transcoder.config.app_config import ConfigManager, TranscoderConfig
from transcoder.dispatcher import JobDispatcher
from transcoder.filename_encoder import encode_filename
from transcoder.model.derivative_kind import DerivativeKind
from transcoder.model.derivative_result import DerivativeResult
from transcoder.option_resolver import coalesce_options
from transcoder.source import resolve_source_path

log = logging.getLogger(__name__)


class Transcoder:
    """
    Entry point for hosts that need web-ready derivatives of their videos.

    The URL methods return "" until the derivative exists and is fresh. Calling them
    again with the same arguments is how a caller finds out a job has finished.
    """

    def __init__(self, config: Optional[TranscoderConfig] = None, dispatcher: Optional[JobDispatcher] = None):
        self.config = config or ConfigManager.get_config()
        self.dispatcher = dispatcher or JobDispatcher(self.config)

    def get_video_url(self, source, video_options: Optional[Mapping[str, Any]] = None) -> str:
        return self.request_video(source, video_options).url

    def get_video_thumbnail_url(self,
                                source,
                                thumbnail_options: Optional[Mapping[str, Any]] = None,
                                wait_seconds: Optional[float] = None) -> str:
        """
        Thumbnails are quick to extract: with wait_seconds set, a freshly started
        job is awaited so the URL can be returned from the same call.
        """
        result = self.request_thumbnail(source, thumbnail_options)
        if result.is_done or result.handle is None or not wait_seconds:
            return result.url

        if not result.handle.wait(timeout=wait_seconds):
            log.info(f"Thumbnail {result.identity} not ready after {wait_seconds}s")
            return ""

        return self.thumbnail_status(source, thumbnail_options).url

    def request_video(self, source, video_options: Optional[Mapping[str, Any]] = None) -> DerivativeResult:
        return self.dispatcher.request(DerivativeKind.VIDEO, source, video_options)

    def request_thumbnail(self, source, thumbnail_options: Optional[Mapping[str, Any]] = None) -> DerivativeResult:
        return self.dispatcher.request(DerivativeKind.THUMBNAIL, source, thumbnail_options)

    def video_status(self, source, video_options: Optional[Mapping[str, Any]] = None) -> DerivativeResult:
        return self.dispatcher.status(DerivativeKind.VIDEO, source, video_options)

    def thumbnail_status(self, source, thumbnail_options: Optional[Mapping[str, Any]] = None) -> DerivativeResult:
        return self.dispatcher.status(DerivativeKind.THUMBNAIL, source, thumbnail_options)

    def get_file_info(self, source) -> Any | None:
        return prober.probe(self.config, source)

    def get_video_filename(self, source, video_options: Optional[Mapping[str, Any]] = None) -> str:
        options = coalesce_options(DerivativeKind.VIDEO, video_options, self.config)
        return encode_filename(resolve_source_path(source), options)
