import logging
import shlex
from pathlib import Path
from typing import Any, Mapping

from transcoder.config.app_config import TranscoderConfig
from transcoder.model import option_keys
from transcoder.model.aspect_ratio_mode import AspectRatioMode
from transcoder.model.derivative_kind import DerivativeKind
from transcoder.option_resolver import is_requested

log = logging.getLogger(__name__)

VIDEO_CONTAINER_FORMAT = "mp4"
THUMBNAIL_CONTAINER_FORMAT = "image2"
SHARPEN_FILTER = "unsharp=5:5:1.0:5:5:0.0"


def build_command(kind: DerivativeKind,
                  config: TranscoderConfig,
                  source_path: Path,
                  options: Mapping[str, Any],
                  output_path: Path) -> list[str]:
    if kind == DerivativeKind.VIDEO:
        return build_video_command(config, source_path, options, output_path)
    if kind == DerivativeKind.THUMBNAIL:
        return build_thumbnail_command(config, source_path, options, output_path)
    raise ValueError(f"Unknown derivative kind: {kind}")


def build_video_command(config: TranscoderConfig,
                        source_path: Path,
                        options: Mapping[str, Any],
                        output_path: Path) -> list[str]:
    command = [
        config.encoder_path,
        '-i', str(source_path),

        '-vcodec', 'libx264',
        '-vprofile', 'high',
        '-preset', 'slow',
        '-crf', '22',

        '-c:a', 'copy',
        '-bufsize', '1000k',
        '-threads', '0',
    ]

    frame_rate = options.get(option_keys.FRAME_RATE)
    if is_requested(frame_rate):
        command += ['-r', _format_value(frame_rate)]

    bit_rate = options.get(option_keys.BIT_RATE)
    if is_requested(bit_rate):
        command += ['-b:v', _format_value(bit_rate), '-maxrate', _format_value(bit_rate)]

    command += scaling_arguments(options)

    command += [
        '-f', VIDEO_CONTAINER_FORMAT,
        '-y', str(output_path),
    ]

    return command


def build_thumbnail_command(config: TranscoderConfig,
                            source_path: Path,
                            options: Mapping[str, Any],
                            output_path: Path) -> list[str]:
    command = [
        config.encoder_path,
        '-i', str(source_path),

        '-vcodec', 'mjpeg',
        '-vframes', '1',
    ]

    command += scaling_arguments(options)

    time_in_secs = options.get(option_keys.TIME_IN_SECS)
    if is_requested(time_in_secs):
        command += ['-ss', format_timecode(time_in_secs)]

    command += [
        '-f', THUMBNAIL_CONTAINER_FORMAT,
        '-y', str(output_path),
    ]

    return command


def build_probe_command(config: TranscoderConfig, source_path: Path) -> list[str]:
    return [
        config.prober_path,
        *shlex.split(config.prober_options),
        str(source_path),
    ]


def scaling_arguments(options: Mapping[str, Any]) -> list[str]:
    """
    Compose the ``-vf`` scale filter graph.

    Only emitted when both width and height are requested. The graph is the scale
    with its dimensions, then the aspect ratio handling, then the optional sharpen filter.
    """
    width = options.get(option_keys.WIDTH)
    height = options.get(option_keys.HEIGHT)
    if not (is_requested(width) and is_requested(height)):
        return []

    width = _format_value(width)
    height = _format_value(height)

    mode = AspectRatioMode.parse(options.get(option_keys.ASPECT_RATIO))
    if mode == AspectRatioMode.LETTERBOX:
        letterbox_color = options.get(option_keys.LETTERBOX_COLOR)
        color_suffix = f":color={letterbox_color}" if is_requested(letterbox_color) else ""
        aspect_suffix = (
            ':force_original_aspect_ratio=decrease'
            f',pad={width}:{height}:(ow-iw)/2:(oh-ih)/2{color_suffix}'
        )
    elif mode == AspectRatioMode.CROP:
        aspect_suffix = f':force_original_aspect_ratio=increase,crop={width}:{height}'
    else:
        aspect_suffix = ':force_original_aspect_ratio=disable'

    sharpen_suffix = f",{SHARPEN_FILTER}" if is_requested(options.get(option_keys.SHARPEN)) else ""

    return ['-vf', f"scale={width}:{height}{aspect_suffix}{sharpen_suffix}"]


def format_timecode(seconds: Any) -> str:
    total_seconds = int(float(seconds))
    if total_seconds < 0:
        log.warning(f"Negative seek offset {seconds}s, seeking to the start instead")
        total_seconds = 0
    hours, remainder = divmod(total_seconds, 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}.00"


def _format_value(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
