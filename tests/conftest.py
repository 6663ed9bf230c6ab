import os
import subprocess
import sys
import time
from pathlib import Path
from types import SimpleNamespace

import pytest

from transcoder import dispatcher
from transcoder.config.app_config import TranscoderConfig, ConfigManager

DEFAULT_VIDEO_OPTIONS = {
    "fileSuffix": ".mp4",
    "bitRate": "",
    "frameRate": 15,
    "width": "",
    "height": "",
    "sharpen": True,
    "aspectRatio": "letterbox",
    "letterboxColor": "",
}

DEFAULT_THUMBNAIL_OPTIONS = {
    "fileSuffix": ".jpg",
    "timeInSecs": 10,
    "width": 200,
    "height": 100,
    "sharpen": True,
    "aspectRatio": "letterbox",
    "letterboxColor": "",
}


class PopenRecorder:
    """Stands in for subprocess.Popen so no encoder binary is needed."""

    def __init__(self, pid: int):
        self.pid = pid
        self.calls = []
        self.error = None
        self.on_spawn = None

    def __call__(self, command, **kwargs):
        if self.error is not None:
            raise self.error
        self.calls.append((command, kwargs))
        if self.on_spawn is not None:
            self.on_spawn(command)
        return SimpleNamespace(pid=self.pid)


@pytest.fixture
def transcoder_config(tmp_path) -> TranscoderConfig:
    temp_dir = tmp_path / "tmp"
    temp_dir.mkdir()

    return TranscoderConfig(
        encoder_path="ffmpeg",
        prober_path="ffprobe",
        prober_options="-v quiet -print_format json -show_format -show_streams",
        output_dir=tmp_path / "transcoded",
        output_url_prefix="https://cdn.example.com/transcoded/",
        temp_dir=temp_dir,
        default_video_options=dict(DEFAULT_VIDEO_OPTIONS),
        default_thumbnail_options=dict(DEFAULT_THUMBNAIL_OPTIONS),
        lock_timeout_seconds=5.0,
        stale_lock_seconds=0,
    )


@pytest.fixture
def mock_app_config(monkeypatch, transcoder_config) -> TranscoderConfig:
    monkeypatch.setattr(ConfigManager, "get_config", lambda: transcoder_config)
    return transcoder_config


@pytest.fixture
def source_video(tmp_path) -> Path:
    source_dir = tmp_path / "media"
    source_dir.mkdir()
    video = source_dir / "movie.mov"
    video.write_bytes(b"\x00\x00\x00\x18ftypqt  ")

    an_hour_ago = time.time() - 3600
    os.utime(video, (an_hour_ago, an_hour_ago))
    return video


@pytest.fixture
def fake_popen(monkeypatch) -> PopenRecorder:
    # The running test process plays a live encoder
    recorder = PopenRecorder(pid=os.getpid())
    monkeypatch.setattr(dispatcher, "subprocess", SimpleNamespace(
        Popen=recorder,
        DEVNULL=subprocess.DEVNULL,
        STDOUT=subprocess.STDOUT,
    ))
    return recorder


@pytest.fixture
def dead_pid() -> int:
    process = subprocess.Popen([sys.executable, "-c", "pass"])
    process.wait()
    return process.pid
