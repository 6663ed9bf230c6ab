from transcoder import Transcoder, LocalVolumeAsset
from transcoder.model.derivative_result import JobStatus


def test_uses_configured_settings_by_default(mock_app_config):
    assert Transcoder().config is mock_app_config


def test_video_url_is_empty_until_encoded(mock_app_config, fake_popen, source_video, dead_pid):
    transcoder = Transcoder()

    assert transcoder.get_video_url(source_video, {"width": 640, "height": 360}) == ""
    assert len(fake_popen.calls) == 1

    # Encoder has finished and left its output behind
    identity = transcoder.get_video_filename(source_video, {"width": 640, "height": 360})
    (mock_app_config.output_dir / identity).write_bytes(b"encoded")
    lock_path = transcoder.dispatcher.lock_manager.lock_path(identity)
    lock_path.write_text(str(dead_pid))

    url = transcoder.get_video_url(source_video, {"width": 640, "height": 360})

    assert url == "https://cdn.example.com/transcoded/movie_15fps_640w_360h_letterbox.mp4"
    assert len(fake_popen.calls) == 1
    assert not lock_path.exists()


def test_video_filename_uses_video_defaults(mock_app_config, source_video):
    assert Transcoder().get_video_filename(source_video, {}) == "movie_15fps_letterbox.mp4"


def test_missing_source_gives_empty_urls(mock_app_config, fake_popen, tmp_path):
    transcoder = Transcoder()

    assert transcoder.get_video_url(tmp_path / "nope.mov") == ""
    assert transcoder.get_video_thumbnail_url(tmp_path / "nope.mov") == ""
    assert transcoder.get_file_info(tmp_path / "nope.mov") is None
    assert fake_popen.calls == []


def test_thumbnail_wait_returns_url(mock_app_config, fake_popen, source_video, dead_pid):
    fake_popen.pid = dead_pid

    def extract(command):
        mock_app_config.output_dir.mkdir(parents=True, exist_ok=True)
        (mock_app_config.output_dir / "movie_200w_100h_letterbox_10s.jpg").write_bytes(b"jpeg")

    fake_popen.on_spawn = extract

    url = Transcoder().get_video_thumbnail_url(source_video, wait_seconds=1.0)

    assert url == "https://cdn.example.com/transcoded/movie_200w_100h_letterbox_10s.jpg"


def test_thumbnail_without_wait_is_pending(mock_app_config, fake_popen, source_video):
    transcoder = Transcoder()

    assert transcoder.get_video_thumbnail_url(source_video) == ""
    assert transcoder.thumbnail_status(source_video).status == JobStatus.PENDING


def test_asset_sources(mock_app_config, fake_popen, source_video):
    asset = LocalVolumeAsset(volume_path=source_video.parent.parent, folder_path="media", filename="movie.mov")
    mock_app_config.output_dir.mkdir()
    (mock_app_config.output_dir / "movie_15fps_letterbox.mp4").write_bytes(b"encoded")

    assert Transcoder().get_video_url(asset) == "https://cdn.example.com/transcoded/movie_15fps_letterbox.mp4"
    assert fake_popen.calls == []
