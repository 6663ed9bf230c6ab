import json

import pytest

from transcoder import main


@pytest.fixture(autouse=True)
def no_log_files(monkeypatch):
    monkeypatch.setattr(main, "configure_logging", lambda *args, **kwargs: None)


@pytest.mark.parametrize("raw, expected", [
    ("640", 640),
    ("29.97", 29.97),
    ("true", True),
    ("False", False),
    ("letterbox", "letterbox"),
    ("1000k", "1000k"),
    ("", ""),
])
def test_parse_option_value(raw, expected):
    assert main.parse_option_value(raw) == expected


def test_parse_options():
    assert main.parse_options(["width=640", "aspectRatio=crop"]) == {"width": 640, "aspectRatio": "crop"}


def test_parse_options_rejects_bare_words():
    with pytest.raises(ValueError):
        main.parse_options(["width"])


def test_filename_command(mock_app_config, source_video, capsys):
    assert main.main(["filename", str(source_video), "width=640", "height=360", "aspectRatio=crop"]) == 0

    assert capsys.readouterr().out.strip() == "movie_15fps_640w_360h_crop.mp4"


def test_status_command(mock_app_config, source_video, capsys):
    assert main.main(["status", "video", str(source_video)]) == 0

    status = json.loads(capsys.readouterr().out)
    assert status["status"] == "absent"
    assert status["identity"] == "movie_15fps_letterbox.mp4"


def test_info_command_for_missing_file(mock_app_config, tmp_path, capsys):
    assert main.main(["info", str(tmp_path / "missing.mov")]) == 0

    assert capsys.readouterr().out.strip() == "null"


def test_bad_option_exits(mock_app_config, source_video):
    with pytest.raises(SystemExit):
        main.main(["video", str(source_video), "width"])
