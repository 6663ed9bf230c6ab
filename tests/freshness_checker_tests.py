import os
import time

from transcoder.freshness_checker import is_reusable


def _touch(path, mtime):
    path.write_bytes(b"data")
    os.utime(path, (mtime, mtime))


def test_missing_derivative_is_not_reusable(tmp_path):
    source = tmp_path / "movie.mov"
    _touch(source, time.time())

    assert not is_reusable(source, tmp_path / "movie.mp4")


def test_newer_derivative_is_reusable(tmp_path):
    now = time.time()
    source = tmp_path / "movie.mov"
    derivative = tmp_path / "movie.mp4"
    _touch(source, now - 100)
    _touch(derivative, now)

    assert is_reusable(source, derivative)


def test_same_mtime_is_reusable(tmp_path):
    now = time.time()
    source = tmp_path / "movie.mov"
    derivative = tmp_path / "movie.mp4"
    _touch(source, now)
    _touch(derivative, now)

    assert is_reusable(source, derivative)


def test_older_derivative_is_stale(tmp_path):
    now = time.time()
    source = tmp_path / "movie.mov"
    derivative = tmp_path / "movie.mp4"
    _touch(source, now)
    _touch(derivative, now - 100)

    assert not is_reusable(source, derivative)
