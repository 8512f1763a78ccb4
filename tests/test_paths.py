import os
from pathlib import Path

import pytest

from errors import PathError, ValidationError
from paths import (
    clean_path,
    default_output_path,
    ensure_parent_dir,
    is_jpeg_path,
    resolve_output_location,
    webp_output_path,
)


@pytest.mark.parametrize(
    "src, expected",
    [
        ("photo.jpg", "photo_compressed.jpg"),
        ("dir/photo.JPEG", "dir/photo_compressed.JPEG"),
        ("/abs/path/a.b.jpg", "/abs/path/a.b_compressed.jpg"),
        ("noext", "noext_compressed"),
    ],
)
def test_default_output_path(src, expected):
    assert default_output_path(src) == expected


@pytest.mark.parametrize(
    "path, expected",
    [("a.jpg", True), ("a.JPEG", True), ("a.Jpg", True), ("a.png", False), ("a", False), ("a.jp", False), ("", False)],
)
def test_is_jpeg_path(path, expected):
    assert is_jpeg_path(path) is expected


def test_clean_path_collapses_dots():
    assert clean_path("a/./b/../c.jpg") == os.path.abspath("a/c.jpg")
    assert os.path.isabs(clean_path("x.jpg"))


@pytest.mark.parametrize("bad", ["", "   ", None, "bad\x00name.jpg"])
def test_clean_path_rejects(bad):
    with pytest.raises(PathError):
        clean_path(bad)


def test_file_mode_default():
    assert resolve_output_location("photo.jpg", None, "file") == os.path.abspath("photo_compressed.jpg")


def test_file_mode_explicit():
    assert resolve_output_location("photo.jpg", "out/../small.jpg", "file") == os.path.abspath("small.jpg")


def test_dir_mode_default():
    assert resolve_output_location("photo.jpg") == os.path.abspath(os.path.join("compressed", "photo.jpg"))


def test_dir_mode_keeps_base_name(tmp_path: Path):
    out = resolve_output_location("some/where/photo.jpg", str(tmp_path / "out"), "dir")
    assert out == str(tmp_path / "out" / "photo.jpg")


def test_dir_mode_traversal_is_normalized(tmp_path: Path):
    out = resolve_output_location("photo.jpg", str(tmp_path / "a" / ".." / "b"), "dir")
    assert out == str(tmp_path / "b" / "photo.jpg")


def test_dir_mode_without_file_name():
    with pytest.raises(PathError):
        resolve_output_location("somedir/", None, "dir")


def test_unknown_mode():
    with pytest.raises(ValidationError):
        resolve_output_location("photo.jpg", None, "zip")


def test_resolver_does_not_create_directories(tmp_path: Path):
    resolve_output_location("photo.jpg", str(tmp_path / "new"), "dir")
    assert not (tmp_path / "new").exists()


def test_webp_output_path():
    assert webp_output_path("/x/photo.jpg") == "/x/photo.webp"
    assert webp_output_path("/x/photo_compressed.JPEG") == "/x/photo_compressed.webp"


def test_ensure_parent_dir_creates(tmp_path: Path):
    target = tmp_path / "a" / "b" / "photo.jpg"
    assert ensure_parent_dir(str(target)) == str(tmp_path / "a" / "b")
    assert (tmp_path / "a" / "b").is_dir()


def test_ensure_parent_dir_without_create(tmp_path: Path):
    with pytest.raises(PathError, match="does not exist"):
        ensure_parent_dir(str(tmp_path / "missing" / "photo.jpg"), create=False)
    assert ensure_parent_dir(str(tmp_path / "photo.jpg"), create=False) == str(tmp_path)


def test_ensure_parent_dir_blocked_by_file(tmp_path: Path):
    (tmp_path / "file").write_text("x")
    with pytest.raises(PathError):
        ensure_parent_dir(str(tmp_path / "file" / "photo.jpg"))
