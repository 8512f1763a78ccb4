import os
import shutil
from pathlib import Path

import pytest
from PIL import Image, features

WEBP_AVAILABLE = features.check("webp")
requires_webp = pytest.mark.skipif(not WEBP_AVAILABLE, reason="Pillow built without libwebp")


def gradient_image(width: int, height: int) -> Image.Image:
    img = Image.new("RGB", (width, height))
    img.putdata([
        ((x * 255) // width, (y * 255) // height, ((x + y) * 255) // (width + height))
        for y in range(height)
        for x in range(width)
    ])
    return img


def checkerboard_image(width: int, height: int, block: int = 8) -> Image.Image:
    img = Image.new("RGB", (width, height))
    img.putdata([
        (255, 255, 255) if ((x // block) + (y // block)) % 2 == 0 else (0, 0, 0)
        for y in range(height)
        for x in range(width)
    ])
    return img


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    # keep a developer's .env / shell settings out of the tests
    for name in list(os.environ):
        if name.startswith("JCOMPRESS_") or name == "LOG_LEVEL":
            monkeypatch.delenv(name, raising=False)


@pytest.fixture
def make_jpeg(tmp_path: Path):
    """Factory writing a gradient JPEG under tmp_path and returning its path."""

    def _make(name: str = "photo.jpg", width: int = 64, height: int = 48, quality: int = 95) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        gradient_image(width, height).save(path, format="JPEG", quality=quality)
        return path

    return _make


@pytest.fixture
def jpeg_file(make_jpeg) -> Path:
    return make_jpeg()


@pytest.fixture
def copy_as(tmp_path: Path):
    def _copy(src: Path, name: str) -> Path:
        dst = tmp_path / name
        shutil.copyfile(src, dst)
        return dst

    return _copy
