import dataclasses

import pytest

from errors import UnsupportedFormat, ValidationError, WebPUnsupported
from models import ConversionRequest, ConversionResult


def test_valid_request_needs_no_io():
    req = ConversionRequest(input_path="does/not/exist.JPG", quality=1)
    assert req.mode == "dir"
    assert req.webp is False


@pytest.mark.parametrize("quality", [0, 101, -10, 999999])
def test_quality_out_of_range(quality):
    with pytest.raises(ValidationError, match="between 1 and 100"):
        ConversionRequest(input_path="a.jpg", quality=quality)


@pytest.mark.parametrize("quality", ["80", 5.5, True])
def test_quality_must_be_int(quality):
    with pytest.raises(ValidationError):
        ConversionRequest(input_path="a.jpg", quality=quality)


@pytest.mark.parametrize("path", ["a.png", "a", "", "a.jp"])
def test_extension(path):
    with pytest.raises(UnsupportedFormat):
        ConversionRequest(input_path=path)


def test_mode():
    with pytest.raises(ValidationError):
        ConversionRequest(input_path="a.jpg", mode="tar")


def test_request_is_frozen():
    req = ConversionRequest(input_path="a.jpg")
    with pytest.raises(dataclasses.FrozenInstanceError):
        req.quality = 10


def test_result():
    result = ConversionResult()
    assert result.ok
    assert result.written_paths == []
    result.error = WebPUnsupported("nope")
    assert not result.ok
