from __future__ import annotations

import contextlib
import logging
import os
import tempfile
from io import BytesIO
from typing import Optional

from PIL import Image

from errors import DecodeError, EncodeError, UnsupportedFormat, WriteError
from models import DEFAULT_QUALITY, MAX_QUALITY, MIN_QUALITY
from paths import default_output_path, is_jpeg_path

# Modes Pillow's JPEG writer takes as-is
JPEG_MODES = ("RGB", "L", "CMYK")
# Pillow reports multi-picture JPEGs as MPO
JPEG_FORMATS = ("JPEG", "MPO")

logger = logging.getLogger("jcompress.compress")


def clamp_quality(quality: int) -> int:
    return min(max(int(quality), MIN_QUALITY), MAX_QUALITY)


def _decode(path: str, label: str) -> tuple[Image.Image, Optional[str]]:
    try:
        fh = open(path, "rb")
    except OSError as e:
        raise DecodeError(f"failed to open input file: {e}") from e
    with fh:
        try:
            image = Image.open(fh)
            fmt = image.format
            # multi-picture files (MPO from phones/cameras): keep the primary frame
            if getattr(image, "n_frames", 1) > 1:
                image.seek(0)
                image.load()
                image = image.copy()
            else:
                image.load()
        except (OSError, SyntaxError, ValueError, EOFError, Image.DecompressionBombError) as e:
            raise DecodeError(f"failed to decode {label} {path}: {e}") from e
    logger.debug("Decoded %s: %s %sx%s", path, fmt, image.width, image.height)
    return image, fmt


def decode_image(path: str) -> Image.Image:
    """Open and fully load any raster Pillow can read. The file is closed on return."""
    return _decode(path, "image")[0]


def decode_jpeg(path: str) -> Image.Image:
    """Like decode_image, but the content itself must be JPEG, whatever the name says."""
    image, fmt = _decode(path, "JPEG image")
    if fmt not in JPEG_FORMATS:
        raise DecodeError(f"failed to decode JPEG image {path}: content is {fmt or 'unknown'}")
    return image


def flatten_for_jpeg(image: Image.Image) -> Image.Image:
    # JPEG can't have alpha
    if image.mode == "P" and "transparency" in image.info:
        image = image.convert("RGBA")
    if image.mode in ("RGBA", "LA"):
        bg = Image.new("RGB", image.size, (255, 255, 255))
        bg.paste(image, mask=image.split()[-1])
        return bg
    if image.mode not in JPEG_MODES:
        return image.convert("RGB")
    return image


def _default_file_mode() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_bytes(path: str, data: bytes, atomic: bool = True) -> str:
    """Write data to path, via a uniquely named temp file and a rename when atomic."""
    path = os.fspath(path)
    if not atomic:
        try:
            with open(path, "wb") as f:
                f.write(data)
        except OSError as e:
            raise WriteError(f"failed to write output file {path}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(data), path)
        return path

    directory, name = os.path.split(path)
    tmp_path = None
    try:
        fd, tmp_path = tempfile.mkstemp(dir=directory or ".", prefix=f".{name}.", suffix=".tmp")
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        # mkstemp creates 0600; give the result the mode a plain open() would
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None:
            with contextlib.suppress(OSError):
                os.remove(tmp_path)
        raise WriteError(f"failed to write output file {path}: {e}") from e
    logger.debug("Wrote %d bytes to %s", len(data), path)
    return path


class Compressor:
    """JPEG encoder bound to one quality value.

    The quality is clamped to 1..100 here and never changes afterwards, so a
    single instance can serve any number of conversions.
    """

    def __init__(self, quality: int = DEFAULT_QUALITY, atomic: bool = True):
        self._quality = clamp_quality(quality)
        self._atomic = atomic

    @property
    def quality(self) -> int:
        return self._quality

    def compress(self, image: Optional[Image.Image]) -> bytes:
        """Encode an in-memory raster and return the JPEG bytes."""
        if image is None:
            raise EncodeError("failed to encode JPEG image: no image given")
        buffer = BytesIO()
        try:
            flatten_for_jpeg(image).save(buffer, format="JPEG", quality=self._quality, optimize=True)
        except (OSError, ValueError) as e:
            raise EncodeError(f"failed to encode JPEG image: {e}") from e
        return buffer.getvalue()

    def save(self, image: Image.Image, output_path: str) -> str:
        data = self.compress(image)
        return write_bytes(output_path, data, atomic=self._atomic)

    def compress_file(self, input_path: str, output_path: Optional[str] = None) -> str:
        """Recompress a JPEG file. Returns the path written.

        The input is decoded completely before anything is written, so
        output_path may be input_path itself.
        """
        if not is_jpeg_path(input_path):
            ext = os.path.splitext(input_path or "")[1]
            raise UnsupportedFormat(f"input file must be a JPEG image (got {ext or 'no extension'})")
        image = decode_jpeg(input_path)
        if not output_path:
            output_path = default_output_path(input_path)
        logger.debug("Recompressing %s -> %s at quality %d", input_path, output_path, self._quality)
        return self.save(image, output_path)


def compress_jpeg(input_path: str, output_path: Optional[str], quality: int, atomic: bool = True) -> str:
    return Compressor(quality, atomic=atomic).compress_file(input_path, output_path)


def compress_to_bytes(image: Optional[Image.Image], quality: int) -> bytes:
    return Compressor(quality).compress(image)
