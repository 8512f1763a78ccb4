"""WebP output, available only when Pillow was built against libwebp.

``get_webp_encoder`` picks the implementation once at startup. Without
libwebp (or with ``JCOMPRESS_WEBP=off``) every call raises
``WebPUnsupported`` so callers can tell a missing capability apart from a
failed encode.
"""
from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional

from PIL import Image, features

from compress import clamp_quality, decode_image, write_bytes
from errors import ConfigError, EncodeError, WebPUnsupported

WEBP_UNSUPPORTED_MESSAGE = (
    "WebP support is not available in this build (Pillow needs libwebp); "
    "reinstall Pillow with WebP support enabled to use --webp"
)
DEFAULT_METHOD = 4

logger = logging.getLogger("jcompress.webp")


def webp_available() -> bool:
    return bool(features.check("webp"))


def map_quality(quality: int) -> float:
    """Map the 1..100 JPEG-style scale onto libwebp's 0.0..100.0 lossy quality."""
    return float(clamp_quality(quality))


class WebPEncoder:
    supported = False

    def encode(self, image: Optional[Image.Image], output_path: str, quality: int) -> str:
        raise NotImplementedError

    def compress_file(self, input_path: str, output_path: str, quality: int) -> str:
        raise NotImplementedError


class NativeWebPEncoder(WebPEncoder):
    supported = True

    def __init__(self, method: int = DEFAULT_METHOD, atomic: bool = True):
        self.method = method
        self.atomic = atomic

    def encode(self, image: Optional[Image.Image], output_path: str, quality: int) -> str:
        if image is None:
            raise EncodeError("failed to encode WebP image: no image given")
        if image.mode not in ("RGB", "RGBA"):
            image = image.convert("RGBA" if image.mode in ("LA", "PA") or "transparency" in image.info else "RGB")
        buffer = BytesIO()
        try:
            image.save(buffer, format="WEBP", quality=map_quality(quality), method=self.method)
        except (OSError, ValueError) as e:
            raise EncodeError(f"failed to encode WebP image: {e}") from e
        logger.debug("Encoded WebP for %s (quality=%s, method=%s)", output_path, quality, self.method)
        return write_bytes(output_path, buffer.getvalue(), atomic=self.atomic)

    def compress_file(self, input_path: str, output_path: str, quality: int) -> str:
        image = decode_image(input_path)
        return self.encode(image, output_path, quality)


class UnsupportedWebPEncoder(WebPEncoder):
    """Stand-in used when WebP is unavailable. Never looks at its arguments."""

    def encode(self, image, output_path, quality):
        raise WebPUnsupported(WEBP_UNSUPPORTED_MESSAGE)

    def compress_file(self, input_path, output_path, quality):
        raise WebPUnsupported(WEBP_UNSUPPORTED_MESSAGE)


def get_webp_encoder(mode: str = "auto", method: int = DEFAULT_METHOD, atomic: bool = True) -> WebPEncoder:
    mode = (mode or "auto").lower()
    if mode == "off":
        return UnsupportedWebPEncoder()
    if mode == "auto":
        if webp_available():
            return NativeWebPEncoder(method=method, atomic=atomic)
        logger.debug("Pillow has no libwebp; WebP output disabled")
        return UnsupportedWebPEncoder()
    if mode == "on":
        if not webp_available():
            raise WebPUnsupported(WEBP_UNSUPPORTED_MESSAGE)
        return NativeWebPEncoder(method=method, atomic=atomic)
    raise ConfigError(f"WebP mode must be one of auto, on, off (got {mode!r})")


def encode_webp(image: Optional[Image.Image], output_path: str, quality: int) -> str:
    return get_webp_encoder().encode(image, output_path, quality)


def compress_file_to_webp(input_path: str, output_path: str, quality: int) -> str:
    return get_webp_encoder().compress_file(input_path, output_path, quality)
