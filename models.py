"""Conversion request/result models."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional

from errors import JCompressError, UnsupportedFormat, ValidationError
from paths import MODES, is_jpeg_path

MIN_QUALITY = 1
MAX_QUALITY = 100
DEFAULT_QUALITY = 50


@dataclass(frozen=True)
class ConversionRequest:
    """One validated invocation. Checked on construction, no I/O involved."""

    input_path: str
    output: Optional[str] = None
    quality: int = DEFAULT_QUALITY
    webp: bool = False
    mode: str = "dir"
    create_dirs: bool = True

    def __post_init__(self):
        if not isinstance(self.quality, int) or isinstance(self.quality, bool):
            raise ValidationError(f"quality must be an integer (got {self.quality!r})")
        if self.quality < MIN_QUALITY or self.quality > MAX_QUALITY:
            raise ValidationError(f"quality must be between {MIN_QUALITY} and {MAX_QUALITY}")
        if not is_jpeg_path(self.input_path):
            ext = os.path.splitext(self.input_path or "")[1]
            raise UnsupportedFormat(f"input file must be a JPEG image (got {ext or 'no extension'})")
        if self.mode not in MODES:
            raise ValidationError(f"mode must be one of {', '.join(MODES)} (got {self.mode!r})")


@dataclass
class ConversionResult:
    written_paths: list[str] = field(default_factory=list)
    error: Optional[JCompressError] = None

    @property
    def ok(self) -> bool:
        return self.error is None
