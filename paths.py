"""Output path derivation and cleaning.

Nothing in here touches image data. Only ``ensure_parent_dir`` has a side
effect on the filesystem.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

from errors import PathError, ValidationError

COMPRESSED_SUFFIX = "_compressed"
DEFAULT_OUTPUT_DIR = "compressed"
JPEG_EXTS = {".jpg", ".jpeg"}
MODES = ("dir", "file")

logger = logging.getLogger("jcompress.paths")


def is_jpeg_path(path: str) -> bool:
    return os.path.splitext(path or "")[1].lower() in JPEG_EXTS


def default_output_path(input_path: str) -> str:
    """photo.jpg -> photo_compressed.jpg, keeping directory and extension."""
    base, ext = os.path.splitext(input_path)
    return f"{base}{COMPRESSED_SUFFIX}{ext}"


def clean_path(path: str) -> str:
    """Collapse ``.``/``..`` segments and return the absolute form of path."""
    if path is None or not str(path).strip():
        raise PathError("path is empty")
    path = os.fspath(path)
    if "\x00" in path:
        raise PathError(f"path contains a NUL byte: {path!r}")
    try:
        cleaned = os.path.abspath(os.path.normpath(path))
    except (OSError, ValueError) as e:
        raise PathError(f"cannot resolve path {path!r}: {e}") from e
    if not cleaned:
        raise PathError(f"cannot resolve path {path!r}")
    return cleaned


def resolve_output_location(input_path: str, output: Optional[str] = None, mode: str = "dir") -> str:
    """Work out where the recompressed JPEG goes.

    In ``file`` mode ``output`` is the destination file itself and defaults to
    ``default_output_path(input_path)``. In ``dir`` mode ``output`` is a
    directory (default ``./compressed``) and the file keeps the input's name.
    """
    if mode == "file":
        target = output if output else default_output_path(input_path)
        return clean_path(target)
    if mode == "dir":
        name = os.path.basename(input_path or "")
        if not name:
            raise PathError(f"input path has no file name: {input_path!r}")
        directory = clean_path(output if output else DEFAULT_OUTPUT_DIR)
        return os.path.join(directory, name)
    raise ValidationError(f"mode must be one of {', '.join(MODES)} (got {mode!r})")


def webp_output_path(jpeg_output_path: str) -> str:
    base, _ = os.path.splitext(jpeg_output_path)
    return base + ".webp"


def ensure_parent_dir(path: str, create: bool = True) -> str:
    directory = os.path.dirname(clean_path(path))
    if create:
        try:
            os.makedirs(directory, exist_ok=True)
        except OSError as e:
            raise PathError(f"cannot create output directory {directory}: {e}") from e
        logger.debug("Output directory ready: %s", directory)
    elif not os.path.isdir(directory):
        raise PathError(f"output directory does not exist: {directory}")
    return directory
