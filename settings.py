"""Runtime configuration. Loads from environment and .env file."""
import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from errors import ConfigError
from models import DEFAULT_QUALITY, MAX_QUALITY, MIN_QUALITY
from paths import DEFAULT_OUTPUT_DIR, MODES

# Load .env from cwd; variables already set in the environment win
load_dotenv()

OUTPUT_MODES = MODES
WEBP_MODES = ("auto", "on", "off")

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger("jcompress")


@dataclass(frozen=True)
class Settings:
    quality: int = DEFAULT_QUALITY
    output_mode: str = "dir"
    output_dir: str = DEFAULT_OUTPUT_DIR
    create_dirs: bool = True
    atomic_writes: bool = True
    webp: str = "auto"
    webp_method: int = 4
    log_level: str = "WARNING"


def _get_int(name: str, default: int, low: int, high: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ConfigError(f"{name} must be an integer (got {raw!r})") from None
    if value < low or value > high:
        raise ConfigError(f"{name} must be between {low} and {high} (got {value})")
    return value


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ConfigError(f"{name} must be a boolean (got {raw!r})")


def _get_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = (os.getenv(name) or "").strip().lower()
    if not value:
        return default
    if value not in choices:
        raise ConfigError(f"{name} must be one of {', '.join(choices)} (got {value!r})")
    return value


def load_settings() -> Settings:
    """Read settings from the environment, falling back to defaults."""
    output_dir = (os.getenv("JCOMPRESS_OUTPUT_DIR") or "").strip() or Settings.output_dir
    log_level = (os.getenv("LOG_LEVEL") or Settings.log_level).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"LOG_LEVEL is not a logging level (got {log_level!r})")
    return Settings(
        quality=_get_int("JCOMPRESS_QUALITY", Settings.quality, MIN_QUALITY, MAX_QUALITY),
        output_mode=_get_choice("JCOMPRESS_OUTPUT_MODE", Settings.output_mode, OUTPUT_MODES),
        output_dir=output_dir,
        create_dirs=_get_bool("JCOMPRESS_CREATE_DIRS", Settings.create_dirs),
        atomic_writes=_get_bool("JCOMPRESS_ATOMIC_WRITES", Settings.atomic_writes),
        webp=_get_choice("JCOMPRESS_WEBP", Settings.webp, WEBP_MODES),
        webp_method=_get_int("JCOMPRESS_WEBP_METHOD", Settings.webp_method, 0, 6),
        log_level=log_level,
    )


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
