"""Exceptions raised by jcompress."""


class JCompressError(Exception):
    """Base exception for jcompress failures."""

    pass


class UsageError(JCompressError):
    """Bad flags or wrong number of positional arguments."""

    pass


class HelpRequested(Exception):
    """Raised by the argument parser when -h/--help was given. Not a failure."""

    pass


class ConfigError(JCompressError):
    """Malformed value in the environment or .env file."""

    pass


class ValidationError(JCompressError):
    pass


class UnsupportedFormat(ValidationError):
    """Input path does not carry a .jpg/.jpeg extension."""

    pass


class PathError(JCompressError):
    """Empty, unresolvable or otherwise invalid path."""

    pass


class DecodeError(JCompressError):
    pass


class EncodeError(JCompressError):
    pass


class WriteError(EncodeError):
    """Encoded data could not be written to its destination."""

    pass


class WebPUnsupported(JCompressError):
    """WebP encoding is not available with the installed imaging library."""

    pass
