"""
Exceptions raised by the dereader package.

All of them derive from EphemerisError so callers can catch the whole
family at once. None of them are retried internally: they describe either
a permanent defect of the file or a bad request.
"""


class EphemerisError(Exception):
    """Base class for every error raised while reading an ephemeris."""

    pass


class EphemerisFileNotFoundError(EphemerisError, FileNotFoundError):
    """Raised when the ephemeris file does not exist or cannot be opened."""

    pass


class SeekError(EphemerisError):
    """Raised when seeking inside the ephemeris file fails."""

    pass


class ReadError(EphemerisError):
    """Raised when a read fails or returns fewer bytes than required."""

    pass


class FileCorruptError(EphemerisError):
    """Raised when the header holds values no real ephemeris can have."""

    pass


class InvalidBodyIndexError(EphemerisError):
    """Raised for target or center codes outside the supported range."""

    pass


class QuantityUnavailableError(EphemerisError):
    """Raised when the file carries no coefficients for a requested quantity."""

    pass


class OutOfRangeError(EphemerisError):
    """Raised when the epoch lies outside the ephemeris time span."""

    pass
