"""
JPL DE and INPOP binary ephemeris reader.

This package decodes the header of a binary ephemeris file and evaluates
the Chebyshev coefficients it stores to give positions and velocities of
the Sun, Moon and planets, nutations, lunar librations and TT-TDB at any
epoch the file covers.
"""

from .ephemeris import (
    Body,
    HeaderField,
    Position,
    Velocity,
    Ephemeris,
    open_ephemeris,
    close_ephemeris,
    relative_state,
    header_field,
)
from .header import EphemerisHeader, HeaderDecoder, InterpolationParams, FormatVariant
from .constants import ConstantTable, read_constants
from .masses import BodyMass, planetary_masses
from .errors import (
    EphemerisError,
    EphemerisFileNotFoundError,
    SeekError,
    ReadError,
    FileCorruptError,
    InvalidBodyIndexError,
    QuantityUnavailableError,
    OutOfRangeError,
)

__all__ = [
    "Body",
    "HeaderField",
    "Position",
    "Velocity",
    "Ephemeris",
    "open_ephemeris",
    "close_ephemeris",
    "relative_state",
    "header_field",
    "EphemerisHeader",
    "HeaderDecoder",
    "InterpolationParams",
    "FormatVariant",
    "ConstantTable",
    "read_constants",
    "BodyMass",
    "planetary_masses",
    "EphemerisError",
    "EphemerisFileNotFoundError",
    "SeekError",
    "ReadError",
    "FileCorruptError",
    "InvalidBodyIndexError",
    "QuantityUnavailableError",
    "OutOfRangeError",
]
