"""
Open ephemeris files and query them.

    with Ephemeris.open("de405.bin") as eph:
        position, velocity = eph.calculate_pv(2451545.0, Body.MARS, Body.SUN)

An Ephemeris owns its byte source, a single-record cache and the
interpolation state. It is not safe to share one instance between threads.
"""

import logging
import os
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Optional, Tuple, Union

import numpy as np

from .chebyshev import ChebyshevInterpolator
from .codec import ByteCodec
from .constants import ConstantTable, read_constants
from .errors import EphemerisFileNotFoundError
from .header import N_IPT_ROWS, EphemerisHeader, HeaderDecoder
from .logging import get_logger
from .record_cache import RecordCache
from .relative import RelativeStateResolver
from .state import StateAssembler

Source = Union[str, "os.PathLike[str]", BinaryIO]


class Body(IntEnum):
    """Body and quantity codes accepted by relative_state."""

    MERCURY = 1
    VENUS = 2
    EARTH = 3
    MARS = 4
    JUPITER = 5
    SATURN = 6
    URANUS = 7
    NEPTUNE = 8
    PLUTO = 9
    MOON = 10
    SUN = 11
    SOLAR_SYSTEM_BARYCENTER = 12
    EARTH_MOON_BARYCENTER = 13
    NUTATIONS = 14
    LIBRATIONS = 15
    LUNAR_MANTLE_OMEGA = 16
    TT_TDB = 17

    @property
    def is_quantity(self) -> bool:
        """True for codes that name a stored quantity rather than a position."""
        return self >= Body.NUTATIONS

    @property
    def label(self) -> str:
        return self.name.replace("_", " ").title().replace("Tt Tdb", "TT-TDB")

    @classmethod
    def parse(cls, text: str) -> "Body":
        """
        Parse a body from a code or a name.

        Accepts "3", "earth", "Earth-Moon barycenter", "emb", "ssb", "tt-tdb".

        Raises:
            ValueError: If the text names no body
        """
        key = text.strip()
        if key.isdigit():
            return cls(int(key))
        key = key.upper().replace("-", "_").replace(" ", "_")
        aliases = {
            "SSB": cls.SOLAR_SYSTEM_BARYCENTER,
            "EMB": cls.EARTH_MOON_BARYCENTER,
            "TTTDB": cls.TT_TDB,
        }
        if key in aliases:
            return aliases[key]
        try:
            return cls[key]
        except KeyError:
            raise ValueError(f"Unknown body: {text}") from None


class HeaderField(IntEnum):
    """Header field codes accepted by header_field."""

    START_JD = 0
    END_JD = 8
    STEP = 16
    N_CONSTANTS = 24
    AU_IN_KM = 28
    EARTH_MOON_RATIO = 36
    IPT_ARRAY = 44
    VERSION = 224
    KERNEL_SIZE = 228
    RECORD_SIZE = 232
    N_COEFF = 236
    SWAP_BYTES = 240


N_IPT_VALUES = N_IPT_ROWS * 3


@dataclass(frozen=True)
class Position:
    """Position in AU."""

    x: float
    y: float
    z: float

    def distance(self) -> float:
        return float(np.sqrt(self.x * self.x + self.y * self.y + self.z * self.z))


@dataclass(frozen=True)
class Velocity:
    """Velocity in AU/day."""

    dx: float
    dy: float
    dz: float


class Ephemeris:
    """An open JPL DE / INPOP ephemeris file."""

    def __init__(
        self,
        source: BinaryIO,
        header: EphemerisHeader,
        owns_source: bool = False,
        constants: Optional[ConstantTable] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or get_logger(__name__)
        self.source = source
        self.header = header
        self.owns_source = owns_source
        self.codec = ByteCodec(header.byte_order)
        self.records = RecordCache(source, header, self.codec, self.logger)
        self.assembler = StateAssembler(
            header, self.records, ChebyshevInterpolator(self.logger), self.logger
        )
        self.resolver = RelativeStateResolver(self.assembler, self.logger)
        self._constants = constants
        self.closed = False

    @classmethod
    def open(
        cls,
        source: Source,
        load_constants: bool = False,
        logger: Optional[logging.Logger] = None,
    ) -> "Ephemeris":
        """
        Open an ephemeris file and decode its header.

        Args:
            source: Path to the file, or a seekable binary file object.
                A file object stays owned by the caller and is not closed.
            load_constants: Read and keep every constant name and value now
            logger: Logger used by every component of this handle

        Returns:
            The open ephemeris

        Raises:
            EphemerisFileNotFoundError: If the path cannot be opened
            SeekError, ReadError: If a header section cannot be read
            FileCorruptError: If the header is not a usable ephemeris header
        """
        logger = logger or get_logger(__name__)
        owns_source = isinstance(source, (str, os.PathLike))
        if owns_source:
            try:
                stream: BinaryIO = open(source, "rb")
            except OSError as e:
                raise EphemerisFileNotFoundError(
                    f"Cannot open ephemeris file {os.fspath(source)}: {e}"
                ) from e
        else:
            stream = source

        try:
            header = HeaderDecoder(logger).decode(stream)
            constants = None
            if load_constants:
                constants = read_constants(stream, header)
        except BaseException:
            if owns_source:
                stream.close()
            raise

        return cls(stream, header, owns_source=owns_source, constants=constants, logger=logger)

    def close(self) -> None:
        """Release the byte source. Calling close again does nothing."""
        if self.closed:
            return
        self.closed = True
        if self.owns_source:
            self.source.close()
            self.logger.debug(f"Closed {self.header.name or 'ephemeris'}")

    def __enter__(self) -> "Ephemeris":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _check_open(self) -> None:
        if self.closed:
            raise ValueError("I/O operation on closed ephemeris")

    @property
    def name(self) -> str:
        return self.header.name

    @property
    def start(self) -> float:
        return self.header.start

    @property
    def end(self) -> float:
        return self.header.end

    @property
    def step(self) -> float:
        return self.header.step

    @property
    def constants(self) -> ConstantTable:
        """Constant names and values, read on first use unless loaded at open."""
        if self._constants is None:
            self._check_open()
            self._constants = read_constants(self.source, self.header, self.codec)
        return self._constants

    def relative_state(
        self,
        epoch: float,
        target: Union[int, Body],
        center: Union[int, Body],
        want_velocity: bool = True,
    ) -> np.ndarray:
        """
        State of `target` relative to `center` at a Julian Ephemeris Date.

        See RelativeStateResolver.relative_state for codes and units.
        """
        self._check_open()
        return self.resolver.relative_state(float(epoch), int(target), int(center), want_velocity)

    def calculate_pv(
        self,
        epoch: float,
        target: Union[int, Body],
        center: Union[int, Body],
        velocity: bool = True,
    ) -> Tuple[Position, Velocity]:
        """
        Position and velocity of a body relative to a center.

        For quantity codes (nutations, librations, mantle rates, TT-TDB) the
        components fill x, y, z in order and their rates fill dx, dy, dz,
        padded with zeros: nutations give (psi, eps, 0) and (dpsi, deps, 0).
        This differs on purpose from packing the raw state six-wide across
        both triples, which would put nutation rates in z and dx.
        The velocity is zero when not requested.
        """
        state = self.relative_state(epoch, target, center, velocity)
        if Body.NUTATIONS <= int(target) <= Body.TT_TDB:
            half = state.size // 2 if velocity else state.size
            values = list(state[:half]) + [0.0] * (3 - half)
            rates = list(state[half:]) + [0.0] * (3 - (state.size - half))
        else:
            values = list(state[:3])
            rates = list(state[3:6]) if velocity else [0.0, 0.0, 0.0]
        return (
            Position(*(float(v) for v in values)),
            Velocity(*(float(v) for v in rates)),
        )

    def header_field(self, field: Union[int, HeaderField]) -> Union[float, int]:
        """
        Read a header field by code.

        IPT entries are addressed as HeaderField.IPT_ARRAY + i with i in
        0-44 (row i // 3, column i % 3).

        Raises:
            ValueError: If the code names no field
        """
        header = self.header
        doubles = {
            HeaderField.START_JD: header.start,
            HeaderField.END_JD: header.end,
            HeaderField.STEP: header.step,
            HeaderField.AU_IN_KM: header.au_km,
            HeaderField.EARTH_MOON_RATIO: header.emrat,
        }
        longs = {
            HeaderField.N_CONSTANTS: header.n_constants,
            HeaderField.VERSION: header.version,
            HeaderField.KERNEL_SIZE: header.kernel_size,
            HeaderField.RECORD_SIZE: header.record_size,
            HeaderField.N_COEFF: header.n_coeff_per_record,
            HeaderField.SWAP_BYTES: int(header.byte_swapped),
        }
        code = int(field)
        if code in doubles:
            return float(doubles[code])
        if code in longs:
            return int(longs[code])
        index = code - HeaderField.IPT_ARRAY
        if 0 <= index < N_IPT_VALUES:
            return int(header.ipt[index // 3].as_tuple()[index % 3])
        raise ValueError(f"Unknown header field code: {field}")


def open_ephemeris(
    source: Source, load_constants: bool = False, logger: Optional[logging.Logger] = None
) -> Ephemeris:
    """Open an ephemeris file; see Ephemeris.open."""
    return Ephemeris.open(source, load_constants=load_constants, logger=logger)


def close_ephemeris(ephemeris: Ephemeris) -> None:
    ephemeris.close()


def relative_state(
    ephemeris: Ephemeris,
    epoch: float,
    target: Union[int, Body],
    center: Union[int, Body],
    want_velocity: bool = True,
) -> np.ndarray:
    return ephemeris.relative_state(epoch, target, center, want_velocity)


def header_field(ephemeris: Ephemeris, field: Union[int, HeaderField]) -> Union[float, int]:
    return ephemeris.header_field(field)
