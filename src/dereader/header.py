"""
Header decoding for JPL DE / INPOP binary ephemeris files.

The header record of a DE file holds, in order:

- three 84-byte title lines (bytes 0-251)
- the names of the first 400 constants, 6 bytes each (bytes 252-2651)
- start, end and step epochs, constant count, AU and Earth/Moon mass ratio
  (bytes 2652-2695)
- the interpolation parameter table (IPT) for rows 0-12 (bytes 2696-2855)
- names of constants beyond the 400th, then IPT rows 13 and 14 for files
  of version 430 and later

Each IPT row locates one quantity's Chebyshev coefficients inside a data
record: (1-based offset, coefficients per component, sub-intervals per
record).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, List, Optional, Tuple

from .codec import ByteCodec
from .errors import FileCorruptError, SeekError
from .logging import get_logger

TITLE_LINE_SIZE = 84
N_TITLE_LINES = 3
CONSTANT_NAME_SIZE = 6
N_FIXED_CONSTANT_NAMES = 400

# Start of the numeric header: after the title lines and the first 400 names
NUMERIC_HEADER_OFFSET = TITLE_LINE_SIZE * N_TITLE_LINES + N_FIXED_CONSTANT_NAMES * CONSTANT_NAME_SIZE

# 5 doubles + 41 unsigned 32-bit integers (constant count and 40 IPT values)
NUMERIC_HEADER_SIZE = 5 * 8 + 41 * 4

# Names of constants 400 and above start right after the numeric header
EXTRA_CONSTANT_NAMES_OFFSET = NUMERIC_HEADER_OFFSET + NUMERIC_HEADER_SIZE

N_IPT_ROWS = 15
N_HEADER_IPT_VALUES = 40

# IPT rows with a fixed meaning
SUN_ROW = 10
NUTATIONS_ROW = 11
LIBRATIONS_ROW = 12
MANTLE_RATE_ROW = 13
TT_TDB_ROW = 14

# Versions from which rows 13 and 14 may follow the constant names
FIRST_VERSION_WITH_EXTRA_ROWS = 430

EMRAT_MIN = 81.30055
EMRAT_MAX = 81.3008

INPOP_PREFIX = b"INPOP"


class FormatVariant(Enum):
    """Title-line layout, resolved once when the file is opened."""

    CLASSIC = "classic"
    INPOP = "inpop"

    @classmethod
    def from_title(cls, title: bytes) -> "FormatVariant":
        if title.startswith(INPOP_PREFIX):
            return cls.INPOP
        return cls.CLASSIC

    @property
    def version_slice(self) -> slice:
        """Title bytes holding the version number."""
        if self is FormatVariant.INPOP:
            return slice(5, 30)
        return slice(26, 54)

    @property
    def name_slice(self) -> slice:
        """Title bytes holding the ephemeris name."""
        if self is FormatVariant.INPOP:
            return slice(0, 30)
        return slice(24, 54)


@dataclass(frozen=True)
class InterpolationParams:
    """One IPT row: where a quantity's coefficients live inside a record."""

    offset: int
    order: int
    n_subintervals: int

    @classmethod
    def zero(cls) -> "InterpolationParams":
        return cls(0, 0, 0)

    def as_tuple(self) -> Tuple[int, int, int]:
        return (self.offset, self.order, self.n_subintervals)

    @property
    def end(self) -> int:
        """1-based offset just past a three-component quantity's coefficients."""
        return self.offset + self.order * self.n_subintervals * 3


def quantity_dimension(row: int) -> int:
    """Number of components stored for an IPT row."""
    if row == NUTATIONS_ROW:
        return 2
    if row == TT_TDB_ROW:
        return 1
    return 3


@dataclass(frozen=True)
class EphemerisHeader:
    """Decoded header of an ephemeris file; immutable once the file is open."""

    start: float
    end: float
    step: float
    n_constants: int
    au_km: float
    emrat: float
    ipt: Tuple[InterpolationParams, ...]
    version: int
    byte_swapped: bool
    variant: FormatVariant
    name: str
    kernel_size: int
    record_size: int
    n_coeff_per_record: int

    def __post_init__(self) -> None:
        if len(self.ipt) != N_IPT_ROWS:
            raise ValueError(f"IPT must have {N_IPT_ROWS} rows, got {len(self.ipt)}")

    @property
    def byte_order(self) -> str:
        return ">" if self.byte_swapped else "<"

    def n_records(self) -> int:
        """Number of data records covering [start, end]."""
        return int(round((self.end - self.start) / self.step))


def compute_kernel_size(ipt: Tuple[InterpolationParams, ...]) -> int:
    """Record size in 4-byte units: 4 plus two per coefficient."""
    size = 4
    for row, params in enumerate(ipt):
        size += 2 * params.order * params.n_subintervals * quantity_dimension(row)
    return size


def parse_version(title: bytes, variant: FormatVariant) -> int:
    """
    Extract the ephemeris version number from the first title line.

    Raises:
        FileCorruptError: If no digits are found where the version should be
    """
    text = title[variant.version_slice].decode("latin-1").lstrip(" ")
    digits = ""
    for char in text:
        if not char.isdigit():
            break
        digits += char
    if not digits:
        raise FileCorruptError(f"Cannot parse ephemeris version from title {text!r}")
    return int(digits)


def parse_name(title: bytes, variant: FormatVariant) -> str:
    """First word of the name field of the title line."""
    name_bytes = title[variant.name_slice].split(b"\x00", 1)[0]
    words = name_bytes.decode("latin-1").split()
    return words[0] if words else ""


def _rows_from_values(values: List[int]) -> List[InterpolationParams]:
    rows = []
    for row in range(N_IPT_ROWS):
        triple = values[row * 3 : row * 3 + 3]
        triple += [0] * (3 - len(triple))
        rows.append(InterpolationParams(*triple))
    return rows


class HeaderDecoder:
    """Reads an ephemeris header from a seekable binary source."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or get_logger(__name__)

    def decode(self, source: BinaryIO) -> EphemerisHeader:
        """
        Decode the header of an ephemeris file.

        Args:
            source: Seekable binary stream positioned anywhere

        Returns:
            The decoded header

        Raises:
            SeekError: If positioning the stream fails
            ReadError: If a fixed header section cannot be read in full
            FileCorruptError: If the version or the mass ratio is unusable
        """
        title = ByteCodec.read_exact(source, 0, TITLE_LINE_SIZE, "title line")
        variant = FormatVariant.from_title(title)

        raw = ByteCodec.read_exact(
            source, NUMERIC_HEADER_OFFSET, NUMERIC_HEADER_SIZE, "numeric header"
        )
        codec = ByteCodec.detect(raw)
        if codec.swapped:
            self.logger.debug("Constant count implausible little-endian; reading big-endian")

        start, end, step = codec.doubles(raw, 3, 0)
        (n_constants,) = codec.uint32s(raw, 1, 24)
        au_km, emrat = codec.doubles(raw, 2, 28)
        values = list(codec.uint32s(raw, N_HEADER_IPT_VALUES, 44))

        version = parse_version(title, variant)
        name = parse_name(title, variant)

        # Librations are stored one slot later than the table layout implies
        values[36:39] = values[37:40]
        values[39:] = []

        if version >= FIRST_VERSION_WITH_EXTRA_ROWS and n_constants != N_FIXED_CONSTANT_NAMES:
            extra_offset = EXTRA_CONSTANT_NAMES_OFFSET + max(
                0, n_constants - N_FIXED_CONSTANT_NAMES
            ) * CONSTANT_NAME_SIZE
            extra = ByteCodec.read_exact(source, extra_offset, 6 * 4, "IPT rows 13 and 14")
            values += list(codec.uint32s(extra, 6))

        rows = _rows_from_values(values)
        if (
            rows[MANTLE_RATE_ROW].offset != rows[LIBRATIONS_ROW].end
            or rows[TT_TDB_ROW].offset != rows[MANTLE_RATE_ROW].end
        ):
            if any(rows[MANTLE_RATE_ROW].as_tuple()) or any(rows[TT_TDB_ROW].as_tuple()):
                self.logger.warning(
                    f"IPT rows 13/14 {rows[MANTLE_RATE_ROW].as_tuple()} "
                    f"{rows[TT_TDB_ROW].as_tuple()} fail the offset check; ignoring them"
                )
            rows[MANTLE_RATE_ROW] = InterpolationParams.zero()
            rows[TT_TDB_ROW] = InterpolationParams.zero()

        if emrat > EMRAT_MAX or emrat < EMRAT_MIN:
            raise FileCorruptError(f"Earth/Moon mass ratio out of range: {emrat}")

        ipt = tuple(rows)
        kernel_size = compute_kernel_size(ipt)
        record_size = kernel_size * 4

        if n_constants == N_FIXED_CONSTANT_NAMES:
            n_constants += self._count_extra_constant_names(source, record_size)

        header = EphemerisHeader(
            start=start,
            end=end,
            step=step,
            n_constants=n_constants,
            au_km=au_km,
            emrat=emrat,
            ipt=ipt,
            version=version,
            byte_swapped=codec.swapped,
            variant=variant,
            name=name,
            kernel_size=kernel_size,
            record_size=record_size,
            n_coeff_per_record=kernel_size // 2,
        )
        self.logger.info(
            f"Opened {header.name or 'ephemeris'} version {version}: "
            f"JD {start} to {end}, step {step} days, {header.n_coeff_per_record} "
            f"coefficients per record"
        )
        return header

    def _count_extra_constant_names(self, source: BinaryIO, record_size: int) -> int:
        """
        Count constant names stored past the 400th in files that report 400.

        A chunk counts while it is a full 6 bytes with no NUL and still lies
        inside the header record.
        """
        span = record_size - EXTRA_CONSTANT_NAMES_OFFSET
        if span < CONSTANT_NAME_SIZE:
            return 0
        try:
            source.seek(EXTRA_CONSTANT_NAMES_OFFSET)
        except (OSError, ValueError) as e:
            raise SeekError(f"Cannot seek to extra constant names: {e}") from e
        data = source.read(span) or b""

        count = 0
        for start in range(0, len(data) - CONSTANT_NAME_SIZE + 1, CONSTANT_NAME_SIZE):
            if b"\x00" in data[start : start + CONSTANT_NAME_SIZE]:
                break
            count += 1
        if count:
            self.logger.debug(f"Found {count} constant names beyond the first 400")
        return count


def decode_header(source: BinaryIO, logger: Optional[logging.Logger] = None) -> EphemerisHeader:
    """Decode the header of an ephemeris file."""
    return HeaderDecoder(logger).decode(source)
