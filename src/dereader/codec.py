"""
Fixed-width binary decoding for ephemeris files.

DE files are written in the byte order of the machine that produced them.
Little-endian is the default; big-endian files are recognised by probing
the constant count in the raw header bytes.
"""

import struct
from typing import BinaryIO, Tuple

import numpy as np

from .errors import ReadError, SeekError

LITTLE_ENDIAN = "<"
BIG_ENDIAN = ">"

# Byte order DE files are assumed to use unless the probe says otherwise
DEFAULT_BYTE_ORDER = LITTLE_ENDIAN

# Offset of the constant count inside the numeric header block
N_CONSTANTS_OFFSET = 24

# A constant count above this value only makes sense with the bytes reversed
MAX_PLAUSIBLE_CONSTANTS = 65536


class ByteCodec:
    """Decodes doubles and unsigned 32-bit integers in a declared byte order."""

    def __init__(self, byte_order: str = DEFAULT_BYTE_ORDER):
        if byte_order not in (LITTLE_ENDIAN, BIG_ENDIAN):
            raise ValueError(f"Unsupported byte order: {byte_order!r}")
        self.byte_order = byte_order
        self._double_dtype = np.dtype(byte_order + "f8")

    @property
    def swapped(self) -> bool:
        """True when the file's order differs from the default DE byte order."""
        return self.byte_order != DEFAULT_BYTE_ORDER

    @classmethod
    def detect(cls, raw_header: bytes) -> "ByteCodec":
        """
        Pick the byte order of a file from its raw numeric header.

        The constant count is decoded little-endian; a value above 65536 is
        taken to mean the file is big-endian. This is a historical heuristic,
        not a format signal, and is kept for compatibility.

        Args:
            raw_header: The numeric header bytes starting at offset 2652

        Returns:
            A codec for the detected byte order
        """
        (n_constants,) = struct.unpack_from(
            DEFAULT_BYTE_ORDER + "I", raw_header, N_CONSTANTS_OFFSET
        )
        if n_constants > MAX_PLAUSIBLE_CONSTANTS:
            return cls(BIG_ENDIAN)
        return cls(DEFAULT_BYTE_ORDER)

    def doubles(self, raw: bytes, count: int, offset: int = 0) -> Tuple[float, ...]:
        return struct.unpack_from(f"{self.byte_order}{count}d", raw, offset)

    def uint32s(self, raw: bytes, count: int, offset: int = 0) -> Tuple[int, ...]:
        return struct.unpack_from(f"{self.byte_order}{count}I", raw, offset)

    def double_array(self, raw: bytes) -> np.ndarray:
        """Decode a block of doubles into a native float64 array."""
        return np.frombuffer(raw, dtype=self._double_dtype).astype(np.float64)

    @staticmethod
    def read_exact(source: BinaryIO, offset: int, size: int, what: str) -> bytes:
        """
        Read exactly `size` bytes at absolute position `offset`.

        Args:
            source: Seekable binary stream
            offset: Absolute byte offset
            size: Number of bytes required
            what: Description of the section, used in error messages

        Returns:
            The bytes read

        Raises:
            SeekError: If the stream cannot be positioned
            ReadError: If the read fails or comes back short
        """
        try:
            source.seek(offset)
        except (OSError, ValueError) as e:
            raise SeekError(f"Cannot seek to {what} at offset {offset}: {e}") from e
        try:
            data = source.read(size)
        except (OSError, ValueError) as e:
            raise ReadError(f"Cannot read {what} at offset {offset}: {e}") from e
        if data is None or len(data) != size:
            got = 0 if data is None else len(data)
            raise ReadError(
                f"Short read of {what} at offset {offset}: expected {size} bytes, got {got}"
            )
        return data
