"""
Single-record cache over an ephemeris file.

Ephemeris access is overwhelmingly sequential in time, so exactly one
decoded coefficient record is kept in memory and replaced only when an
epoch falls into a different record.
"""

import logging
from typing import BinaryIO, Optional

import numpy as np

from .codec import ByteCodec
from .header import EphemerisHeader
from .logging import get_logger

# The header record and the constant-values record precede the data records
N_LEADING_RECORDS = 2


class RecordCache:
    """Owns the byte source and holds the currently loaded coefficient record."""

    def __init__(
        self,
        source: BinaryIO,
        header: EphemerisHeader,
        codec: Optional[ByteCodec] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.source = source
        self.header = header
        self.codec = codec or ByteCodec(header.byte_order)
        self.logger = logger or get_logger(__name__)
        self.record_index: Optional[int] = None
        self.coefficients: Optional[np.ndarray] = None
        self.loads = 0

    def record_offset(self, record_index: int) -> int:
        return (record_index + N_LEADING_RECORDS) * self.header.record_size

    def load(self, record_index: int) -> np.ndarray:
        """
        Return the coefficients of a data record, reading it if necessary.

        Args:
            record_index: 0-based index of the data record

        Returns:
            The record's coefficients as a float64 array

        Raises:
            SeekError: If the record cannot be positioned
            ReadError: If the record cannot be read in full
        """
        if record_index == self.record_index and self.coefficients is not None:
            return self.coefficients

        # Drop the old record first so a failed read leaves nothing stale behind
        self.record_index = None
        self.coefficients = None

        offset = self.record_offset(record_index)
        raw = self.codec.read_exact(
            self.source,
            offset,
            self.header.n_coeff_per_record * 8,
            f"coefficient record {record_index}",
        )
        self.coefficients = self.codec.double_array(raw)
        self.record_index = record_index
        self.loads += 1
        self.logger.debug(
            f"Loaded record {record_index} at offset {offset}: "
            f"covers JD {self.coefficients[0]} to {self.coefficients[1]}"
        )
        return self.coefficients
