"""
Named constants stored in an ephemeris file.

Names are 6-byte blank-padded strings: the first 400 follow the title
lines, the rest follow the numeric header. Values are doubles filling the
second record of the file.
"""

from dataclasses import dataclass
from functools import cached_property
from typing import BinaryIO, Dict, Iterator, List, Optional, Tuple

from .codec import ByteCodec
from .header import (
    CONSTANT_NAME_SIZE,
    EXTRA_CONSTANT_NAMES_OFFSET,
    N_FIXED_CONSTANT_NAMES,
    N_TITLE_LINES,
    TITLE_LINE_SIZE,
    EphemerisHeader,
)

FIXED_CONSTANT_NAMES_OFFSET = TITLE_LINE_SIZE * N_TITLE_LINES


def constant_name_offset(index: int) -> int:
    """File offset of the name of constant `index`."""
    if index < N_FIXED_CONSTANT_NAMES:
        return FIXED_CONSTANT_NAMES_OFFSET + index * CONSTANT_NAME_SIZE
    return EXTRA_CONSTANT_NAMES_OFFSET + (index - N_FIXED_CONSTANT_NAMES) * CONSTANT_NAME_SIZE


@dataclass(frozen=True)
class ConstantTable:
    """Constant names and values in file order."""

    names: Tuple[str, ...]
    values: Tuple[float, ...]

    def __post_init__(self) -> None:
        if len(self.names) != len(self.values):
            raise ValueError(
                f"{len(self.names)} constant names but {len(self.values)} values"
            )

    def __len__(self) -> int:
        return len(self.names)

    def __iter__(self) -> Iterator[Tuple[str, float]]:
        return iter(zip(self.names, self.values))

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.strip() in self._index

    def __getitem__(self, name: str) -> float:
        """Value of a constant by name, ignoring padding blanks."""
        return self.values[self._index[name.strip()]]

    @cached_property
    def _index(self) -> Dict[str, int]:
        # First occurrence wins when a file repeats a name
        index: Dict[str, int] = {}
        for i, name in enumerate(self.names):
            index.setdefault(name, i)
        return index

    def get(self, name: str, default: Optional[float] = None) -> Optional[float]:
        if name in self:
            return self[name]
        return default

    def name(self, index: int) -> str:
        if not 0 <= index < len(self.names):
            raise IndexError(f"Constant index {index} out of range 0-{len(self.names) - 1}")
        return self.names[index]

    def value(self, index: int) -> float:
        if not 0 <= index < len(self.values):
            raise IndexError(f"Constant index {index} out of range 0-{len(self.values) - 1}")
        return self.values[index]

    def as_dict(self) -> Dict[str, float]:
        return {name: self[name] for name in self.names}


def read_constant_names(source: BinaryIO, n_constants: int) -> List[str]:
    fixed = min(n_constants, N_FIXED_CONSTANT_NAMES)
    raw = ByteCodec.read_exact(
        source, FIXED_CONSTANT_NAMES_OFFSET, fixed * CONSTANT_NAME_SIZE, "constant names"
    )
    if n_constants > N_FIXED_CONSTANT_NAMES:
        raw += ByteCodec.read_exact(
            source,
            EXTRA_CONSTANT_NAMES_OFFSET,
            (n_constants - N_FIXED_CONSTANT_NAMES) * CONSTANT_NAME_SIZE,
            "extra constant names",
        )
    names = []
    for i in range(n_constants):
        chunk = raw[i * CONSTANT_NAME_SIZE : (i + 1) * CONSTANT_NAME_SIZE]
        names.append(chunk.split(b"\x00", 1)[0].decode("latin-1").strip())
    return names


def read_constants(
    source: BinaryIO, header: EphemerisHeader, codec: Optional[ByteCodec] = None
) -> ConstantTable:
    """
    Read every constant name and value from an ephemeris file.

    Args:
        source: Seekable binary stream of the ephemeris file
        header: The file's decoded header
        codec: Codec for the file's byte order; derived from the header if omitted

    Returns:
        The constant table

    Raises:
        SeekError, ReadError: If the names or values cannot be read
    """
    codec = codec or ByteCodec(header.byte_order)
    names = read_constant_names(source, header.n_constants)
    raw = ByteCodec.read_exact(
        source, header.record_size, header.n_constants * 8, "constant values"
    )
    values = codec.doubles(raw, header.n_constants)
    return ConstantTable(names=tuple(names), values=tuple(float(v) for v in values))
