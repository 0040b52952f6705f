"""Tests for ephemeris header decoding."""

import io
import struct
import unittest

from synthetic_ephemeris import (
    AU_KM,
    DE405_IPT,
    DE430_EXTRA_IPT,
    EMRAT,
    START,
    STEP,
    SyntheticEphemeris,
)

from dereader.errors import FileCorruptError, ReadError
from dereader.header import (
    MANTLE_RATE_ROW,
    TT_TDB_ROW,
    FormatVariant,
    HeaderDecoder,
    InterpolationParams,
    compute_kernel_size,
    parse_name,
    parse_version,
    quantity_dimension,
)


class TestHeaderDecoder(unittest.TestCase):
    """Test decoding of DE405 and DE430 style headers."""

    def decode(self, synthetic):
        return HeaderDecoder().decode(io.BytesIO(synthetic.build()))

    def test_de405_header(self):
        """Numeric fields, IPT and record geometry of a DE405 layout."""
        header = self.decode(SyntheticEphemeris(n_records=2))
        self.assertEqual(header.start, START)
        self.assertEqual(header.end, START + 2 * STEP)
        self.assertEqual(header.step, STEP)
        self.assertEqual(header.au_km, AU_KM)
        self.assertEqual(header.emrat, EMRAT)
        self.assertEqual(header.version, 405)
        self.assertEqual(header.name, "DE405/LE405")
        self.assertEqual(header.variant, FormatVariant.CLASSIC)
        self.assertFalse(header.byte_swapped)
        self.assertEqual(header.kernel_size, 2036)
        self.assertEqual(header.record_size, 8144)
        self.assertEqual(header.n_coeff_per_record, 1018)
        self.assertEqual(header.n_records(), 2)
        for row, expected in enumerate(DE405_IPT):
            self.assertEqual(header.ipt[row].as_tuple(), expected)

    def test_librations_shift(self):
        """Librations come from the three values after the DENUM slot."""
        header = self.decode(SyntheticEphemeris(n_records=1))
        self.assertEqual(header.ipt[12].as_tuple(), (899, 10, 4))

    def test_pre_430_has_no_extra_rows(self):
        header = self.decode(SyntheticEphemeris(n_records=1))
        self.assertEqual(header.ipt[MANTLE_RATE_ROW], InterpolationParams.zero())
        self.assertEqual(header.ipt[TT_TDB_ROW], InterpolationParams.zero())

    def test_de430_extra_rows(self):
        """Rows 13 and 14 are read after the constant names in version 430 files."""
        header = self.decode(SyntheticEphemeris(version=430, n_records=1))
        self.assertEqual(header.ipt[MANTLE_RATE_ROW].as_tuple(), DE430_EXTRA_IPT[0])
        self.assertEqual(header.ipt[TT_TDB_ROW].as_tuple(), DE430_EXTRA_IPT[1])
        self.assertEqual(header.kernel_size, 2484)
        self.assertEqual(header.n_coeff_per_record, 1242)

    def test_de430_rows_after_extra_names(self):
        """With more than 400 constants the rows follow the extra names."""
        constants = [(f"C{i:04d}", float(i)) for i in range(405)]
        header = self.decode(
            SyntheticEphemeris(version=430, n_records=1, constants=constants)
        )
        self.assertEqual(header.n_constants, 405)
        self.assertEqual(header.ipt[TT_TDB_ROW].as_tuple(), DE430_EXTRA_IPT[1])

    def test_inconsistent_extra_rows_are_zeroed(self):
        """Rows 13/14 that do not follow on from row 12 are discarded."""
        data = bytearray(SyntheticEphemeris(version=430, n_records=1).build())
        # Rows 13/14 stored one coefficient too late; row 12 ends at 1019
        data[2856 : 2856 + 24] = struct.pack("<6I", 1020, 10, 4, 1140, 13, 8)
        with self.assertLogs("dereader.header", level="WARNING"):
            header = HeaderDecoder().decode(io.BytesIO(bytes(data)))
        self.assertEqual(header.ipt[MANTLE_RATE_ROW], InterpolationParams.zero())
        self.assertEqual(header.ipt[TT_TDB_ROW], InterpolationParams.zero())
        self.assertEqual(header.kernel_size, 2036)

    def test_big_endian(self):
        header = self.decode(SyntheticEphemeris(byte_order=">", n_records=1))
        self.assertTrue(header.byte_swapped)
        self.assertEqual(header.byte_order, ">")
        self.assertEqual(header.start, START)
        self.assertEqual(header.ipt[9].as_tuple(), (441, 13, 8))

    def test_inpop_title(self):
        header = self.decode(SyntheticEphemeris(version=10, inpop=True, n_records=1))
        self.assertEqual(header.variant, FormatVariant.INPOP)
        self.assertEqual(header.version, 10)
        self.assertEqual(header.name, "INPOP10a")

    def test_emrat_out_of_range(self):
        with self.assertRaises(FileCorruptError):
            self.decode(SyntheticEphemeris(emrat=81.4, n_records=1))
        with self.assertRaises(FileCorruptError):
            self.decode(SyntheticEphemeris(emrat=81.3, n_records=1))

    def test_emrat_bounds_are_inclusive(self):
        self.assertEqual(self.decode(SyntheticEphemeris(emrat=81.30055, n_records=1)).emrat, 81.30055)
        self.assertEqual(self.decode(SyntheticEphemeris(emrat=81.3008, n_records=1)).emrat, 81.3008)

    def test_truncated_file(self):
        data = SyntheticEphemeris(n_records=1).build()[:1000]
        with self.assertRaises(ReadError):
            HeaderDecoder().decode(io.BytesIO(data))

    def test_extra_constant_names_counted(self):
        """A file reporting exactly 400 constants may store more names."""
        constants = [(f"C{i:04d}", float(i)) for i in range(403)]
        header = self.decode(
            SyntheticEphemeris(n_records=1, constants=constants, reported_n_constants=400)
        )
        self.assertEqual(header.n_constants, 403)

    def test_exactly_400_constants(self):
        constants = [(f"C{i:04d}", float(i)) for i in range(400)]
        header = self.decode(SyntheticEphemeris(n_records=1, constants=constants))
        self.assertEqual(header.n_constants, 400)


class TestHeaderHelpers(unittest.TestCase):
    """Test title parsing and record geometry helpers."""

    def title(self, text):
        return text.encode("ascii").ljust(84, b" ")

    def test_parse_version(self):
        self.assertEqual(
            parse_version(self.title("JPL Planetary Ephemeris DE440/LE440"), FormatVariant.CLASSIC),
            440,
        )
        self.assertEqual(parse_version(self.title("INPOP19a"), FormatVariant.INPOP), 19)

    def test_parse_version_without_digits(self):
        with self.assertRaises(FileCorruptError):
            parse_version(self.title("JPL Planetary Ephemeris XXXXX"), FormatVariant.CLASSIC)

    def test_parse_name(self):
        self.assertEqual(
            parse_name(self.title("JPL Planetary Ephemeris DE405/LE405"), FormatVariant.CLASSIC),
            "DE405/LE405",
        )
        self.assertEqual(parse_name(self.title(""), FormatVariant.CLASSIC), "")

    def test_variant_from_title(self):
        self.assertEqual(FormatVariant.from_title(b"INPOP10e"), FormatVariant.INPOP)
        self.assertEqual(FormatVariant.from_title(b"JPL Planetary"), FormatVariant.CLASSIC)

    def test_quantity_dimension(self):
        self.assertEqual(quantity_dimension(0), 3)
        self.assertEqual(quantity_dimension(11), 2)
        self.assertEqual(quantity_dimension(12), 3)
        self.assertEqual(quantity_dimension(14), 1)

    def test_kernel_size(self):
        rows = [InterpolationParams(*row) for row in DE405_IPT]
        rows += [InterpolationParams.zero()] * 2
        self.assertEqual(compute_kernel_size(tuple(rows)), 2036)

    def test_params_end(self):
        self.assertEqual(InterpolationParams(899, 10, 4).end, 1019)


if __name__ == "__main__":
    unittest.main()
