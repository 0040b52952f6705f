"""Tests for reading the constant table."""

import io
import unittest

from synthetic_ephemeris import AU_KM, EMRAT, SyntheticEphemeris

from dereader.constants import ConstantTable, constant_name_offset, read_constants
from dereader.header import HeaderDecoder


def read(synthetic):
    source = io.BytesIO(synthetic.build())
    header = HeaderDecoder().decode(source)
    return read_constants(source, header)


class TestReadConstants(unittest.TestCase):
    """Test reading constant names and values from files."""

    def test_default_constants(self):
        table = read(SyntheticEphemeris(n_records=1))
        self.assertEqual(len(table), 17)
        self.assertEqual(table.name(0), "DENUM")
        self.assertEqual(table.value(0), 405.0)
        self.assertEqual(table["AU"], AU_KM)
        self.assertEqual(table["EMRAT  "], EMRAT)
        self.assertIn("GMS", table)
        self.assertNotIn("GM3", table)

    def test_big_endian_values(self):
        table = read(SyntheticEphemeris(byte_order=">", n_records=1))
        self.assertEqual(table["AU"], AU_KM)

    def test_names_beyond_400(self):
        constants = [(f"C{i:04d}", float(i) * 0.5) for i in range(410)]
        table = read(SyntheticEphemeris(n_records=1, constants=constants))
        self.assertEqual(len(table), 410)
        self.assertEqual(table.name(399), "C0399")
        self.assertEqual(table.name(400), "C0400")
        self.assertEqual(table["C0409"], 204.5)

    def test_reported_400_with_more_names(self):
        constants = [(f"C{i:04d}", float(i)) for i in range(402)]
        table = read(SyntheticEphemeris(n_records=1, constants=constants, reported_n_constants=400))
        self.assertEqual(len(table), 402)
        self.assertEqual(table["C0401"], 401.0)

    def test_name_offsets(self):
        self.assertEqual(constant_name_offset(0), 252)
        self.assertEqual(constant_name_offset(399), 252 + 399 * 6)
        self.assertEqual(constant_name_offset(400), 2856)
        self.assertEqual(constant_name_offset(402), 2868)


class TestConstantTable(unittest.TestCase):
    """Test lookups on a constant table."""

    def setUp(self):
        self.table = ConstantTable(names=("AU", "EMRAT", "AU"), values=(1.0, 2.0, 3.0))

    def test_first_name_wins(self):
        self.assertEqual(self.table["AU"], 1.0)
        self.assertEqual(self.table.as_dict(), {"AU": 1.0, "EMRAT": 2.0})

    def test_get(self):
        self.assertEqual(self.table.get("EMRAT"), 2.0)
        self.assertIsNone(self.table.get("GMS"))
        self.assertEqual(self.table.get("GMS", 0.0), 0.0)

    def test_missing_name(self):
        with self.assertRaises(KeyError):
            self.table["GMS"]

    def test_index_out_of_range(self):
        with self.assertRaises(IndexError):
            self.table.name(3)
        with self.assertRaises(IndexError):
            self.table.value(-1)

    def test_iteration(self):
        self.assertEqual(list(self.table), [("AU", 1.0), ("EMRAT", 2.0), ("AU", 3.0)])

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            ConstantTable(names=("AU",), values=())


if __name__ == "__main__":
    unittest.main()
