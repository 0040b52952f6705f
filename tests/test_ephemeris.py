"""Tests for the Ephemeris handle and module-level entry points."""

import io
import os
import shutil
import tempfile
import unittest
from unittest import mock

import numpy as np
from synthetic_ephemeris import (
    AU_KM,
    EMRAT,
    J2000,
    START,
    STEP,
    SyntheticEphemeris,
    body_position_au,
    tt_minus_tdb,
)

from dereader import (
    Body,
    Ephemeris,
    EphemerisError,
    EphemerisFileNotFoundError,
    FileCorruptError,
    HeaderField,
    close_ephemeris,
    header_field,
    open_ephemeris,
    relative_state,
)


class TestEphemeris(unittest.TestCase):
    """Test opening, querying and closing ephemeris files."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.path = SyntheticEphemeris(n_records=4).write(os.path.join(self.temp_dir, "de405.bin"))

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_open_path(self):
        with Ephemeris.open(self.path) as eph:
            self.assertEqual(eph.name, "DE405/LE405")
            self.assertEqual(eph.start, START)
            self.assertEqual(eph.end, START + 4 * STEP)
            self.assertEqual(eph.step, STEP)
            self.assertTrue(eph.owns_source)
        self.assertTrue(eph.closed)
        self.assertTrue(eph.source.closed)

    def test_missing_file(self):
        missing = os.path.join(self.temp_dir, "missing.bin")
        with self.assertRaises(EphemerisFileNotFoundError):
            Ephemeris.open(missing)
        # Also usable as a plain FileNotFoundError
        with self.assertRaises(FileNotFoundError):
            Ephemeris.open(missing)

    def test_corrupt_file_is_closed(self):
        """A file that fails to decode is closed before the error propagates."""
        stream = io.BytesIO(SyntheticEphemeris(emrat=90.0, n_records=1).build())
        with mock.patch("dereader.ephemeris.open", create=True, return_value=stream):
            with self.assertRaises(FileCorruptError):
                Ephemeris.open(self.path)
        self.assertTrue(stream.closed)

    def test_caller_stream_not_closed(self):
        stream = io.BytesIO(SyntheticEphemeris(n_records=1).build())
        eph = Ephemeris.open(stream)
        self.assertFalse(eph.owns_source)
        eph.close()
        self.assertFalse(stream.closed)

    def test_close_is_idempotent(self):
        eph = Ephemeris.open(self.path)
        eph.close()
        eph.close()
        self.assertTrue(eph.closed)

    def test_closed_handle_rejects_queries(self):
        eph = Ephemeris.open(self.path)
        eph.close()
        with self.assertRaises(ValueError):
            eph.relative_state(J2000, Body.MARS, Body.SUN)

    def test_relative_state(self):
        with Ephemeris.open(self.path) as eph:
            state = eph.relative_state(J2000, Body.SUN, Body.SOLAR_SYSTEM_BARYCENTER)
        np.testing.assert_allclose(state[:3], body_position_au(10, J2000), atol=1e-14)

    def test_calculate_pv(self):
        with Ephemeris.open(self.path) as eph:
            position, velocity = eph.calculate_pv(J2000, Body.EARTH_MOON_BARYCENTER, Body.SOLAR_SYSTEM_BARYCENTER)
            self.assertAlmostEqual(position.x, 1.0, places=10)
            self.assertAlmostEqual(position.distance(), 1.0, places=10)
            self.assertAlmostEqual(velocity.dy, 2.0 * np.pi / 365.25, places=10)

            position, velocity = eph.calculate_pv(J2000, Body.MARS, Body.SUN, velocity=False)
            self.assertEqual((velocity.dx, velocity.dy, velocity.dz), (0.0, 0.0, 0.0))

    def test_calculate_pv_quantity(self):
        """Quantity values fill the position and their rates the velocity."""
        with Ephemeris.open(self.path) as eph:
            position, velocity = eph.calculate_pv(J2000, Body.NUTATIONS, Body.EARTH)
        self.assertAlmostEqual(position.x, -6.75e-5, places=15)
        self.assertAlmostEqual(position.y, -2.8e-5, places=15)
        self.assertEqual(position.z, 0.0)
        self.assertAlmostEqual(velocity.dx, 1e-9, places=15)
        self.assertEqual(velocity.dz, 0.0)

    def test_calculate_pv_single_component_quantity(self):
        """TT-TDB lands in x and its rate in dx, not spread across the triples."""
        path = SyntheticEphemeris(version=430, n_records=2).write(
            os.path.join(self.temp_dir, "de430.bin")
        )
        with Ephemeris.open(path) as eph:
            position, velocity = eph.calculate_pv(J2000, Body.TT_TDB, Body.SOLAR_SYSTEM_BARYCENTER)
        self.assertAlmostEqual(position.x, float(tt_minus_tdb(J2000)[0]), places=15)
        self.assertEqual((position.y, position.z), (0.0, 0.0))
        self.assertAlmostEqual(velocity.dx, 2.0 * np.pi / 365.25 * 1.657e-3 / 86400.0, delta=1e-13)
        self.assertEqual((velocity.dy, velocity.dz), (0.0, 0.0))

    def test_header_field(self):
        with Ephemeris.open(self.path) as eph:
            self.assertEqual(eph.header_field(HeaderField.START_JD), START)
            self.assertEqual(eph.header_field(HeaderField.END_JD), START + 4 * STEP)
            self.assertEqual(eph.header_field(HeaderField.STEP), STEP)
            self.assertEqual(eph.header_field(HeaderField.N_CONSTANTS), 17)
            self.assertEqual(eph.header_field(HeaderField.AU_IN_KM), AU_KM)
            self.assertEqual(eph.header_field(HeaderField.EARTH_MOON_RATIO), EMRAT)
            self.assertEqual(eph.header_field(HeaderField.VERSION), 405)
            self.assertEqual(eph.header_field(HeaderField.KERNEL_SIZE), 2036)
            self.assertEqual(eph.header_field(HeaderField.RECORD_SIZE), 8144)
            self.assertEqual(eph.header_field(HeaderField.N_COEFF), 1018)
            self.assertEqual(eph.header_field(HeaderField.SWAP_BYTES), 0)
            # Moon row: offset, order, sub-intervals
            self.assertEqual(eph.header_field(HeaderField.IPT_ARRAY + 27), 441)
            self.assertEqual(eph.header_field(HeaderField.IPT_ARRAY + 28), 13)
            self.assertEqual(eph.header_field(HeaderField.IPT_ARRAY + 29), 8)
            self.assertEqual(eph.header_field(HeaderField.IPT_ARRAY + 44), 0)
            self.assertIsInstance(eph.header_field(HeaderField.VERSION), int)
            self.assertIsInstance(eph.header_field(HeaderField.STEP), float)

    def test_header_field_unknown(self):
        with Ephemeris.open(self.path) as eph:
            for code in (1, 89, 300, -4):
                with self.assertRaises(ValueError):
                    eph.header_field(code)

    def test_constants_loaded_lazily(self):
        with Ephemeris.open(self.path) as eph:
            self.assertIsNone(eph._constants)
            self.assertEqual(eph.constants["AU"], AU_KM)
        with Ephemeris.open(self.path, load_constants=True) as eph:
            self.assertIsNotNone(eph._constants)
            self.assertEqual(eph.constants["EMRAT"], EMRAT)

    def test_module_functions(self):
        eph = open_ephemeris(self.path)
        try:
            state = relative_state(eph, J2000, 10, 3, want_velocity=False)
            self.assertEqual(state.size, 3)
            self.assertEqual(header_field(eph, 232), 8144)
        finally:
            close_ephemeris(eph)
        self.assertTrue(eph.closed)

    def test_errors_share_base_class(self):
        with Ephemeris.open(self.path) as eph:
            with self.assertRaises(EphemerisError):
                eph.relative_state(START - 100.0, Body.MARS, Body.SUN)


class TestBody(unittest.TestCase):
    """Test body code parsing."""

    def test_parse(self):
        self.assertEqual(Body.parse("4"), Body.MARS)
        self.assertEqual(Body.parse("mars"), Body.MARS)
        self.assertEqual(Body.parse("Earth-Moon barycenter"), Body.EARTH_MOON_BARYCENTER)
        self.assertEqual(Body.parse("ssb"), Body.SOLAR_SYSTEM_BARYCENTER)
        self.assertEqual(Body.parse("emb"), Body.EARTH_MOON_BARYCENTER)
        self.assertEqual(Body.parse("tt-tdb"), Body.TT_TDB)

    def test_parse_invalid(self):
        with self.assertRaises(ValueError):
            Body.parse("vulcan")
        with self.assertRaises(ValueError):
            Body.parse("42")

    def test_labels(self):
        self.assertEqual(Body.SOLAR_SYSTEM_BARYCENTER.label, "Solar System Barycenter")
        self.assertEqual(Body.TT_TDB.label, "TT-TDB")
        self.assertTrue(Body.LIBRATIONS.is_quantity)
        self.assertFalse(Body.EARTH_MOON_BARYCENTER.is_quantity)


if __name__ == "__main__":
    unittest.main()
