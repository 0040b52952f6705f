"""
Assembly of body states for one epoch.

A state call interpolates every requested quantity from the record that
covers the epoch and collects the results in a 13x6 body table. The Sun is
always evaluated (position, velocity and acceleration) because every
heliocentric or barycentric correction needs it; its vector is cached by
epoch independently of the record cache.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np

from .chebyshev import (
    POSITION_VELOCITY,
    POSITION_VELOCITY_ACCELERATION,
    ChebyshevInterpolator,
)
from .errors import OutOfRangeError
from .header import SUN_ROW, EphemerisHeader, quantity_dimension
from .logging import get_logger
from .record_cache import RecordCache

# Request mask slots
MERCURY = 0
VENUS = 1
EMB = 2
MARS = 3
JUPITER = 4
SATURN = 5
URANUS = 6
NEPTUNE = 7
PLUTO = 8
MOON = 9
NUTATIONS = 10
LIBRATIONS = 11
MANTLE_RATE = 12
TT_TDB = 13

N_REQUEST_SLOTS = 14
N_BODY_ROWS = 13
N_STATE_COMPONENTS = 6
N_SPECIAL_COMPONENTS = 6
N_SUN_COMPONENTS = 9

# Slots 0-9 hold bodies stored in km; the rest are angles or times
N_BODY_SLOTS = 10
# Bodies the Sun is subtracted from in heliocentric output (Mercury to Pluto)
N_PLANET_SLOTS = 9

# The Sun is evaluated as a fifteenth pseudo-slot after the 14 request slots
SUN_SLOT = N_REQUEST_SLOTS

SKIP = 0

SUBINTERVAL_GRANULARITIES = (1, 2, 4, 8)

NO_EPOCH = -1e80


def ipt_row_for_slot(slot: int) -> int:
    """IPT row holding the coefficients for a request slot."""
    if slot == SUN_SLOT:
        return SUN_ROW
    if slot < N_BODY_SLOTS:
        return slot
    return slot + 1


@dataclass
class StateResult:
    """Output of one state call."""

    bodies: np.ndarray
    special: np.ndarray
    sun: np.ndarray


class StateAssembler:
    """Interpolates requested quantities for an epoch."""

    def __init__(
        self,
        header: EphemerisHeader,
        records: RecordCache,
        interpolator: Optional[ChebyshevInterpolator] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.header = header
        self.records = records
        self.logger = logger or get_logger(__name__)
        self.interpolator = interpolator or ChebyshevInterpolator(self.logger)
        self.sun = np.zeros(N_SUN_COMPONENTS)
        self.sun_epoch = NO_EPOCH

    def locate(self, epoch: float):
        """
        Find the record and in-record fraction for an epoch.

        The fraction follows a (0, 1] convention: an epoch on a record
        boundary belongs to the end of the previous record, except at the
        very start of the file.

        Raises:
            OutOfRangeError: If the epoch lies outside [start, end]
        """
        header = self.header
        if not header.start <= epoch <= header.end:
            raise OutOfRangeError(
                f"Epoch {epoch} outside ephemeris range [{header.start}, {header.end}]"
            )
        block = (epoch - header.start) / header.step
        record = int(block)
        fraction = block - record
        if fraction == 0.0 and record != 0:
            fraction = 1.0
            record -= 1
        return record, fraction

    def compute_state(
        self, epoch: float, request_mask: Sequence[int], barycentric: bool
    ) -> StateResult:
        """
        Interpolate the requested quantities at an epoch.

        Args:
            epoch: Julian Ephemeris Date
            request_mask: 14 entries, 0 = skip, 1 = position, 2 = position and velocity;
                slots are Mercury, Venus, EMB, Mars, Jupiter, Saturn, Uranus,
                Neptune, Pluto, geocentric Moon, nutations, librations,
                lunar mantle rate, TT-TDB
            barycentric: Keep planets relative to the solar system barycenter;
                when false the Sun is subtracted from Mercury to Pluto

        Returns:
            StateResult with the 13x6 body table (AU, AU/day), the special
            output (native units) and the Sun's 9-component SSB vector

        Raises:
            OutOfRangeError: If the epoch is outside the ephemeris range
            SeekError, ReadError: If the covering record cannot be loaded
        """
        if len(request_mask) != N_REQUEST_SLOTS:
            raise ValueError(
                f"Request mask must have {N_REQUEST_SLOTS} entries, got {len(request_mask)}"
            )
        for request in request_mask:
            if request not in (0, 1, 2):
                raise ValueError(f"Invalid request {request!r}: expected 0, 1 or 2")

        record, fraction = self.locate(epoch)
        coeffs = self.records.load(record)

        bodies = np.zeros((N_BODY_ROWS, N_STATE_COMPONENTS))
        special = np.zeros(N_SPECIAL_COMPONENTS)
        km_to_au = 1.0 / self.header.au_km
        recompute_sun = epoch != self.sun_epoch
        sun = self.sun.copy()

        self.logger.debug(
            f"State at JD {epoch}: record {record}, fraction {fraction}, "
            f"mask {list(request_mask)}, barycentric={barycentric}"
        )

        for granularity in SUBINTERVAL_GRANULARITIES:
            for slot in range(N_REQUEST_SLOTS + 1):
                if slot == SUN_SLOT:
                    derivatives = POSITION_VELOCITY_ACCELERATION if recompute_sun else SKIP
                else:
                    derivatives = request_mask[slot]
                row = ipt_row_for_slot(slot)
                params = self.header.ipt[row]
                if derivatives == SKIP or params.n_subintervals != granularity:
                    continue

                n_components = quantity_dimension(row)
                values = self.interpolator.interpolate(
                    coeffs[params.offset - 1 :],
                    fraction,
                    self.header.step,
                    params.order,
                    n_components,
                    params.n_subintervals,
                    derivatives,
                )
                if slot == SUN_SLOT:
                    sun[:] = values * km_to_au
                elif slot < N_BODY_SLOTS:
                    bodies[slot, : values.size] = values * km_to_au
                else:
                    special[: values.size] = values

        if recompute_sun:
            self.sun = sun
            self.sun_epoch = epoch
            self.logger.debug(f"Recomputed Sun at JD {epoch}: {sun[:3]}")

        if not barycentric:
            for slot in range(N_PLANET_SLOTS):
                n = request_mask[slot] * 3
                bodies[slot, :n] -= self.sun[:n]

        return StateResult(bodies=bodies, special=special, sun=self.sun.copy())
