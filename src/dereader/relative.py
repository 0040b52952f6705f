"""
Relative states between bodies.

Body codes follow the JPL convention:

    1 Mercury   2 Venus    3 Earth    4 Mars     5 Jupiter   6 Saturn
    7 Uranus    8 Neptune  9 Pluto   10 Moon    11 Sun      12 SSB
   13 EMB      14 nutations          15 librations
   16 lunar mantle rate              17 TT-TDB

Codes 14-17 are not positions: they return the stored quantity itself and
ignore the center.
"""

import logging
from typing import Optional

import numpy as np

from .errors import InvalidBodyIndexError, QuantityUnavailableError
from .header import quantity_dimension
from .logging import get_logger
from .state import (
    EMB,
    MOON,
    N_REQUEST_SLOTS,
    N_STATE_COMPONENTS,
    StateAssembler,
    ipt_row_for_slot,
)

EARTH_CODE = 3
MOON_CODE = 10
SUN_CODE = 11
SSB_CODE = 12
EMB_CODE = 13
FIRST_QUANTITY_CODE = 14
LAST_QUANTITY_CODE = 17

# Body-table rows
EARTH_ROW = EARTH_CODE - 1
MOON_ROW = MOON_CODE - 1
SUN_ROW = SUN_CODE - 1
SSB_ROW = SSB_CODE - 1
EMB_ROW = EMB_CODE - 1

# Request slots for codes 14-17 start after the ten body slots
FIRST_QUANTITY_SLOT = 10


class RelativeStateResolver:
    """Turns (target, center) requests into state calls and differences them."""

    def __init__(self, assembler: StateAssembler, logger: Optional[logging.Logger] = None):
        self.assembler = assembler
        self.logger = logger or get_logger(__name__)

    @property
    def header(self):
        return self.assembler.header

    def relative_state(
        self, epoch: float, target: int, center: int, want_velocity: bool = True
    ) -> np.ndarray:
        """
        State of `target` relative to `center`.

        Args:
            epoch: Julian Ephemeris Date
            target: Body code 1-17
            center: Body code 1-13 (ignored for targets 14-17)
            want_velocity: Include velocities

        Returns:
            For bodies, position (AU) and optionally velocity (AU/day), 3 or 6
            components. For targets 14-17, the quantity's components followed
            by their rates when velocity is requested (radians, radians/day,
            or days for TT-TDB).

        Raises:
            InvalidBodyIndexError: If a code is out of range
            QuantityUnavailableError: If the file has no data for a quantity
            OutOfRangeError, SeekError, ReadError: Propagated from the state call
        """
        request = 2 if want_velocity else 1
        n_out = request * 3

        if target == center:
            return np.zeros(n_out)

        if FIRST_QUANTITY_CODE <= target <= LAST_QUANTITY_CODE:
            return self._quantity(epoch, target, request)

        if not (1 <= target <= EMB_CODE and 1 <= center <= EMB_CODE):
            raise InvalidBodyIndexError(
                f"Invalid target/center codes ({target}, {center}): expected 1-{EMB_CODE}"
            )

        mask = [0] * N_REQUEST_SLOTS
        for code in (target, center):
            slot = code - 1
            if slot <= MOON:
                mask[slot] = request
            # The Moon is stored geocentric and Earth only through the EMB
            if slot == MOON:
                mask[EMB] = request
            if slot == EMB:
                mask[MOON] = request
            if code == EMB_CODE:
                mask[EMB] = request

        result = self.assembler.compute_state(epoch, mask, barycentric=True)
        table = result.bodies

        if SUN_CODE in (target, center):
            table[SUN_ROW] = result.sun[:N_STATE_COMPONENTS]
        if SSB_CODE in (target, center):
            table[SSB_ROW] = 0.0
        if EMB_CODE in (target, center):
            table[EMB_ROW] = table[EARTH_ROW]

        if {target, center} == {EARTH_CODE, MOON_CODE}:
            # Earth-Moon pairs use the geocentric Moon directly
            table[EARTH_ROW] = 0.0
        else:
            if mask[EMB]:
                n = mask[EMB] * 3
                table[EARTH_ROW, :n] -= table[MOON_ROW, :n] / (1.0 + self.header.emrat)
            if mask[MOON]:
                n = mask[MOON] * 3
                table[MOON_ROW, :n] += table[EARTH_ROW, :n]

        return table[target - 1, :n_out] - table[center - 1, :n_out]

    def _quantity(self, epoch: float, target: int, request: int) -> np.ndarray:
        slot = FIRST_QUANTITY_SLOT + target - FIRST_QUANTITY_CODE
        row = ipt_row_for_slot(slot)
        if self.header.ipt[row].n_subintervals == 0:
            raise QuantityUnavailableError(
                f"Quantity {target} (IPT row {row}) is not present in this ephemeris"
            )
        mask = [0] * N_REQUEST_SLOTS
        mask[slot] = request
        result = self.assembler.compute_state(epoch, mask, barycentric=False)
        return result.special[: quantity_dimension(row) * request]
