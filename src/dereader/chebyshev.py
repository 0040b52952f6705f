"""
Chebyshev interpolation of ephemeris coefficient blocks.

A quantity's coefficients for one record are laid out as
[sub-interval][component][order]. Evaluating a quantity at a normalised
time picks the sub-interval, maps the time into [-1, 1] and sums the
Chebyshev series T_n (position), its first derivative T'_n (velocity) and,
for the Sun, its second derivative (acceleration).

The polynomial values depend only on the normalised time tc, and a single
epoch evaluates many quantities that share it, so the T_n and T'_n terms are
kept between calls and recomputed only when tc changes.
"""

import logging
import math
from typing import Optional

import numpy as np

from .logging import get_logger

# Largest number of coefficients per component in any published DE or INPOP
# file. The recurrence buffers are allocated to this size; a file that needs
# more is outside what this reader was written for.
MAX_CHEBYSHEV_ORDER = 18

POSITION = 1
POSITION_VELOCITY = 2
POSITION_VELOCITY_ACCELERATION = 3


class RecurrenceCache:
    """Chebyshev terms evaluated at the most recent tc."""

    def __init__(self) -> None:
        self.position_terms = np.zeros(MAX_CHEBYSHEV_ORDER)
        self.velocity_terms = np.zeros(MAX_CHEBYSHEV_ORDER)
        self.position_terms[0] = 1.0
        # No valid tc yet; any real tc differs from this
        self.position_terms[1] = -2.0
        self.velocity_terms[1] = 1.0
        self.n_position = 2
        self.n_velocity = 2
        self.twice_tc = -4.0

    @property
    def tc(self) -> float:
        return float(self.position_terms[1])

    def reset(self, tc: float) -> None:
        self.position_terms[1] = tc
        self.twice_tc = tc + tc
        self.n_position = 2
        self.n_velocity = 2

    def ensure_position_terms(self, order: int) -> np.ndarray:
        """T_0..T_{order-1} at the current tc."""
        terms = self.position_terms
        if self.n_position < order:
            for i in range(self.n_position, order):
                terms[i] = self.twice_tc * terms[i - 1] - terms[i - 2]
            self.n_position = order
        return terms[:order]

    def ensure_velocity_terms(self, order: int) -> np.ndarray:
        """T'_0..T'_{order-1} at the current tc; needs the position terms."""
        terms = self.velocity_terms
        position = self.ensure_position_terms(order)
        if self.n_velocity < order:
            for i in range(self.n_velocity, order):
                terms[i] = self.twice_tc * terms[i - 1] + 2 * position[i - 1] - terms[i - 2]
            self.n_velocity = order
        return terms[:order]


class ChebyshevInterpolator:
    """Evaluates coefficient blocks, reusing recurrence terms across calls."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.cache = RecurrenceCache()
        self.logger = logger or get_logger(__name__)

    def interpolate(
        self,
        coeffs: np.ndarray,
        fraction: float,
        interval_days: float,
        order: int,
        n_components: int,
        n_subintervals: int,
        derivative_order: int,
    ) -> np.ndarray:
        """
        Interpolate one quantity at a point inside a record.

        Args:
            coeffs: Coefficients for this quantity, starting at its first sub-interval
            fraction: Position of the epoch inside the record, in [0, 1]
            interval_days: Length of the record in days
            order: Coefficients per component
            n_components: Components per sub-interval (3 for bodies)
            n_subintervals: Sub-intervals per record
            derivative_order: 1 = position, 2 = adds velocity, 3 = adds acceleration

        Returns:
            Array of n_components * derivative_order values: all positions,
            then all velocities (per day), then all accelerations
        """
        assert order <= MAX_CHEBYSHEV_ORDER, (
            f"order {order} exceeds MAX_CHEBYSHEV_ORDER={MAX_CHEBYSHEV_ORDER}"
        )

        scaled = n_subintervals * fraction
        frac_part, int_part = math.modf(scaled)
        subinterval = int(int_part)
        tc = 2.0 * frac_part - 1.0
        if subinterval == n_subintervals:
            subinterval -= 1
            tc = 1.0

        assert -1.0 <= tc <= 1.0, f"normalised time {tc} outside [-1, 1]"

        if tc != self.cache.tc:
            self.cache.reset(tc)

        start = subinterval * n_components * order
        block = np.asarray(coeffs[start : start + n_components * order]).reshape(
            n_components, order
        )

        output = np.empty(n_components * derivative_order)
        position_terms = self.cache.ensure_position_terms(order)
        output[:n_components] = block @ position_terms

        if derivative_order <= POSITION:
            return output

        velocity_terms = self.cache.ensure_velocity_terms(order)
        scale = 2.0 * n_subintervals / interval_days
        output[n_components : 2 * n_components] = (block[:, 1:] @ velocity_terms[1:]) * scale

        if derivative_order >= POSITION_VELOCITY_ACCELERATION:
            accel_terms = np.zeros(order)
            for i in range(2, order):
                accel_terms[i] = (
                    4.0 * velocity_terms[i - 1]
                    + self.cache.twice_tc * accel_terms[i - 1]
                    - accel_terms[i - 2]
                )
            output[2 * n_components : 3 * n_components] = (
                block[:, 2:] @ accel_terms[2:]
            ) * (scale * scale)

        return output
