"""
Planetary masses from the GM constants of an ephemeris file.

DE files store GM values in AU^3/day^2 under names such as GMS (Sun),
GM1-GM9 (planets, GM3 unused), GMB (Earth-Moon barycenter) and
MA0001-MA0004 (the four largest asteroids). Earth and Moon are split from
GMB with EMRAT.
"""

from dataclasses import dataclass
from typing import List, Optional

from .constants import ConstantTable

SECONDS_PER_DAY = 86400.0

# (label, constant name); None marks values derived from GMB and EMRAT
MASS_SOURCES = [
    ("Sun", "GMS"),
    ("Mercury", "GM1"),
    ("Venus", "GM2"),
    ("EMB", "GMB"),
    ("Mars", "GM4"),
    ("Jupiter", "GM5"),
    ("Saturn", "GM6"),
    ("Uranus", "GM7"),
    ("Neptune", "GM8"),
    ("Pluto", "GM9"),
    ("Earth", None),
    ("Moon", None),
    ("Ceres", "MA0001"),
    ("Pallas", "MA0002"),
    ("Juno", "MA0003"),
    ("Vesta", "MA0004"),
]


@dataclass(frozen=True)
class BodyMass:
    """GM of one body in several units."""

    name: str
    gm_au3_day2: float
    sun_gm_au3_day2: float
    au_km: float

    @property
    def ratio_to_sun(self) -> float:
        return self.gm_au3_day2 / self.sun_gm_au3_day2

    @property
    def sun_ratio(self) -> float:
        """Solar mass over this body's mass."""
        return self.sun_gm_au3_day2 / self.gm_au3_day2

    @property
    def gm_km3_s2(self) -> float:
        return self.gm_au3_day2 * self.au_km**3 / SECONDS_PER_DAY**2


def _lookup(constants: ConstantTable, name: str) -> Optional[float]:
    value = constants.get(name)
    if value is None or value == 0.0:
        return None
    return value


def planetary_masses(constants: ConstantTable, au_km: Optional[float] = None) -> List[BodyMass]:
    """
    Build the mass table for every body whose constants are present.

    Args:
        constants: Constants read from the ephemeris file
        au_km: Kilometres per AU; taken from the AU constant when omitted

    Returns:
        Masses in the order Sun, Mercury, Venus, EMB, Mars ... Vesta, skipping
        bodies the file has no value for

    Raises:
        KeyError: If the file has no GMS constant, or no AU when au_km is omitted
    """
    sun = _lookup(constants, "GMS")
    if sun is None:
        raise KeyError("GMS")
    if au_km is None:
        au_km = constants["AU"]

    gmb = _lookup(constants, "GMB")
    emrat = _lookup(constants, "EMRAT")
    moon = gmb / (1.0 + emrat) if gmb is not None and emrat is not None else None
    derived = {
        "Moon": moon,
        "Earth": gmb - moon if moon is not None and gmb is not None else None,
    }

    masses = []
    for label, name in MASS_SOURCES:
        gm = derived[label] if name is None else _lookup(constants, name)
        if gm is None:
            continue
        masses.append(BodyMass(name=label, gm_au3_day2=gm, sun_gm_au3_day2=sun, au_km=au_km))
    return masses
