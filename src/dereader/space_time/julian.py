"""Julian date calculation module.

Converts between datetime objects and Julian dates using the Meeus
algorithm from "Astronomical Algorithms" (2nd ed.).

Ephemeris epochs are Julian Ephemeris Dates in TDB. Calendar times passed
through here are taken as TDB directly; no UTC/TT/TDB offset is applied.
"""

from datetime import datetime, timedelta, timezone

# Precision for Julian dates (microsecond precision = 12 decimal places)
JD_PRECISION = 12

# First Julian Day Number of the Gregorian calendar (1582-10-15)
GREGORIAN_CUTOVER_JDN = 2299161


def gregorian_to_jdn(year: int, month: int, day: int) -> int:
    """Convert a Gregorian date to Julian Day Number using Meeus algorithm.

    Args:
        year: Year in Gregorian calendar
        month: Month in Gregorian calendar (1-12)
        day: Day in Gregorian calendar

    Returns:
        Julian Day Number

    Raises:
        ValueError: If date is before 1583 (Gregorian calendar adoption)
    """
    if year < 1583:
        raise ValueError("Dates before 1583 are not supported")

    # Jan & Feb are months 13 & 14 of the previous year
    if month <= 2:
        year -= 1
        month += 12

    a = year // 100
    b = 2 - a + (a // 4)

    return int(365.25 * (year + 4716)) + int(30.6001 * (month + 1)) + day + b - 1524


def datetime_to_julian(dt: datetime) -> float:
    """Convert a datetime object to a Julian Date.

    Args:
        dt: Timezone-aware datetime object

    Returns:
        Julian Date (JD)

    Raises:
        ValueError: If the datetime has no timezone
    """
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware")
    dt = dt.astimezone(timezone.utc)

    jdn = gregorian_to_jdn(dt.year, dt.month, dt.day)
    seconds = dt.hour * 3600 + dt.minute * 60 + dt.second + dt.microsecond / 1_000_000

    # Julian days start at noon
    return round(jdn - 0.5 + seconds / 86400, JD_PRECISION)


def julian_to_datetime(jd: float) -> datetime:
    """Convert a Julian Date to a UTC datetime, to the nearest microsecond.

    Raises:
        ValueError: If the date falls outside the range datetime supports
    """
    jd = round(jd, JD_PRECISION)
    jd_plus_half = jd + 0.5
    z = int(jd_plus_half)
    f = jd_plus_half - z

    a = z
    if z >= GREGORIAN_CUTOVER_JDN:
        alpha = int((z - 1867216.25) / 36524.25)
        a = z + 1 + alpha - int(alpha / 4)

    b = a + 1524
    c = int((b - 122.1) / 365.25)
    d = int(365.25 * c)
    e = int((b - d) / 30.6001)

    day = b - d - int(30.6001 * e)
    month = e - 1 if e < 14 else e - 13
    year = c - 4716 if month > 2 else c - 4715

    midnight = datetime(year, month, day, tzinfo=timezone.utc)
    microseconds = round(f * 86400 * 1_000_000)
    return midnight + timedelta(microseconds=microseconds)
