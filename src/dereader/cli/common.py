"""
Command-line interface utilities for dereader.

This module provides logging configuration, date parsing and ephemeris
opening shared by the dereader commands.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, Union

import click

from ..ephemeris import Ephemeris
from ..errors import EphemerisError
from ..logging import set_log_level
from ..space_time.julian import datetime_to_julian


def configure_logging(args: Dict[str, Any]) -> None:
    """
    Configure logging based on command line arguments.

    Args:
        args: Parsed command line flags (quiet, debug, verbose)
    """
    quiet = args.get("quiet", False)
    debug = args.get("debug", False)
    verbosity = args.get("verbose", 0)

    if quiet:
        log_level = logging.ERROR
    elif debug:
        log_level = logging.DEBUG
    else:
        # 0 -> WARNING, 1 -> INFO, 2+ -> DEBUG
        if verbosity == 0:
            log_level = logging.WARNING
        elif verbosity == 1:
            log_level = logging.INFO
        else:
            log_level = logging.DEBUG

    # Apply log level to all dereader loggers
    set_log_level(log_level)

    logging.getLogger("dereader").debug(
        f"Logging configured with level {logging.getLevelName(log_level)}"
    )


def parse_date_input(date_str: str) -> Union[datetime, float]:
    """Parse date input in various formats.

    Args:
        date_str: Date string in various formats:
            - Julian date (e.g., "2451545.0")
            - ISO format with timezone (e.g., "2000-01-01T12:00:00+00:00")
            - ISO format without timezone (e.g., "2000-01-01T12:00:00")
            - "now"

    Returns:
        Either a datetime object (for ISO format or "now") or a float (for Julian date)

    Raises:
        ValueError: If date string is invalid
    """
    if date_str.lower() == "now":
        return datetime.now(timezone.utc)

    try:
        # Try parsing as Julian date
        return float(date_str.strip("' "))
    except ValueError:
        # Try parsing as ISO format
        try:
            dt = datetime.fromisoformat(date_str)
            if dt.tzinfo is None:
                dt = dt.replace(tzinfo=timezone.utc)
            return dt
        except ValueError:
            raise ValueError(f"Invalid date format: {date_str}")


def parse_epoch(date_str: str) -> float:
    """Julian date for a command-line date, as a click error when invalid."""
    try:
        value = parse_date_input(date_str)
        if isinstance(value, datetime):
            return datetime_to_julian(value)
        return value
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--date")


@contextmanager
def open_ephemeris_file(path: str, load_constants: bool = False) -> Iterator[Ephemeris]:
    """Open an ephemeris for a command, reporting library errors to click."""
    try:
        eph = Ephemeris.open(path, load_constants=load_constants)
    except EphemerisError as e:
        raise click.ClickException(str(e))
    with eph:
        try:
            yield eph
        except EphemerisError as e:
            raise click.ClickException(str(e))
