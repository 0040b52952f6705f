"""Calendar conversions for epochs given on the command line."""

from .julian import datetime_to_julian, julian_to_datetime

__all__ = ["datetime_to_julian", "julian_to_datetime"]
