# This file marks pyxmlrpc.utils as a Python package.

from .helpers import (
    EPOCH,
    MIN_UNIX_TIME,
    MAX_UNIX_TIME,
    ISO8601_WIRE_FORMAT,
    get_unix_time,
    unix_time_to_datetime,
    datetime_to_unix_time,
    date_to_unix_time,
    format_iso8601,
    parse_iso8601,
)

__all__ = [
    # Constants
    "EPOCH",
    "MIN_UNIX_TIME",
    "MAX_UNIX_TIME",
    "ISO8601_WIRE_FORMAT",
    # Time Conversion
    "get_unix_time",
    "unix_time_to_datetime",
    "datetime_to_unix_time",
    "date_to_unix_time",
    "format_iso8601",
    "parse_iso8601",
]
