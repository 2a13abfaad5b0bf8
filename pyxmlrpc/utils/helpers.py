import datetime
import re

# Constants
EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)

# Seconds from EPOCH to the first and last second a datetime can hold
MIN_UNIX_TIME = int((datetime.datetime(1, 1, 1, tzinfo=datetime.timezone.utc) - EPOCH).total_seconds())
MAX_UNIX_TIME = int((datetime.datetime(9999, 12, 31, 23, 59, 59, tzinfo=datetime.timezone.utc) - EPOCH).total_seconds())

ISO8601_WIRE_FORMAT = "%Y%m%dT%H:%M:%S"
"""Layout used on the wire by XML-RPC peers: compact date, colon-separated time."""

# Accepted on input besides the wire layout. Tried in order.
_ISO8601_INPUT_FORMATS = (
    ISO8601_WIRE_FORMAT,
    "%Y%m%dT%H%M%S",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M:%S.%f",
    "%Y-%m-%d %H:%M:%S",
    "%Y%m%d",
    "%Y-%m-%d",
)

_TRAILING_OFFSET = re.compile(r"(Z|[+-]\d{2}:?\d{2})$")

# --- Time Conversion ---

def get_unix_time() -> int:
    """Returns the current UTC time as a Unix timestamp (seconds since epoch)."""
    return int(datetime.datetime.now(datetime.timezone.utc).timestamp())

def unix_time_to_datetime(timestamp: int) -> datetime.datetime:
    """Converts a Unix timestamp to a UTC datetime object."""
    return EPOCH + datetime.timedelta(seconds=timestamp)

def datetime_to_unix_time(dt: datetime.datetime) -> int:
    """Converts a datetime object to a Unix timestamp. Naive datetimes are taken as UTC."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=datetime.timezone.utc)
    return int((dt - EPOCH).total_seconds())

def date_to_unix_time(d: datetime.date) -> int:
    """Converts a calendar date to the Unix timestamp of its midnight, UTC."""
    return datetime_to_unix_time(datetime.datetime(d.year, d.month, d.day))

def format_iso8601(timestamp: int) -> str:
    """Formats a Unix timestamp as ``YYYYMMDDTHH:MM:SS`` in UTC."""
    dt = unix_time_to_datetime(timestamp)
    # strftime("%Y") does not pad years below 1000 on every platform
    return f"{dt.year:04d}{dt.month:02d}{dt.day:02d}T{dt:%H:%M:%S}"

def parse_iso8601(text: str) -> int:
    """
    Parses an XML-RPC ``dateTime.iso8601`` string into a Unix timestamp.

    The wire layout is tried first, then common ISO 8601 variants. A trailing
    ``Z`` or numeric UTC offset is honoured; without one the time is UTC.

    Raises:
        ValueError: if ``text`` matches none of the accepted layouts.
    """
    text = text.strip()
    for fmt in _ISO8601_INPUT_FORMATS:
        try:
            return datetime_to_unix_time(datetime.datetime.strptime(text, fmt))
        except ValueError:
            continue

    if _TRAILING_OFFSET.search(text):
        iso_text = text[:-1] + "+00:00" if text.endswith("Z") else text
        try:
            return datetime_to_unix_time(datetime.datetime.fromisoformat(iso_text))
        except ValueError:
            pass
    raise ValueError(f"Unrecognized dateTime.iso8601 value '{text}'")
