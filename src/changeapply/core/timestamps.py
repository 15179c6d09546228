"""RFC 3339 timestamps with optional fractional seconds.

Usage:
    ts = parse_timestamp("2024-01-02T03:04:05.5Z")
    format_timestamp(ts)  # "2024-01-02T03:04:05.5Z"
"""

from __future__ import annotations

import re
from datetime import UTC, datetime

# Fractional seconds may carry up to nanosecond precision. Offsets are
# either "Z" or a numeric "+hh:mm" / "-hh:mm".
_RFC3339 = re.compile(
    r"(?P<date>[0-9]{4}-[0-9]{2}-[0-9]{2})T(?P<time>[0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]{1,9}))?"
    r"(?P<offset>Z|[+-][0-9]{2}:[0-9]{2})"
)

ZERO_TIMESTAMP = datetime(1, 1, 1, tzinfo=UTC)
"""Value a timestamp field takes when cleared."""


def parse_timestamp(text: str) -> datetime:
    """Parse an RFC 3339 timestamp.

    Digits past microsecond precision are truncated.

    Args:
        text: Timestamp such as "2024-01-02T03:04:05.123456789+02:00".

    Returns:
        Timezone-aware datetime.

    Raises:
        ValueError: If text is not a valid RFC 3339 timestamp.
    """
    match = _RFC3339.fullmatch(text)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {text!r}")

    fraction = match["fraction"]
    micros = f".{fraction[:6].ljust(6, '0')}" if fraction else ""
    offset = "+00:00" if match["offset"] == "Z" else match["offset"]
    return datetime.fromisoformat(f"{match['date']}T{match['time']}{micros}{offset}")


def format_timestamp(value: datetime) -> str:
    """Format a datetime with the same layout parse_timestamp reads.

    Trailing zeros of the fraction are dropped and UTC is written as "Z".
    Naive datetimes are treated as UTC.

    Args:
        value: Datetime to format.

    Returns:
        RFC 3339 string.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)

    text = (
        f"{value.year:04d}-{value.month:02d}-{value.day:02d}"
        f"T{value.hour:02d}:{value.minute:02d}:{value.second:02d}"
    )
    if value.microsecond:
        text += f".{value.microsecond:06d}".rstrip("0")

    offset = value.utcoffset()
    if not offset:
        return text + "Z"
    total_minutes = int(offset.total_seconds()) // 60
    sign = "+" if total_minutes >= 0 else "-"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{text}{sign}{hours:02d}:{minutes:02d}"
