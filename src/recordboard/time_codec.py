"""Conversion between swim time notation and integer milliseconds.

Times are stored as milliseconds; 0 means "no time recorded". Parsing never
raises: anything that cannot be read comes back as 0 and callers decide what
to do about it.

    parse_time_to_ms("1:42.00")  -> 102000
    parse_time_to_ms("1:42:00")  -> 102000   (":00" typed instead of ".00")
    format_ms_to_time(24560)     -> "24.56"
"""

import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

# A trailing ":NN" is a mistyped decimal point: "1:42:00" means "1:42.00"
_TRAILING_COLON_HUNDREDTHS = re.compile(r":(\d{2})$")

_WHOLE = re.compile(r"^\d+$")
_SECONDS = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")

# Formats accepted as-typed by editors
VALID_TIME_PATTERNS = (
    re.compile(r"^\d{1,2}\.\d{1,2}$"),  # SS.hh
    re.compile(r"^\d{1,2}:\d{2}\.\d{1,2}$"),  # M:SS.hh / MM:SS.hh
    re.compile(r"^\d{1,2}:\d{2}:\d{2}$"),  # M:SS:hh (mistyped)
    re.compile(r"^\d{1,2}:\d{2}:\d{2}\.\d{1,2}$"),  # H:MM:SS.hh
)


def _round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def parse_time_to_ms(value: str | None) -> int:
    """Parse a time string to milliseconds.

    Accepts "SS.hh", "M:SS.hh", "H:MM:SS.hh" and the mistyped "M:SS:hh".

    Returns:
        Milliseconds, or 0 for empty or unreadable input
    """
    if value is None:
        return 0
    cleaned = value.strip()
    if not cleaned:
        return 0

    normalized = _TRAILING_COLON_HUNDREDTHS.sub(r".\1", cleaned)
    parts = normalized.split(":")
    if len(parts) > 3:
        return 0

    *whole_parts, seconds_part = parts
    if not _SECONDS.match(seconds_part) or not all(_WHOLE.match(p) for p in whole_parts):
        return 0

    try:
        seconds = Decimal(seconds_part)
    except InvalidOperation:
        return 0

    multiplier = 60
    for part in reversed(whole_parts):
        seconds += int(part) * multiplier
        multiplier *= 60

    return _round_half_up(seconds * 1000)


def format_ms_to_time(ms: int) -> str:
    """Format milliseconds as "SS.hh" (under a minute) or "M:SS.hh".

    Returns:
        Empty string for ms <= 0
    """
    if ms <= 0:
        return ""

    hundredths = _round_half_up(Decimal(ms) / 10)
    minutes, remainder = divmod(hundredths, 6000)
    seconds, fraction = divmod(remainder, 100)

    if minutes == 0:
        return f"{seconds}.{fraction:02d}"
    return f"{minutes}:{seconds:02d}.{fraction:02d}"


def is_valid_time_format(value: str | None) -> bool:
    """Check whether a string is in one of the accepted time formats."""
    if not value or not value.strip():
        return False
    trimmed = value.strip()
    return any(pattern.match(trimmed) for pattern in VALID_TIME_PATTERNS)
