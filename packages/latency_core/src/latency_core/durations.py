"""Duration type accepting Go-style duration strings, with Pydantic serialization support."""

import re
from datetime import timedelta
from decimal import Decimal
from typing import Annotated

from pydantic import BeforeValidator, PlainSerializer
from whenever import TimeDelta

_UNITS_US: dict[str, Decimal] = {
    "ns": Decimal("0.001"),
    "us": Decimal(1),
    "µs": Decimal(1),
    "ms": Decimal(1_000),
    "s": Decimal(1_000_000),
    "m": Decimal(60_000_000),
    "h": Decimal(3_600_000_000),
}

_PART = re.compile(r"(\d+(?:\.\d+)?)(ns|us|µs|ms|s|m|h)")

_US_PER_SECOND = 1_000_000
_US_PER_MINUTE = 60 * _US_PER_SECOND
_US_PER_HOUR = 60 * _US_PER_MINUTE


def parse_duration(value: object) -> object:
    """Parse ``"1m30s"``, ``"1500ms"`` or ISO 8601 strings into a timedelta.

    Anything that is not a string is left to Pydantic's own timedelta handling.
    """
    if not isinstance(value, str):
        return value
    text = value.strip()
    if text.startswith(("P", "-P")):
        return TimeDelta.parse_iso(text).py_timedelta()
    if text in ("0", ""):
        return timedelta(0)
    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    pos = 0
    total_us = Decimal(0)
    for match in _PART.finditer(text):
        if match.start() != pos:
            break
        total_us += Decimal(match.group(1)) * _UNITS_US[match.group(2)]
        pos = match.end()
    if not text or pos != len(text):
        raise ValueError(f"invalid duration '{value}'")
    return timedelta(microseconds=sign * int(total_us.to_integral_value()))


def format_duration(value: timedelta) -> str:
    """Format a timedelta the way Go prints durations: ``1h0m0s``, ``20m34.567s``, ``1500us``."""
    us = value // timedelta(microseconds=1)
    if us == 0:
        return "0s"
    sign = "-" if us < 0 else ""
    us = abs(us)
    if us < _US_PER_SECOND:
        if us % 1_000:
            return f"{sign}{us}us"
        return f"{sign}{us // 1_000}ms"

    hours, rem = divmod(us, _US_PER_HOUR)
    minutes, rem = divmod(rem, _US_PER_MINUTE)
    seconds, frac = divmod(rem, _US_PER_SECOND)
    secs = f"{seconds}.{frac:06d}".rstrip("0") if frac else str(seconds)
    if hours:
        return f"{sign}{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{sign}{minutes}m{secs}s"
    return f"{sign}{secs}s"


DurationType = Annotated[
    timedelta,
    BeforeValidator(parse_duration),
    PlainSerializer(format_duration),
]
