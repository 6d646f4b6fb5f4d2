"""Lenient parsers for user supplied query parameters.

Command-line flags and HTTP query strings arrive as text; these helpers turn
them into Query fields without ever failing the request.
"""

import re
from datetime import timedelta
from typing import Optional

from ferret.search.schema import DEFAULT_TIMEOUT

# Seconds per unit
_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_DURATION_PART = re.compile(r"(\d+\.?\d*|\.\d+)(ns|us|µs|ms|s|m|h)")

# Largest duration representable as int64 nanoseconds (about 292 years)
MAX_DURATION_SECONDS = (2 ** 63 - 1) / 1e9


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as ``5000ms``, ``1.5s`` or ``1h2m3s``.

    Raises:
        ValueError: if the text is not a duration.
    """
    text = value.strip()
    if not text:
        raise ValueError("invalid duration: empty string")

    sign = 1
    if text[0] in "+-":
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)

    seconds = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        seconds += float(match.group(1)) * _UNITS[match.group(2)]
        pos = match.end()

    if pos == 0 or pos != len(text):
        raise ValueError(f"invalid duration: {value!r}")
    if seconds > MAX_DURATION_SECONDS:
        raise ValueError(f"invalid duration: {value!r} is out of range")
    try:
        return timedelta(seconds=sign * seconds)
    except OverflowError as e:
        raise ValueError(f"invalid duration: {value!r} is out of range") from e


def parse_page(page: Optional[str]) -> int:
    """Positive page number, 1 for anything else."""
    if page:
        try:
            p = int(page)
        except ValueError:
            return 1
        if p > 0:
            return p
    return 1


def parse_goto(goto: Optional[str]) -> int:
    """Positive result number to open, 0 (no goto) for anything else."""
    if goto:
        try:
            g = int(goto)
        except ValueError:
            return 0
        if g > 0:
            return g
    return 0


def parse_timeout(timeout: Optional[str], default: Optional[str] = None) -> timedelta:
    """Timeout for a query.

    An explicit value is used when it parses. Without one, ``default`` (or the
    configured FERRET_SEARCH_TIMEOUT) is used when it parses. Anything
    malformed falls back to 5000ms.
    """
    candidate = timeout
    if not candidate:
        if default is None:
            from ferret.shared.settings import get_settings
            default = get_settings().search_timeout
        candidate = default

    try:
        return parse_duration(candidate)
    except ValueError:
        return DEFAULT_TIMEOUT
