"""
View count codec.

Videos keep an integer view count; the API and legacy catalogue data speak in
short human-readable strings ("0", "999", "1.2K", "3.4M", "2.0B").
"""
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Union

_SUFFIX_MULTIPLIERS = {
    "": 1,
    "k": 1_000,
    "m": 1_000_000,
    "b": 1_000_000_000,
}

# Largest unit first; format walks this list.
_FORMAT_UNITS = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)

_VIEW_COUNT_RE = re.compile(r"^\s*(\d+(?:\.\d+)?|\.\d+)\s*([kmb]?)\s*$", re.IGNORECASE)


def parse_view_count(value: Union[str, int, None]) -> int:
    """
    Decode a formatted view count to a non-negative integer.

    Accepts a plain integer or an integer/decimal suffixed with K, M or B
    (case-insensitive). ``None`` and the empty string decode to 0.

    Raises:
        ValueError: if the value is negative or not in a recognised shape.
    """
    if value is None:
        return 0

    if isinstance(value, bool):
        raise ValueError(f"Invalid view count: {value!r}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"View count must be non-negative: {value}")
        return value

    text = str(value).strip()
    if not text:
        return 0

    match = _VIEW_COUNT_RE.match(text)
    if not match:
        raise ValueError(f"Invalid view count: {value!r}")

    number, suffix = match.groups()
    try:
        amount = Decimal(number) * _SUFFIX_MULTIPLIERS[suffix.lower()]
    except InvalidOperation:
        raise ValueError(f"Invalid view count: {value!r}")

    return int(amount.to_integral_value(rounding=ROUND_HALF_UP))


def format_view_count(count: int) -> str:
    """
    Encode an integer view count for display.

    ``< 1000`` renders as the integer itself; larger values render with one
    decimal place and a K, M or B suffix. A value that rounds up to 1000 of a
    unit is promoted to the next unit (999_950 -> "1.0M").
    """
    if count < 0:
        raise ValueError(f"View count must be non-negative: {count}")

    if count < 1_000:
        return str(count)

    for index, (divisor, suffix) in enumerate(_FORMAT_UNITS):
        if count < divisor:
            continue

        scaled = (Decimal(count) / divisor).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
        if scaled >= 1000 and index > 0:
            bigger_divisor, bigger_suffix = _FORMAT_UNITS[index - 1]
            scaled = (Decimal(count) / bigger_divisor).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
            suffix = bigger_suffix
        return f"{scaled}{suffix}"

    return str(count)


def normalize_view_count(value: Union[str, int, None]) -> str:
    """Canonical form of any accepted view count value."""
    return format_view_count(parse_view_count(value))
