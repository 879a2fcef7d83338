"""
Quantity Lexer.

Parses numeric tokens found in recipe text (integers, decimals, vulgar
fractions, mixed numbers and unicode fraction characters) and durations such
as "1 hour 15 minutes".
"""
from __future__ import annotations

import logging
import math
import re

_LOGGER = logging.getLogger(__name__)

# Map unicode fractions to their values
UNICODE_FRACTIONS = {
    "½": 1 / 2,
    "⅓": 1 / 3,
    "⅔": 2 / 3,
    "¼": 1 / 4,
    "¾": 3 / 4,
    "⅛": 1 / 8,
    "⅜": 3 / 8,
    "⅝": 5 / 8,
    "⅞": 7 / 8,
}

_UNICODE_CHARS = "".join(UNICODE_FRACTIONS)

_MIXED_RE = re.compile(r"^(\d+)\s+(\d+)\s*/\s*(\d+)$")
_FRACTION_RE = re.compile(r"^(\d+)\s*/\s*(\d+)$")
_DECIMAL_RE = re.compile(r"^(?:\d+(?:\.\d*)?|\.\d+)$")
_UNICODE_RE = re.compile(rf"^(\d+)?\s*([{_UNICODE_CHARS}])$")

# A quantity token inside free text, longest alternatives first
QUANTITY_PATTERN = (
    rf"\d+\s+\d+/\d+"
    rf"|\d+\s*[{_UNICODE_CHARS}]"
    rf"|\d+/\d+"
    rf"|[{_UNICODE_CHARS}]"
    rf"|\d*\.\d+"
    rf"|\d+"
)

_LEADING_QUANTITY_RE = re.compile(rf"({QUANTITY_PATTERN})")
# Upper bound of a range such as "4-6" or "4 to 6"
_RANGE_TAIL_RE = re.compile(rf"^\s*(?:-|–|—|to\s)\s*(?:{QUANTITY_PATTERN})")

_DURATION_RE = re.compile(
    rf"({QUANTITY_PATTERN})\s*"
    r"(hours?|hrs?|h|minutes?|mins?|m)\b",
    re.IGNORECASE,
)


def _parse_fraction(numerator: str, denominator: str) -> float | None:
    """Divide two integer strings, rejecting a zero denominator."""
    den = int(denominator)
    if den == 0:
        return None
    return int(numerator) / den


def _parse_token(text: str) -> float | None:
    match = _MIXED_RE.match(text)
    if match:
        whole, numerator, denominator = match.groups()
        fraction = _parse_fraction(numerator, denominator)
        if fraction is None:
            return None
        return int(whole) + fraction

    match = _FRACTION_RE.match(text)
    if match:
        return _parse_fraction(*match.groups())

    if _DECIMAL_RE.match(text):
        return float(text)

    match = _UNICODE_RE.match(text)
    if match:
        whole, char = match.groups()
        return (int(whole) if whole else 0) + UNICODE_FRACTIONS[char]

    return None


def parse_quantity(token: str | None) -> float | None:
    """Parse a numeric token into a float.

    Recognizes, in order: mixed numbers ("1 1/2"), vulgar fractions ("3/4"),
    decimals and integers ("2", "0.5"), and unicode fractions ("½", "1½").

    Args:
        token: The token to parse

    Returns:
        The parsed value, or None when the token is not numeric, has a
        zero denominator or is too large for a float

    Examples:
        >>> parse_quantity("1 1/2")
        1.5
        >>> parse_quantity("abc") is None
        True
    """
    if token is None:
        return None

    text = " ".join(str(token).split())
    if not text:
        return None

    try:
        value = _parse_token(text)
    except (OverflowError, ValueError):
        # Integers too long to convert, or too large for a float
        _LOGGER.debug("Quantity '%.40s' is out of range", text)
        return None

    if value is None or not math.isfinite(value):
        return None
    return value


def extract_leading_quantity(text: str) -> tuple[float | None, str]:
    """Find the first quantity in free text.

    Args:
        text: Text such as "8 servings" or "Makes 12 cookies"

    Returns:
        Tuple of (quantity or None, the text following the quantity)
    """
    match = _LEADING_QUANTITY_RE.search(text or "")
    if not match:
        return None, (text or "").strip()

    quantity = parse_quantity(match.group(1))
    rest = _RANGE_TAIL_RE.sub("", text[match.end():]).strip(" \t:-.,")
    return quantity, rest


def parse_duration_minutes(text: str | None) -> int | None:
    """Sum every "<N> hour(s)" and "<N> min(s)" in text into minutes.

    Examples:
        >>> parse_duration_minutes("1 hour 15 minutes")
        75
        >>> parse_duration_minutes("about an hour") is None
        True
    """
    if not text:
        return None

    total = 0.0
    found = False
    for number, unit in _DURATION_RE.findall(text):
        value = parse_quantity(number)
        if value is None:
            continue
        found = True
        if unit.lower().startswith("h"):
            total += value * 60
        else:
            total += value

    if not found:
        _LOGGER.debug("No duration found in '%s'", text)
        return None
    if not math.isfinite(total):
        _LOGGER.debug("Duration in '%.40s' is too large", text)
        return None

    return int(round(total))
