"""
Ingredient line splitter.

Splits a single free-text ingredient line of the shape
"<quantity> <unit> <name>" into structured fields.
"""
from __future__ import annotations

import logging
import re

from ..models.recipe import ParsedIngredient
from ..quantity import QUANTITY_PATTERN, parse_quantity
from ..unit_converter import UNIT_ALIASES, normalize_unit

_LOGGER = logging.getLogger(__name__)

# Every unit spelling, longest first so "fl oz" wins over "fl"
_UNITS = "|".join(
    re.escape(alias)
    for alias in sorted(
        {alias for aliases in UNIT_ALIASES.values() for alias in aliases},
        key=len,
        reverse=True,
    )
)

# "250g flour"
_COMPACT_RE = re.compile(
    rf"^({QUANTITY_PATTERN})({_UNITS})(?![\w.])\s+(.+)$", re.IGNORECASE)
# "1 1/2 cups flour"
_QTY_UNIT_NAME_RE = re.compile(
    rf"^({QUANTITY_PATTERN})\s+({_UNITS})(?![\w.])\s+(.+)$", re.IGNORECASE)
# "2 large eggs"
_QTY_NAME_RE = re.compile(rf"^({QUANTITY_PATTERN})\s+(.+)$", re.IGNORECASE)

_BULLET_RE = re.compile(r"^[-*•]\s*")


def _split_notes(name: str) -> tuple[str, str | None]:
    """Split "butter, softened" into ("butter", "softened")."""
    name = re.sub(r"^of\s+", "", name.strip(), flags=re.IGNORECASE)
    head, sep, tail = name.partition(",")
    if sep and head.strip() and tail.strip():
        return head.strip(), tail.strip()
    return name, None


def split_ingredient_line(text: str | None, **extra) -> ParsedIngredient | None:
    """Split an ingredient line into quantity, unit, name and notes.

    Supports:
    - Compact: "250g flour"
    - Standard: "1 1/2 cups flour, sifted"
    - Quantity-name: "2 large eggs" (unit defaults to 'piece')

    Args:
        text: Raw ingredient line
        **extra: Additional ParsedIngredient fields (e.g., group, id)

    Returns:
        A ParsedIngredient, or None if the line has no usable leading quantity
    """
    if not text:
        return None

    line = _BULLET_RE.sub("", text.strip())

    for pattern in (_COMPACT_RE, _QTY_UNIT_NAME_RE):
        match = pattern.match(line)
        if match:
            quantity_str, unit, rest = match.groups()
            unit = normalize_unit(unit)
            break
    else:
        match = _QTY_NAME_RE.match(line)
        if not match:
            _LOGGER.debug("No leading quantity in ingredient line '%s'", line)
            return None
        quantity_str, rest = match.groups()
        unit = None

    quantity = parse_quantity(quantity_str)
    if quantity is None or quantity <= 0:
        _LOGGER.debug("Unusable quantity '%s' in ingredient line '%s'",
                      quantity_str, line)
        return None

    name, notes = _split_notes(rest)
    if not name:
        return None

    return ParsedIngredient(
        name=name,
        quantity=quantity,
        unit=unit,
        notes=notes,
        raw=text.strip(),
        **extra
    )
