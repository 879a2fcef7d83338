"""Unit normalization utilities for recipe ingredients."""
from __future__ import annotations

# Unit spellings to one canonical abbreviation per unit family
UNIT_ALIASES = {
    # Imperial/US volume
    "tsp": ("teaspoon", "teaspoons", "tsp", "tsps", "tsp."),
    "tbsp": ("tablespoon", "tablespoons", "tbsp", "tbsps", "tbsp.", "tbs", "tbl", "tb"),
    "cup": ("cup", "cups", "c"),
    "fl oz": ("fluid ounce", "fluid ounces", "fl oz", "fl. oz", "fl. oz.", "floz"),
    "pint": ("pint", "pints", "pt", "pts"),
    "quart": ("quart", "quarts", "qt", "qts"),
    "gallon": ("gallon", "gallons", "gal", "gals"),
    # Imperial/US weight
    "oz": ("ounce", "ounces", "oz", "oz."),
    "lb": ("pound", "pounds", "lb", "lbs", "lb.", "lbs."),
    # Metric
    "g": ("gram", "grams", "gramme", "grammes", "g", "gr"),
    "kg": ("kilogram", "kilograms", "kilo", "kilos", "kg", "kgs"),
    "ml": ("milliliter", "milliliters", "millilitre", "millilitres", "ml", "mls"),
    "l": ("liter", "liters", "litre", "litres", "l"),
    "dl": ("deciliter", "deciliters", "decilitre", "decilitres", "dl"),
    # Length
    "inch": ("inch", "inches", "in."),
    # Count
    "piece": ("piece", "pieces", "pc", "pcs", "each", "ea", "whole"),
    "clove": ("clove", "cloves"),
    "slice": ("slice", "slices"),
    "can": ("can", "cans", "tin", "tins"),
    # Imprecise amounts
    "pinch": ("pinch", "pinches"),
    "dash": ("dash", "dashes"),
}

_CANONICAL_BY_ALIAS = {
    alias: canonical
    for canonical, aliases in UNIT_ALIASES.items()
    for alias in aliases
}

# Semantic type of each canonical unit
UNIT_TYPES = {
    "tsp": "volume",
    "tbsp": "volume",
    "cup": "volume",
    "fl oz": "volume",
    "pint": "volume",
    "quart": "volume",
    "gallon": "volume",
    "ml": "volume",
    "l": "volume",
    "dl": "volume",
    "pinch": "volume",
    "dash": "volume",
    "oz": "weight",
    "lb": "weight",
    "g": "weight",
    "kg": "weight",
    "inch": "length",
    "piece": "count",
    "clove": "count",
    "slice": "count",
    "can": "count",
    "°f": "temperature",
    "°c": "temperature",
}


def normalize_unit(unit: str | None) -> str:
    """
    Map a free-text unit spelling to its canonical abbreviation.

    Unknown units are returned trimmed but otherwise unchanged so that an
    unusual unit never makes a recipe unusable.

    Args:
        unit: The unit string (e.g., 'Tablespoons', 'tbsp', 'TBSPS', 'knob')

    Returns:
        The canonical unit, or the trimmed input when it is not recognized

    Examples:
        >>> normalize_unit('Tablespoons')
        'tbsp'
        >>> normalize_unit('knob')
        'knob'
    """
    if unit is None:
        return ""

    stripped = unit.strip()
    return _CANONICAL_BY_ALIAS.get(stripped.lower(), stripped)


def is_known_unit(unit: str | None) -> bool:
    """Return True when the unit spelling belongs to a known unit family."""
    if not unit:
        return False
    return unit.strip().lower() in _CANONICAL_BY_ALIAS


def unit_type(unit: str | None) -> str | None:
    """
    Return the semantic type of a unit.

    Returns:
        One of 'weight', 'volume', 'count', 'length', 'temperature',
        or None for custom units
    """
    if not unit:
        return None
    return UNIT_TYPES.get(normalize_unit(unit).lower())


def format_quantity(quantity: float | int | None) -> str:
    """
    Format quantity to remove unnecessary decimals.

    Args:
        quantity: The numeric quantity (can be int, float, or None)

    Returns:
        Formatted string (empty string if quantity is None)

    Examples:
        >>> format_quantity(2.0)
        '2'
        >>> format_quantity(2.5)
        '2.5'
        >>> format_quantity(2.125)
        '2.13'
    """
    if quantity is None:
        return ""

    # If it's a whole number, return without decimals
    if quantity == int(quantity):
        return str(int(quantity))

    # Otherwise, return with up to 2 decimal places, removing trailing zeros
    return f"{quantity:.2f}".rstrip('0').rstrip('.')
