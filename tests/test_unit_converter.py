import pytest

from recipe_pipeline.unit_converter import (
    format_quantity,
    is_known_unit,
    normalize_unit,
    unit_type,
)


@pytest.mark.parametrize(
    "unit,expected",
    (
        ("Tablespoons", "tbsp"),
        ("tbsp", "tbsp"),
        ("TBSPS", "tbsp"),
        ("  Cups ", "cup"),
        ("fl oz", "fl oz"),
        ("grams", "g"),
        ("Pounds", "lb"),
        ("cloves", "clove"),
        ("knob", "knob"),
        (" Knob ", "Knob"),
        (None, ""),
    ),
)
def test_normalize_unit(unit, expected: str) -> None:
    assert normalize_unit(unit) == expected


def test_known_units() -> None:
    assert is_known_unit("grams")
    assert is_known_unit("TSP")
    assert not is_known_unit("knob")
    assert not is_known_unit("")


@pytest.mark.parametrize(
    "unit,expected",
    (
        ("Tablespoons", "volume"),
        ("kg", "weight"),
        ("inches", "length"),
        ("cloves", "count"),
        ("piece", "count"),
        ("knob", None),
        (None, None),
    ),
)
def test_unit_type(unit, expected) -> None:
    assert unit_type(unit) == expected


@pytest.mark.parametrize(
    "quantity,expected",
    ((2.0, "2"), (2.5, "2.5"), (0.25, "0.25"), (None, "")),
)
def test_format_quantity(quantity, expected: str) -> None:
    assert format_quantity(quantity) == expected
