import pytest

from recipe_pipeline.quantity import (
    extract_leading_quantity,
    parse_duration_minutes,
    parse_quantity,
)


@pytest.mark.parametrize(
    "token,expected",
    (
        ("1 1/2", 1.5),
        ("3/4", 0.75),
        ("2", 2.0),
        ("0.5", 0.5),
        (".5", 0.5),
        ("½", 0.5),
        ("1½", 1.5),
        ("1 ½", 1.5),
        ("  2  1/4 ", 2.25),
    ),
)
def test_parse_quantity(token: str, expected: float) -> None:
    assert parse_quantity(token) == pytest.approx(expected)


@pytest.mark.parametrize(
    "token",
    (
        "abc", "", None, "1/0", "2 1/0", "1.2.3", "-1",
        "9" * 400 + "/1", "9" * 400 + " 1/2", "9" * 400 + "½", "9" * 5000,
    ),
)
def test_parse_quantity_unparseable(token) -> None:
    assert parse_quantity(token) is None


@pytest.mark.parametrize(
    "text,expected",
    (
        ("8 servings", (8.0, "servings")),
        ("Makes 12 cookies", (12.0, "cookies")),
        ("4-6 servings", (4.0, "servings")),
        ("4 to 6 people", (4.0, "people")),
        ("1 1/2 loaves", (1.5, "loaves")),
        ("about a dozen", (None, "about a dozen")),
        ("9" * 400 + "/1 servings", (None, "servings")),
    ),
)
def test_extract_leading_quantity(text: str, expected: tuple) -> None:
    assert extract_leading_quantity(text) == expected


@pytest.mark.parametrize(
    "text,expected",
    (
        ("45 minutes", 45),
        ("1 hour 30 minutes", 90),
        ("1 1/2 hours", 90),
        ("2 hrs 5 mins", 125),
        ("2h 15m", 135),
        ("about an hour", None),
        ("9" * 308 + " hours", None),
        ("", None),
        (None, None),
    ),
)
def test_parse_duration_minutes(text, expected) -> None:
    assert parse_duration_minutes(text) == expected
