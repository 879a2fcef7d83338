import pytest

from recipe_pipeline.parsers.ingredient_parser import split_ingredient_line


@pytest.mark.parametrize(
    "line,quantity,unit,name,notes",
    (
        ("1 1/2 cups flour", 1.5, "cup", "flour", None),
        ("2 Tablespoons olive oil", 2.0, "tbsp", "olive oil", None),
        ("250g flour", 250.0, "g", "flour", None),
        ("1 cup butter, softened", 1.0, "cup", "butter", "softened"),
        ("2 large eggs", 2.0, "piece", "large eggs", None),
        ("3 knobs of butter", 3.0, "piece", "knobs of butter", None),
        ("½ tsp salt", 0.5, "tsp", "salt", None),
        ("4 cloves garlic, minced", 4.0, "clove", "garlic", "minced"),
        ("2 cups of milk", 2.0, "cup", "milk", None),
        ("- 1 lb ground beef", 1.0, "lb", "ground beef", None),
    ),
)
def test_split_ingredient_line(line: str, quantity: float, unit: str, name: str,
                               notes: str | None) -> None:
    got = split_ingredient_line(line)
    assert got is not None
    assert got.quantity == pytest.approx(quantity)
    assert got.unit == unit
    assert got.name == name
    assert got.notes == notes
    assert got.raw == line


def test_split_keeps_extra_fields() -> None:
    got = split_ingredient_line("2 cups milk", group="For the sauce", id=3)
    assert got.group == "For the sauce"
    assert got.id == 3


def test_unit_must_be_a_whole_word() -> None:
    # "l" is a unit, "large" is not
    got = split_ingredient_line("1 large onion")
    assert got.unit == "piece"
    assert got.name == "large onion"


@pytest.mark.parametrize(
    "line",
    ("Salt and pepper to taste", "a handful of blueberries", "0 cups flour", "", None, "2"),
)
def test_split_without_usable_quantity(line) -> None:
    assert split_ingredient_line(line) is None
