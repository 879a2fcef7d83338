import math

import pytest

from recipe_pipeline.exceptions import InvalidScaleRequest
from recipe_pipeline.models import (
    ParsedIngredient,
    ParsedRecipe,
    ScaleConstraint,
    ScaleRequest,
)
from recipe_pipeline.services.scaling import (
    build_scale_request,
    resolve_scale_factor,
    round_to_common_fraction,
    scale_recipe,
    should_round_to_whole,
)


def quantities(recipe) -> list[float]:
    return [ingredient.quantity for ingredient in recipe.ingredients]


def test_multiply_by_one_is_identity(simple_recipe: ParsedRecipe) -> None:
    got = scale_recipe(simple_recipe, ScaleRequest(multiply_by=1))
    assert quantities(got) == quantities(simple_recipe)
    assert all(i.rounding_note is None for i in got.ingredients)
    assert got.yield_quantity == simple_recipe.yield_quantity
    assert got.scale_factor == 1


def test_whole_eggs_double(simple_recipe: ParsedRecipe) -> None:
    got = scale_recipe(simple_recipe, ScaleRequest(multiply_by=2))
    eggs = got.ingredients[1]
    assert eggs.quantity == 6
    assert eggs.rounding_note is None
    assert got.yield_quantity == 8


def test_common_fraction_without_note(simple_recipe: ParsedRecipe) -> None:
    got = scale_recipe(simple_recipe, ScaleRequest(multiply_by=1.5))
    flour = got.ingredients[0]
    assert flour.quantity == 1.5
    assert flour.rounding_note is None


def test_rounding_note_when_moved(simple_recipe: ParsedRecipe) -> None:
    got = scale_recipe(simple_recipe, ScaleRequest(multiply_by=1.4))
    flour, eggs = got.ingredients
    assert flour.quantity == 1.5
    assert "1.4" in flour.rounding_note
    assert eggs.quantity == 4
    assert eggs.rounding_note == "Rounded from 4.20"


def test_constraint_by_index() -> None:
    recipe = ParsedRecipe(
        ingredients=[
            ParsedIngredient(name="flour", quantity=2, unit="cup"),
            ParsedIngredient(name="sugar", quantity=1, unit="cup"),
        ],
        instructions=["Mix."],
    )
    request = ScaleRequest(constraint=ScaleConstraint(ingredient_index=0, target_quantity=3))
    got = scale_recipe(recipe, request)
    assert got.scale_factor == 1.5
    assert quantities(got) == [3.0, 1.5]


def test_constraint_by_id(simple_recipe: ParsedRecipe) -> None:
    request = ScaleRequest(constraint=ScaleConstraint(ingredient_id="7", target_quantity=6))
    assert resolve_scale_factor(simple_recipe, request) == 2


def test_divide(simple_recipe: ParsedRecipe) -> None:
    got = scale_recipe(simple_recipe, ScaleRequest(divide_by=2))
    assert quantities(got) == [0.5, 2.0]
    assert got.yield_quantity == 2


def test_text_fields_pass_through(simple_recipe: ParsedRecipe) -> None:
    got = scale_recipe(simple_recipe, ScaleRequest(multiply_by=3))
    assert got.name == simple_recipe.name
    assert got.instructions == simple_recipe.instructions
    assert [i.id for i in got.ingredients] == ["flour", 7]


@pytest.mark.parametrize(
    "request_",
    (
        ScaleRequest(),
        ScaleRequest(multiply_by=2, divide_by=2),
        ScaleRequest(multiply_by=0),
        ScaleRequest(multiply_by=-1),
        ScaleRequest(multiply_by=math.nan),
        ScaleRequest(divide_by=math.inf),
        ScaleRequest(constraint=ScaleConstraint(ingredient_index=5, target_quantity=1)),
        ScaleRequest(constraint=ScaleConstraint(ingredient_id="missing", target_quantity=1)),
        ScaleRequest(constraint=ScaleConstraint(target_quantity=1)),
        ScaleRequest(constraint=ScaleConstraint(ingredient_index=0, target_quantity=0)),
    ),
)
def test_invalid_requests(simple_recipe: ParsedRecipe, request_: ScaleRequest) -> None:
    with pytest.raises(InvalidScaleRequest):
        scale_recipe(simple_recipe, request_)


@pytest.mark.parametrize("target_unit", ("cups", "g"))
def test_constraint_target_unit_is_display_only(simple_recipe: ParsedRecipe,
                                                target_unit: str) -> None:
    request = ScaleRequest(constraint=ScaleConstraint(
        ingredient_index=0, target_quantity=2, target_unit=target_unit))
    assert resolve_scale_factor(simple_recipe, request) == 2


@pytest.mark.parametrize(
    "value,expected",
    (
        (1.19, 1.25),
        (2.95, 3.0),
        (1.4, 1.5),
        (0.33, 1 / 3),
        (0.7, 2 / 3),
        (2.04, 2.0),
        (0.1, 0.1),
    ),
)
def test_round_to_common_fraction(value: float, expected: float) -> None:
    assert round_to_common_fraction(value) == pytest.approx(expected)


@pytest.mark.parametrize(
    "name,unit,expected",
    (
        ("eggs", "large", True),
        ("Granny Smith apples", "bag", True),
        ("apples, peeled", "bag", True),
        ("eggplant", "bag", False),
        ("apple cider vinegar", "tbsp", False),
        ("garlic", "clove", True),
        ("flour", "cup", False),
    ),
)
def test_should_round_to_whole(name: str, unit: str, expected: bool) -> None:
    ingredient = ParsedIngredient(name=name, unit=unit)
    assert should_round_to_whole(ingredient) is expected


def test_whole_number_never_drops_to_zero() -> None:
    recipe = ParsedRecipe(
        ingredients=[ParsedIngredient(name="eggs", quantity=1)],
        instructions=["Boil."],
    )
    got = scale_recipe(recipe, ScaleRequest(divide_by=4))
    assert got.ingredients[0].quantity == 1
    assert got.ingredients[0].rounding_note == "Rounded from 0.25"


@pytest.mark.parametrize(
    "payload,expected",
    (
        ({"multiplyBy": 2}, ScaleRequest(multiply_by=2)),
        ({"divideBy": "4"}, ScaleRequest(divide_by=4)),
        ({"type": "multiply", "value": 2}, ScaleRequest(multiply_by=2)),
        ({"type": "divide", "value": 3}, ScaleRequest(divide_by=3)),
        (
            {"constraint": {"ingredientIndex": 0, "targetQuantity": 3}},
            ScaleRequest(constraint=ScaleConstraint(ingredient_index=0, target_quantity=3)),
        ),
        (
            {"type": "constraint", "constraintIngredientId": "abc", "constraintQuantity": 2},
            ScaleRequest(constraint=ScaleConstraint(ingredient_id="abc", target_quantity=2)),
        ),
    ),
)
def test_build_scale_request(payload: dict, expected: ScaleRequest) -> None:
    assert build_scale_request(payload) == expected


@pytest.mark.parametrize(
    "payload",
    (
        {},
        {"multiplyBy": 2, "divideBy": 2},
        {"multiplyBy": 0},
        {"multiplyBy": "lots"},
        {"multiplyBy": "nan"},
        {"type": "bogus", "value": 2},
        {"constraint": {"targetQuantity": 3}},
        {"constraint": {"ingredientIndex": 0, "ingredientId": 1, "targetQuantity": 3}},
        "multiply by two",
    ),
)
def test_build_scale_request_invalid(payload) -> None:
    with pytest.raises(InvalidScaleRequest):
        build_scale_request(payload)
