"""
Recipe Scaling Engine.

Resolves a scale factor (multiply, divide, or constrain one ingredient to a
target quantity) and rescales a structured recipe, rounding every quantity to
something a cook can actually measure.
"""
from __future__ import annotations

import logging
import math
import re
from typing import Any

import voluptuous as vol

from ..const import ROUNDING_NOTE_THRESHOLD
from ..exceptions import InvalidScaleRequest
from ..models.recipe import (
    ParsedIngredient,
    ParsedRecipe,
    ScaleConstraint,
    ScaledIngredient,
    ScaledRecipe,
    ScaleRequest,
)
from ..unit_converter import format_quantity, normalize_unit, unit_type

_LOGGER = logging.getLogger(__name__)

# Ingredients that should be rounded to whole numbers
WHOLE_NUMBER_INGREDIENTS = (
    "egg",
    "eggs",
    "whole egg",
    "whole eggs",
    "banana",
    "bananas",
    "apple",
    "apples",
    "orange",
    "oranges",
)

# Unit types that are always counted in whole numbers
WHOLE_NUMBER_UNIT_TYPES = ("count",)

# Common culinary fractions: (value, label, capture window around the value)
COMMON_FRACTIONS = (
    (1 / 4, "1/4", 0.125),
    (1 / 3, "1/3", 0.05),
    (1 / 2, "1/2", 0.125),
    (2 / 3, "2/3", 0.05),
    (3 / 4, "3/4", 0.125),
)

# Fractional parts this close to 0 or 1 round to the whole number
WHOLE_SNAP_WINDOW = 0.125

_WHOLE_NUMBER_RE = re.compile(
    r"\b(?:%s)$" % "|".join(
        re.escape(item) for item in sorted(WHOLE_NUMBER_INGREDIENTS, key=len, reverse=True)
    )
)


def _finite(value: float) -> float:
    if not math.isfinite(value):
        raise vol.Invalid("must be a finite number")
    return value


_POSITIVE_NUMBER = vol.All(
    vol.Coerce(float), _finite, vol.Range(min=0, min_included=False))


def _require_reference(constraint: dict[str, Any]) -> dict[str, Any]:
    if "ingredientIndex" not in constraint and "ingredientId" not in constraint:
        raise vol.Invalid("constraint needs an ingredientIndex or an ingredientId")
    return constraint


def _require_mode(request: dict[str, Any]) -> dict[str, Any]:
    if not any(key in request for key in ("multiplyBy", "divideBy", "constraint")):
        raise vol.Invalid("one of multiplyBy, divideBy or constraint is required")
    return request


CONSTRAINT_SCHEMA = vol.All(
    {
        vol.Exclusive("ingredientIndex", "reference"): vol.All(
            vol.Coerce(int), vol.Range(min=0)),
        vol.Exclusive("ingredientId", "reference"): vol.Any(int, str),
        vol.Required("targetQuantity"): _POSITIVE_NUMBER,
        vol.Optional("targetUnit"): vol.Any(None, str),
    },
    _require_reference,
)

SCALE_REQUEST_SCHEMA = vol.Schema(
    vol.All(
        {
            vol.Exclusive("multiplyBy", "mode"): _POSITIVE_NUMBER,
            vol.Exclusive("divideBy", "mode"): _POSITIVE_NUMBER,
            vol.Exclusive("constraint", "mode"): CONSTRAINT_SCHEMA,
        },
        _require_mode,
    )
)

# Legacy {"type": ..., "value": ...} scale options
_LEGACY_MODES = {"multiply": "multiplyBy", "divide": "divideBy"}


def _from_legacy_options(payload: dict[str, Any]) -> dict[str, Any]:
    scale_type = payload.get("type")
    if scale_type in _LEGACY_MODES:
        return {_LEGACY_MODES[scale_type]: payload.get("value")}
    if scale_type == "constraint":
        constraint = {"targetQuantity": payload.get("constraintQuantity")}
        if payload.get("constraintIngredientId") is not None:
            constraint["ingredientId"] = payload["constraintIngredientId"]
        if payload.get("constraintIngredientIndex") is not None:
            constraint["ingredientIndex"] = payload["constraintIngredientIndex"]
        return {"constraint": constraint}
    raise InvalidScaleRequest(f"Unknown scale type: {scale_type!r}")


def build_scale_request(payload: dict[str, Any]) -> ScaleRequest:
    """Validate a loosely-typed scale request payload.

    Accepts {"multiplyBy": 2}, {"divideBy": 4},
    {"constraint": {"ingredientIndex": 0, "targetQuantity": 3}} and the
    legacy {"type": "multiply", "value": 2} form.

    Raises:
        InvalidScaleRequest: If the payload does not describe exactly one
            valid scaling mode
    """
    if not isinstance(payload, dict):
        raise InvalidScaleRequest("Scale request must be an object")
    if "type" in payload:
        payload = _from_legacy_options(payload)

    try:
        validated = SCALE_REQUEST_SCHEMA(payload)
    except vol.Invalid as e:
        raise InvalidScaleRequest(f"Invalid scale request: {e}") from e
    return ScaleRequest.model_validate(validated)


def _positive(value: Any, label: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidScaleRequest(f"The {label} must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidScaleRequest(f"The {label} must be a finite positive number, got {value}")
    return float(value)


def find_reference_ingredient(
    recipe: ParsedRecipe, constraint: ScaleConstraint
) -> ParsedIngredient:
    """Locate the ingredient a constraint refers to, by index or by id."""
    if (constraint.ingredient_index is None) == (constraint.ingredient_id is None):
        raise InvalidScaleRequest(
            "A constraint must reference exactly one of ingredient index or ingredient id")

    if constraint.ingredient_index is not None:
        index = constraint.ingredient_index
        if not 0 <= index < len(recipe.ingredients):
            raise InvalidScaleRequest(f"No ingredient at index {index}")
        return recipe.ingredients[index]

    for ingredient in recipe.ingredients:
        if ingredient.id is not None and str(ingredient.id) == str(constraint.ingredient_id):
            return ingredient
    raise InvalidScaleRequest(f"No ingredient with id {constraint.ingredient_id!r}")


def resolve_scale_factor(recipe: ParsedRecipe, request: ScaleRequest) -> float:
    """Compute the factor a scale request applies to every quantity.

    Raises:
        InvalidScaleRequest: If not exactly one mode is set, an input is not
            a finite positive number, or the constraint reference is missing
    """
    modes = [mode for mode in (request.multiply_by, request.divide_by, request.constraint)
             if mode is not None]
    if len(modes) != 1:
        raise InvalidScaleRequest(
            "Exactly one of multiply_by, divide_by or constraint must be set")

    if request.multiply_by is not None:
        factor = _positive(request.multiply_by, "multiplier")
    elif request.divide_by is not None:
        factor = 1 / _positive(request.divide_by, "divisor")
    else:
        constraint = request.constraint
        reference = find_reference_ingredient(recipe, constraint)
        target = _positive(constraint.target_quantity, "target quantity")
        if constraint.target_unit and normalize_unit(constraint.target_unit) != reference.unit:
            _LOGGER.warning("Target unit %s differs from the unit of '%s' (%s); "
                            "the target is read in %s", constraint.target_unit,
                            reference.name, reference.unit, reference.unit)
        factor = target / reference.quantity
        _LOGGER.debug("Constraint on '%s': %s -> %s %s",
                      reference.name, format_quantity(reference.quantity),
                      format_quantity(target), reference.unit)

    if not math.isfinite(factor) or factor <= 0:
        raise InvalidScaleRequest(f"Scale factor must be finite and positive, got {factor}")
    return factor


def should_round_to_whole(ingredient: ParsedIngredient) -> bool:
    """True for discrete foods (eggs, apples, ...) and count units."""
    if unit_type(ingredient.unit) in WHOLE_NUMBER_UNIT_TYPES:
        return True

    # Compare the head of the name, ignoring notes after a comma or parenthesis
    head = re.split(r"[,(]", ingredient.name, maxsplit=1)[0].strip().lower()
    return bool(_WHOLE_NUMBER_RE.search(head))


def round_to_common_fraction(value: float) -> float:
    """Snap a quantity to a whole number or a common culinary fraction.

    Examples:
        >>> round_to_common_fraction(1.19)
        1.25
        >>> round_to_common_fraction(2.95)
        3.0
    """
    # Very small amounts are kept as they are
    if value < WHOLE_SNAP_WINDOW:
        return value

    whole = math.floor(value)
    fraction = value - whole

    if fraction < WHOLE_SNAP_WINDOW:
        return float(whole)
    if fraction > 1 - WHOLE_SNAP_WINDOW:
        return float(whole + 1)

    candidates = [
        (abs(fraction_value - fraction), fraction_value)
        for fraction_value, _, window in COMMON_FRACTIONS
        if abs(fraction_value - fraction) <= window
    ] or [(abs(fraction_value - fraction), fraction_value)
          for fraction_value, _, _ in COMMON_FRACTIONS]
    return whole + min(candidates)[1]


def round_quantity(ingredient: ParsedIngredient, scaled_quantity: float) -> float:
    """Round a scaled quantity according to the kind of ingredient."""
    if should_round_to_whole(ingredient):
        # Halves round up; a whole-number ingredient never disappears
        return float(max(1, math.floor(scaled_quantity + 0.5)))
    return round_to_common_fraction(scaled_quantity)


def scale_ingredient(ingredient: ParsedIngredient, factor: float) -> ScaledIngredient:
    """Scale one ingredient, noting the computed value when rounding moved it."""
    scaled_quantity = ingredient.quantity * factor
    if factor == 1:
        rounded = ingredient.quantity
    else:
        rounded = round_quantity(ingredient, scaled_quantity)

    note = None
    if abs(rounded - scaled_quantity) > ROUNDING_NOTE_THRESHOLD:
        note = f"Rounded from {scaled_quantity:.2f}"

    _LOGGER.debug("Scaled %s: %s -> %s%s", ingredient.name,
                  format_quantity(ingredient.quantity), format_quantity(rounded),
                  f" ({note})" if note else "")

    return ScaledIngredient(
        **ingredient.model_dump(exclude={"quantity", "rounding_note"}),
        quantity=rounded,
        rounding_note=note,
    )


def scale_recipe(recipe: ParsedRecipe, request: ScaleRequest) -> ScaledRecipe:
    """Scale every ingredient quantity and the yield of a recipe.

    Instructions and text fields are passed through unchanged.

    Args:
        recipe: The recipe to scale
        request: How to compute the scale factor

    Returns:
        The scaled recipe

    Raises:
        InvalidScaleRequest: If the request cannot produce a valid factor
    """
    factor = resolve_scale_factor(recipe, request)
    _LOGGER.info("Scaling recipe '%s' by factor %.4g", recipe.name, factor)

    ingredients = [scale_ingredient(ingredient, factor) for ingredient in recipe.ingredients]

    yield_quantity = recipe.yield_quantity
    if yield_quantity is not None and factor != 1:
        yield_quantity = round_to_common_fraction(yield_quantity * factor)

    return ScaledRecipe(
        **recipe.model_dump(exclude={"ingredients", "yield_quantity", "scale_factor"}),
        ingredients=ingredients,
        yield_quantity=yield_quantity,
        scale_factor=factor,
    )
