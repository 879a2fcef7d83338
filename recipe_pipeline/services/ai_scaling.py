"""
Recipe Scaling Service.

Accepts a parsed recipe, a loosely-typed recipe payload (as sent by a UI) or
raw recipe text, repairs it into a valid ParsedRecipe and scales it, either
with an AI-suggested computation or with the deterministic scaling engine.
"""
from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from bs4 import BeautifulSoup

from ..ai_client import CompletionClient
from ..config import PipelineConfig
from ..const import (
    DEFAULT_QUANTITY,
    DEFAULT_RECIPE_NAME,
    DEFAULT_UNIT,
    PLACEHOLDER_INGREDIENT,
    PLACEHOLDER_INSTRUCTION,
    ROUNDING_NOTE_THRESHOLD,
)
from ..exceptions import (
    AiError,
    AiParsingForced,
    AiSchemaInvalid,
    AiUnavailable,
    InvalidRecipeForScaling,
    InvalidScaleRequest,
)
from ..models.recipe import (
    ParsedIngredient,
    ParsedRecipe,
    ScaledIngredient,
    ScaledRecipe,
    ScaleRequest,
)
from ..parsers.ai_parser import (
    coerce_minutes,
    coerce_positive_number,
    decode_ai_payload,
    optional_text,
    recipe_from_payload,
    request_completion,
)
from ..parsers.ingredient_parser import split_ingredient_line
from ..parsers.prompts import RECIPE_JSON_SHAPE, SCALE_PROMPT, SCALE_SYSTEM_PROMPT
from ..unit_converter import format_quantity, normalize_unit
from .recipe_service import RecipeParsingService, build_client
from .scaling import (
    build_scale_request,
    resolve_scale_factor,
    round_to_common_fraction,
    scale_recipe,
)

_LOGGER = logging.getLogger(__name__)

_STEP_PREFIX_RE = re.compile(
    r"^\s*(?:(?:step\s*\d+\s*[.):-]?|\d+\s*[.):-])(?=\s|$)|[-*•])\s*", re.IGNORECASE)
_HTML_TAG_RE = re.compile(r"<[a-zA-Z/][^>]*>")


def _first(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return None


def _unit_name(value: Any) -> str | None:
    """Read a unit given as text or as an object such as {"name": "cup"}."""
    if isinstance(value, Mapping):
        value = _first(value, "abbreviation", "name")
    return optional_text(value)


def resplit_ingredient(ingredient: ParsedIngredient) -> ParsedIngredient:
    """Split a free-text ingredient ("1 1/2 cups flour") into its fields.

    Only ingredients still in free-text form (whole line as name, default
    quantity and unit) are touched.
    """
    if not (ingredient.raw
            and ingredient.name == ingredient.raw
            and ingredient.quantity == DEFAULT_QUANTITY
            and ingredient.unit == DEFAULT_UNIT):
        return ingredient
    return split_ingredient_line(
        ingredient.raw, group=ingredient.group, id=ingredient.id) or ingredient


def normalize_ingredient(item: Any) -> ParsedIngredient | None:
    """Repair one loosely-typed ingredient.

    When the name is missing but a raw line is present, the raw line is split
    into quantity, unit and name; if that fails the raw line becomes the
    name with quantity 1 and unit 'piece'.

    Returns:
        The ingredient, or None when it has neither a name nor a raw line
    """
    if isinstance(item, ParsedIngredient):
        return resplit_ingredient(item)
    if isinstance(item, str):
        item = {"raw": item}
    if not isinstance(item, Mapping):
        _LOGGER.debug("Skipping ingredient of type %s", type(item).__name__)
        return None

    name = optional_text(item.get("name"))
    raw = optional_text(item.get("raw"))
    group = optional_text(item.get("group"))
    identifier = item.get("id")
    if isinstance(identifier, bool) or not isinstance(identifier, (int, str)):
        identifier = None

    if not name:
        if not raw:
            return None
        split = split_ingredient_line(raw, group=group, id=identifier)
        if split is not None:
            return split
        _LOGGER.debug("Could not split raw ingredient '%s', keeping it as the name", raw)
        return ParsedIngredient(name=raw, raw=raw, group=group, id=identifier)

    unit = _unit_name(item.get("unit"))
    return resplit_ingredient(ParsedIngredient(
        name=name,
        quantity=coerce_positive_number(item.get("quantity")) or DEFAULT_QUANTITY,
        unit=normalize_unit(unit) if unit else DEFAULT_UNIT,
        notes=optional_text(item.get("notes")),
        group=group,
        raw=raw,
        id=identifier,
    ))


def _strip_step_prefix(step: str) -> str:
    return _STEP_PREFIX_RE.sub("", step, count=1).strip()


def normalize_instructions(value: Any) -> list[str]:
    """Turn instructions given as a list, HTML or plain text into steps.

    Leading numbering ("1.", "Step 2:") and bullets are stripped.
    """
    if value is None:
        return []

    if isinstance(value, (list, tuple)):
        steps = []
        for item in value:
            if isinstance(item, Mapping):
                item = _first(item, "text", "instruction", "step")
            if isinstance(item, str):
                steps.extend(normalize_instructions(item))
        return steps

    if not isinstance(value, str):
        return []

    if _HTML_TAG_RE.search(value):
        soup = BeautifulSoup(value, "html.parser")
        items = soup.find_all("li")
        if items:
            lines = [" ".join(li.get_text().split()) for li in items]
        else:
            lines = soup.get_text("\n").splitlines()
    else:
        lines = value.splitlines()

    steps = [_strip_step_prefix(line) for line in lines]
    return [step for step in steps if step]


def normalize_recipe(data: ParsedRecipe | Mapping[str, Any]) -> ParsedRecipe:
    """Repair a parsed recipe or loosely-typed payload into a ParsedRecipe.

    Raises:
        InvalidRecipeForScaling: If no ingredients or instructions survive
    """
    if isinstance(data, ParsedRecipe):
        ingredients = [resplit_ingredient(ingredient) for ingredient in data.ingredients]
        _ensure_scalable(ingredients, data.instructions)
        return data.model_copy(update={"ingredients": ingredients})

    if not isinstance(data, Mapping):
        raise InvalidRecipeForScaling(
            f"Cannot scale a recipe of type {type(data).__name__}")

    raw_ingredients = data.get("ingredients") or []
    if isinstance(raw_ingredients, str):
        raw_ingredients = raw_ingredients.splitlines()
    elif not isinstance(raw_ingredients, (list, tuple)):
        raise InvalidRecipeForScaling(
            f"Ingredients must be a list or text, got {type(raw_ingredients).__name__}")
    ingredients = [
        ingredient
        for ingredient in (normalize_ingredient(item) for item in raw_ingredients)
        if ingredient is not None
    ]
    instructions = normalize_instructions(data.get("instructions"))
    _ensure_scalable(ingredients, instructions)

    description = data.get("description")
    return ParsedRecipe(
        name=optional_text(data.get("name")) or DEFAULT_RECIPE_NAME,
        description=description.strip() if isinstance(description, str) else "",
        ingredients=ingredients,
        instructions=instructions,
        notes=optional_text(data.get("notes")),
        yield_quantity=coerce_positive_number(
            _first(data, "yieldQuantity", "yield_quantity")),
        yield_unit=_unit_name(_first(data, "yieldUnit", "yield_unit")),
        prep_time_minutes=coerce_minutes(
            _first(data, "prepTimeMinutes", "prep_time_minutes")),
        cook_time_minutes=coerce_minutes(
            _first(data, "cookTimeMinutes", "cook_time_minutes")),
    )


def _ensure_scalable(ingredients: list[ParsedIngredient], instructions: list[str]) -> None:
    if not ingredients or all(i.name == PLACEHOLDER_INGREDIENT for i in ingredients):
        raise InvalidRecipeForScaling("Recipe has no ingredients to scale")
    if not instructions or all(step == PLACEHOLDER_INSTRUCTION for step in instructions):
        raise InvalidRecipeForScaling("Recipe has no instructions")


class RecipeScalingService:
    """Normalizes recipes from any source and scales them."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        client: CompletionClient | None = None,
        parsing_service: RecipeParsingService | None = None,
    ) -> None:
        """Initialize the scaling service.

        Args:
            config: Pipeline configuration; defaults are used when omitted
            client: AI completion client; built from config when omitted
            parsing_service: Parser used for raw text sources
        """
        self.config = config or PipelineConfig()
        self.client = client if client is not None else build_client(self.config)
        self.parsing_service = parsing_service or RecipeParsingService(
            self.config, self.client)

    def prepare(self, source: ParsedRecipe | Mapping[str, Any] | str) -> ParsedRecipe:
        """Turn raw text, a payload or a parsed recipe into a scalable recipe."""
        if isinstance(source, str):
            source = self.parsing_service.parse(source)
        return normalize_recipe(source)

    def scale(
        self,
        source: ParsedRecipe | Mapping[str, Any] | str,
        *,
        multiplier: float | None = None,
        divisor: float | None = None,
        target_yield: float | None = None,
        target_yield_unit: str | None = None,
        request: ScaleRequest | None = None,
        use_ai: bool = False,
        force_ai: bool = False,
    ) -> ScaledRecipe:
        """Scale a recipe by a multiplier, a divisor or to a target yield.

        Args:
            source: The recipe as a ParsedRecipe, a payload or raw text
            multiplier: Multiply every quantity by this factor
            divisor: Divide every quantity by this value
            target_yield: Scale so the recipe yields this quantity
            target_yield_unit: Yield unit shown on the result (display only)
            request: An explicit ScaleRequest instead of the options above
            use_ai: Ask the AI service for the scaled quantities first
            force_ai: Like use_ai, but never fall back to the scaling engine

        Returns:
            The scaled recipe

        Raises:
            InvalidRecipeForScaling: If the source has no usable ingredients or instructions
            InvalidScaleRequest: If the scaling options are missing or invalid
            AiParsingForced: If force_ai is set and the AI suggestion failed
        """
        recipe = self.prepare(source)
        scale_request = self._build_request(
            recipe, multiplier, divisor, target_yield, request)

        if use_ai or force_ai:
            try:
                scaled = self._scale_with_ai(recipe, scale_request)
            except AiError as e:
                if force_ai:
                    _LOGGER.error("Forced AI scaling failed: %s", str(e), exc_info=True)
                    raise AiParsingForced(e) from e
                _LOGGER.warning("AI scaling failed (%s), falling back to scaling engine",
                                str(e))
                scaled = scale_recipe(recipe, scale_request)
        else:
            scaled = scale_recipe(recipe, scale_request)

        if target_yield_unit:
            scaled = scaled.model_copy(update={"yield_unit": target_yield_unit.strip()})
        return scaled

    def _build_request(
        self,
        recipe: ParsedRecipe,
        multiplier: float | None,
        divisor: float | None,
        target_yield: float | None,
        request: ScaleRequest | None,
    ) -> ScaleRequest:
        given = [option for option in (multiplier, divisor, target_yield, request)
                 if option is not None]
        if len(given) != 1:
            raise InvalidScaleRequest(
                "Provide exactly one of multiplier, divisor, target yield or request")

        if request is not None:
            return request
        if multiplier is not None:
            return build_scale_request({"multiplyBy": multiplier})
        if divisor is not None:
            return build_scale_request({"divideBy": divisor})

        target = coerce_positive_number(target_yield)
        if target is None:
            raise InvalidScaleRequest(f"Target yield must be a positive number, got {target_yield}")
        if recipe.yield_quantity is None:
            raise InvalidScaleRequest(
                f"Recipe '{recipe.name}' has no yield to scale to a target yield from")
        return ScaleRequest(multiply_by=target / recipe.yield_quantity)

    def _scale_with_ai(self, recipe: ParsedRecipe, request: ScaleRequest) -> ScaledRecipe:
        if self.client is None:
            raise AiUnavailable("AI service is not configured")

        factor = resolve_scale_factor(recipe, request)
        _LOGGER.info("Requesting AI scaling of '%s' by factor %.4g", recipe.name, factor)

        prompt = SCALE_PROMPT.format(
            factor=f"{factor:g}",
            recipe_json=json.dumps(recipe.to_dict(), indent=2, ensure_ascii=False),
            json_shape=RECIPE_JSON_SHAPE,
        )
        response = request_completion(self.client, prompt, SCALE_SYSTEM_PROMPT)
        payload = decode_ai_payload(response)
        suggestion = recipe_from_payload(payload)

        if len(suggestion.ingredients) != len(recipe.ingredients):
            raise AiSchemaInvalid(
                f"AI returned {len(suggestion.ingredients)} ingredients, "
                f"expected {len(recipe.ingredients)}")

        ingredients = []
        for original, suggested, item in zip(
                recipe.ingredients, suggestion.ingredients, payload["ingredients"]):
            if suggested.unit != original.unit:
                raise AiSchemaInvalid(
                    f"AI changed the unit of '{original.name}' "
                    f"from {original.unit} to {suggested.unit}")
            if coerce_positive_number(item.get("quantity")) is None:
                raise AiSchemaInvalid(
                    f"AI returned no usable quantity for '{original.name}'")

            expected = original.quantity * factor
            note = None
            if abs(suggested.quantity - expected) > ROUNDING_NOTE_THRESHOLD:
                note = f"Rounded from {expected:.2f}"
            _LOGGER.debug("AI scaled %s: %s -> %s", original.name,
                          format_quantity(original.quantity),
                          format_quantity(suggested.quantity))
            ingredients.append(ScaledIngredient(
                **original.model_dump(exclude={"quantity", "rounding_note"}),
                quantity=suggested.quantity,
                rounding_note=note,
            ))

        yield_quantity = recipe.yield_quantity
        if yield_quantity is not None and factor != 1:
            yield_quantity = round_to_common_fraction(yield_quantity * factor)

        return ScaledRecipe(
            **recipe.model_dump(exclude={"ingredients", "yield_quantity", "scale_factor"}),
            ingredients=ingredients,
            yield_quantity=yield_quantity,
            scale_factor=factor,
        )
