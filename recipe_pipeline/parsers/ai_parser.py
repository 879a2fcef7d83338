"""
AI-based Recipe Parser.

This module sends raw recipe text to the AI completion service and validates
and normalizes the returned JSON into the same ParsedRecipe shape the
heuristic parser produces. The service is untrusted: fences are stripped,
required fields are checked and numeric fields are never taken on faith.
"""
from __future__ import annotations

import json
import logging
import math
import re
from typing import Any

import voluptuous as vol

from ..ai_client import CompletionClient
from ..const import (
    DEFAULT_MAX_TEXT_LENGTH,
    DEFAULT_QUANTITY,
    DEFAULT_UNIT,
    LOG_RESPONSE_PREVIEW,
    METHOD_AI,
)
from ..exceptions import AiMalformedResponse, AiSchemaInvalid, AiUnavailable
from ..models.recipe import ParsedIngredient, ParsedRecipe
from ..quantity import parse_duration_minutes, parse_quantity
from ..unit_converter import normalize_unit
from .base_parser import BaseRecipeParser
from .prompts import PARSE_PROMPT, RECIPE_JSON_SHAPE, SYSTEM_PROMPT

_LOGGER = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json|JSON)?\s*([\s\S]+?)\s*```")


def _non_blank(value: str) -> str:
    if not value.strip():
        raise vol.Invalid("must not be blank")
    return value


# Required fields of an AI recipe payload; everything else is optional
AI_RECIPE_SCHEMA = vol.Schema(
    {
        vol.Required("name"): vol.All(str, _non_blank),
        vol.Required("ingredients"): vol.All(
            [vol.Schema({vol.Required("name"): vol.All(str, _non_blank)},
                        extra=vol.ALLOW_EXTRA)],
            vol.Length(min=1),
        ),
        vol.Required("instructions"): vol.All(
            [vol.All(str, _non_blank)],
            vol.Length(min=1),
        ),
    },
    extra=vol.ALLOW_EXTRA,
)


def preview(text: str | None, limit: int = LOG_RESPONSE_PREVIEW) -> str:
    """Truncate text for logging."""
    if text is None:
        return ""
    return text if len(text) <= limit else text[:limit] + "..."


def strip_code_fences(text: str) -> str:
    """Remove optional ```json ... ``` wrapping around a response."""
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def decode_ai_payload(response: str) -> dict[str, Any]:
    """Decode and validate a recipe JSON payload returned by the AI service.

    Args:
        response: The raw response text, optionally wrapped in code fences

    Returns:
        The decoded payload with required fields present

    Raises:
        AiMalformedResponse: If the response is not JSON
        AiSchemaInvalid: If required recipe fields are missing or empty
    """
    try:
        payload = json.loads(strip_code_fences(response or ""))
    except json.JSONDecodeError as e:
        _LOGGER.error("AI response is not valid JSON: %s (response: %s)",
                      e, preview(response))
        raise AiMalformedResponse(
            f"AI response is not valid JSON: {e}", preview(response)) from e

    if not isinstance(payload, dict):
        _LOGGER.error("AI response is not a JSON object (response: %s)",
                      preview(response))
        raise AiSchemaInvalid("AI response is not a JSON object")

    try:
        AI_RECIPE_SCHEMA(payload)
    except vol.Invalid as e:
        _LOGGER.error("AI response is missing required fields: %s (response: %s)",
                      e, preview(response))
        raise AiSchemaInvalid(f"Invalid response format from AI: {e}") from e

    return payload


def coerce_positive_number(value: Any) -> float | None:
    """Return a finite positive number, or None for anything else."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        number = parse_quantity(value)
        if number is None:
            return None
    else:
        return None
    return number if math.isfinite(number) and number > 0 else None


def coerce_minutes(value: Any) -> int | None:
    """Return a non-negative whole number of minutes, or None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if not math.isfinite(value) or value < 0:
            return None
        return int(round(value))
    if isinstance(value, str):
        minutes = parse_duration_minutes(value)
        if minutes is None:
            number = parse_quantity(value)
            minutes = int(round(number)) if number is not None else None
        return minutes
    return None


def optional_text(value: Any) -> str | None:
    """Return stripped text, or None for blanks and non-strings."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _first(payload: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if payload.get(key) is not None:
            return payload[key]
    return None


def ingredient_from_payload(item: dict[str, Any]) -> ParsedIngredient:
    """Build a ParsedIngredient from a validated AI ingredient object."""
    unit = optional_text(item.get("unit"))
    identifier = item.get("id")
    if isinstance(identifier, bool) or not isinstance(identifier, (int, str)):
        identifier = None

    return ParsedIngredient(
        name=item["name"].strip(),
        quantity=coerce_positive_number(item.get("quantity")) or DEFAULT_QUANTITY,
        unit=normalize_unit(unit) if unit else DEFAULT_UNIT,
        notes=optional_text(item.get("notes")),
        group=optional_text(item.get("group")),
        raw=optional_text(item.get("raw")),
        id=identifier,
    )


def recipe_from_payload(payload: dict[str, Any]) -> ParsedRecipe:
    """Build a ParsedRecipe from a validated AI payload, defaulting optional fields."""
    return ParsedRecipe(
        name=payload["name"].strip(),
        description=optional_text(payload.get("description")) or "",
        ingredients=[ingredient_from_payload(item) for item in payload["ingredients"]],
        instructions=[step.strip() for step in payload["instructions"]],
        notes=optional_text(payload.get("notes")),
        yield_quantity=coerce_positive_number(
            _first(payload, "yieldQuantity", "yield_quantity")),
        yield_unit=optional_text(_first(payload, "yieldUnit", "yield_unit")),
        prep_time_minutes=coerce_minutes(
            _first(payload, "prepTimeMinutes", "prep_time_minutes")),
        cook_time_minutes=coerce_minutes(
            _first(payload, "cookTimeMinutes", "cook_time_minutes")),
    )


class AIRecipeParser(BaseRecipeParser):
    """Parses recipe data from unstructured text using the AI completion service."""

    method = METHOD_AI

    def __init__(
        self,
        client: CompletionClient | None,
        max_text_length: int = DEFAULT_MAX_TEXT_LENGTH,
    ) -> None:
        """Initialize the AI recipe parser.

        Args:
            client: The completion client, or None when AI is not configured
            max_text_length: Longest recipe text sent to the service
        """
        self.client = client
        self.max_text_length = max_text_length
        _LOGGER.debug("Initialized AIRecipeParser (configured: %s)", client is not None)

    def parse_recipe(self, text: str) -> ParsedRecipe:
        """Parse recipe information from unstructured text using AI.

        Args:
            text: The raw recipe text

        Returns:
            A ParsedRecipe built from the validated AI response

        Raises:
            AiUnavailable: If no client is configured or the service fails
            AiMalformedResponse: If the response is not JSON
            AiSchemaInvalid: If the response misses required fields
        """
        if self.client is None:
            raise AiUnavailable("AI service is not configured")

        text = text or ""
        if len(text) > self.max_text_length:
            _LOGGER.warning("Recipe text truncated from %d to %d characters",
                            len(text), self.max_text_length)
            text = text[:self.max_text_length]

        _LOGGER.info("Parsing recipe from %d characters of text using AI", len(text))

        prompt = PARSE_PROMPT.format(recipe_text=text, json_shape=RECIPE_JSON_SHAPE)
        response = request_completion(self.client, prompt, SYSTEM_PROMPT)
        recipe = recipe_from_payload(decode_ai_payload(response))

        _LOGGER.info("Successfully parsed recipe '%s' with %d ingredients using AI",
                     recipe.name, len(recipe.ingredients))
        return recipe


def request_completion(client: CompletionClient, prompt: str, system: str) -> str:
    """Call the completion client, mapping transport failures to AiUnavailable."""
    try:
        return client.complete(prompt, system=system)
    except OSError as e:
        _LOGGER.error("AI service unreachable: %s", str(e))
        raise AiUnavailable(f"AI service unreachable: {e}") from e
