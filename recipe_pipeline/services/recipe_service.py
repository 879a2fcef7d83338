"""
Recipe Parsing Service.

This module chooses between AI and heuristic parsing: AI is tried first when
it is forced or enabled by default, and the heuristic parser is the fallback
unless the caller forced AI.
"""
from __future__ import annotations

import logging
from typing import Any

from ..ai_client import CompletionClient, GeminiCompletionClient
from ..config import PipelineConfig
from ..const import METHOD_AI
from ..exceptions import AiError, AiParsingForced
from ..models.recipe import ParsedRecipe
from ..parsers.ai_parser import AIRecipeParser
from ..parsers.heuristic_parser import HeuristicRecipeParser

_LOGGER = logging.getLogger(__name__)


def build_client(config: PipelineConfig) -> CompletionClient | None:
    """Create the AI completion client described by the configuration."""
    if not config.ai_configured:
        return None
    return GeminiCompletionClient(
        api_key=config.api_key, model=config.model, timeout=config.timeout)


class RecipeParsingService:
    """Parses raw recipe text with AI or heuristics according to configuration."""

    def __init__(
        self,
        config: PipelineConfig | None = None,
        client: CompletionClient | None = None,
    ) -> None:
        """Initialize the parsing service.

        Args:
            config: Pipeline configuration; defaults are used when omitted
            client: AI completion client; built from config when omitted
        """
        self.config = config or PipelineConfig()
        if client is None:
            client = build_client(self.config)
        self.ai_parser = AIRecipeParser(
            client, max_text_length=self.config.max_text_length)
        self.heuristic_parser = HeuristicRecipeParser(
            split_ingredients=self.config.split_heuristic_ingredients)

    def parse(self, text: str, force_ai: bool = False) -> ParsedRecipe:
        """Parse raw recipe text into a structured recipe.

        Args:
            text: The raw recipe text
            force_ai: Require the AI parser; never fall back to heuristics

        Returns:
            The parsed recipe

        Raises:
            AiParsingForced: If force_ai is set and AI parsing failed
        """
        recipe, _ = self._parse(text, force_ai)
        return recipe

    def parse_with_metadata(self, text: str, force_ai: bool = False) -> dict[str, Any]:
        """Parse raw recipe text and report which parser produced the result."""
        recipe, method = self._parse(text, force_ai)
        result = recipe.to_dict()
        result["parsingMethod"] = method
        result["usedAi"] = method == METHOD_AI
        return result

    def _parse(self, text: str, force_ai: bool) -> tuple[ParsedRecipe, str]:
        if force_ai or self.config.use_ai_by_default:
            try:
                return self.ai_parser.parse_recipe(text), self.ai_parser.method
            except AiError as e:
                if force_ai:
                    _LOGGER.error("Forced AI parsing failed: %s", str(e), exc_info=True)
                    raise AiParsingForced(e) from e
                _LOGGER.warning("AI parsing failed (%s), falling back to heuristic parser",
                                str(e))

        return self.heuristic_parser.parse_recipe(text), self.heuristic_parser.method


def parse_recipe(
    text: str,
    *,
    force_ai: bool = False,
    config: PipelineConfig | None = None,
    client: CompletionClient | None = None,
) -> ParsedRecipe:
    """Parse raw recipe text with a one-off RecipeParsingService."""
    return RecipeParsingService(config, client).parse(text, force_ai=force_ai)
