"""
Base Recipe Parser.

Every parser turns raw recipe text into a ParsedRecipe and names the parsing
method it implements, which is reported with parse results.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import ClassVar

from ..models.recipe import ParsedRecipe


class BaseRecipeParser(ABC):
    """Abstract base class for recipe parsers.

    Attributes:
        method: The parsingMethod label of results from this parser
    """

    method: ClassVar[str]

    @abstractmethod
    def parse_recipe(self, text: str) -> ParsedRecipe:
        """Parse raw recipe text into a structured recipe.

        Args:
            text: The raw recipe text to parse

        Returns:
            The parsed recipe

        Raises:
            AiError: Parsers backed by the AI service raise when it fails;
                the heuristic parser never raises
        """
