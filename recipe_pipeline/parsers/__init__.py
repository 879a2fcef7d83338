"""Parsers package."""
from .ai_parser import AIRecipeParser
from .base_parser import BaseRecipeParser
from .heuristic_parser import HeuristicRecipeParser
from .ingredient_parser import split_ingredient_line

__all__ = [
    "AIRecipeParser",
    "BaseRecipeParser",
    "HeuristicRecipeParser",
    "split_ingredient_line",
]
