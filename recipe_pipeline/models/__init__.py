"""Data models."""
from .recipe import (
    ParsedIngredient,
    ParsedRecipe,
    ScaleConstraint,
    ScaledIngredient,
    ScaledRecipe,
    ScaleRequest,
)

__all__ = [
    "ParsedIngredient",
    "ParsedRecipe",
    "ScaleConstraint",
    "ScaleRequest",
    "ScaledIngredient",
    "ScaledRecipe",
]
