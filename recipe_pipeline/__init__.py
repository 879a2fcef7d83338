"""
Recipe Pipeline.

Turns free-form recipe text into structured recipes, using an AI completion
service when available and a heuristic section parser otherwise, and scales
structured recipes to a new size with kitchen-friendly rounding.
"""
from __future__ import annotations

from .config import PipelineConfig, load_config
from .exceptions import (
    AiError,
    AiMalformedResponse,
    AiParsingForced,
    AiSchemaInvalid,
    AiUnavailable,
    InvalidRecipeForScaling,
    InvalidScaleRequest,
    RecipePipelineError,
)
from .models import (
    ParsedIngredient,
    ParsedRecipe,
    ScaleConstraint,
    ScaledIngredient,
    ScaledRecipe,
    ScaleRequest,
)
from .services import (
    RecipeParsingService,
    RecipeScalingService,
    build_scale_request,
    parse_recipe,
    scale_recipe,
)

__version__ = "1.0.0"

__all__ = [
    "AiError",
    "AiMalformedResponse",
    "AiParsingForced",
    "AiSchemaInvalid",
    "AiUnavailable",
    "InvalidRecipeForScaling",
    "InvalidScaleRequest",
    "ParsedIngredient",
    "ParsedRecipe",
    "PipelineConfig",
    "RecipeParsingService",
    "RecipePipelineError",
    "RecipeScalingService",
    "ScaleConstraint",
    "ScaleRequest",
    "ScaledIngredient",
    "ScaledRecipe",
    "build_scale_request",
    "load_config",
    "parse_recipe",
    "scale_recipe",
]
