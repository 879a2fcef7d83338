"""Services package."""
from .ai_scaling import RecipeScalingService, normalize_recipe
from .recipe_service import RecipeParsingService, parse_recipe
from .scaling import build_scale_request, scale_recipe

__all__ = [
    "RecipeParsingService",
    "RecipeScalingService",
    "build_scale_request",
    "normalize_recipe",
    "parse_recipe",
    "scale_recipe",
]
