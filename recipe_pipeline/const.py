"""Constants for the recipe pipeline."""

# Environment variable names (unified)
ENV_API_KEY = "GEMINI_API_KEY"
ENV_MODEL = "RECIPE_PIPELINE_MODEL"
ENV_USE_AI = "RECIPE_PIPELINE_USE_AI"
ENV_TIMEOUT = "RECIPE_PIPELINE_AI_TIMEOUT"
ENV_MAX_TEXT_LENGTH = "RECIPE_PIPELINE_MAX_TEXT_LENGTH"
ENV_SPLIT_INGREDIENTS = "RECIPE_PIPELINE_SPLIT_INGREDIENTS"

# Default values
DEFAULT_MODEL = "gemini-2.5-flash-lite"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_TEXT_LENGTH = 8000
DEFAULT_TEMPERATURE = 0.2
DEFAULT_MAX_OUTPUT_TOKENS = 4000

# Available models
AVAILABLE_MODELS = [
    "gemini-2.5-flash-lite",
    "gemini-2.5-flash",
    "gemini-2.5-pro",
]

# Recipe defaults
DEFAULT_RECIPE_NAME = "Untitled Recipe"
DEFAULT_UNIT = "piece"
DEFAULT_QUANTITY = 1.0
DEFAULT_YIELD_UNIT = "servings"
PLACEHOLDER_INGREDIENT = "No ingredients found"
PLACEHOLDER_INSTRUCTION = "No instructions found"

# Scaling
ROUNDING_NOTE_THRESHOLD = 0.1

# Logging
LOG_RESPONSE_PREVIEW = 200

# Parsing methods reported in parse metadata
METHOD_AI = "ai"
METHOD_HEURISTIC = "heuristic"
