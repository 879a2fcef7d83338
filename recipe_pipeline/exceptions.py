"""Errors raised by the recipe pipeline."""
from __future__ import annotations


class RecipePipelineError(Exception):
    """Base class for all recipe pipeline errors."""


class AiError(RecipePipelineError):
    """The AI completion service could not produce a usable recipe.

    Every AI error is recoverable by falling back to the heuristic parser
    unless the caller forced the AI path.
    """


class AiUnavailable(AiError):
    """The AI service is not configured, unreachable or timed out."""


class AiMalformedResponse(AiError):
    """The AI service returned something that is not JSON."""

    def __init__(self, message: str, raw_response: str | None = None) -> None:
        super().__init__(message)
        self.raw_response = raw_response


class AiSchemaInvalid(AiError):
    """The AI service returned JSON missing required recipe fields."""


class AiParsingForced(RecipePipelineError):
    """AI was explicitly requested and failed, so no fallback was attempted."""

    def __init__(self, cause: Exception) -> None:
        super().__init__(f"AI processing was forced and failed: {cause}")
        self.cause = cause


class InvalidScaleRequest(RecipePipelineError, ValueError):
    """A multiplier, divisor, target or constraint reference is unusable."""


class InvalidRecipeForScaling(RecipePipelineError, ValueError):
    """Ingredients or instructions could not be normalized for scaling."""
