"""
Configuration for the recipe pipeline.

Configuration is an explicit value passed into the services. load_config
builds one from the environment (and a .env file, when present).
"""
from __future__ import annotations

import logging
import os
from typing import Any

import voluptuous as vol
from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from .const import (
    DEFAULT_MAX_TEXT_LENGTH,
    DEFAULT_MODEL,
    DEFAULT_TIMEOUT,
    ENV_API_KEY,
    ENV_MAX_TEXT_LENGTH,
    ENV_MODEL,
    ENV_SPLIT_INGREDIENTS,
    ENV_TIMEOUT,
    ENV_USE_AI,
)

_LOGGER = logging.getLogger(__name__)

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional("use_ai_by_default", default=False): vol.Boolean(),
        vol.Optional("api_key", default=None): vol.Any(None, vol.All(str, vol.Strip)),
        vol.Optional("model", default=DEFAULT_MODEL): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Optional("timeout", default=DEFAULT_TIMEOUT): vol.All(
            vol.Coerce(float), vol.Range(min=0, min_included=False)),
        vol.Optional("max_text_length", default=DEFAULT_MAX_TEXT_LENGTH): vol.All(
            vol.Coerce(int), vol.Range(min=1)),
        vol.Optional("split_heuristic_ingredients", default=False): vol.Boolean(),
    }
)


class PipelineConfig(BaseModel):
    """Settings shared by the parsing and scaling services.

    Attributes:
        use_ai_by_default: Try the AI parser first even when not forced
        api_key: API key for the AI service; AI is unavailable without it
        model: The model used for AI completions
        timeout: Seconds to wait for one AI response
        max_text_length: Longest recipe text sent to the AI service
        split_heuristic_ingredients: Split heuristic ingredient lines into fields
    """

    model_config = ConfigDict(frozen=True)

    use_ai_by_default: bool = False
    api_key: str | None = None
    model: str = DEFAULT_MODEL
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_text_length: int = Field(default=DEFAULT_MAX_TEXT_LENGTH, gt=0)
    split_heuristic_ingredients: bool = False

    @property
    def ai_configured(self) -> bool:
        return bool(self.api_key)


def load_config(environ: dict[str, str] | None = None, **overrides: Any) -> PipelineConfig:
    """Build the pipeline configuration from environment variables.

    Args:
        environ: Mapping to read instead of os.environ (a .env file is only
            loaded when reading the real environment)
        **overrides: Values that take precedence over the environment (None
            values are ignored)

    Returns:
        The validated configuration

    Raises:
        vol.Invalid: If an environment value cannot be coerced
    """
    if environ is None:
        load_dotenv()
        environ = dict(os.environ)

    raw = {
        "use_ai_by_default": environ.get(ENV_USE_AI),
        "api_key": environ.get(ENV_API_KEY),
        "model": environ.get(ENV_MODEL),
        "timeout": environ.get(ENV_TIMEOUT),
        "max_text_length": environ.get(ENV_MAX_TEXT_LENGTH),
        "split_heuristic_ingredients": environ.get(ENV_SPLIT_INGREDIENTS),
    }
    raw.update({key: value for key, value in overrides.items() if value is not None})
    options = CONFIG_SCHEMA({key: value for key, value in raw.items() if value is not None})

    if not options["api_key"]:
        options["api_key"] = None
        if options["use_ai_by_default"]:
            _LOGGER.warning("AI parsing enabled by default but no %s is set", ENV_API_KEY)

    return PipelineConfig(**options)
