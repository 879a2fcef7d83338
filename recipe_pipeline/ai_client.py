"""
AI completion client.

The pipeline talks to the AI service through a single capability,
``complete(prompt) -> text``. GeminiCompletionClient implements it with
Google's generative AI SDK; tests substitute a scripted fake.
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from .const import (
    DEFAULT_MAX_OUTPUT_TOKENS,
    DEFAULT_MODEL,
    DEFAULT_TEMPERATURE,
    DEFAULT_TIMEOUT,
)
from .exceptions import AiMalformedResponse, AiUnavailable

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class CompletionClient(Protocol):
    """Anything that turns a prompt into a text completion."""

    def complete(self, prompt: str, *, system: str | None = None) -> str:
        """Return the completion text for a prompt.

        Raises:
            AiUnavailable: If the service cannot be reached or times out
        """
        ...


class GeminiCompletionClient:
    """Completion client backed by a Gemini model."""

    def __init__(
        self,
        api_key: str,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        temperature: float = DEFAULT_TEMPERATURE,
        max_output_tokens: int = DEFAULT_MAX_OUTPUT_TOKENS,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: API key for the language model
            model: The model to use for completions
            timeout: Seconds to wait for a response before giving up

        Raises:
            ValueError: If API key is empty
        """
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty")

        genai.configure(api_key=api_key)
        self.model = model
        self.timeout = timeout
        self.generation_config = {
            "temperature": temperature,
            "max_output_tokens": max_output_tokens,
        }
        _LOGGER.debug("Initialized GeminiCompletionClient with model %s", model)

    def complete(self, prompt: str, *, system: str | None = None) -> str:
        """Send one request to the model; no retries are attempted."""
        model = genai.GenerativeModel(self.model, system_instruction=system)
        _LOGGER.debug("Calling %s with %d characters of prompt",
                      self.model, len(prompt))

        try:
            response = model.generate_content(
                prompt,
                generation_config=self.generation_config,
                request_options={"timeout": self.timeout},
            )
        except (google_exceptions.DeadlineExceeded, TimeoutError) as e:
            _LOGGER.warning("AI request to %s timed out after %ss",
                            self.model, self.timeout)
            raise AiUnavailable(f"AI request timed out: {e}") from e
        except google_exceptions.GoogleAPIError as e:
            _LOGGER.error("AI request to %s failed: %s", self.model, str(e))
            raise AiUnavailable(f"AI service error: {e}") from e

        try:
            return response.text
        except ValueError as e:
            # Raised by the SDK when the candidate carries no text (e.g. blocked)
            raise AiMalformedResponse(f"AI response has no text: {e}") from e
