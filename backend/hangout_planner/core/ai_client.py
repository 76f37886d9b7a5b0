"""
Gemini client used for itinerary generation
"""

from typing import Optional

import structlog
from google import genai
from google.genai import types

from hangout_planner.core.exceptions import ConfigurationError
from hangout_planner.core.settings import Settings

logger = structlog.get_logger(__name__)


class GeminiClient:
    """
    Async wrapper around the Gemini SDK.

    Requests ask for a JSON response and carry an HTTP timeout of
    ``timeout_seconds``. Errors are raised to the caller, which decides how
    to recover.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-1.5-pro",
        temperature: float = 0.7,
        timeout_seconds: float = 20.0,
        client: Optional[genai.Client] = None,
    ):
        if not api_key and client is None:
            raise ConfigurationError("GEMINI_API_KEY environment variable is required")
        self.model = model
        self.temperature = temperature
        self.timeout_seconds = timeout_seconds
        self._client = client or genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000)),
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiClient":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model=settings.GEMINI_MODEL,
            temperature=settings.AI_TEMPERATURE,
            timeout_seconds=settings.AI_TIMEOUT_SECONDS,
        )

    async def generate(self, prompt: str) -> str:
        """Send one prompt and return the raw response text."""
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
            config=types.GenerateContentConfig(
                temperature=self.temperature,
                response_mime_type="application/json",
            ),
        )
        text = getattr(response, "text", None)
        if not text:
            raise ValueError("Gemini returned an empty response")
        logger.debug("gemini_response_received", model=self.model, chars=len(text))
        return text
