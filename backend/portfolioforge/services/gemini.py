"""
Gemini text generation used by the resume extractor and profession classifier.
"""
import logging
from typing import Optional

from google import genai

from ..config import Settings, get_settings
from ..exceptions import ExternalServiceError

logger = logging.getLogger(__name__)


class GeminiTextGenerator:
    """Send a prompt, get the response text back."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._client = None

    @property
    def client(self) -> genai.Client:
        """Get the Gemini client, initializing lazily if needed."""
        if self._client is None:
            if not self.settings.gemini_api_key:
                raise ExternalServiceError("Gemini API not configured. Please set GEMINI_API_KEY.")
            self._client = genai.Client(api_key=self.settings.gemini_api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        client = self.client
        try:
            response = await client.aio.models.generate_content(
                model=self.settings.gemini_model,
                contents=prompt,
                config=genai.types.GenerateContentConfig(
                    temperature=self.settings.gemini_temperature,
                ),
            )
        except Exception as e:
            logger.error(f"Gemini request failed ({self.settings.gemini_model}): {e}")
            raise ExternalServiceError(f"Gemini request failed: {e}") from e
        return response.text or ""
