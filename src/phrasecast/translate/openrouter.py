"""Chat-completion translator for OpenAI-compatible endpoints (OpenRouter by default)."""

import logging
import os

from openai import AsyncOpenAI, OpenAIError

from ..errors import TranslationError
from .base import Translator

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_MODEL = "google/gemini-2.0-flash-001"

SYSTEM_PROMPT = (
    "You are a professional translator. Translate the following text to "
    "{language}. Respond ONLY with the translated text and nothing else."
)


class OpenRouterTranslator(Translator):
    """Translator backed by a chat completion model."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        target_language: str = "English",
        timeout: float = 30.0,
    ) -> None:
        """Initialize translator.

        Args:
            api_key: API key. If not provided, reads from OPENROUTER_API_KEY
                    environment variable.
            model: Chat model identifier
            base_url: OpenAI-compatible API base URL
            target_language: Language every submission is translated into
            timeout: Request timeout in seconds

        Raises:
            TranslationError: If API key is not provided.
        """
        self._api_key = api_key or os.getenv("OPENROUTER_API_KEY")
        if not self._api_key:
            raise TranslationError(
                "OpenRouter API key not found. Set OPENROUTER_API_KEY environment "
                "variable or provide api_key parameter."
            )

        self._client = AsyncOpenAI(
            api_key=self._api_key, base_url=base_url, timeout=timeout
        )
        self.model = model
        self.target_language = target_language

    async def translate(self, text: str) -> str:
        """Translate text with a single chat completion call.

        Raises:
            TranslationError: If the call fails or the reply is empty
        """
        try:
            response = await self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {
                        "role": "system",
                        "content": SYSTEM_PROMPT.format(language=self.target_language),
                    },
                    {"role": "user", "content": text},
                ],
                temperature=0.3,
            )
        except OpenAIError as e:
            logger.error(f"Translation request failed: {e}")
            raise TranslationError(f"Translation request failed: {e}", e) from e

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            raise TranslationError(f"Malformed translation reply: {e}", e) from e

        translated = (content or "").strip()
        if not translated:
            raise TranslationError("Translation reply was empty")

        return translated
