"""OpenAI text-to-speech provider implementation."""

import os

from openai import APIConnectionError, APIStatusError, AsyncOpenAI, AuthenticationError

from ..errors import SynthesisAPIError, SynthesisAuthError
from .base import SynthesisProvider

VOICES = ("alloy", "ash", "coral", "echo", "fable", "nova", "onyx", "sage", "shimmer")


class OpenAITTSProvider(SynthesisProvider):
    """OpenAI speech endpoint provider.

    The endpoint accepts speed values from 0.25 to 4.0 and returns MP3.
    """

    def __init__(
        self,
        api_key: str | None = None,
        voice: str = "alloy",
        model: str = "tts-1",
        timeout: float = 60.0,
    ) -> None:
        """Initialize OpenAI provider.

        Args:
            api_key: OpenAI API key. If not provided, reads from
                    OPENAI_API_KEY environment variable.
            voice: Voice name used for every synthesis
            model: Speech model name
            timeout: Request timeout in seconds

        Raises:
            SynthesisAuthError: If API key is not provided.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise SynthesisAuthError(
                "OpenAI API key not found. Set OPENAI_API_KEY environment "
                "variable or provide api_key parameter."
            )

        self._client = AsyncOpenAI(api_key=self._api_key, timeout=timeout)
        self.voice = voice
        self.model = model

    async def synthesize(self, text: str, speed: float) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            text: Text to convert to speech
            speed: Speaking speed, passed through unchanged

        Returns:
            Audio data as bytes (MP3 format)

        Raises:
            SynthesisAPIError: If API call fails
            SynthesisAuthError: If authentication fails
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        try:
            response = await self._client.audio.speech.create(
                model=self.model,
                voice=self.voice,
                input=text.strip(),
                speed=speed,
                response_format="mp3",
            )
            audio_bytes = response.content
        except AuthenticationError as e:
            raise SynthesisAuthError(f"Authentication failed: {e}", e) from e
        except APIStatusError as e:
            if e.status_code == 429:
                raise SynthesisAPIError(f"Rate limit exceeded: {e}", 429, e) from e
            raise SynthesisAPIError(f"API call failed: {e}", e.status_code, e) from e
        except APIConnectionError as e:
            raise SynthesisAPIError(f"Connection failed: {e}", None, e) from e

        if not audio_bytes:
            raise SynthesisAPIError("No audio data received from API")

        return audio_bytes

    async def list_voices(self) -> list[dict]:
        """Return the built-in OpenAI voices."""
        return [
            {"id": voice, "name": voice.capitalize(), "provider": "openai"}
            for voice in VOICES
        ]
