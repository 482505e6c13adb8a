"""ElevenLabs text-to-speech provider implementation."""

import asyncio
import os

from elevenlabs.client import ElevenLabs

from ..errors import SynthesisAPIError, SynthesisAuthError, SynthesisError
from .base import SynthesisProvider
from .models import VoiceSettings

DEFAULT_VOICE = "21m00Tcm4TlvDq8ikWAM"


def _map_error(e: Exception, action: str) -> SynthesisError:
    """Translate an ElevenLabs SDK exception into a synthesis error."""
    if "unauthorized" in str(e).lower() or "401" in str(e):
        return SynthesisAuthError(f"Authentication failed: {e}", e)
    elif "429" in str(e):
        return SynthesisAPIError(f"Rate limit exceeded: {e}", 429, e)
    elif "5" in str(e)[:1]:  # 5xx server errors
        return SynthesisAPIError(f"Server error: {e}", None, e)
    return SynthesisAPIError(f"{action} failed: {e}", None, e)


class ElevenLabsProvider(SynthesisProvider):
    """ElevenLabs TTS provider implementation.

    The configured speed is sent as the voice settings' speaking rate.
    """

    def __init__(
        self,
        api_key: str | None = None,
        voice: str | None = None,
        model_id: str = "eleven_turbo_v2_5",
    ) -> None:
        """Initialize ElevenLabs provider.

        Args:
            api_key: ElevenLabs API key. If not provided, reads from
                    ELEVENLABS_API_KEY environment variable.
            voice: Voice ID used for every synthesis
            model_id: ElevenLabs model ID

        Raises:
            SynthesisAuthError: If API key is not provided or invalid.
        """
        self._api_key = api_key or os.getenv("ELEVENLABS_API_KEY")
        if not self._api_key:
            raise SynthesisAuthError(
                "ElevenLabs API key not found. Set ELEVENLABS_API_KEY environment "
                "variable or provide api_key parameter."
            )

        try:
            self._client = ElevenLabs(api_key=self._api_key)
        except Exception as e:
            raise SynthesisAuthError(
                f"Failed to initialize ElevenLabs client: {e}", e
            ) from e

        self.voice = voice or DEFAULT_VOICE
        self.model_id = model_id

        # Cache for voices to avoid repeated API calls
        self._voices_cache: list[dict] | None = None

    async def synthesize(self, text: str, speed: float) -> bytes:
        """Convert text to speech audio bytes.

        Args:
            text: Text to convert to speech
            speed: Speaking rate (0.25-4.0)

        Returns:
            Audio data as bytes (MP3 format)

        Raises:
            SynthesisAPIError: If API call fails
            SynthesisAuthError: If authentication fails
            ValueError: If text is empty or speed is out of range
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        voice_settings = VoiceSettings(speaking_rate=speed)

        # Run synchronous ElevenLabs client in thread to avoid blocking event loop
        def _sync_convert() -> bytes:
            audio_generator = self._client.text_to_speech.convert(
                text=text.strip(),
                voice_id=self.voice,
                model_id=self.model_id,
                voice_settings=voice_settings.to_dict(),
            )
            return b"".join(audio_generator)

        try:
            audio_bytes = await asyncio.to_thread(_sync_convert)
        except Exception as e:
            raise _map_error(e, "API call") from e

        if not audio_bytes:
            raise SynthesisAPIError("No audio data received from API")

        return audio_bytes

    async def list_voices(self) -> list[dict]:
        """Get list of available voices.

        Results are cached after first call to avoid repeated API requests.

        Returns:
            List of voice dictionaries with id, name, and provider fields

        Raises:
            SynthesisAPIError: If API call fails
            SynthesisAuthError: If authentication fails
        """
        if self._voices_cache is not None:
            return self._voices_cache

        def _sync_get_voices() -> list[dict]:
            response = self._client.voices.get_all()
            return [
                {"id": voice.voice_id, "name": voice.name, "provider": "elevenlabs"}
                for voice in response.voices
            ]

        try:
            voices = await asyncio.to_thread(_sync_get_voices)
        except Exception as e:
            raise _map_error(e, "List voices") from e

        self._voices_cache = voices
        return voices
