"""Abstract base class for speech synthesis providers.

This module defines the interface that all synthesis providers must
implement, so the audio cache can call any backend the same way.
"""

from abc import ABC, abstractmethod
from typing import ClassVar


class SynthesisProvider(ABC):
    """Abstract base class for text-to-speech providers.

    All providers must inherit from this class and implement the required
    methods for synthesizing speech and listing voices.

    Voice Dictionary Structure:
        Each voice returned by list_voices() should follow this structure:
        {
            "id": str,       # Unique identifier for the voice
            "name": str,     # Human-readable name for the voice
            "provider": str  # Name of the provider (e.g., "openai", "system")
        }
    """

    # File extension of the audio returned by synthesize()
    audio_extension: ClassVar[str] = "mp3"

    @abstractmethod
    async def synthesize(self, text: str, speed: float) -> bytes:
        """Convert text to audio bytes.

        Args:
            text: The text to convert to speech
            speed: Speaking speed multiplier (1.0 is the provider's normal rate)

        Returns:
            Audio data as bytes

        Raises:
            SynthesisError: If synthesis fails
        """
        pass

    @abstractmethod
    async def list_voices(self) -> list[dict]:
        """Return available voices for this provider.

        Returns:
            List of voice dictionaries, each containing:
            - id: Unique voice identifier
            - name: Human-readable voice name
            - provider: Provider name

        Raises:
            SynthesisError: If voice listing fails
        """
        pass
