"""Provider abstraction for speech synthesis services.

This module provides a registry pattern for managing synthesis providers,
allowing the configured backend to be selected by name at runtime.
"""

from typing import TYPE_CHECKING, Any, ClassVar

if TYPE_CHECKING:
    from .base import SynthesisProvider

from .elevenlabs import ElevenLabsProvider
from .openai_tts import OpenAITTSProvider
from .system import SystemTTSProvider

__all__ = ["ProviderRegistry"]


class ProviderRegistry:
    """Registry for managing synthesis providers.

    This class maintains a registry of available providers,
    allowing registration and retrieval by name.
    """

    _providers: ClassVar[dict[str, type["SynthesisProvider"]]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["SynthesisProvider"]) -> None:
        """Register a synthesis provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements SynthesisProvider
        """
        cls._providers[name] = provider_class

    @classmethod
    def get(cls, name: str) -> type["SynthesisProvider"]:
        """Get a provider class by name.

        Args:
            name: Name of the provider to retrieve

        Returns:
            Provider class

        Raises:
            KeyError: If provider name not found
        """
        if name not in cls._providers:
            available = ", ".join(cls._providers.keys()) if cls._providers else "none"
            raise KeyError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return cls._providers[name]

    @classmethod
    def create(cls, name: str, **kwargs: Any) -> "SynthesisProvider":
        """Instantiate a provider by name.

        Args:
            name: Name of the provider
            **kwargs: Constructor arguments (e.g. voice)

        Returns:
            New provider instance

        Raises:
            KeyError: If provider name not found
        """
        return cls.get(name)(**kwargs)

    @classmethod
    def names(cls) -> list[str]:
        """Return registered provider names."""
        return sorted(cls._providers)


# Register providers
ProviderRegistry.register("elevenlabs", ElevenLabsProvider)
ProviderRegistry.register("openai", OpenAITTSProvider)
ProviderRegistry.register("system", SystemTTSProvider)
