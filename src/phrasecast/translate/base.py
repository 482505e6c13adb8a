"""Abstract base class for text translators."""

from abc import ABC, abstractmethod


class Translator(ABC):
    """Turns submitted text into the sentence that gets stored and repeated."""

    @abstractmethod
    async def translate(self, text: str) -> str:
        """Translate text into the target language.

        Args:
            text: Text as submitted by the user

        Returns:
            Translated text, stripped of surrounding whitespace

        Raises:
            TranslationError: If no usable translation could be obtained
        """
        pass
