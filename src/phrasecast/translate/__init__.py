"""Translation backends for phrasecast."""

from .base import Translator
from .openrouter import OpenRouterTranslator

__all__ = ["OpenRouterTranslator", "Translator"]
