"""Deduplicated sentence storage for phrasecast."""

from .models import InsertResult, LearningItem
from .storage import SentenceStore

__all__ = ["InsertResult", "LearningItem", "SentenceStore"]
