"""Data models for the sentence store."""

import math
from dataclasses import dataclass
from typing import Any


@dataclass
class LearningItem:
    """A translated sentence scheduled for spaced repetition.

    Attributes:
        text: Translated sentence, also the identity used for deduplication
        last_sent_at: Epoch milliseconds of the last delivery (0 = never sent)
    """

    text: str
    last_sent_at: int = 0

    @classmethod
    def from_raw(cls, raw: Any) -> "LearningItem":
        """Build an item from its persisted JSON form.

        Older data files stored bare strings; those become never-sent items.

        Args:
            raw: A string or a mapping with "text" and optional "lastSentAt"

        Returns:
            Normalized LearningItem

        Raises:
            ValueError: If raw is neither form or has no usable text
        """
        if isinstance(raw, str):
            return cls(text=raw)

        if isinstance(raw, dict):
            text = raw.get("text")
            if not isinstance(text, str):
                raise ValueError(f"Item has no text field: {raw!r}")

            last_sent_at = raw.get("lastSentAt", 0)
            # bool is an int subclass but never a timestamp
            if isinstance(last_sent_at, bool) or not isinstance(
                last_sent_at, (int, float)
            ):
                last_sent_at = 0
            elif isinstance(last_sent_at, float) and not math.isfinite(last_sent_at):
                last_sent_at = 0
            return cls(text=text, last_sent_at=int(last_sent_at))

        raise ValueError(f"Unsupported item representation: {raw!r}")

    def to_dict(self) -> dict[str, Any]:
        """Return the persisted JSON form of this item."""
        return {"text": self.text, "lastSentAt": self.last_sent_at}


@dataclass(frozen=True)
class InsertResult:
    """Outcome of SentenceStore.insert.

    Attributes:
        inserted: False when the text was already stored
        item: The new item, or the existing one for duplicates
    """

    inserted: bool
    item: LearningItem
