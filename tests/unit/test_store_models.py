"""Unit tests for learning item models and their JSON form."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from phrasecast.store.models import InsertResult, LearningItem


class TestLearningItemFromRaw:
    """Test normalization at the deserialization boundary."""

    def test_legacy_bare_string_becomes_never_sent_item(self) -> None:
        """Test that a bare string is upgraded to an item with lastSentAt 0."""
        item = LearningItem.from_raw("Hello")

        assert item == LearningItem(text="Hello", last_sent_at=0)

    def test_object_form_with_timestamp(self) -> None:
        """Test that the object form keeps its timestamp."""
        item = LearningItem.from_raw({"text": "Hello", "lastSentAt": 1234})

        assert item.text == "Hello"
        assert item.last_sent_at == 1234

    def test_object_form_without_timestamp_defaults_to_zero(self) -> None:
        """Test that a missing lastSentAt means never sent."""
        assert LearningItem.from_raw({"text": "Hi"}).last_sent_at == 0

    def test_non_numeric_timestamp_defaults_to_zero(self) -> None:
        """Test that garbage timestamps are treated as never sent."""
        assert LearningItem.from_raw({"text": "Hi", "lastSentAt": "x"}).last_sent_at == 0
        assert LearningItem.from_raw({"text": "Hi", "lastSentAt": True}).last_sent_at == 0

    def test_float_timestamp_is_truncated(self) -> None:
        """Test that float timestamps are stored as ints."""
        assert LearningItem.from_raw({"text": "Hi", "lastSentAt": 12.9}).last_sent_at == 12

    def test_object_without_text_raises(self) -> None:
        """Test that objects without a string text are rejected."""
        with pytest.raises(ValueError, match="no text field"):
            LearningItem.from_raw({"lastSentAt": 5})

        with pytest.raises(ValueError, match="no text field"):
            LearningItem.from_raw({"text": 42})

    def test_unsupported_type_raises(self) -> None:
        """Test that numbers and lists are rejected."""
        with pytest.raises(ValueError, match="Unsupported item representation"):
            LearningItem.from_raw(42)

        with pytest.raises(ValueError, match="Unsupported item representation"):
            LearningItem.from_raw(["Hello"])


class TestLearningItemToDict:
    """Test the persisted JSON form."""

    def test_to_dict_uses_persisted_keys(self) -> None:
        """Test that to_dict produces text/lastSentAt keys."""
        item = LearningItem(text="Xin chào", last_sent_at=99)

        assert item.to_dict() == {"text": "Xin chào", "lastSentAt": 99}


def test_insert_result_is_frozen() -> None:
    """Test that InsertResult cannot be mutated."""
    result = InsertResult(inserted=True, item=LearningItem("A"))

    with pytest.raises(AttributeError):
        result.inserted = False  # type: ignore[misc]
