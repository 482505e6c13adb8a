"""Unit tests for SentenceStore persistence and mutation logic."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "src"))

from phrasecast.store.models import LearningItem
from phrasecast.store.storage import SentenceStore


def _seed(store: SentenceStore, *texts: str) -> None:
    store.save([LearningItem(text) for text in texts])


def _texts(store: SentenceStore) -> list[str]:
    return [item.text for item in store.load()]


class TestLoad:
    """Test reading persisted state."""

    def test_missing_file_loads_empty(self, store: SentenceStore) -> None:
        """Test that an absent data file is an empty store."""
        assert not store.path.exists()
        assert store.load() == []

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        """Test that the store creates its parent directory."""
        path = tmp_path / "nested" / "dir" / "data.json"
        SentenceStore(path)

        assert path.parent.is_dir()

    def test_malformed_json_loads_empty(self, store: SentenceStore) -> None:
        """Test that a parse failure is swallowed and treated as empty."""
        store.path.write_text("{not json", encoding="utf-8")

        assert store.load() == []

    def test_non_array_top_level_loads_empty(self, store: SentenceStore) -> None:
        """Test that a JSON object at top level is treated as empty."""
        store.path.write_text('{"text": "Hello"}', encoding="utf-8")

        assert store.load() == []

    def test_legacy_string_items_are_upgraded(self, store: SentenceStore) -> None:
        """Test that bare strings and objects can be mixed in one file."""
        store.path.write_text(
            json.dumps(["Hello", {"text": "World", "lastSentAt": 5}]), encoding="utf-8"
        )

        assert store.load() == [LearningItem("Hello", 0), LearningItem("World", 5)]

    def test_malformed_entries_are_skipped(self, store: SentenceStore) -> None:
        """Test that unusable entries are dropped while good ones load."""
        store.path.write_text(json.dumps(["A", 42, {"no": "text"}, "B"]), encoding="utf-8")

        assert _texts(store) == ["A", "B"]

    @pytest.mark.parametrize("raw_value", ["1e400", "-1e400", "Infinity", "NaN"])
    def test_non_finite_last_sent_at_loads_as_never_sent(
        self, store: SentenceStore, raw_value: str
    ) -> None:
        """Test that out-of-range timestamps do not break loading."""
        store.path.write_text(
            f'[{{"text": "A", "lastSentAt": {raw_value}}}, "B"]', encoding="utf-8"
        )

        assert store.load() == [LearningItem("A", 0), LearningItem("B", 0)]

    def test_non_finite_last_sent_at_does_not_block_mutations(
        self, store: SentenceStore
    ) -> None:
        """Test that insert and touch keep working on such a file."""
        store.path.write_text('[{"text": "A", "lastSentAt": 1e400}]', encoding="utf-8")

        assert store.insert("B").inserted is True
        assert store.touch("A", 5000) is True
        assert store.load() == [LearningItem("A", 5000), LearningItem("B", 0)]

    def test_all_is_a_snapshot_of_load(self, store: SentenceStore) -> None:
        """Test that all() returns the same items as load()."""
        _seed(store, "A", "B")

        assert store.all() == store.load()


class TestSave:
    """Test writing persisted state."""

    def test_save_writes_pretty_printed_objects(self, store: SentenceStore) -> None:
        """Test that saved JSON is indented and uses the object form."""
        store.save([LearningItem("Hello", 7)])

        content = store.path.read_text(encoding="utf-8")
        assert json.loads(content) == [{"text": "Hello", "lastSentAt": 7}]
        assert "\n  " in content

    def test_save_keeps_non_ascii_readable(self, store: SentenceStore) -> None:
        """Test that non-ASCII text is written as-is for human inspection."""
        store.save([LearningItem("Tôi yêu bạn")])

        assert "Tôi yêu bạn" in store.path.read_text(encoding="utf-8")

    def test_save_leaves_no_temp_files(self, store: SentenceStore) -> None:
        """Test that the atomic write cleans up after itself."""
        store.save([LearningItem("A")])

        assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]

    def test_save_failure_is_logged_not_raised(self, store: SentenceStore) -> None:
        """Test that write errors are best-effort."""
        _seed(store, "original")

        with patch("phrasecast.store.storage.os.replace", side_effect=OSError("disk full")):
            assert store.save([LearningItem("new")]) is False

        # Previous content untouched, temp file removed
        assert _texts(store) == ["original"]
        assert [p.name for p in store.path.parent.iterdir()] == [store.path.name]


class TestInsert:
    """Test deduplicated insertion."""

    def test_insert_into_empty_store(self, store: SentenceStore) -> None:
        """Test inserting the first item persists it as never sent."""
        result = store.insert("Hello")

        assert result.inserted is True
        assert result.item == LearningItem("Hello", 0)
        assert json.loads(store.path.read_text(encoding="utf-8")) == [
            {"text": "Hello", "lastSentAt": 0}
        ]

    def test_duplicate_insert_is_rejected(self, store: SentenceStore) -> None:
        """Test that exact duplicates are not inserted and the store is unchanged."""
        store.insert("Hello")
        before = store.path.read_text(encoding="utf-8")

        result = store.insert("Hello")

        assert result.inserted is False
        assert result.item.text == "Hello"
        assert store.path.read_text(encoding="utf-8") == before

    def test_duplicate_returns_existing_item_with_its_state(
        self, store: SentenceStore
    ) -> None:
        """Test that a duplicate reports the stored item including lastSentAt."""
        store.save([LearningItem("Hello", 123)])

        assert store.insert("Hello").item == LearningItem("Hello", 123)

    def test_dedup_is_case_sensitive(self, store: SentenceStore) -> None:
        """Test that texts differing only in case are distinct items."""
        assert store.insert("Hello").inserted
        assert store.insert("hello").inserted
        assert _texts(store) == ["Hello", "hello"]

    def test_insertion_order_preserved(self, store: SentenceStore) -> None:
        """Test that items keep insertion order."""
        for text in ["C", "A", "B"]:
            store.insert(text)

        assert _texts(store) == ["C", "A", "B"]

    @pytest.mark.parametrize(
        "texts",
        [
            ["A", "B", "A", "C", "B", "A"],
            ["x"] * 5,
            ["one", "One", "ONE", "one"],
        ],
    )
    def test_each_text_stored_at_most_once(
        self, store: SentenceStore, texts: list[str]
    ) -> None:
        """Test the dedup invariant over sequences of inserts."""
        for text in texts:
            store.insert(text)

        stored = _texts(store)
        assert len(stored) == len(set(stored))
        assert set(stored) == set(texts)


class TestDeleteAt:
    """Test positional deletion."""

    @pytest.mark.parametrize("positions", [{1, 3}, [3, 1], [1, 3], (3, 1, 3)])
    def test_delete_positions_in_any_order(
        self, store: SentenceStore, positions
    ) -> None:
        """Test that deleting {1,3} from [A,B,C,D] yields [B,D] regardless of order."""
        _seed(store, "A", "B", "C", "D")

        removed = store.delete_at(positions)

        assert _texts(store) == ["B", "D"]
        assert sorted(item.text for item in removed) == ["A", "C"]

    def test_out_of_range_positions_ignored(self, store: SentenceStore) -> None:
        """Test that only in-range positions are deleted."""
        _seed(store, "A", "B", "C", "D")

        removed = store.delete_at({2, 5})

        assert len(removed) == 1
        assert _texts(store) == ["A", "C", "D"]

    def test_zero_and_negative_positions_ignored(self, store: SentenceStore) -> None:
        """Test that positions are 1-based and non-positive ones are ignored."""
        _seed(store, "A", "B")

        assert store.delete_at([0, -1]) == []
        assert _texts(store) == ["A", "B"]

    def test_no_write_when_nothing_deleted(self, store: SentenceStore) -> None:
        """Test that an all-out-of-range delete does not touch the file."""
        _seed(store, "A")

        with patch.object(store, "save") as mock_save:
            store.delete_at([9])

        mock_save.assert_not_called()

    def test_single_save_for_multiple_deletions(self, store: SentenceStore) -> None:
        """Test that deletions are persisted once."""
        _seed(store, "A", "B", "C")

        with patch.object(store, "save", wraps=store.save) as mock_save:
            store.delete_at([1, 2, 3])

        assert mock_save.call_count == 1
        assert store.load() == []


class TestClearAndTouch:
    """Test clearing and recency updates."""

    def test_clear_empties_store(self, store: SentenceStore) -> None:
        """Test that clear persists an empty list and returns removed items."""
        _seed(store, "A", "B")

        removed = store.clear()

        assert [item.text for item in removed] == ["A", "B"]
        assert store.load() == []
        assert json.loads(store.path.read_text(encoding="utf-8")) == []

    def test_touch_updates_last_sent_at(self, store: SentenceStore) -> None:
        """Test that touch sets the timestamp of the matching item only."""
        _seed(store, "A", "B")

        assert store.touch("B", 5000) is True
        assert store.load() == [LearningItem("A", 0), LearningItem("B", 5000)]

    def test_touch_missing_item_is_noop(self, store: SentenceStore) -> None:
        """Test that touching a deleted item is not an error and writes nothing."""
        _seed(store, "A")

        with patch.object(store, "save") as mock_save:
            assert store.touch("gone", 5000) is False

        mock_save.assert_not_called()
