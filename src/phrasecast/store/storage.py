"""JSON file storage for learning items."""

import json
import logging
import os
import tempfile
from collections.abc import Iterable
from pathlib import Path

from .models import InsertResult, LearningItem

logger = logging.getLogger(__name__)


class SentenceStore:
    """Ordered, deduplicated collection of learning items backed by a JSON file.

    Every mutation reads the whole file, changes the list in memory and writes
    the whole list back. There is no locking: overlapping writers are
    last-write-wins.

    Persistence is best-effort. Read failures are logged and treated as an
    empty store, write failures are logged and not raised.
    """

    def __init__(self, path: Path):
        """Initialize store backed by the given JSON file.

        Args:
            path: Location of the data file (created on first save)
        """
        self.path = path

        # Create parent directory if it doesn't exist
        path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> list[LearningItem]:
        """Read all items from disk.

        Returns:
            Items in insertion order, or an empty list if the file is
            missing, unreadable or not a JSON array
        """
        if not self.path.exists():
            return []

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read store {self.path}: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(
                f"Store {self.path} does not contain a JSON array, treating as empty"
            )
            return []

        items = []
        for entry in raw:
            try:
                items.append(LearningItem.from_raw(entry))
            except ValueError as e:
                logger.warning(f"Skipping malformed store entry: {e}")
        return items

    def all(self) -> list[LearningItem]:
        """Return a snapshot of every stored item."""
        return self.load()

    def save(self, items: Iterable[LearningItem]) -> bool:
        """Overwrite the data file with the given items.

        The JSON is written to a temporary file in the same directory and
        moved into place, so readers see either the old or the new list.

        Args:
            items: Full item sequence to persist

        Returns:
            True if the file was written, False if the write failed
        """
        payload = json.dumps(
            [item.to_dict() for item in items], indent=2, ensure_ascii=False
        )

        tmp_path = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp_path, self.path)
            return True
        except OSError as e:
            logger.error(f"Failed to save store {self.path}: {e}")
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            return False

    def insert(self, text: str) -> InsertResult:
        """Append a new never-sent item unless the exact text is already stored.

        Args:
            text: Translated sentence (compared case-sensitively)

        Returns:
            InsertResult with inserted=False and the existing item for duplicates
        """
        items = self.load()

        for item in items:
            if item.text == text:
                logger.debug(f"Duplicate item not inserted: '{text[:50]}'")
                return InsertResult(inserted=False, item=item)

        item = LearningItem(text=text, last_sent_at=0)
        items.append(item)
        self.save(items)

        logger.info(f"Stored new item (total: {len(items)}): '{text[:50]}'")
        return InsertResult(inserted=True, item=item)

    def delete_at(self, positions: Iterable[int]) -> list[LearningItem]:
        """Delete items by their 1-based position in the current listing.

        Positions are applied highest first so earlier positions stay valid
        while the list shrinks. Out-of-range positions are ignored.

        Args:
            positions: 1-based positions, in any order, duplicates allowed

        Returns:
            Removed items (empty if nothing matched)
        """
        items = self.load()

        removed = []
        for position in sorted(set(positions), reverse=True):
            if 1 <= position <= len(items):
                removed.append(items.pop(position - 1))

        if removed:
            self.save(items)
            logger.info(f"Deleted {len(removed)} item(s), {len(items)} remaining")

        return removed

    def clear(self) -> list[LearningItem]:
        """Remove every item.

        Returns:
            Items that were stored before clearing
        """
        removed = self.load()
        self.save([])
        logger.info(f"Cleared store ({len(removed)} item(s) removed)")
        return removed

    def touch(self, text: str, at: int) -> bool:
        """Record a delivery time for the item with the given text.

        Args:
            text: Exact text of the item
            at: Delivery time in epoch milliseconds

        Returns:
            True if the item was found and updated, False otherwise
        """
        items = self.load()

        for item in items:
            if item.text == text:
                item.last_sent_at = at
                self.save(items)
                return True

        logger.debug(f"Touch skipped, item no longer stored: '{text[:50]}'")
        return False
