"""Spaced repetition selection.

An item becomes eligible again once its cooldown has elapsed since the last
delivery. Each scheduled tick picks uniformly at random among eligible items,
which approximates round-robin review without per-item schedules.
"""

import logging
import random
import time
from collections.abc import Sequence

from .store.models import LearningItem

logger = logging.getLogger(__name__)

COOLDOWN_MS = 2 * 60 * 60 * 1000


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class SpacedRepetitionSelector:
    """Picks the next item to re-deliver from a store snapshot."""

    def __init__(
        self, cooldown_ms: int = COOLDOWN_MS, rng: random.Random | None = None
    ) -> None:
        """Initialize selector.

        Args:
            cooldown_ms: Minimum time between two deliveries of the same item
            rng: Random source (a seeded instance makes picks reproducible)

        Raises:
            ValueError: If cooldown_ms is negative
        """
        if cooldown_ms < 0:
            raise ValueError(f"cooldown_ms must be non-negative, got {cooldown_ms}")

        self.cooldown_ms = cooldown_ms
        self._rng = rng or random.Random()

    def eligible(
        self, items: Sequence[LearningItem], now: int
    ) -> list[LearningItem]:
        """Return items whose cooldown has strictly elapsed at `now`."""
        return [item for item in items if now - item.last_sent_at > self.cooldown_ms]

    def pick(self, items: Sequence[LearningItem], now: int) -> LearningItem | None:
        """Choose one eligible item uniformly at random.

        Args:
            items: Full store snapshot
            now: Current time in epoch milliseconds

        Returns:
            The chosen item, or None if nothing is eligible (including an
            empty store)
        """
        pool = self.eligible(items, now)
        if not pool:
            logger.debug(
                f"No eligible items ({len(items)} stored, all cooling down)"
                if items
                else "No items stored"
            )
            return None

        return self._rng.choice(pool)
