"""Periodic trigger for scheduled lesson delivery.

Fires the orchestrator's scheduled delivery on every interval boundary
inside a daily window, e.g. at :00 and :30 from 08:00 to 23:30 local time.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import TYPE_CHECKING
from zoneinfo import ZoneInfo

if TYPE_CHECKING:
    from .pipeline import DeliveryOrchestrator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeliveryWindow:
    """Daily window of delivery slots.

    Attributes:
        start_hour: First hour with slots (inclusive)
        end_hour: Last hour with slots (inclusive)
        interval_minutes: Slot spacing, must divide 60
        timezone: IANA timezone the hours refer to
    """

    start_hour: int = 8
    end_hour: int = 23
    interval_minutes: int = 30
    timezone: str = "Asia/Ho_Chi_Minh"

    def __post_init__(self) -> None:
        """Validate window bounds."""
        if not 0 <= self.start_hour <= self.end_hour <= 23:
            raise ValueError("hours must satisfy 0 <= start_hour <= end_hour <= 23")
        if not 1 <= self.interval_minutes <= 60 or 60 % self.interval_minutes != 0:
            raise ValueError("interval_minutes must divide 60")

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def contains(self, moment: datetime) -> bool:
        """Return True if moment falls within the window's hours."""
        local = moment.astimezone(self.tz)
        return self.start_hour <= local.hour <= self.end_hour

    def next_run(self, after: datetime) -> datetime:
        """Return the first slot strictly after the given moment.

        Args:
            after: Timezone-aware reference time

        Returns:
            Timezone-aware datetime in the window's timezone
        """
        local = after.astimezone(self.tz)
        hour_start = local.replace(minute=0, second=0, microsecond=0)
        slots_passed = local.minute // self.interval_minutes + 1
        candidate = hour_start + timedelta(minutes=slots_passed * self.interval_minutes)

        if candidate.hour < self.start_hour:
            return datetime.combine(candidate.date(), time(self.start_hour), tzinfo=self.tz)
        if candidate.hour > self.end_hour:
            next_day = candidate.date() + timedelta(days=1)
            return datetime.combine(next_day, time(self.start_hour), tzinfo=self.tz)
        return candidate


class DeliveryScheduler:
    """Runs scheduled deliveries on window slots until stopped."""

    def __init__(
        self,
        orchestrator: "DeliveryOrchestrator",
        window: DeliveryWindow,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.window = window
        self._now = now or (lambda: datetime.now(window.tz))
        self._stop = asyncio.Event()

    async def tick(self) -> None:
        """Run one scheduled delivery; failures are logged, never raised."""
        try:
            outcome = await self.orchestrator.run_scheduled_delivery()
            if outcome.item is None:
                logger.debug("Tick finished, nothing eligible")
        except Exception as e:
            logger.error(f"Scheduled delivery failed: {e}")

    async def run_forever(self) -> None:
        """Sleep until each slot and deliver, until stop() is called."""
        logger.info(
            f"Scheduler started: every {self.window.interval_minutes} min, "
            f"{self.window.start_hour:02d}:00-{self.window.end_hour:02d}:59 "
            f"{self.window.timezone}"
        )

        last_slot: datetime | None = None
        while not self._stop.is_set():
            now = self._now()
            # A timer can wake slightly before its slot; never fire a slot twice
            reference = now if last_slot is None else max(now, last_slot)
            next_run = self.window.next_run(reference)
            delay = max(0.0, (next_run - now).total_seconds())
            logger.debug(f"Next delivery at {next_run.isoformat()} (in {delay:.0f}s)")

            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
            except TimeoutError:
                last_slot = next_run
                logger.info(f"[{next_run.strftime('%H:%M')}] Delivery slot reached")
                await self.tick()

        logger.info("Scheduler stopped")

    def stop(self) -> None:
        """Ask run_forever to return."""
        self._stop.set()
