"""Delivery orchestrator for phrasecast.

Coordinates the translator, SentenceStore, AudioCache, spaced repetition
selector and delivery sink. Two entry points drive everything: a user
submitting new text, and the scheduler asking for the next lesson.
"""

import enum
import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from .cache.manager import AudioCache
from .cache.models import ArtifactHandle
from .delivery.base import DeliverySink
from .errors import DeliveryError, SynthesisError, TranslationError
from .repetition import SpacedRepetitionSelector, now_ms
from .store.models import LearningItem
from .store.storage import SentenceStore
from .translate.base import Translator

logger = logging.getLogger(__name__)


class SubmitStatus(enum.Enum):
    """Outcome kinds of DeliveryOrchestrator.submit_text."""

    ADDED = "added"
    DUPLICATE = "duplicate"
    TRANSLATION_FAILED = "translation_failed"


@dataclass(frozen=True)
class SubmitResult:
    """Result of submitting new text.

    Attributes:
        status: What happened to the submission
        text: Translated text (None if translation failed)
        artifact: Pronunciation audio (None unless ADDED with working synthesis)
        total: Number of stored items after the submission
        error: Failure message for TRANSLATION_FAILED
    """

    status: SubmitStatus
    text: str | None = None
    artifact: ArtifactHandle | None = None
    total: int = 0
    error: str | None = None


@dataclass(frozen=True)
class ListedItem:
    """An item as shown to the user, with its current 1-based position."""

    position: int
    text: str
    last_sent_at: int


@dataclass(frozen=True)
class DeliveryOutcome:
    """Result of one scheduled delivery tick.

    Attributes:
        item: Selected item, None when nothing was eligible
        artifact: Audio sent with the lesson, None for text-only delivery
        delivered: True if the sink accepted the lesson
    """

    item: LearningItem | None
    artifact: ArtifactHandle | None = None
    delivered: bool = False


class DeliveryOrchestrator:
    """Runs the submit and scheduled-delivery workflows over injected collaborators.

    Example:
        orchestrator = DeliveryOrchestrator(
            store=SentenceStore(Path("data.json")),
            cache=AudioCache(Path("audio"), provider),
            translator=OpenRouterTranslator(),
            sink=ConsoleSink(),
            speed=0.7,
        )

        result = await orchestrator.submit_text("Xin chào")
        # SubmitResult(status=SubmitStatus.ADDED, text="Hello", ...)

        outcome = await orchestrator.run_scheduled_delivery()
    """

    def __init__(
        self,
        store: SentenceStore,
        cache: AudioCache,
        translator: Translator | None,
        sink: DeliverySink,
        speed: float = 1.0,
        selector: SpacedRepetitionSelector | None = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        """Initialize orchestrator.

        Args:
            store: Sentence store
            cache: Audio cache (owns the synthesis provider)
            translator: Translator applied to every submission (None rejects
                submissions as translation failures)
            sink: Destination of scheduled lessons
            speed: Synthesis speed used for every artifact
            selector: Spaced repetition policy (defaults to 2h cooldown)
            clock: Returns current time in epoch milliseconds
        """
        self.store = store
        self.cache = cache
        self.translator = translator
        self.sink = sink
        self.speed = speed
        self.selector = selector or SpacedRepetitionSelector()
        self.clock = clock

    async def submit_text(self, text: str) -> SubmitResult:
        """Translate, store and voice a new sentence.

        Synthesis failures degrade to a text-only result; the item stays
        stored either way.

        Args:
            text: Raw user input

        Returns:
            SubmitResult describing the outcome

        Raises:
            ValueError: If text is empty
        """
        if not text or not text.strip():
            raise ValueError("Text cannot be empty")

        try:
            if self.translator is None:
                raise TranslationError("No translator configured")
            translated = await self.translator.translate(text.strip())
        except TranslationError as e:
            logger.error(f"Translation failed for '{text[:50]}': {e}")
            return SubmitResult(status=SubmitStatus.TRANSLATION_FAILED, error=str(e))

        result = self.store.insert(translated)
        total = len(self.store.all())

        if not result.inserted:
            return SubmitResult(
                status=SubmitStatus.DUPLICATE, text=translated, total=total
            )

        artifact = await self._ensure_audio(translated)
        return SubmitResult(
            status=SubmitStatus.ADDED, text=translated, artifact=artifact, total=total
        )

    def list_items(self) -> list[ListedItem]:
        """Return stored items with their current 1-based positions."""
        return [
            ListedItem(position=i, text=item.text, last_sent_at=item.last_sent_at)
            for i, item in enumerate(self.store.all(), start=1)
        ]

    def delete_items(self, positions: Iterable[int]) -> int:
        """Delete items by 1-based position and evict their audio.

        Returns:
            Number of items deleted
        """
        removed = self.store.delete_at(positions)
        for item in removed:
            self.cache.evict(item.text, self.speed)
        return len(removed)

    def clear_all(self) -> int:
        """Delete every item and every cached artifact.

        Returns:
            Number of items deleted
        """
        removed = self.store.clear()
        self.cache.evict_all()
        return len(removed)

    async def request_voice(self, position: int) -> ArtifactHandle | None:
        """Return the pronunciation audio for the item at a 1-based position.

        Returns:
            Artifact handle, or None if the position does not exist

        Raises:
            SynthesisError: If the artifact is not cached and synthesis fails
        """
        items = self.store.all()
        if not 1 <= position <= len(items):
            logger.debug(f"Voice requested for missing position {position}")
            return None

        return await self.cache.ensure(items[position - 1].text, self.speed)

    async def run_scheduled_delivery(self) -> DeliveryOutcome:
        """Pick an eligible item, deliver it and record the delivery time.

        A text-only delivery (synthesis failed) still counts against the
        cooldown. If the sink rejects the lesson the item is left untouched
        so it stays eligible.

        Returns:
            DeliveryOutcome for this tick
        """
        now = self.clock()
        item = self.selector.pick(self.store.all(), now)

        if item is None:
            logger.info("No eligible items to deliver")
            return DeliveryOutcome(item=None)

        artifact = await self._ensure_audio(item.text)

        try:
            await self.sink.deliver(item.text, artifact)
        except DeliveryError as e:
            logger.error(f"Delivery failed for '{item.text[:50]}': {e}")
            return DeliveryOutcome(item=item, artifact=artifact, delivered=False)

        self.store.touch(item.text, now)
        logger.info(
            f"Delivered '{item.text[:50]}' ({'with audio' if artifact else 'text only'})"
        )
        return DeliveryOutcome(item=item, artifact=artifact, delivered=True)

    async def _ensure_audio(self, text: str) -> ArtifactHandle | None:
        try:
            return await self.cache.ensure(text, self.speed)
        except SynthesisError as e:
            logger.warning(f"Synthesis failed, continuing without audio: {e}")
            return None
