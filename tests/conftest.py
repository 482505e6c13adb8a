"""Pytest configuration and fixtures for phrasecast tests."""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from phrasecast.cache.manager import AudioCache
from phrasecast.cache.models import ArtifactHandle
from phrasecast.delivery.base import DeliverySink
from phrasecast.errors import DeliveryError, SynthesisAPIError, TranslationError
from phrasecast.pipeline import DeliveryOrchestrator
from phrasecast.providers.base import SynthesisProvider
from phrasecast.repetition import SpacedRepetitionSelector
from phrasecast.store.storage import SentenceStore
from phrasecast.translate.base import Translator

HOUR_MS = 60 * 60 * 1000
T0 = 1_700_000_000_000


class FakeProvider(SynthesisProvider):
    """Synthesis provider returning deterministic bytes and recording calls."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[tuple[str, float]] = []

    async def synthesize(self, text: str, speed: float) -> bytes:
        self.calls.append((text, speed))
        if self.fail:
            raise SynthesisAPIError("synthesis unavailable", 503)
        return f"audio:{text}:{speed}".encode()

    async def list_voices(self) -> list[dict]:
        return [{"id": "fake", "name": "Fake", "provider": "fake"}]


class FakeTranslator(Translator):
    """Translator that looks texts up in a mapping (identity for unknown text)."""

    def __init__(self, mapping: dict[str, str] | None = None, fail: bool = False) -> None:
        self.mapping = mapping or {}
        self.fail = fail
        self.calls: list[str] = []

    async def translate(self, text: str) -> str:
        self.calls.append(text)
        if self.fail:
            raise TranslationError("translator unreachable")
        return self.mapping.get(text, text)


class RecordingSink(DeliverySink):
    """Delivery sink that remembers what it was asked to send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.deliveries: list[tuple[str, ArtifactHandle | None]] = []

    async def deliver(self, text: str, artifact: ArtifactHandle | None) -> None:
        if self.fail:
            raise DeliveryError("destination rejected the lesson", 400)
        self.deliveries.append((text, artifact))


class FakeClock:
    """Callable clock returning a settable epoch-millisecond time."""

    def __init__(self, now: int = T0) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()


@pytest.fixture
def translator() -> FakeTranslator:
    return FakeTranslator()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(tmp_path: Path) -> SentenceStore:
    return SentenceStore(tmp_path / "data" / "data.json")


@pytest.fixture
def cache(tmp_path: Path, provider: FakeProvider) -> AudioCache:
    return AudioCache(tmp_path / "audio", provider)


@pytest.fixture
def orchestrator(
    store: SentenceStore,
    cache: AudioCache,
    translator: FakeTranslator,
    sink: RecordingSink,
    clock: FakeClock,
) -> DeliveryOrchestrator:
    return DeliveryOrchestrator(
        store=store,
        cache=cache,
        translator=translator,
        sink=sink,
        speed=0.7,
        selector=SpacedRepetitionSelector(),
        clock=clock,
    )
