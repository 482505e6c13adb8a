"""High-level API for building a phrasecast orchestrator from configuration."""

import logging

from .cache.manager import AudioCache
from .config import PhrasecastConfig
from .delivery import ConsoleSink, DeliverySink, TelegramSink
from .pipeline import DeliveryOrchestrator
from .providers import ProviderRegistry
from .repetition import SpacedRepetitionSelector
from .scheduler import DeliveryScheduler, DeliveryWindow
from .store.storage import SentenceStore
from .translate import OpenRouterTranslator, Translator

logger = logging.getLogger(__name__)


def build_sink(config: PhrasecastConfig) -> DeliverySink:
    """Return the Telegram sink when a chat is configured, else the console sink."""
    if config.telegram.chat_id:
        return TelegramSink(chat_id=config.telegram.chat_id)
    logger.debug("No telegram chat configured, lessons go to the console")
    return ConsoleSink()


def build_orchestrator(
    config: PhrasecastConfig,
    sink: DeliverySink | None = None,
    translator: Translator | None = None,
    offline: bool = False,
) -> DeliveryOrchestrator:
    """Wire store, cache, provider, translator and sink from configuration.

    Args:
        config: Loaded configuration
        sink: Override for the delivery destination
        translator: Override for the translator
        offline: Skip creating the provider and translator, for commands that
            only list or delete (no credentials needed). Cache hits still work.

    Returns:
        Ready-to-use DeliveryOrchestrator

    Raises:
        KeyError: If the configured provider is unknown
        PhrasecastError: If a collaborator is missing credentials
    """
    provider_class = ProviderRegistry.get(config.tts.provider)

    provider = None
    if not offline:
        provider_kwargs = {"voice": config.tts.voice} if config.tts.voice else {}
        provider = provider_class(**provider_kwargs)
        if translator is None:
            translator = OpenRouterTranslator(
                model=config.translate.model,
                base_url=config.translate.base_url,
                target_language=config.translate.target_language,
            )

    cache = AudioCache(
        config.cache.dir, provider, extension=provider_class.audio_extension
    )

    return DeliveryOrchestrator(
        store=SentenceStore(config.store.path),
        cache=cache,
        translator=translator,
        sink=sink or (ConsoleSink() if offline else build_sink(config)),
        speed=config.cache.speed,
        selector=SpacedRepetitionSelector(
            cooldown_ms=config.schedule.cooldown_minutes * 60 * 1000
        ),
    )


def build_scheduler(
    config: PhrasecastConfig, orchestrator: DeliveryOrchestrator
) -> DeliveryScheduler:
    """Create the periodic trigger for the configured delivery window."""
    window = DeliveryWindow(
        start_hour=config.schedule.start_hour,
        end_hour=config.schedule.end_hour,
        interval_minutes=config.schedule.interval_minutes,
        timezone=config.schedule.timezone,
    )
    return DeliveryScheduler(orchestrator, window)
