"""Configuration management for phrasecast.

Loads configuration from ~/.config/phrasecast/config.toml.
Priority chain: CLI flags > env vars > config file.
"""

import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError

CONFIG_DIR = Path.home() / ".config" / "phrasecast"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = """\
# phrasecast configuration

[store]
# JSON file holding every stored sentence
path = "~/.local/share/phrasecast/data.json"

[cache]
# Directory of synthesized audio, one file per (sentence, speed)
dir = "~/.cache/phrasecast/audio"

# Speaking speed sent to the synthesis provider (0.25-4.0)
speed = 0.7

[tts]
# Provider: "openai" (cloud), "elevenlabs" (cloud), "system" (OS built-in)
provider = "openai"

# Voice for speech synthesis (provider-specific, empty = provider default)
voice = "alloy"

[translate]
# OpenAI-compatible chat completion endpoint used for translation
base_url = "https://openrouter.ai/api/v1"
model = "google/gemini-2.0-flash-001"
target_language = "English"

[schedule]
# Lessons are sent every interval_minutes between start_hour and end_hour
start_hour = 8
end_hour = 23
interval_minutes = 30
timezone = "Asia/Ho_Chi_Minh"

# A delivered sentence is not repeated before this many minutes
cooldown_minutes = 120

[telegram]
# Chat that receives scheduled lessons (empty = print to terminal)
chat_id = ""

# API keys are read from environment variables, not this file:
#   OPENROUTER_API_KEY  - translation
#   OPENAI_API_KEY      - openai provider
#   ELEVENLABS_API_KEY  - elevenlabs provider
#   TELEGRAM_BOT_TOKEN  - telegram delivery
"""


@dataclass(frozen=True)
class StoreConfig:
    """Sentence store configuration."""

    path: Path


@dataclass(frozen=True)
class CacheConfig:
    """Audio cache configuration."""

    dir: Path
    speed: float


@dataclass(frozen=True)
class TTSConfig:
    """Synthesis provider configuration."""

    provider: str
    voice: str


@dataclass(frozen=True)
class TranslateConfig:
    """Translator configuration."""

    base_url: str
    model: str
    target_language: str


@dataclass(frozen=True)
class ScheduleConfig:
    """Scheduled delivery configuration."""

    start_hour: int
    end_hour: int
    interval_minutes: int
    timezone: str
    cooldown_minutes: int


@dataclass(frozen=True)
class TelegramConfig:
    """Telegram delivery configuration."""

    chat_id: str


@dataclass(frozen=True)
class PhrasecastConfig:
    """Top-level phrasecast configuration."""

    store: StoreConfig
    cache: CacheConfig
    tts: TTSConfig
    translate: TranslateConfig
    schedule: ScheduleConfig
    telegram: TelegramConfig


_cached_config: PhrasecastConfig | None = None


def generate_config(path: Path | None = None) -> Path:
    """Write the default config file.

    Args:
        path: Target file (defaults to ~/.config/phrasecast/config.toml)

    Returns:
        Path of the written file
    """
    path = path or CONFIG_PATH
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _expand(value: str) -> Path:
    return Path(value).expanduser()


def _int_value(schedule: dict, key: str, default: int) -> int:
    value = schedule.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError) as e:
        raise ConfigError(f"Invalid schedule.{key} value: {value!r}", e) from e


def load_config(path: Path | None = None) -> PhrasecastConfig:
    """Load configuration from a config file with env var overrides.

    The default location is read once and memoized; an explicit path is
    always re-read.

    Args:
        path: Config file to read (defaults to ~/.config/phrasecast/config.toml)

    Returns:
        Loaded and validated PhrasecastConfig.

    Raises:
        ConfigError: If the file is missing, unparsable, or lacks required values.
    """
    global _cached_config
    if path is None and _cached_config is not None:
        return _cached_config

    config_path = path or CONFIG_PATH
    if not config_path.exists():
        raise ConfigError(
            f"No config found at {config_path}. Run `phrasecast init-config` to create one."
        )

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}", e) from e

    store = data.get("store", {})
    cache = data.get("cache", {})
    tts = data.get("tts", {})
    translate = data.get("translate", {})
    schedule = data.get("schedule", {})
    telegram = data.get("telegram", {})

    # Validate required fields
    missing = []
    if "path" not in store:
        missing.append("store.path")
    if "dir" not in cache:
        missing.append("cache.dir")
    if "speed" not in cache:
        missing.append("cache.speed")
    if "provider" not in tts:
        missing.append("tts.provider")

    if missing:
        raise ConfigError(
            f"Missing required config values: {', '.join(missing)}. "
            f"Edit {config_path} or delete it and run `phrasecast init-config`."
        )

    speed_str = os.getenv("PHRASECAST_SPEED", str(cache["speed"]))
    try:
        speed = float(speed_str)
    except ValueError as e:
        raise ConfigError(f"Invalid speed value: {speed_str!r}", e) from e

    start_hour = _int_value(schedule, "start_hour", 8)
    end_hour = _int_value(schedule, "end_hour", 23)
    interval_minutes = _int_value(schedule, "interval_minutes", 30)
    cooldown_minutes = _int_value(schedule, "cooldown_minutes", 120)
    if not 0 <= start_hour <= end_hour <= 23:
        raise ConfigError(
            f"schedule hours must satisfy 0 <= start_hour <= end_hour <= 23, "
            f"got {start_hour}-{end_hour}"
        )
    if not 1 <= interval_minutes <= 60 or 60 % interval_minutes != 0:
        raise ConfigError(
            f"schedule.interval_minutes must divide 60, got {interval_minutes}"
        )

    config = PhrasecastConfig(
        store=StoreConfig(
            path=_expand(os.getenv("PHRASECAST_STORE_PATH", store["path"])),
        ),
        cache=CacheConfig(
            dir=_expand(os.getenv("PHRASECAST_CACHE_DIR", cache["dir"])),
            speed=speed,
        ),
        tts=TTSConfig(
            provider=os.getenv("PHRASECAST_PROVIDER", tts["provider"]),
            voice=os.getenv("PHRASECAST_VOICE", tts.get("voice", "")),
        ),
        translate=TranslateConfig(
            base_url=translate.get("base_url", "https://openrouter.ai/api/v1"),
            model=translate.get("model", "google/gemini-2.0-flash-001"),
            target_language=translate.get("target_language", "English"),
        ),
        schedule=ScheduleConfig(
            start_hour=start_hour,
            end_hour=end_hour,
            interval_minutes=interval_minutes,
            timezone=schedule.get("timezone", "Asia/Ho_Chi_Minh"),
            cooldown_minutes=cooldown_minutes,
        ),
        telegram=TelegramConfig(
            chat_id=os.getenv("PHRASECAST_CHAT_ID", str(telegram.get("chat_id", ""))),
        ),
    )

    if path is None:
        _cached_config = config
    return config
