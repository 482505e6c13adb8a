"""Content-addressed audio cache.

Maps (text, speed) to a synthesized audio file named after a SHA-256 hash of
both values. A miss calls the synthesis provider once and writes the audio
atomically, so every later request for the same pair is served from disk,
across restarts and across items that share the same text.
"""

import asyncio
import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from ..errors import SynthesisError
from . import get_cache_dir
from .models import ArtifactHandle

if TYPE_CHECKING:
    from ..providers.base import SynthesisProvider

logger = logging.getLogger(__name__)

TMP_SUFFIX = ".part"


class AudioCache:
    """Filesystem cache of synthesized audio keyed by content hash.

    Example:
        cache = AudioCache(Path("/var/cache/phrasecast"), provider)

        # First call - cache miss, synthesizes and stores audio
        handle = await cache.ensure("Good morning", 0.7)

        # Second call - cache hit, no provider call
        handle = await cache.ensure("Good morning", 0.7)
        assert handle.cached
    """

    def __init__(
        self,
        cache_dir: Path | None,
        synthesizer: "SynthesisProvider | None",
        extension: str = "mp3",
    ):
        """Initialize audio cache.

        Args:
            cache_dir: Directory for audio files (defaults to ~/.cache/phrasecast/audio)
            synthesizer: Provider called on cache misses (None: hits only)
            extension: File extension of stored artifacts, without the dot

        Raises:
            ValueError: If extension is empty
        """
        if not extension or not extension.strip("."):
            raise ValueError("extension cannot be empty")

        self.cache_dir = cache_dir or get_cache_dir()
        self.cache_dir.mkdir(parents=True, exist_ok=True)

        self.synthesizer = synthesizer
        self.extension = extension.strip(".")

        # Serializes misses for the same key within this process
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

        logger.debug(f"AudioCache initialized at {self.cache_dir}")

    def artifact_key(self, text: str, speed: float) -> str:
        """Derive the deterministic cache key for a text/speed pair.

        Args:
            text: Sentence to synthesize
            speed: Synthesis speed

        Returns:
            64-character SHA-256 hex digest

        Raises:
            ValueError: If text or speed is None
        """
        if text is None or speed is None:
            raise ValueError("Both text and speed must be non-None")

        input_string = f"{text}:{float(speed)!r}"
        return hashlib.sha256(input_string.encode("utf-8")).hexdigest()

    def artifact_path(self, text: str, speed: float) -> Path:
        """Return where the artifact for text/speed lives (whether or not it exists)."""
        return self.cache_dir / f"{self.artifact_key(text, speed)}.{self.extension}"

    def lookup(self, text: str, speed: float) -> ArtifactHandle | None:
        """Return a handle to an existing artifact without synthesizing.

        Returns:
            Handle on cache hit, None on miss
        """
        key = self.artifact_key(text, speed)
        path = self.cache_dir / f"{key}.{self.extension}"
        if self._is_readable(path):
            return ArtifactHandle(key=key, path=path, cached=True)
        return None

    async def ensure(self, text: str, speed: float) -> ArtifactHandle:
        """Return the artifact for text/speed, synthesizing it on a miss.

        On a miss the provider is called and the audio is written to a
        temporary file, then renamed onto the key path. Once this returns,
        the artifact is on disk for every later caller with the same key.

        Args:
            text: Sentence to synthesize
            speed: Synthesis speed passed through to the provider

        Returns:
            Handle to the cached artifact

        Raises:
            SynthesisError: If the provider fails or returns no audio, or the
                artifact cannot be written. No file is left under the key.
        """
        key = self.artifact_key(text, speed)
        path = self.cache_dir / f"{key}.{self.extension}"

        if self._is_readable(path):
            logger.debug(f"Cache hit for '{text[:50]}' at {path.name}")
            return ArtifactHandle(key=key, path=path, cached=True)

        lock = self._locks.setdefault(key, asyncio.Lock())
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                # Another task may have filled the key while we waited
                if self._is_readable(path):
                    logger.debug(f"Cache filled while waiting for '{text[:50]}'")
                    return ArtifactHandle(key=key, path=path, cached=True)

                await self._synthesize_into(path, text, speed)
        finally:
            self._release_lock(key)

        logger.info(f"Cached audio for '{text[:50]}' as {path.name}")
        return ArtifactHandle(key=key, path=path, cached=False)

    async def _synthesize_into(self, path: Path, text: str, speed: float) -> None:
        if self.synthesizer is None:
            raise SynthesisError("No synthesis provider configured")

        logger.debug(f"Cache miss for '{text[:50]}', synthesizing at speed {speed}")
        try:
            audio_bytes = await self.synthesizer.synthesize(text, speed)
        except SynthesisError:
            raise
        except Exception as e:
            raise SynthesisError(f"Synthesis failed: {e}", e) from e

        if not audio_bytes:
            raise SynthesisError("Synthesis returned no audio data")

        self._write_atomic(path, audio_bytes)

    def _release_lock(self, key: str) -> None:
        """Forget the lock for key once no task holds or waits for it."""
        self._lock_users[key] -= 1
        if not self._lock_users[key]:
            del self._lock_users[key]
            del self._locks[key]

    def evict(self, text: str, speed: float) -> bool:
        """Delete the artifact for text/speed if present.

        Returns:
            True if a file was deleted
        """
        path = self.artifact_path(text, speed)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning(f"Failed to evict {path}: {e}")
            return False

        logger.debug(f"Evicted {path.name}")
        return True

    def evict_all(self) -> int:
        """Delete every artifact in the cache directory, whatever its key.

        Returns:
            Number of artifacts deleted (leftover temp files are removed but
            not counted)
        """
        try:
            paths = list(self.cache_dir.iterdir())
        except OSError as e:
            logger.warning(f"Failed to list cache directory {self.cache_dir}: {e}")
            return 0

        removed = 0
        for path in paths:
            if not path.is_file():
                continue

            is_artifact = path.suffix == f".{self.extension}"
            if not is_artifact and not path.name.endswith(TMP_SUFFIX):
                continue

            try:
                path.unlink()
            except OSError as e:
                logger.warning(f"Failed to evict {path}: {e}")
                continue

            if is_artifact:
                removed += 1

        logger.info(f"Evicted {removed} cached artifact(s) from {self.cache_dir}")
        return removed

    def _write_atomic(self, path: Path, audio_bytes: bytes) -> None:
        """Write audio to path via a temp file so no partial file is ever visible."""
        tmp_path = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.cache_dir, prefix=f".{path.stem}.", suffix=TMP_SUFFIX
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "wb") as f:
                f.write(audio_bytes)
            os.replace(tmp_path, path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise SynthesisError(f"Failed to store audio artifact: {e}", e) from e

    @staticmethod
    def _is_readable(path: Path) -> bool:
        try:
            return path.is_file() and path.stat().st_size > 0 and os.access(path, os.R_OK)
        except OSError:
            return False
