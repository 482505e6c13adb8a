"""Data models for cached audio artifacts."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ArtifactHandle:
    """Reference to a synthesized audio file in the cache.

    Attributes:
        key: Content hash derived from (text, speed)
        path: Location of the audio file
        cached: True if the artifact already existed (no synthesis call)
    """

    key: str
    path: Path
    cached: bool

    @property
    def filename(self) -> str:
        """Externally addressable name of the artifact."""
        return self.path.name

    def read_bytes(self) -> bytes:
        """Read the audio data."""
        return self.path.read_bytes()
