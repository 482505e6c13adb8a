"""Audio artifact cache for phrasecast."""

from pathlib import Path


def get_cache_dir() -> Path:
    """Get or create the phrasecast audio cache directory.

    Creates ~/.cache/phrasecast/audio/ if it doesn't exist.

    Returns:
        Path to the audio cache directory
    """
    cache_dir = Path.home() / ".cache" / "phrasecast" / "audio"
    cache_dir.mkdir(parents=True, exist_ok=True)

    return cache_dir
