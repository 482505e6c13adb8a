"""System TTS provider using native OS text-to-speech commands.

Uses `say` on macOS and `espeak` on Linux. Handy for offline use and local
testing; audio quality is far below the cloud providers.
"""

import asyncio
import logging
import platform
import shutil
import subprocess
import tempfile
from pathlib import Path

from ..errors import SynthesisAPIError
from .base import SynthesisProvider

logger = logging.getLogger(__name__)

# Default speaking rate of both say and espeak, in words per minute
BASE_WPM = 175


class SystemTTSProvider(SynthesisProvider):
    """System TTS provider using native OS commands.

    Speed is converted to words per minute relative to BASE_WPM.
    Output is WAV audio.
    """

    audio_extension = "wav"

    def __init__(self, voice: str | None = None) -> None:
        """Initialize system TTS provider and detect platform.

        Args:
            voice: Optional platform-specific voice name

        Raises:
            RuntimeError: If the platform is not supported
        """
        self.platform = platform.system()
        self.voice = voice

        if self.platform not in ["Darwin", "Linux"]:
            raise RuntimeError(f"Unsupported platform: {self.platform}")

    @staticmethod
    def words_per_minute(speed: float) -> int:
        """Convert a speed multiplier to a words-per-minute rate (at least 1)."""
        return max(1, round(BASE_WPM * speed))

    async def _run(self, *cmd: str) -> None:
        proc = await asyncio.create_subprocess_exec(
            *cmd, stdout=asyncio.subprocess.PIPE, stderr=asyncio.subprocess.PIPE
        )
        _, stderr = await proc.communicate()

        if proc.returncode != 0:
            raise SynthesisAPIError(
                f"System TTS failed with code {proc.returncode}: {stderr.decode()}"
            )

    async def synthesize(self, text: str, speed: float) -> bytes:
        """Convert text to speech using native OS commands.

        Args:
            text: Text to convert to speech
            speed: Speaking speed multiplier

        Returns:
            Audio data as bytes in WAV format

        Raises:
            SynthesisAPIError: If the TTS command is missing or fails
        """
        wpm = str(self.words_per_minute(speed))

        with tempfile.TemporaryDirectory(prefix="phrasecast-tts-") as tmp_dir:
            output_path = Path(tmp_dir) / "speech.wav"

            if self.platform == "Darwin":
                # say writes AIFF, convert to WAV for compatibility
                aiff_path = Path(tmp_dir) / "speech.aiff"
                cmd = ["say", "-r", wpm, "-o", str(aiff_path)]
                if self.voice:
                    cmd.extend(["-v", self.voice])
                cmd.append(text)
                await self._run(*cmd)
                await self._run(
                    "afconvert", "-f", "WAVE", "-d", "LEI16", str(aiff_path), str(output_path)
                )
            else:
                if shutil.which("espeak") is None:
                    raise SynthesisAPIError(
                        "espeak not found. Install it with: sudo apt-get install espeak"
                    )
                cmd = ["espeak", "-s", wpm, "-w", str(output_path)]
                if self.voice:
                    cmd.extend(["-v", self.voice])
                cmd.append(text)
                await self._run(*cmd)

            return output_path.read_bytes()

    async def list_voices(self) -> list[dict]:
        """List available system voices.

        Returns:
            List of voice dictionaries with id, name, and provider fields
        """
        voices = []

        if self.platform == "Darwin":
            try:
                result = subprocess.run(
                    ["say", "-v", "?"], capture_output=True, text=True, check=True
                )
                # Format: "Voice Name     Language  # Description"
                for line in result.stdout.strip().split("\n"):
                    parts = line.split()
                    if parts and not line.startswith("#"):
                        voices.append(
                            {"id": parts[0], "name": parts[0], "provider": "system"}
                        )
            except (OSError, subprocess.CalledProcessError) as e:
                logger.error(f"Failed to list macOS voices: {e}")
        else:
            try:
                result = subprocess.run(
                    ["espeak", "--voices"], capture_output=True, text=True, check=True
                )
                # Skip the header line, voice ID is in the second column
                for line in result.stdout.strip().split("\n")[1:]:
                    parts = line.split()
                    if len(parts) >= 2:
                        voices.append(
                            {"id": parts[1], "name": parts[1], "provider": "system"}
                        )
            except (OSError, subprocess.CalledProcessError):
                logger.warning("espeak not found - no voices available")

        if not voices:
            voices.append(
                {"id": "default", "name": "Default System Voice", "provider": "system"}
            )

        return voices
