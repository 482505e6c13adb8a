"""Telegram Bot API delivery sink."""

import logging
import os
from typing import Any

import httpx

from ..cache.models import ArtifactHandle
from ..errors import DeliveryError
from .base import DeliverySink

logger = logging.getLogger(__name__)

API_BASE = "https://api.telegram.org"


class TelegramSink(DeliverySink):
    """Sends lessons to a fixed Telegram chat.

    The sentence goes out with sendMessage, the pronunciation (if any) with
    sendAudio as a multipart upload.
    """

    def __init__(
        self,
        chat_id: str,
        token: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize Telegram sink.

        Args:
            chat_id: Destination chat
            token: Bot token. If not provided, reads from TELEGRAM_BOT_TOKEN
                  environment variable.
            client: Optional pre-built HTTP client (tests inject a mock transport)
            timeout: Request timeout in seconds

        Raises:
            DeliveryError: If bot token or chat id is missing.
        """
        self._token = token or os.getenv("TELEGRAM_BOT_TOKEN")
        if not self._token:
            raise DeliveryError(
                "Telegram bot token not found. Set TELEGRAM_BOT_TOKEN environment "
                "variable or provide token parameter."
            )
        if not chat_id:
            raise DeliveryError("Telegram chat id is required")

        self.chat_id = str(chat_id)
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _url(self, method: str) -> str:
        return f"{API_BASE}/bot{self._token}/{method}"

    async def _call(
        self,
        method: str,
        data: dict[str, Any],
        files: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            resp = await self._client.post(self._url(method), data=data, files=files)
        except httpx.HTTPError as e:
            raise DeliveryError(f"Telegram {method} request failed: {e}", None, e) from e

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if resp.status_code != 200 or not payload.get("ok", False):
            description = payload.get("description", resp.text[:200])
            raise DeliveryError(
                f"Telegram {method} failed ({resp.status_code}): {description}",
                resp.status_code,
            )

        return payload

    async def deliver(self, text: str, artifact: ArtifactHandle | None) -> None:
        """Send the lesson text, then its audio.

        Once the text is out the lesson counts as delivered. A failed audio
        upload after that is logged and the lesson stays text-only.

        Raises:
            DeliveryError: If the text message could not be sent
        """
        await self._call(
            "sendMessage", {"chat_id": self.chat_id, "text": f"📝 Lesson: {text}"}
        )

        if artifact is not None:
            try:
                await self._call(
                    "sendAudio",
                    {"chat_id": self.chat_id, "title": text[:64]},
                    files={"audio": (artifact.filename, artifact.read_bytes())},
                )
            except (DeliveryError, OSError) as e:
                logger.warning(f"Audio upload failed, lesson sent as text only: {e}")
                return

        logger.debug(f"Delivered lesson to chat {self.chat_id}")

    async def close(self) -> None:
        await self._client.aclose()
