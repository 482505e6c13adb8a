"""Abstract base class for lesson delivery destinations."""

from abc import ABC, abstractmethod

from ..cache.models import ArtifactHandle


class DeliverySink(ABC):
    """Destination that scheduled lessons are sent to."""

    @abstractmethod
    async def deliver(self, text: str, artifact: ArtifactHandle | None) -> None:
        """Send a lesson.

        Args:
            text: Sentence to deliver
            artifact: Pronunciation audio, or None for a text-only lesson

        A sink that gets the text out but not the audio returns normally;
        raising means the learner received nothing.

        Raises:
            DeliveryError: If the lesson could not be sent
        """
        pass

    async def close(self) -> None:
        """Release any resources held by the sink."""
        return None
