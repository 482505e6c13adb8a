"""Delivery sink that prints lessons to the terminal."""

import typer

from ..cache.models import ArtifactHandle
from .base import DeliverySink


class ConsoleSink(DeliverySink):
    """Prints lessons with typer.echo; used when no chat destination is configured."""

    async def deliver(self, text: str, artifact: ArtifactHandle | None) -> None:
        typer.echo(f"📝 Lesson: {text}")
        if artifact is not None:
            typer.echo(f"🔊 Audio: {artifact.path}")
