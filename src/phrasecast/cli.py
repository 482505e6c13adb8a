"""Typer CLI definition for phrasecast."""

import asyncio
import logging
import shutil
from datetime import datetime
from pathlib import Path

import typer

from .api import build_orchestrator, build_scheduler
from .config import CONFIG_PATH, PhrasecastConfig, generate_config, load_config
from .delivery import ConsoleSink
from .errors import PhrasecastError
from .pipeline import DeliveryOrchestrator, SubmitStatus
from .providers import ProviderRegistry

app = typer.Typer(help="Translate sentences, store them and get them back as spaced repetition")


class State:
    """Options shared by every command."""

    debug: bool = False
    config_path: Path | None = None


state = State()


def _fail(message: str, error: Exception | None = None) -> typer.Exit:
    """Print an error the way every command does and return the exit to raise."""
    if state.debug and error is not None:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    elif error is not None:
        typer.echo(f"Error: {message}: {error}", err=True)
    else:
        typer.echo(f"Error: {message}", err=True)
    return typer.Exit(1)


def _config() -> PhrasecastConfig:
    try:
        return load_config(state.config_path)
    except PhrasecastError as e:
        raise _fail("Failed to load config", e) from None


def _orchestrator(offline: bool = False, delivers: bool = False) -> DeliveryOrchestrator:
    """Build the orchestrator; only commands that deliver get the configured sink."""
    config = _config()
    sink = None if delivers else ConsoleSink()
    try:
        return build_orchestrator(config, sink=sink, offline=offline)
    except (PhrasecastError, KeyError, RuntimeError) as e:
        raise _fail("Failed to initialize", e) from None


def _format_sent(last_sent_at: int) -> str:
    if not last_sent_at:
        return "never sent"
    return datetime.fromtimestamp(last_sent_at / 1000).strftime("sent %Y-%m-%d %H:%M")


@app.callback()
def main(
    debug: bool = typer.Option(
        False, "--debug", help="Show verbose error messages and cache activity"
    ),
    config: Path | None = typer.Option(
        None, "-c", "--config", help=f"Config file (default: {CONFIG_PATH})"
    ),
) -> None:
    """Translate sentences, store them and get them back as spaced repetition."""
    state.debug = debug
    state.config_path = config

    # Configure logging for debug mode
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


@app.command("init-config")
def init_config(
    force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
) -> None:
    """Write a commented default config file."""
    path = state.config_path or CONFIG_PATH
    if path.exists() and not force:
        typer.echo(f"Config already exists at {path} (use --force to overwrite)")
        raise typer.Exit(1)

    generate_config(path)
    typer.echo(f"Generated {path}. Review it and set your API keys.")


@app.command()
def add(text: str = typer.Argument(..., help="Sentence to translate and store")) -> None:
    """Translate a sentence, store it and synthesize its pronunciation."""
    orchestrator = _orchestrator()

    typer.echo("⏳ Translating...")
    try:
        result = asyncio.run(orchestrator.submit_text(text))
    except ValueError as e:
        raise _fail("Invalid input", e) from None

    if result.status is SubmitStatus.TRANSLATION_FAILED:
        typer.echo(f"❌ Translation failed: {result.error}", err=True)
        raise typer.Exit(1)

    if result.status is SubmitStatus.DUPLICATE:
        typer.echo(f'⚠️ "{result.text}" is already stored')
        return

    typer.echo(f'✅ Stored: "{result.text}" (total: {result.total})')
    if result.artifact is not None:
        typer.echo(f"🔊 Audio: {result.artifact.path}")
    else:
        typer.echo("🔇 Audio unavailable (synthesis failed)")


@app.command("list")
def list_items() -> None:
    """List stored sentences with their positions."""
    items = _orchestrator(offline=True).list_items()
    if not items:
        typer.echo("No sentences stored.")
        return

    for item in items:
        typer.echo(f"{item.position}. {item.text}  ({_format_sent(item.last_sent_at)})")


@app.command()
def delete(
    positions: list[int] = typer.Argument(..., help="1-based positions from `list`"),
) -> None:
    """Delete sentences by position, together with their audio."""
    count = _orchestrator(offline=True).delete_items(positions)
    typer.echo(f"Deleted {count} sentence(s)")


@app.command()
def clear(
    yes: bool = typer.Option(False, "-y", "--yes", help="Skip confirmation"),
) -> None:
    """Delete every sentence and every cached audio file."""
    if not yes:
        typer.confirm("Delete ALL sentences and audio?", abort=True)

    count = _orchestrator(offline=True).clear_all()
    typer.echo(f"Library reset ({count} sentence(s) removed)")


@app.command()
def voice(
    position: int = typer.Argument(..., help="1-based position from `list`"),
    output: Path | None = typer.Option(
        None, "-o", "--output", help="Copy the audio to this file"
    ),
) -> None:
    """Get (and synthesize if needed) the pronunciation of a stored sentence."""
    orchestrator = _orchestrator()
    try:
        artifact = asyncio.run(orchestrator.request_voice(position))
    except PhrasecastError as e:
        raise _fail("Synthesis failed", e) from None

    if artifact is None:
        raise _fail(f"No sentence at position {position}")

    if output:
        try:
            shutil.copyfile(artifact.path, output)
        except OSError as e:
            raise _fail("Failed to save audio file", e) from None
        typer.echo(f"Audio saved to {output}")
    else:
        typer.echo(str(artifact.path))


@app.command()
def tick() -> None:
    """Run one scheduled delivery now."""
    orchestrator = _orchestrator(delivers=True)

    async def _run() -> None:
        try:
            outcome = await orchestrator.run_scheduled_delivery()
        finally:
            await orchestrator.sink.close()

        if outcome.item is None:
            typer.echo("Nothing eligible for delivery.")
        elif not outcome.delivered:
            typer.echo(f'Delivery failed for "{outcome.item.text}"', err=True)
            raise typer.Exit(1)

    asyncio.run(_run())


@app.command()
def serve() -> None:
    """Deliver lessons on the configured schedule until interrupted."""
    config = _config()
    orchestrator = _orchestrator(delivers=True)
    scheduler = build_scheduler(config, orchestrator)

    async def _run() -> None:
        try:
            await scheduler.run_forever()
        finally:
            await orchestrator.sink.close()

    typer.echo(
        f"🤖 Delivering every {config.schedule.interval_minutes} min "
        f"({config.schedule.start_hour}h-{config.schedule.end_hour}h, "
        f"{config.schedule.timezone}). Ctrl+C to stop."
    )
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        typer.echo("Stopped.")


@app.command()
def voices(
    provider: str | None = typer.Option(
        None, "-p", "--provider", help="TTS provider (from config if omitted)"
    ),
) -> None:
    """List voices of the synthesis provider."""
    name = provider or _config().tts.provider
    try:
        instance = ProviderRegistry.create(name)
        available = asyncio.run(instance.list_voices())
    except (PhrasecastError, KeyError, RuntimeError) as e:
        raise _fail("Failed to list voices", e) from None

    for v in available:
        typer.echo(f"{v['name']}: {v['id']}")
