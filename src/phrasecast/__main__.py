"""Entry point for running phrasecast as a module."""

from .cli import app


def main() -> None:
    """Main entry point for the phrasecast CLI application."""
    app()


if __name__ == "__main__":
    main()
