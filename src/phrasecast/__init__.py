"""phrasecast - translate sentences and get them back as spaced repetition with audio."""

__version__ = "0.1.0"
__all__ = ["build_orchestrator"]


def __getattr__(name: str):  # type: ignore[no-untyped-def]
    if name == "build_orchestrator":
        from .api import build_orchestrator

        return build_orchestrator
    raise AttributeError(f"module 'phrasecast' has no attribute {name!r}")
