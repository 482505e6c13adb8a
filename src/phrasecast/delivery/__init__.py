"""Delivery destinations for scheduled lessons."""

from .base import DeliverySink
from .console import ConsoleSink
from .telegram import TelegramSink

__all__ = ["ConsoleSink", "DeliverySink", "TelegramSink"]
