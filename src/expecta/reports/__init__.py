"""Reporters notified by checkpoints."""

from expecta.reports.base import Reporter
from expecta.reports.console import ConsoleReporter
from expecta.reports.registry import (
    get_reporter_registry,
    reporter,
    reporter_class,
    resolve_reporters,
)

__all__ = [
    "ConsoleReporter",
    "Reporter",
    "get_reporter_registry",
    "reporter",
    "reporter_class",
    "resolve_reporters",
]
