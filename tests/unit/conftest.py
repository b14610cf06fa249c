"""Shared fixtures for unit tests."""

import pytest

from expecta.config import ExpectaConfig, set_config
from expecta.reports.registry import get_reporter_registry


class RecordingReporter:
    """Reporter that remembers every notification."""

    passes: list = []
    failures: list = []

    def on_pass(self, context) -> None:
        RecordingReporter.passes.append(context)

    def on_fail(self, context, failure) -> None:
        RecordingReporter.failures.append((context, failure))


@pytest.fixture(autouse=True)
def default_config():
    """Run every test with default settings, independent of the environment."""
    set_config(ExpectaConfig())
    yield
    set_config(None)


@pytest.fixture
def recording_reporter(monkeypatch):
    """Register RecordingReporter and reset what it saw."""
    RecordingReporter.passes = []
    RecordingReporter.failures = []
    monkeypatch.setitem(get_reporter_registry(), "RecordingReporter", RecordingReporter)
    return RecordingReporter
