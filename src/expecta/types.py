"""Shared types for expecta."""

from enum import Enum


class Verdict(Enum):
    """Outcome of a checkpoint."""

    PASSED = "passed"
    FAILED = "failed"
