"""Expecta error types."""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from expecta.types import Verdict

if TYPE_CHECKING:
    from expecta.expectations.result import FailureRecord


class ExpectaError(Exception):
    """Base class for all errors raised by expecta."""


class ConfigError(ExpectaError):
    """Raised when the ``[tool.expecta]`` table or environment is invalid."""


class RewriteError(ExpectaError):
    """Raised when ``deferred`` cannot recompile a test function."""


class FormattingFault(ExpectaError):
    """Raised when a failure message cannot be rendered into text.

    Never swallowed: a malformed report is worse than no report.
    """

    def __init__(self, template: object, cause: BaseException) -> None:
        self.template = template
        self.cause = cause
        super().__init__(f"Could not render expectation message {template!r}: {cause!r}")


class AggregateFailure(ExpectaError, AssertionError):
    """The single failure raised by a checkpoint with pending records.

    Subclasses ``AssertionError`` so any host test framework reports the test
    as failed rather than errored.
    """

    verdict = Verdict.FAILED

    def __init__(self, report: str, records: Sequence[FailureRecord]) -> None:
        self.report = report
        self.records = tuple(records)
        super().__init__(report)

    @property
    def failure_count(self) -> int:
        return len(self.records)
