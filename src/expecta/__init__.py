"""Expecta - deferred assertions for tests.

Record every failed condition of a test with :func:`expect` and report them
all at once with :func:`let_fail`.
"""

from .context import AccumulationContext, current_expectations, expectation_scope
from .errors import AggregateFailure, ExpectaError, FormattingFault
from .expectations import (
    FailureRecord,
    Verdict,
    checkpoint,
    deferred,
    expect,
    let_fail,
)
from .testcase import ExpectaTestCase, ExpectationsMixin
from .version import __version__


__all__ = [
    # Core
    "expect",
    "checkpoint",
    "let_fail",
    "deferred",
    # Context
    "AccumulationContext",
    "current_expectations",
    "expectation_scope",
    # unittest
    "ExpectaTestCase",
    "ExpectationsMixin",
    # Results and errors
    "FailureRecord",
    "Verdict",
    "AggregateFailure",
    "ExpectaError",
    "FormattingFault",
    "__version__",
]
