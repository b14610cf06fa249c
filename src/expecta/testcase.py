"""unittest integration.

``expect`` and ``let_fail`` without an explicit scope share one context per
thread, so a test that errors before its checkpoint would hand its records to
the next test on that thread. Mixing :class:`ExpectationsMixin` into a
``unittest.TestCase`` gives every test method its own scope.
"""

from __future__ import annotations

import logging
import unittest

from expecta.context import AccumulationContext, expectation_scope
from expecta.expectations.checkpoint import render_report

logger = logging.getLogger(__name__)


class ExpectationsMixin:
    """Per-test accumulation scope for ``unittest.TestCase`` subclasses.

    The scope is opened in ``setUp`` and closed by a cleanup, so it also
    covers ``tearDown``. Records still pending when the test ends were never
    checkpointed; they are logged and discarded with the scope.

        class TestMath(ExpectationsMixin, unittest.TestCase):
            def test_sums(self):
                expect(2 + 2 == 5)
                let_fail()
    """

    expectations: AccumulationContext

    def setUp(self) -> None:
        super().setUp()
        self.expectations = self.enterContext(expectation_scope(name=self.id()))
        self.addCleanup(self._discard_pending)

    def _discard_pending(self) -> None:
        if self.expectations:
            logger.warning(
                "%s finished with unreported expect() failures:\n%s",
                self.id(),
                render_report(self.expectations.drain()),
            )


class ExpectaTestCase(ExpectationsMixin, unittest.TestCase):
    """``unittest.TestCase`` with a fresh accumulation scope per test method."""
