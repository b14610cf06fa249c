"""Tests for the unittest integration."""

import unittest

from expecta import ExpectaTestCase, ExpectationsMixin, current_expectations, expect, let_fail


def run_case(case_class: type[unittest.TestCase]) -> unittest.TestResult:
    suite = unittest.defaultTestLoader.loadTestsFromTestCase(case_class)
    result = unittest.TestResult()
    suite.run(result)
    return result


def test_errored_test_does_not_leak_into_the_next():
    seen = {}

    class Sequence(ExpectaTestCase):
        def test_a_errors_before_checkpoint(self):
            seen["a"] = self.expectations
            expect(False, "from test A")
            raise RuntimeError("boom")

        def test_b_passes(self):
            seen["b"] = self.expectations
            expect(True)
            let_fail()

    result = run_case(Sequence)

    assert result.testsRun == 2
    assert [test.id().rsplit(".", 1)[-1] for test, _ in result.errors] == ["test_a_errors_before_checkpoint"]
    assert result.failures == []
    assert seen["a"] is not seen["b"]
    assert not current_expectations()


def test_pending_records_are_dropped_with_a_warning(caplog):
    holder = {}

    class Pending(ExpectaTestCase):
        def test_never_checkpoints(self):
            holder["ctx"] = self.expectations
            expect(False, "left behind")

    result = run_case(Pending)

    assert result.wasSuccessful()
    assert not holder["ctx"]
    assert "unreported expect() failures" in caplog.text
    assert "1: left behind" in caplog.text


def test_failed_checkpoint_is_a_test_failure():
    class Failing(ExpectaTestCase):
        def test_math(self):
            expect(2 + 2 == 5)
            expect(1 + 1 == 2)
            let_fail()

    result = run_case(Failing)

    assert result.errors == []
    assert len(result.failures) == 1
    assert "`expect` test failed with 1 failed assertions" in result.failures[0][1]
    assert "Expected 2 + 2 == 5" in result.failures[0][1]


def test_mixin_scope_is_named_after_the_test():
    names = []

    class Named(ExpectationsMixin, unittest.TestCase):
        def setUp(self):
            super().setUp()
            names.append((self.id(), self.expectations.name))

        def test_one(self):
            assert current_expectations() is self.expectations

    result = run_case(Named)

    assert result.wasSuccessful()
    assert names and names[0][0] == names[0][1]
