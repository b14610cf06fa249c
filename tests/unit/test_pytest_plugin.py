"""Tests for the pytest plugin, run in isolated pytester sessions."""

import pytest


def test_pending_failures_fail_the_test(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        from expecta import expect

        def test_math():
            x, y, z = 4, "is not", 5
            expect(2 + 2 == 5, "{} surely {} {}", x, y, z)
            expect(1 + 1 == 2)
            expect(3 - 7 == -3)
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(
        [
            "*`expect` test failed with 2 failed assertions:*",
            "*1: 4 surely is not 5*",
            "*2: Expected 3 - 7 == -3*",
        ]
    )


def test_explicit_checkpoint_and_passing_test(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        import pytest
        from expecta import AggregateFailure, Verdict, expect, let_fail

        def test_passes():
            expect(1 + 1 == 2)
            assert let_fail() is Verdict.PASSED

        def test_fails_once():
            expect(False, "a")
            expect(False, "b")
            let_fail()
            pytest.fail("unreachable")
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(passed=1, failed=1)
    result.stdout.no_fnmatch_line("*unreachable*")


def test_records_do_not_leak_between_tests(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        import pytest
        from expecta import current_expectations, expect

        @pytest.mark.expecta_no_auto_checkpoint
        def test_leaves_failures_behind():
            expect(False, "left behind")

        def test_starts_clean():
            assert len(current_expectations()) == 0
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(passed=2)


def test_no_auto_checkpoint_option(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        from expecta import expect

        def test_unreported():
            expect(False, "ignored")
        """
    )

    result = pytester.runpytest("--expecta-no-auto-checkpoint")

    result.assert_outcomes(passed=1)


def test_auto_checkpoint_disabled_in_pyproject(pytester: pytest.Pytester):
    pytester.makefile(".toml", pyproject="[tool.expecta]\nauto_checkpoint = false\n")
    pytester.makepyfile(
        """
        from expecta import expect

        def test_unreported():
            expect(False, "ignored")
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(passed=1)


def test_expectations_fixture(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        from expecta import current_expectations

        def test_fixture_is_current(expectations):
            assert current_expectations() is expectations

        def test_fixture_records(expectations):
            expectations.expect("abc".isdigit())
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(passed=1, failed=1)
    result.stdout.fnmatch_lines(['*1: Expected "abc".isdigit()*'])


def test_body_errors_take_precedence(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        from expecta import expect

        def test_errors():
            expect(False, "recorded first")
            raise RuntimeError("body error")
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*RuntimeError: body error*", "*1: recorded first*"])


def test_threads_in_parallel_tests_are_isolated(pytester: pytest.Pytester):
    pytester.makepyfile(
        """
        import threading

        import pytest
        from expecta import AggregateFailure, expect, expectation_scope, let_fail

        def run_case(label, out):
            with expectation_scope(name=label):
                expect(False, label)
                try:
                    let_fail()
                except AggregateFailure as failure:
                    out[label] = [r.message for r in failure.records]

        def test_workers():
            out = {}
            threads = [threading.Thread(target=run_case, args=(n, out)) for n in ("w1", "w2", "w3")]
            for t in threads:
                t.start()
            for t in threads:
                t.join()
            assert out == {"w1": ["w1"], "w2": ["w2"], "w3": ["w3"]}
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(passed=1)


def test_pyproject_settings_reach_checkpoints(pytester: pytest.Pytester):
    pytester.makefile(".toml", pyproject="[tool.expecta]\ninclude_location = true\n")
    pytester.makepyfile(
        """
        from expecta import expect

        def test_located():
            expect(False, "with location")
        """
    )

    result = pytester.runpytest()

    result.assert_outcomes(failed=1)
    result.stdout.fnmatch_lines(["*1: with location (*test_pyproject_settings_reach_checkpoints.py:*)*"])
