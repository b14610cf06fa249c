"""Pytest integration.

Every test runs setup, call and teardown inside its own accumulation scope,
so ``expect`` calls never leak between tests sharing a worker. After the test
body returns, pending failures are checkpointed (unless disabled with
``--expecta-no-auto-checkpoint`` or ``auto_checkpoint = false`` in
``[tool.expecta]``).
"""

from __future__ import annotations

import logging
from collections.abc import Generator

import pytest

from expecta.config import ExpectaConfig, load_config, set_config
from expecta.context import AccumulationContext, expectation_scope
from expecta.expectations.checkpoint import render_report

logger = logging.getLogger(__name__)

CONTEXT_KEY = pytest.StashKey[AccumulationContext]()
CONFIG_KEY = pytest.StashKey[ExpectaConfig]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("expecta", "deferred expectations")
    group.addoption(
        "--expecta-no-auto-checkpoint",
        action="store_true",
        default=False,
        dest="expecta_no_auto_checkpoint",
        help="Do not fail tests that end with pending expect() failures",
    )


def pytest_configure(config: pytest.Config) -> None:
    expecta_config = load_config(config.rootpath)
    config.stash[CONFIG_KEY] = expecta_config
    set_config(expecta_config)
    config.addinivalue_line(
        "markers",
        "expecta_no_auto_checkpoint: leave pending expect() failures unreported for this test",
    )


def pytest_unconfigure(config: pytest.Config) -> None:
    set_config(None)


def _context_for(item: pytest.Item) -> AccumulationContext:
    ctx = item.stash.get(CONTEXT_KEY, None)
    if ctx is None:
        ctx = AccumulationContext(name=item.nodeid)
        item.stash[CONTEXT_KEY] = ctx
    return ctx


def _auto_checkpoint(item: pytest.Item) -> bool:
    if item.config.getoption("expecta_no_auto_checkpoint"):
        return False
    if item.get_closest_marker("expecta_no_auto_checkpoint") is not None:
        return False
    return item.config.stash[CONFIG_KEY].auto_checkpoint


@pytest.hookimpl(wrapper=True)
def pytest_runtest_setup(item: pytest.Item) -> Generator[None, None, None]:
    with expectation_scope(_context_for(item)):
        return (yield)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Generator[None, None, None]:
    ctx = _context_for(item)
    with expectation_scope(ctx):
        try:
            result = yield
        except BaseException as exc:
            if ctx:
                exc.add_note(render_report(ctx.drain()))
            raise
        if ctx and _auto_checkpoint(item):
            ctx.checkpoint()
        return result


@pytest.hookimpl(wrapper=True)
def pytest_runtest_teardown(item: pytest.Item, nextitem: pytest.Item | None) -> Generator[None, None, None]:
    ctx = _context_for(item)
    try:
        with expectation_scope(ctx):
            return (yield)
    finally:
        if ctx:
            logger.warning("%s finished with %d unreported expect() failure(s)", item.nodeid, len(ctx))
        ctx.clear()


@pytest.fixture
def expectations(request: pytest.FixtureRequest) -> AccumulationContext:
    """The accumulation context of the running test, for explicit passing."""
    return _context_for(request.node)
