"""Checkpoint: drain accumulated expectations into a single verdict."""

from __future__ import annotations

import io
import logging
import sys
from collections.abc import Sequence

from expecta.config import ExpectaConfig, get_config
from expecta.context import AccumulationContext, current_expectations
from expecta.errors import AggregateFailure
from expecta.expectations.result import FailureRecord, Verdict
from expecta.reports.base import Reporter
from expecta.reports.registry import resolve_reporters

logger = logging.getLogger(__name__)

PASS_NOTICE = "`expect` test passed."


def render_report(records: Sequence[FailureRecord], *, include_location: bool = False) -> str:
    """Render the aggregated failure report, one numbered line per record."""
    buf = io.StringIO()
    buf.write(f"`expect` test failed with {len(records)} failed assertions:\n")
    for index, record in enumerate(records, start=1):
        buf.write(f"{index}: {record.message}")
        if include_location and record.location:
            buf.write(f" ({record.location})")
        buf.write("\n")
    return buf.getvalue()


def _reporters(config: ExpectaConfig) -> list[Reporter]:
    try:
        return resolve_reporters(config.reporters)
    except Exception:
        logger.exception("Could not create reporters %s", config.reporters)
        return []


def checkpoint_context(ctx: AccumulationContext, config: ExpectaConfig | None = None) -> Verdict:
    """Drain ``ctx``; return ``Verdict.PASSED`` or raise one ``AggregateFailure``.

    Reporter errors are logged and never replace the verdict; on failure they
    are also attached to the ``AggregateFailure`` as notes.
    """
    config = config or get_config()
    records = ctx.drain()
    name = ctx.name or "<anonymous>"

    if not records:
        logger.debug("%s: %s", name, PASS_NOTICE)
        if config.announce_pass:
            print(PASS_NOTICE, file=sys.stderr)
        for rep in _reporters(config):
            try:
                rep.on_pass(ctx)
            except Exception:
                logger.exception("Reporter %s failed on a passing checkpoint", type(rep).__name__)
        return Verdict.PASSED

    failure = AggregateFailure(
        render_report(records, include_location=config.include_location),
        records,
    )
    logger.debug("%s: %d expectation(s) failed", name, len(records))
    for rep in _reporters(config):
        try:
            rep.on_fail(ctx, failure)
        except Exception as exc:
            logger.exception("Reporter %s failed on a failing checkpoint", type(rep).__name__)
            failure.add_note(f"reporter {type(rep).__name__} raised {exc!r}")
    raise failure


def checkpoint() -> Verdict:
    """Fail the running test if any ``expect`` call recorded a failure.

    Drains the current accumulation context. With no pending failures this is
    a pass and the test continues. Otherwise exactly one
    :class:`~expecta.errors.AggregateFailure` is raised listing every failure,
    numbered from 1 in the order they were recorded.
    """
    return checkpoint_context(current_expectations())


let_fail = checkpoint
