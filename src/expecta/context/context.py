from __future__ import annotations

import logging
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Callable, Iterator

if TYPE_CHECKING:
    from expecta.expectations.result import FailureRecord, Verdict


logger = logging.getLogger(__name__)

EXPECTATIONS_CONTEXT: ContextVar[AccumulationContext | None] = ContextVar(
    "expectations_context", default=None
)


class AccumulationContext:
    """Ordered store of failed expectations for a single test execution.

    One instance belongs to exactly one test execution. Records keep the order
    in which conditions were evaluated. Records are only removed by
    :meth:`drain` (which :meth:`checkpoint` uses) and :meth:`clear`.

    Attributes
    ----------
    name
        Optional label of the owning execution (e.g., the pytest node id),
        used in log lines and by reporters.
    """

    __slots__ = ("name", "_records")

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self._records: list[FailureRecord] = []

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        return f"AccumulationContext(name={self.name!r}, failures={len(self._records)})"

    @property
    def records(self) -> tuple[FailureRecord, ...]:
        """Snapshot of the pending failure records."""
        return tuple(self._records)

    def add(self, record: FailureRecord) -> None:
        self._records.append(record)
        logger.debug(
            "Recorded failure #%d in %s: %s",
            len(self._records),
            self.name or "<anonymous>",
            record.message,
        )

    def record(
        self,
        condition: Any,
        message: str | Callable[..., Any] | None = None,
        /,
        *args: Any,
        **kwargs: Any,
    ) -> bool:
        """Record a failure into this context if ``condition`` is falsy.

        See :func:`expecta.expect` for the message rules.
        """
        from expecta.expectations.base import record_into

        return record_into(self, condition, message, args, kwargs, _stacklevel=2)

    # Alias so an explicitly passed context reads like the module-level API.
    expect = record

    def drain(self) -> list[FailureRecord]:
        """Return all pending records and leave the context empty."""
        drained, self._records = self._records, []
        return drained

    def clear(self) -> None:
        self._records.clear()

    def checkpoint(self) -> Verdict:
        """Drain this context and pass, or raise a single ``AggregateFailure``."""
        from expecta.expectations.checkpoint import checkpoint_context

        return checkpoint_context(self)


def current_expectations() -> AccumulationContext:
    """Return the context of the running execution, creating it on first use.

    The lazily created context is bound to the calling thread or asyncio task
    only; callers that reuse a worker across tests should open an
    :func:`expectation_scope` per test instead.
    """
    ctx = EXPECTATIONS_CONTEXT.get()
    if ctx is None:
        ctx = AccumulationContext()
        EXPECTATIONS_CONTEXT.set(ctx)
    return ctx


@contextmanager
def expectation_scope(
    ctx: AccumulationContext | None = None,
    *,
    name: str | None = None,
) -> Iterator[AccumulationContext]:
    """Install ``ctx`` (or a fresh empty context) for the duration of the block."""
    if ctx is None:
        ctx = AccumulationContext(name=name)
    token = EXPECTATIONS_CONTEXT.set(ctx)
    try:
        yield ctx
    finally:
        EXPECTATIONS_CONTEXT.reset(token)
