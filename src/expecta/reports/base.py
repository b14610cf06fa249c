"""Base reporter protocol for checkpoint verdicts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from expecta.context import AccumulationContext
    from expecta.errors import AggregateFailure


@runtime_checkable
class Reporter(Protocol):
    """Protocol defining the interface for checkpoint reporters.

    Reporters are notified synchronously, before the checkpoint returns or
    raises, so they must not raise themselves.
    """

    def on_pass(self, context: AccumulationContext) -> None:
        """Called when a checkpoint finds no pending failures."""
        ...

    def on_fail(self, context: AccumulationContext, failure: AggregateFailure) -> None:
        """Called with the aggregated failure right before it is raised."""
        ...
