"""Rich console reporter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table
from rich.text import Text

from expecta.reports.registry import reporter

if TYPE_CHECKING:
    from expecta.context import AccumulationContext
    from expecta.errors import AggregateFailure


@reporter
class ConsoleReporter:
    """Print checkpoint verdicts to stderr."""

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console(stderr=True)
        self.verbosity = verbosity

    def on_pass(self, context: AccumulationContext) -> None:
        if self.verbosity < 1:
            return
        label = f" {context.name}" if context.name else ""
        self.console.print(f"[green]PASSED[/green]{label}", highlight=False)

    def on_fail(self, context: AccumulationContext, failure: AggregateFailure) -> None:
        title = f"{failure.failure_count} failed expectation(s)"
        if context.name:
            title += f" in {context.name}"

        table = Table(title=title, title_style="bold red", show_lines=False)
        table.add_column("#", justify="right", style="red")
        table.add_column("Message")
        table.add_column("Location", style="dim")

        for index, record in enumerate(failure.records, start=1):
            table.add_row(str(index), Text(record.message), Text(record.location or ""))

        self.console.print(table)
