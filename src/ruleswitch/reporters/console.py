from __future__ import annotations

from rich.console import Console

from ruleswitch.language import BaseReporter


class ConsoleReporter(BaseReporter):
    """Write formatter output to stdout."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console(highlight=False, soft_wrap=True)

    def report(self, output: str) -> None:
        if output:
            self.console.print(output, markup=False, emoji=False, highlight=False)


class StderrReporter(ConsoleReporter):
    def __init__(self, console: Console | None = None) -> None:
        super().__init__(console or Console(stderr=True, highlight=False, soft_wrap=True))
