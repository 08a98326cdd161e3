from __future__ import annotations

from ruleswitch.language import BaseRule, RuleFailure, SourceFile

DEFAULT_LIMIT = 100


class MaxLineLengthRule(BaseRule):
    """Lines must not exceed a configured number of characters (default 100)."""

    def limit(self) -> int:
        for option in self.options:
            if isinstance(option, bool):
                continue
            if isinstance(option, int) and option > 0:
                return option
            if isinstance(option, dict):
                value = option.get("limit")
                if isinstance(value, int) and not isinstance(value, bool) and value > 0:
                    return value
        return DEFAULT_LIMIT

    def apply(self, source: SourceFile) -> list[RuleFailure]:
        limit = self.limit()
        failures: list[RuleFailure] = []
        for start, line in zip(source.line_starts, source.text.split("\n")):
            line = line.rstrip("\r")
            if len(line) <= limit:
                continue
            failures.append(
                self._failure(
                    source,
                    start=start,
                    end=start + len(line),
                    message=f"Exceeds maximum line length of {limit} ({len(line)} characters).",
                )
            )
        return failures
