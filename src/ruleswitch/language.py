from __future__ import annotations

from abc import ABC, abstractmethod
from bisect import bisect_right
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ruleswitch.intervals import DisabledInterval, is_disabled_at


@dataclass(frozen=True, slots=True)
class SourceFile:
    path: Path | None
    text: str
    _line_starts: tuple[int, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        starts = [0]
        for idx, ch in enumerate(self.text):
            if ch == "\n":
                starts.append(idx + 1)
        object.__setattr__(self, "_line_starts", tuple(starts))

    @property
    def line_starts(self) -> tuple[int, ...]:
        return self._line_starts

    def lines(self) -> list[str]:
        return self.text.splitlines()

    def line_and_column(self, offset: int) -> tuple[int, int]:
        """1-based (line, column) for a 0-based character offset."""

        line_idx = bisect_right(self._line_starts, offset) - 1
        return line_idx + 1, offset - self._line_starts[line_idx] + 1


@dataclass(frozen=True, slots=True)
class RuleFailure:
    rule_name: str
    message: str
    start: int
    end: int
    path: Path | None = None
    line: int | None = None  # 1-based
    column: int | None = None  # 1-based


class BaseRule(ABC):
    """
    A configured rule instance.

    `value` is whatever the configuration holds for the rule: `True`/`False`,
    a list whose head is the on/off switch and whose tail holds options, or a
    table of options.
    """

    RULE_NAME: str | None = None

    def __init__(self, name: str, value: Any, disabled_intervals: Sequence[DisabledInterval]) -> None:
        self.name = name
        self.value = value
        self.disabled_intervals = tuple(disabled_intervals)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, value={self.value!r})"

    def is_enabled(self) -> bool:
        value = self.value
        if isinstance(value, list | tuple):
            return bool(value) and bool(value[0])
        if isinstance(value, dict):
            return bool(value.get("enabled", True))
        return bool(value)

    @property
    def options(self) -> list[Any]:
        value = self.value
        if isinstance(value, list | tuple):
            return list(value[1:])
        if isinstance(value, dict):
            return [{k: v for k, v in value.items() if k != "enabled"}]
        return []

    @abstractmethod
    def apply(self, source: SourceFile) -> list[RuleFailure]:
        raise NotImplementedError

    def filter_failures(self, failures: Sequence[RuleFailure]) -> list[RuleFailure]:
        return [f for f in failures if not is_disabled_at(self.disabled_intervals, f.start)]

    def _failure(self, source: SourceFile, *, start: int, end: int, message: str) -> RuleFailure:
        line, column = source.line_and_column(start)
        return RuleFailure(
            rule_name=self.name,
            message=message,
            start=start,
            end=end,
            path=source.path,
            line=line,
            column=column,
        )


class BaseFormatter(ABC):
    NAME: str | None = None

    @abstractmethod
    def format(self, failures: Sequence[RuleFailure], *, project_root: Path) -> str:
        raise NotImplementedError


class BaseReporter(ABC):
    NAME: str | None = None

    @abstractmethod
    def report(self, output: str) -> None:
        raise NotImplementedError
