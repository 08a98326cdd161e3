from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from math import inf


@dataclass(frozen=True, slots=True)
class ToggleEvent:
    position: int  # 0-based character offset
    is_enabled: bool


@dataclass(frozen=True, slots=True)
class DisabledInterval:
    """
    Half-open `[start, end)` range of character offsets where a rule is muted.

    `end=None` means the interval runs to the end of the file.
    """

    start: int
    end: int | None = None

    @property
    def is_open_ended(self) -> bool:
        return self.end is None

    def contains(self, position: int) -> bool:
        if position < self.start:
            return False
        return self.end is None or position < self.end


def build_disabled_intervals(
    rule_specific: Sequence[ToggleEvent],
    wildcard: Sequence[ToggleEvent],
) -> list[DisabledInterval]:
    """
    Merge a rule's toggle stream with the wildcard stream into disabled intervals.

    Both sequences must already be sorted by position; this is not checked.
    The rule-specific stream is consumed only when its next position is strictly
    smaller, so wildcard events win exact-position ties.

    Events that do not change the current state (enabling an enabled rule,
    disabling a disabled one) are consumed without producing anything.
    """

    intervals: list[DisabledInterval] = []
    disabled = False
    disabled_start = 0
    i = 0
    j = 0

    while i < len(rule_specific) or j < len(wildcard):
        rule_top = rule_specific[i].position if i < len(rule_specific) else inf
        wildcard_top = wildcard[j].position if j < len(wildcard) else inf
        if rule_top < wildcard_top:
            event = rule_specific[i]
            i += 1
        else:
            event = wildcard[j]
            j += 1

        # Enabling while disabled or disabling while enabled.
        if event.is_enabled == disabled:
            if not disabled:
                disabled_start = event.position
                disabled = True
            else:
                intervals.append(DisabledInterval(start=disabled_start, end=event.position))
                disabled = False

    if disabled:
        intervals.append(DisabledInterval(start=disabled_start, end=None))
    return intervals


def is_disabled_at(intervals: Sequence[DisabledInterval], position: int) -> bool:
    return any(interval.contains(position) for interval in intervals)
