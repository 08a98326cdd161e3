from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from ruleswitch.intervals import ToggleEvent


@dataclass(frozen=True, slots=True)
class ToggleMap:
    """
    Toggle events extracted from one source file.

    `wildcard` holds the "all rules" stream; `rules` holds one stream per rule
    name. Every stream is sorted by position.
    """

    wildcard: tuple[ToggleEvent, ...] = ()
    rules: Mapping[str, tuple[ToggleEvent, ...]] = field(default_factory=lambda: MappingProxyType({}))

    def for_rule(self, name: str) -> tuple[ToggleEvent, ...]:
        return self.rules.get(name, ())


EMPTY_TOGGLES = ToggleMap()

# `ruleswitch:disable`, `ruleswitch:enable:rule-a rule-b`, `ruleswitch:disable-next-line:rule-a -- reason`
_NAME = r"[A-Za-z0-9_]+(?:-[A-Za-z0-9_]+)*"
_DIRECTIVE_RE = re.compile(
    r"ruleswitch:(?P<action>enable|disable-next-line|disable-line|disable)"
    rf"(?::[ \t]*(?P<names>{_NAME}(?:[ \t,]+{_NAME})*))?",
    re.IGNORECASE,
)
_COMMENT_RE = re.compile(r"(#|//|/\*)")


def parse_toggles(text: str) -> ToggleMap:
    """
    Extract enable/disable directives from comments in `text`.

    Plain `enable`/`disable` directives toggle at the directive's offset.
    `disable-line` mutes the directive's own line and `disable-next-line` the
    line after it; both are expressed as a disable/enable pair at line starts.
    Free text after ` -- ` is a reason and never names a rule.
    """

    wildcard: list[ToggleEvent] = []
    by_rule: dict[str, list[ToggleEvent]] = {}
    line_starts, lines = _split_lines(text)

    for line_idx, line in enumerate(lines):
        comment = _COMMENT_RE.search(line)
        if comment is None:
            continue
        base = line_starts[line_idx]
        for match in _DIRECTIVE_RE.finditer(line, comment.start()):
            action = match.group("action").lower()
            names = _split_names(match.group("names"))
            events = _events_for(action, position=base + match.start(), line_idx=line_idx, line_starts=line_starts, text=text)
            if not names:
                wildcard.extend(events)
                continue
            for name in names:
                by_rule.setdefault(name, []).extend(events)

    # Line-scoped directives can land after later plain directives.
    return ToggleMap(
        wildcard=tuple(sorted(wildcard, key=lambda e: e.position)),
        rules=MappingProxyType({name: tuple(sorted(evts, key=lambda e: e.position)) for name, evts in by_rule.items()}),
    )


def _events_for(
    action: str,
    *,
    position: int,
    line_idx: int,
    line_starts: list[int],
    text: str,
) -> list[ToggleEvent]:
    if action == "enable":
        return [ToggleEvent(position=position, is_enabled=True)]
    if action == "disable":
        return [ToggleEvent(position=position, is_enabled=False)]

    target = line_idx if action == "disable-line" else line_idx + 1
    if target >= len(line_starts):
        return []
    start = line_starts[target]
    end = line_starts[target + 1] if target + 1 < len(line_starts) else len(text)
    return [ToggleEvent(position=start, is_enabled=False), ToggleEvent(position=end, is_enabled=True)]


def _split_lines(text: str) -> tuple[list[int], list[str]]:
    lines = text.split("\n")
    if lines[-1] == "":
        # No phantom line after a trailing newline (or for empty text).
        lines.pop()
    starts: list[int] = []
    offset = 0
    for line in lines:
        starts.append(offset)
        offset += len(line) + 1
    return starts, lines


def _split_names(value: str | None) -> list[str]:
    if not value:
        return []
    return [token for token in re.split(r"[,\s]+", value.strip()) if token]
