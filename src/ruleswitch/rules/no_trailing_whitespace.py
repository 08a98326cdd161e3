from __future__ import annotations

import re

from ruleswitch.language import BaseRule, RuleFailure, SourceFile

_TRAILING_RE = re.compile(r"[ \t]+(?=\r?$)", re.MULTILINE)


class NoTrailingWhitespaceRule(BaseRule):
    def apply(self, source: SourceFile) -> list[RuleFailure]:
        return [
            self._failure(source, start=m.start(), end=m.end(), message="Trailing whitespace.")
            for m in _TRAILING_RE.finditer(source.text)
        ]
