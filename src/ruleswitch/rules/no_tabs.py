from __future__ import annotations

import re

from ruleswitch.language import BaseRule, RuleFailure, SourceFile

_LEADING_TAB_RE = re.compile(r"^[ ]*\t[ \t]*", re.MULTILINE)


class TabIndentRule(BaseRule):
    # Declares its own name; `no-tabs` would otherwise have to live in `NoTabsRule`.
    RULE_NAME = "no-tabs"

    def apply(self, source: SourceFile) -> list[RuleFailure]:
        return [
            self._failure(source, start=m.start(), end=m.end(), message="Indentation uses tabs.")
            for m in _LEADING_TAB_RE.finditer(source.text)
        ]
