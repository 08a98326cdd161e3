from __future__ import annotations

from ruleswitch.language import BaseRule, RuleFailure, SourceFile


class EoflineRule(BaseRule):
    """Non-empty files must end with a newline."""

    def apply(self, source: SourceFile) -> list[RuleFailure]:
        text = source.text
        if not text or text.endswith("\n"):
            return []
        end = len(text)
        return [self._failure(source, start=end, end=end, message="File should end with a newline.")]
