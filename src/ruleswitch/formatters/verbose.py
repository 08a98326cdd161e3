from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ruleswitch.language import BaseFormatter, RuleFailure
from ruleswitch.utils import failure_path


class VerboseFormatter(BaseFormatter):
    def format(self, failures: Sequence[RuleFailure], *, project_root: Path) -> str:
        return "\n".join(
            f"({f.rule_name}) {failure_path(f.path, project_root)}[{f.line}, {f.column}]: {f.message}"
            for f in failures
        )
