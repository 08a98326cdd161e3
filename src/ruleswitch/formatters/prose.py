from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ruleswitch.language import BaseFormatter, RuleFailure
from ruleswitch.utils import failure_path


class ProseFormatter(BaseFormatter):
    """`path[line, col]: message`, one failure per line."""

    def format(self, failures: Sequence[RuleFailure], *, project_root: Path) -> str:
        return "\n".join(
            f"{failure_path(f.path, project_root)}[{f.line}, {f.column}]: {f.message}" for f in failures
        )
