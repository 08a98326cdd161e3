from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from ruleswitch.language import BaseFormatter, RuleFailure
from ruleswitch.utils import failure_path


class GithubFormatter(BaseFormatter):
    """GitHub Actions workflow commands (`::warning file=...::...`)."""

    def format(self, failures: Sequence[RuleFailure], *, project_root: Path) -> str:
        lines: list[str] = []
        for f in failures:
            msg = f"{f.rule_name} {f.message}"
            if f.path is None or f.line is None:
                lines.append(f"::warning::{msg}")
                continue
            path = failure_path(f.path, project_root)
            lines.append(f"::warning file={path},line={f.line},col={f.column or 1}::{msg}")
        return "\n".join(lines)
