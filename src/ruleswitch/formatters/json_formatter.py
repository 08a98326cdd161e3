from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from ruleswitch import __version__
from ruleswitch.language import BaseFormatter, RuleFailure
from ruleswitch.utils import failure_path

REPORT_SCHEMA_VERSION = 1


class JsonFormatter(BaseFormatter):
    def format(self, failures: Sequence[RuleFailure], *, project_root: Path) -> str:
        payload = {
            "schema_version": REPORT_SCHEMA_VERSION,
            "tool": {"name": "ruleswitch", "version": __version__},
            "failures": [_failure_to_dict(f, project_root=project_root) for f in failures],
        }
        return json.dumps(payload, indent=2, sort_keys=False)


def _failure_to_dict(f: RuleFailure, *, project_root: Path) -> dict[str, Any]:
    return {
        "rule": f.rule_name,
        "path": failure_path(f.path, project_root),
        "message": f.message,
        "start": {"position": f.start, "line": f.line, "column": f.column},
        "end": {"position": f.end},
    }
