from __future__ import annotations

from pathlib import Path

from ruleswitch.catalog import RegisteredSymbol, describe


def write_module(directory: Path, name: str, content: str) -> Path:
    path = directory / f"{name}.py"
    path.write_text(content.lstrip(), encoding="utf-8")
    return path


def registered(obj) -> RegisteredSymbol:  # type: ignore[no-untyped-def]
    return RegisteredSymbol(descriptor=describe(obj), factory=obj)


RULE_MODULE_HEADER = """
from __future__ import annotations

from ruleswitch.language import BaseRule, RuleFailure, SourceFile
"""
