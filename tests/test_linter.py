from __future__ import annotations

import os
from pathlib import Path

import pytest
from helpers import RULE_MODULE_HEADER, write_module

from ruleswitch.config import RuleswitchConfig
from ruleswitch.language import SourceFile
from ruleswitch.linter import discover_files, lint_paths, lint_source, lint_text
from ruleswitch.loader import RulesNotFoundError, load_rules


def test_lint_text_respects_rule_and_wildcard_directives() -> None:
    text = (
        "a = 1  \n"
        "# ruleswitch:disable:no-trailing-whitespace\n"
        "b = 2  \n"
        "# ruleswitch:enable:no-trailing-whitespace\n"
        "c = 3  \n"
        "# ruleswitch:disable\n"
        "d = 4  \n"
    )
    failures = lint_text(text, {"no-trailing-whitespace": True, "eofline": True}, rules_directories="ruleswitch.rules")
    assert [f.line for f in failures] == [1, 5]


def test_lint_text_disable_next_line() -> None:
    text = "# ruleswitch:disable-next-line:no-tabs\n\tx = 1\n\ty = 2\n"
    failures = lint_text(text, {"no-tabs": True}, rules_directories=["ruleswitch.rules"])
    assert [f.line for f in failures] == [3]


def test_disabled_rules_are_loaded_but_not_applied() -> None:
    rules = load_rules({"eofline": False}, rules_directories="ruleswitch.rules")
    assert lint_source(SourceFile(path=None, text="x = 1"), rules) == []


def test_lint_text_raises_for_unknown_rules() -> None:
    with pytest.raises(RulesNotFoundError) as excinfo:
        lint_text("x = 1\n", {"eofline": True, "nope": True, "also-nope": True}, rules_directories="ruleswitch.rules")
    assert excinfo.value.missing == ("nope", "also-nope")


def test_lint_paths_with_custom_rules(tmp_path: Path, plugin_dir: Path) -> None:
    write_module(
        plugin_dir,
        "todo",
        RULE_MODULE_HEADER
        + """

class NoTodoRule(BaseRule):
    def apply(self, source: SourceFile) -> list[RuleFailure]:
        out = []
        idx = source.text.find("TODO")
        while idx != -1:
            out.append(self._failure(source, start=idx, end=idx + 4, message="TODO found."))
            idx = source.text.find("TODO", idx + 1)
        return out
""",
    )
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.py").write_text("# TODO one\nx = 1  # ruleswitch:disable-line:no-todo\n# TODO two\n", encoding="utf-8")
    (src / "b.txt").write_text("TODO ignored\n", encoding="utf-8")

    config = RuleswitchConfig(rules={"no-todo": True}, rules_directories=(str(plugin_dir),))
    result = lint_paths([src], config, project_root=tmp_path)

    assert result.files == (src / "a.py",)
    assert [(f.rule_name, f.line) for f in result.failures] == [("no-todo", 1), ("no-todo", 3)]
    assert result.failure_count == 2


def test_discover_files_applies_include_exclude_and_skip_dirs(tmp_path: Path) -> None:
    for rel in ("keep.py", "pkg/mod.py", "build/gen.py", ".venv/lib.py", "pkg/notes.md", "pkg/skip_me.py"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("x = 1\n", encoding="utf-8")

    config = RuleswitchConfig(exclude=("skip_me.py",))
    files = discover_files([tmp_path], config, project_root=tmp_path)
    assert [f.relative_to(tmp_path).as_posix() for f in files] == ["keep.py", "pkg/mod.py"]


def test_explicit_file_paths_bypass_globs(tmp_path: Path) -> None:
    notes = tmp_path / "notes.md"
    notes.write_text("x\n", encoding="utf-8")
    assert discover_files([notes, tmp_path / "missing"], RuleswitchConfig(), project_root=tmp_path) == [notes]


def test_lint_text_uses_builtin_rules_by_default() -> None:
    failures = lint_text("x = 1", {"eofline": True})
    assert [f.rule_name for f in failures] == ["eofline"]


def test_lint_paths_reports_unknown_rules_when_no_files_match(tmp_path: Path) -> None:
    config = RuleswitchConfig(rules={"no-such-rule": True, "eofline": True})
    with pytest.raises(RulesNotFoundError) as excinfo:
        lint_paths([tmp_path], config, project_root=tmp_path)
    assert excinfo.value.missing == ("no-such-rule",)


def test_skipped_directories_are_not_descended(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / "node_modules" / "deep").mkdir(parents=True)
    (tmp_path / "node_modules" / "deep" / "x.py").write_text("x = 1\n", encoding="utf-8")
    (tmp_path / "app.py").write_text("x = 1\n", encoding="utf-8")

    visited: list[str] = []
    real_walk = os.walk

    def recording_walk(top, *args, **kwargs):  # type: ignore[no-untyped-def]
        for dirpath, dirnames, filenames in real_walk(top, *args, **kwargs):
            visited.append(Path(dirpath).name)
            yield dirpath, dirnames, filenames

    monkeypatch.setattr("ruleswitch.linter.os.walk", recording_walk)
    files = discover_files([tmp_path], RuleswitchConfig(), project_root=tmp_path)

    assert files == [tmp_path / "app.py"]
    assert "node_modules" not in visited
    assert "deep" not in visited
