from __future__ import annotations

from pathlib import Path

from ruleswitch.intervals import DisabledInterval
from ruleswitch.language import SourceFile
from ruleswitch.rules.eofline import EoflineRule
from ruleswitch.rules.max_line_length import MaxLineLengthRule
from ruleswitch.rules.no_tabs import TabIndentRule
from ruleswitch.rules.no_trailing_whitespace import NoTrailingWhitespaceRule


def _src(text: str) -> SourceFile:
    return SourceFile(path=Path("example.py"), text=text)


def test_source_file_line_and_column() -> None:
    source = _src("ab\ncd\n\nef")
    assert source.line_and_column(0) == (1, 1)
    assert source.line_and_column(1) == (1, 2)
    assert source.line_and_column(3) == (2, 1)
    assert source.line_and_column(6) == (3, 1)
    assert source.line_and_column(8) == (4, 2)


def test_rule_value_switches() -> None:
    assert EoflineRule("eofline", True, []).is_enabled()
    assert not EoflineRule("eofline", False, []).is_enabled()
    assert not EoflineRule("eofline", [False, 3], []).is_enabled()
    assert EoflineRule("eofline", [True, 3], []).options == [3]
    assert not EoflineRule("eofline", {"enabled": False}, []).is_enabled()
    assert EoflineRule("eofline", {"limit": 3}, []).options == [{"limit": 3}]


def test_max_line_length_default_and_option() -> None:
    text = "x" * 101 + "\n" + "y" * 20 + "\n"
    assert len(MaxLineLengthRule("max-line-length", True, []).apply(_src(text))) == 1

    failures = MaxLineLengthRule("max-line-length", [True, 10], []).apply(_src(text))
    assert [(f.line, f.start) for f in failures] == [(1, 0), (2, 102)]
    assert "maximum line length of 10" in failures[0].message

    table = MaxLineLengthRule("max-line-length", {"limit": 50}, [])
    assert table.limit() == 50


def test_no_trailing_whitespace_positions() -> None:
    text = "a = 1  \nb = 2\r\nc = 3\t\r\n"
    failures = NoTrailingWhitespaceRule("no-trailing-whitespace", True, []).apply(_src(text))
    assert [(f.line, f.column) for f in failures] == [(1, 6), (3, 6)]
    assert all(f.rule_name == "no-trailing-whitespace" for f in failures)


def test_tab_indent_rule_uses_configured_name() -> None:
    failures = TabIndentRule("no-tabs", True, []).apply(_src("def f():\n\treturn 1\n"))
    assert len(failures) == 1
    assert failures[0].rule_name == "no-tabs"
    assert failures[0].line == 2


def test_eofline() -> None:
    rule = EoflineRule("eofline", True, [])
    assert rule.apply(_src("")) == []
    assert rule.apply(_src("x = 1\n")) == []
    (failure,) = rule.apply(_src("x = 1"))
    assert failure.start == 5
    assert (failure.line, failure.column) == (1, 6)


def test_filter_failures_drops_failures_inside_intervals() -> None:
    text = "a  \nb  \nc  \n"
    rule = NoTrailingWhitespaceRule("no-trailing-whitespace", True, [DisabledInterval(start=4, end=8)])
    kept = rule.filter_failures(rule.apply(_src(text)))
    assert [f.line for f in kept] == [1, 3]
