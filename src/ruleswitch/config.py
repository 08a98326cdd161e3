from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any


class ConfigError(ValueError):
    """Raised when a ruleswitch configuration table is invalid."""


BUILTIN_RULES_PACKAGE = "ruleswitch.rules"
BUILTIN_FORMATTERS_PACKAGE = "ruleswitch.formatters"
BUILTIN_REPORTERS_PACKAGE = "ruleswitch.reporters"

DEFAULT_FORMATTER = "prose"
DEFAULT_REPORTER = "console"
DEFAULT_INCLUDE: tuple[str, ...] = ("**/*.py",)


@dataclass(frozen=True, slots=True)
class RuleswitchConfig:
    rules: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    rules_directories: tuple[str, ...] = ()
    formatters_directories: tuple[str, ...] = ()
    reporters_directories: tuple[str, ...] = ()
    formatter: str = DEFAULT_FORMATTER
    reporter: str = DEFAULT_REPORTER
    include: tuple[str, ...] = DEFAULT_INCLUDE
    exclude: tuple[str, ...] = ()

    def rules_search_path(self) -> list[str]:
        # User directories take precedence over the built-in package.
        return [*self.rules_directories, BUILTIN_RULES_PACKAGE]

    def formatters_search_path(self) -> list[str]:
        return [*self.formatters_directories, BUILTIN_FORMATTERS_PACKAGE]

    def reporters_search_path(self) -> list[str]:
        return [*self.reporters_directories, BUILTIN_REPORTERS_PACKAGE]


def load_config(project_dir: Path | str = ".") -> RuleswitchConfig:
    """
    Load configuration from the `[tool.ruleswitch]` table of `pyproject.toml`.

    Returns defaults when the file or the table does not exist.
    """

    project_dir_path = Path(project_dir)
    pyproject_path = project_dir_path / "pyproject.toml"
    if not pyproject_path.exists():
        return RuleswitchConfig()

    try:
        data = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {pyproject_path}: {exc}") from exc

    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return RuleswitchConfig()

    table = tool_table.get("ruleswitch", {})
    if not isinstance(table, dict) or not table:
        return RuleswitchConfig()

    return parse_config_table(table, project_dir=project_dir_path)


def parse_config_table(table: Mapping[str, Any], *, project_dir: Path) -> RuleswitchConfig:
    rules = _parse_rules(table.get("rules", {}))
    rules_directories = _parse_directories(table, "rules-directories", project_dir=project_dir)
    formatters_directories = _parse_directories(table, "formatters-directories", project_dir=project_dir)
    reporters_directories = _parse_directories(table, "reporters-directories", project_dir=project_dir)

    formatter = _parse_name(table.get("formatter", DEFAULT_FORMATTER), field_name="tool.ruleswitch.formatter")
    reporter = _parse_name(table.get("reporter", DEFAULT_REPORTER), field_name="tool.ruleswitch.reporter")

    include = _validate_str_list(table.get("include", list(DEFAULT_INCLUDE)), field_name="tool.ruleswitch.include")
    exclude = _validate_str_list(table.get("exclude", []), field_name="tool.ruleswitch.exclude")

    return RuleswitchConfig(
        rules=rules,
        rules_directories=rules_directories,
        formatters_directories=formatters_directories,
        reporters_directories=reporters_directories,
        formatter=formatter,
        reporter=reporter,
        include=include or DEFAULT_INCLUDE,
        exclude=exclude,
    )


def _parse_rules(value: Any) -> Mapping[str, Any]:
    if value is None:
        return MappingProxyType({})
    if not isinstance(value, dict):
        raise ConfigError("`tool.ruleswitch.rules` must be a table.")

    out: dict[str, Any] = {}
    for raw_name, rule_value in value.items():
        name = str(raw_name).strip()
        if not name:
            raise ConfigError("`tool.ruleswitch.rules` contains an empty rule name.")
        if not isinstance(rule_value, bool | list | dict):
            raise ConfigError(f"`tool.ruleswitch.rules.{raw_name}` must be a boolean, a list or a table.")
        if isinstance(rule_value, list) and rule_value and not isinstance(rule_value[0], bool):
            raise ConfigError(f"`tool.ruleswitch.rules.{raw_name}` list must start with true/false.")
        out[name] = rule_value
    return MappingProxyType(out)


def _parse_directories(table: Mapping[str, Any], key: str, *, project_dir: Path) -> tuple[str, ...]:
    underscored = key.replace("-", "_")
    raw = table.get(key, table.get(underscored, []))
    entries = _validate_str_list(raw, field_name=f"tool.ruleswitch.{key}")
    out: list[str] = []
    for entry in entries:
        if not entry:
            continue
        if _is_path_like(entry) or (project_dir / entry).is_dir():
            path = Path(entry).expanduser()
            if not path.is_absolute():
                path = project_dir / path
            out.append(str(path))
        else:
            # Dotted module names are imported, not resolved on disk.
            out.append(entry)
    return tuple(out)


def _is_path_like(entry: str) -> bool:
    return "/" in entry or "\\" in entry or entry.startswith(("~", ".")) or not all(
        part.isidentifier() for part in entry.split(".")
    )


def _parse_name(value: Any, *, field_name: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"`{field_name}` must be a non-empty string.")
    return value.strip()


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value)
