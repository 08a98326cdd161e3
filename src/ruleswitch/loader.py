from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from ruleswitch.catalog import DirectoryId, RegisteredSymbol, list_implementations
from ruleswitch.directives import EMPTY_TOGGLES, ToggleMap
from ruleswitch.intervals import build_disabled_intervals
from ruleswitch.language import BaseFormatter, BaseReporter, BaseRule
from ruleswitch.resolver import Lister, find_symbol

logger = logging.getLogger(__name__)

Directories = DirectoryId | Iterable[DirectoryId | None] | None


class RulesNotFoundError(LookupError):
    """Raised when one or more configured rules have no implementation in any search directory."""

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = tuple(missing)
        super().__init__(self.render())

    def render(self) -> str:
        names = "\n".join(self.missing)
        return (
            "Could not find implementations for the following rules specified in the configuration:\n"
            f"{names}\n"
            "Try upgrading ruleswitch and/or ensuring that you have all necessary custom rules installed."
        )


def load_formatter(name: str, formatters_directories: Directories, *, lister: Lister = list_implementations) -> BaseFormatter | None:
    return _load_internal_symbol(name, formatters_directories, "Formatter", lister=lister)


def load_reporter(name: str, reporters_directories: Directories, *, lister: Lister = list_implementations) -> BaseReporter | None:
    return _load_internal_symbol(name, reporters_directories, "Reporter", lister=lister)


def _load_internal_symbol(name: str, directories: Directories, suffix: str, *, lister: Lister) -> Any:
    symbol = find_symbol(name, suffix, directories, lister=lister)
    if symbol is None:
        return None
    return symbol.factory()


def resolve_rules(
    rule_configuration: Mapping[str, Any],
    rules_directories: Directories = None,
    *,
    lister: Lister = list_implementations,
) -> dict[str, RegisteredSymbol]:
    """
    Find the implementation of every configured rule.

    Every name is attempted before failing, so a single `RulesNotFoundError`
    lists all unresolved rules.
    """

    resolved: dict[str, RegisteredSymbol] = {}
    not_found: list[str] = []

    for rule_name in rule_configuration:
        symbol = find_symbol(rule_name, "Rule", rules_directories, lister=lister)
        if symbol is None:
            not_found.append(rule_name)
            continue
        resolved[rule_name] = symbol

    if not_found:
        logger.debug("unresolved rules: %s", ", ".join(not_found))
        raise RulesNotFoundError(not_found)
    return resolved


def instantiate_rules(
    resolved: Mapping[str, RegisteredSymbol],
    rule_configuration: Mapping[str, Any],
    toggles: ToggleMap = EMPTY_TOGGLES,
) -> list[BaseRule]:
    rules: list[BaseRule] = []
    for rule_name, symbol in resolved.items():
        intervals = build_disabled_intervals(toggles.for_rule(rule_name), toggles.wildcard)
        rules.append(symbol.factory(rule_name, rule_configuration[rule_name], intervals))
    return rules


def load_rules(
    rule_configuration: Mapping[str, Any],
    toggles: ToggleMap = EMPTY_TOGGLES,
    rules_directories: Directories = None,
    *,
    lister: Lister = list_implementations,
) -> list[BaseRule]:
    """
    Instantiate every configured rule with its disabled intervals.

    No rules are returned when any name is unresolved; see `resolve_rules`.
    """

    resolved = resolve_rules(rule_configuration, rules_directories, lister=lister)
    return instantiate_rules(resolved, rule_configuration, toggles)
