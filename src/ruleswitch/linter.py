from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ruleswitch.catalog import RegisteredSymbol
from ruleswitch.config import BUILTIN_RULES_PACKAGE, RuleswitchConfig
from ruleswitch.directives import parse_toggles
from ruleswitch.language import BaseRule, RuleFailure, SourceFile
from ruleswitch.loader import Directories, instantiate_rules, resolve_rules

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "build",
    "dist",
    "__pycache__",
}


@dataclass(frozen=True, slots=True)
class LintResult:
    files: tuple[Path, ...]
    failures: tuple[RuleFailure, ...]

    @property
    def failure_count(self) -> int:
        return len(self.failures)


def lint_source(source: SourceFile, rules: Sequence[BaseRule]) -> list[RuleFailure]:
    failures: list[RuleFailure] = []
    for rule in rules:
        if not rule.is_enabled():
            continue
        failures.extend(rule.filter_failures(rule.apply(source)))
    return sorted(failures, key=lambda f: (f.start, f.rule_name))


def lint_text(
    text: str,
    rule_configuration: Mapping[str, Any],
    *,
    path: Path | None = None,
    rules_directories: Directories = (BUILTIN_RULES_PACKAGE,),
) -> list[RuleFailure]:
    """Parse directives in `text`, load the configured rules and lint it."""

    resolved = resolve_rules(rule_configuration, rules_directories)
    return _lint_resolved(text, path, resolved, rule_configuration)


def lint_paths(
    paths: Iterable[Path],
    config: RuleswitchConfig,
    *,
    project_root: Path,
    rules_directories: Directories = None,
) -> LintResult:
    """
    Lint every file under `paths` that matches the configured include globs.

    Configured rules are resolved once, before any file is read, so resolution
    errors propagate even when nothing matches. Unreadable files are skipped
    with a warning.
    """

    search_path = rules_directories if rules_directories is not None else config.rules_search_path()
    resolved = resolve_rules(config.rules, search_path)
    files = discover_files(paths, config, project_root=project_root)
    logger.debug("discovered %d candidate file(s)", len(files))

    failures: list[RuleFailure] = []
    for file in files:
        try:
            text = file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("skipping unreadable file (%s): %s", file, exc)
            continue
        failures.extend(_lint_resolved(text, file, resolved, config.rules))

    failures.sort(key=lambda f: (str(f.path), f.start, f.rule_name))
    return LintResult(files=tuple(files), failures=tuple(failures))


def _lint_resolved(
    text: str,
    path: Path | None,
    resolved: Mapping[str, RegisteredSymbol],
    rule_configuration: Mapping[str, Any],
) -> list[RuleFailure]:
    rules = instantiate_rules(resolved, rule_configuration, parse_toggles(text))
    return lint_source(SourceFile(path=path, text=text), rules)


def discover_files(paths: Iterable[Path], config: RuleswitchConfig, *, project_root: Path) -> list[Path]:
    out: set[Path] = set()
    for path in paths:
        if path.is_file():
            out.add(path)
            continue
        if not path.is_dir():
            logger.warning("path does not exist: %s", path)
            continue
        for dirpath, dirnames, filenames in os.walk(path, topdown=True):
            dirnames[:] = [d for d in dirnames if d not in DEFAULT_SKIP_DIRS]
            base = Path(dirpath)
            for filename in filenames:
                candidate = base / filename
                if _matches(candidate, config.include, project_root=project_root) and not _matches(
                    candidate, config.exclude, project_root=project_root
                ):
                    out.add(candidate)
    return sorted(out)


def _matches(path: Path, patterns: Iterable[str], *, project_root: Path) -> bool:
    try:
        rel_posix = path.resolve().relative_to(project_root.resolve()).as_posix()
    except (ValueError, OSError):
        rel_posix = path.as_posix()

    for raw_pattern in patterns:
        pattern = raw_pattern.strip().replace("\\", "/")
        if not pattern:
            continue
        if pattern.startswith("./"):
            pattern = pattern[2:]
        if pattern.endswith("/"):
            if rel_posix.startswith(pattern):
                return True
            continue
        if fnmatch.fnmatch(rel_posix, pattern) or fnmatch.fnmatch(path.name, pattern.removeprefix("**/")):
            return True
    return False
