from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from ruleswitch import __version__
from ruleswitch.catalog import SymbolLoadError
from ruleswitch.config import ConfigError, RuleswitchConfig, load_config
from ruleswitch.logging_utils import configure_logging

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="ruleswitch — configurable linter with in-file rule switches.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_KINDS = {"rule": "Rule", "formatter": "Formatter", "reporter": "Reporter"}


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Only log warnings and errors."),
    ] = False,
) -> None:
    """ruleswitch CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)


def _load_config_or_exit(config_dir: Path, extra_rules_dirs: list[str] | None = None) -> RuleswitchConfig:
    try:
        config = load_config(config_dir)
    except ConfigError as exc:
        err_console.print(f"Invalid configuration: {exc}", markup=False)
        raise typer.Exit(code=2) from exc
    if extra_rules_dirs:
        resolved = tuple(
            str(Path(d).expanduser().resolve()) if Path(d).exists() else d for d in extra_rules_dirs if d.strip()
        )
        config = replace(config, rules_directories=(*resolved, *config.rules_directories))
    return config


@app.command()
def lint(
    paths: Annotated[
        list[Path] | None,
        typer.Argument(help="Files or directories to lint (default: the config directory)."),
    ] = None,
    config_dir: Annotated[
        Path,
        typer.Option(
            "--config",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Directory holding pyproject.toml with a [tool.ruleswitch] table.",
        ),
    ] = Path("."),
    output_format: Annotated[
        str | None,
        typer.Option("--format", "-f", help="Formatter name (default from config, else prose)."),
    ] = None,
    reporter_name: Annotated[
        str | None,
        typer.Option("--reporter", help="Reporter name (default from config, else console)."),
    ] = None,
    rules_dir: Annotated[
        list[str] | None,
        typer.Option("--rules-dir", help="Extra rules directory or package, searched first. Repeatable."),
    ] = None,
) -> None:
    """
    Lint files with the rules configured in [tool.ruleswitch.rules].
    """

    from ruleswitch.linter import lint_paths
    from ruleswitch.loader import RulesNotFoundError, load_formatter, load_reporter

    config = _load_config_or_exit(config_dir, rules_dir)

    formatter_name = output_format or config.formatter
    reporter_key = reporter_name or config.reporter
    try:
        formatter = load_formatter(formatter_name, config.formatters_search_path())
        reporter = load_reporter(reporter_key, config.reporters_search_path())
    except SymbolLoadError as exc:
        err_console.print(f"Failed to load plugins: {exc}", markup=False)
        raise typer.Exit(code=2) from exc
    if formatter is None:
        err_console.print(f"Unknown formatter: {formatter_name}", markup=False)
        raise typer.Exit(code=2)
    if reporter is None:
        err_console.print(f"Unknown reporter: {reporter_key}", markup=False)
        raise typer.Exit(code=2)

    targets = [p.resolve() for p in paths] if paths else [config_dir]
    try:
        result = lint_paths(targets, config, project_root=config_dir)
    except RulesNotFoundError as exc:
        err_console.print("Could not find implementations for the following rules:", markup=False)
        for name in exc.missing:
            err_console.print(f"  {name}", markup=False)
        raise typer.Exit(code=2) from exc
    except SymbolLoadError as exc:
        err_console.print(f"Failed to load plugins: {exc}", markup=False)
        raise typer.Exit(code=2) from exc

    logger.info("linted %d file(s), %d failure(s)", len(result.files), result.failure_count)
    reporter.report(formatter.format(result.failures, project_root=config_dir))
    if result.failures:
        raise typer.Exit(code=1)


@app.command()
def resolve(
    name: Annotated[str, typer.Argument(help="Logical name, e.g. no-trailing-whitespace.")],
    kind: Annotated[
        str,
        typer.Option("--kind", "-k", help="What to resolve: rule, formatter or reporter.", show_default=True),
    ] = "rule",
    directory: Annotated[
        list[str] | None,
        typer.Option("--dir", help="Extra directory or package searched before the configured ones. Repeatable."),
    ] = None,
    config_dir: Annotated[
        Path,
        typer.Option("--config", exists=True, file_okay=False, dir_okay=True, resolve_path=True),
    ] = Path("."),
) -> None:
    """
    Show which implementation a name resolves to.
    """

    from ruleswitch.naming import canonical_identifier
    from ruleswitch.resolver import find_symbol

    normalized_kind = kind.strip().lower()
    suffix = _KINDS.get(normalized_kind)
    if suffix is None:
        raise typer.BadParameter("Unsupported kind. Use: rule, formatter, reporter.")

    config = _load_config_or_exit(config_dir)
    search_path = {
        "rule": config.rules_search_path,
        "formatter": config.formatters_search_path,
        "reporter": config.reporters_search_path,
    }[normalized_kind]()
    if directory:
        search_path = [*directory, *search_path]

    try:
        symbol = find_symbol(name, suffix, search_path)
    except SymbolLoadError as exc:
        err_console.print(f"Failed to load plugins: {exc}", markup=False)
        raise typer.Exit(code=2) from exc

    canonical = canonical_identifier(name, suffix)
    if symbol is None:
        err_console.print(f"{name}: not found (expected {canonical})", markup=False)
        raise typer.Exit(code=1)

    module = getattr(symbol.factory, "__module__", "?")
    console.print(f"{name} -> {symbol.canonical_id} ({module})", markup=False, highlight=False, soft_wrap=True)


@app.command()
def rules(
    config_dir: Annotated[
        Path,
        typer.Option("--config", exists=True, file_okay=False, dir_okay=True, resolve_path=True),
    ] = Path("."),
    rules_dir: Annotated[
        list[str] | None,
        typer.Option("--rules-dir", help="Extra rules directory or package, searched first. Repeatable."),
    ] = None,
) -> None:
    """
    List rule implementations available on the search path and whether they are configured.
    """

    from rich.table import Table

    from ruleswitch.catalog import get_valid_directories, list_implementations

    config = _load_config_or_exit(config_dir, rules_dir)

    table = Table(title="Rules")
    table.add_column("Implementation", style="bold")
    table.add_column("Name override")
    table.add_column("Location", overflow="fold")
    table.add_column("Configured", justify="center")

    configured = set(config.rules)
    try:
        for directory in get_valid_directories(config.rules_search_path()):
            if directory is None:
                continue
            for symbol in list_implementations(directory):
                override = symbol.descriptor.raw_name_override
                hit = override in configured if override else False
                table.add_row(
                    symbol.canonical_id,
                    override or "",
                    str(directory),
                    "yes" if hit or _configured_by_canonical(symbol.canonical_id, configured) else "",
                )
    except SymbolLoadError as exc:
        err_console.print(f"Failed to load plugins: {exc}", markup=False)
        raise typer.Exit(code=2) from exc

    console.print(table)


def _configured_by_canonical(canonical_id: str, configured: set[str]) -> bool:
    from ruleswitch.naming import canonical_identifier

    return any(canonical_identifier(name, "Rule") == canonical_id for name in configured)
