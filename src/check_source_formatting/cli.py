from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console

from check_source_formatting import __version__
from check_source_formatting.check import check_paths
from check_source_formatting.config import ConfigError, CsfConfig, find_project_dir, load_config, load_config_file
from check_source_formatting.engine.evaluator import RuleDefinitionError
from check_source_formatting.engine.rule import Rule, is_reserved_name
from check_source_formatting.engine.types import CheckSummary
from check_source_formatting.logging_utils import configure_logging
from check_source_formatting.reporters.json_reporter import render_json
from check_source_formatting.reporters.terminal import render_terminal
from check_source_formatting.rules.plugins import PluginLoadError
from check_source_formatting.utils import display_path

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="csf: check (and fix) formatting of JavaScript, CSS and HTML sources.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
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
        typer.Option("--quiet", "-q", help="Only show files with problems."),
    ] = False,
) -> None:
    """check-source-formatting CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet}


def _cli_settings() -> dict[str, bool]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False}
    return {"verbose": bool(ctx.obj.get("verbose", False)), "quiet": bool(ctx.obj.get("quiet", False))}


def _resolve_config(paths: list[str], *, config_path: Path | None, no_config: bool) -> CsfConfig:
    if no_config:
        return CsfConfig()
    if config_path is not None:
        return load_config_file(config_path)
    start = Path(paths[0]) if paths else Path(".")
    if not start.exists():
        start = Path(".")
    return load_config(find_project_dir(start.resolve()))


def _emit_output(fmt: str, *, summary: CheckSummary, relative: bool, filenames: bool, quiet: bool) -> None:
    if filenames:
        for report in summary.files:
            if report.violations or report.error is not None:
                typer.echo(display_path(report.path, relative=relative))
        return

    normalized = fmt.strip().lower()
    if normalized == "terminal":
        render_terminal(summary, console=console, relative=relative, quiet=quiet)
        return
    if normalized == "json":
        typer.echo(render_json(summary, relative=relative))
        return
    raise typer.BadParameter("Unsupported format. Use: terminal, json.")


@app.command()
def check(
    paths: Annotated[
        list[str],
        typer.Argument(help="Files or glob patterns to check."),
    ],
    inline_edit: Annotated[
        bool,
        typer.Option("--inline-edit", "-i", help="Write fixes back to the files."),
    ] = False,
    filenames: Annotated[
        bool,
        typer.Option("--filenames", help="Only print the names of files with problems."),
    ] = False,
    relative: Annotated[
        bool,
        typer.Option("--relative", help="Print paths relative to the current directory."),
    ] = False,
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Read settings from this TOML file instead of pyproject.toml."),
    ] = None,
    no_config: Annotated[
        bool,
        typer.Option("--no-config", help="Ignore configuration files; use defaults."),
    ] = False,
) -> None:
    """
    Check files against the formatting rules; exits 1 when problems remain.
    """

    settings = _cli_settings()
    if output_format.strip().lower() not in {"terminal", "json"}:
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")

    try:
        config = _resolve_config(paths, config_path=config_path, no_config=no_config)
        summary = check_paths(paths, config, inline_edit=inline_edit)
    except ConfigError as exc:
        err_console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc
    except PluginLoadError as exc:
        err_console.print(f"Failed to load plugins: {exc}")
        raise typer.Exit(code=2) from exc
    except RuleDefinitionError as exc:
        err_console.print(f"Invalid rule: {exc}")
        raise typer.Exit(code=2) from exc

    _emit_output(output_format, summary=summary, relative=relative, filenames=filenames, quiet=settings["quiet"])

    if summary.has_unresolved:
        raise typer.Exit(code=1)


@app.command()
def rules(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Project directory (default: current directory).",
        ),
    ] = Path("."),
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    config_path: Annotated[
        Path | None,
        typer.Option("--config", help="Read settings from this TOML file instead of pyproject.toml."),
    ] = None,
    no_config: Annotated[
        bool,
        typer.Option("--no-config", help="Ignore configuration files; use defaults."),
    ] = False,
) -> None:
    """
    List line rule-sets (built-in + configured) and registered token rules.
    """

    from rich.table import Table

    from check_source_formatting.linters.js import resolve_rule_config
    from check_source_formatting.rules.loader import load_token_rules
    from check_source_formatting.rules.registry import build_rule_set_store

    try:
        config = _resolve_config([str(path)], config_path=config_path, no_config=no_config)
        registry = load_token_rules(config.plugins)
    except ConfigError as exc:
        err_console.print(f"Invalid configuration: {exc}")
        raise typer.Exit(code=2) from exc
    except PluginLoadError as exc:
        err_console.print(f"Failed to load plugins: {exc}")
        raise typer.Exit(code=2) from exc

    store = build_rule_set_store(config.rule_sets)
    line_rows = []
    for name in store.names():
        rule_set = store.lookup(name)
        if rule_set is None or store.is_alias(name):
            continue
        for rule_name, rule in rule_set.items():
            if is_reserved_name(rule_name) or not isinstance(rule, Rule):
                continue
            line_rows.append(
                {
                    "rule_set": name,
                    "rule": rule_name,
                    "fixable": rule.replacer is not None,
                    "pattern": rule.regex.pattern if rule.regex is not None else None,
                }
            )

    token_settings = resolve_rule_config(config)
    token_rows = []
    for rule_id, token_rule in registry.rules().items():
        setting = token_settings.get(rule_id)
        token_rows.append(
            {
                "rule_id": rule_id,
                "severity": setting.severity if setting is not None else "off",
                "description": token_rule.description,
            }
        )

    normalized = output_format.strip().lower()
    if normalized == "json":
        typer.echo(json.dumps({"line_rules": line_rows, "token_rules": token_rows}, indent=2, sort_keys=True))
        return
    if normalized != "terminal":
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")

    table = Table(title="Line rules")
    table.add_column("Rule-set", style="bold")
    table.add_column("Rule")
    table.add_column("Fixable", justify="center")
    for row in line_rows:
        table.add_row(str(row["rule_set"]), str(row["rule"]), "yes" if row["fixable"] else "no")
    console.print(table)

    token_table = Table(title="Token rules")
    token_table.add_column("ID", style="bold")
    token_table.add_column("Severity")
    token_table.add_column("Description")
    for row in token_rows:
        token_table.add_row(str(row["rule_id"]), str(row["severity"]), str(row["description"]))
    console.print(token_table)
