"""CLI entry point: gather facts, run checks, output clearly."""

import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import click
import typer

from .checks import default_registry
from .checks.base import Severity
from .checks.yaml_loader import load_yaml_checks
from .config import Settings, load_facts_file, load_settings
from .context import Facts
from .engine import Evaluator
from .errors import SiteHealthError
from .export import get_stats, save_report
from .format import format_human, format_info, format_json, format_markdown
from .info import BUILTIN_PANELS, collect_info, engine_panel
from .probe import gather_facts
from .registry import Registry
from .report import Report


def _err(msg: str) -> None:
    """Raise a styled usage error; used for all CLI errors."""
    raise click.BadParameter(msg)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _load(config: Optional[Path], facts_file: Optional[Path], probe: bool) -> tuple[Settings, Registry, Facts]:
    """Settings, registry (built-ins + declared checks) and facts for one invocation."""
    try:
        settings = load_settings(config)
        registry = default_registry()
        for path in settings.checks_files:
            for check in load_yaml_checks(path):
                registry.register(check)
        if facts_file is not None:
            facts = load_facts_file(facts_file)
        else:
            facts = gather_facts(probe_network=probe)
    except SiteHealthError as e:
        _err(str(e))
    return settings, registry, facts.merged(settings.facts)


app = typer.Typer(help="Run site health checks and report what needs attention.")

_CONFIG_OPT = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="Settings YAML (default: ./sitehealth.yaml)")
_FACTS_OPT = typer.Option(None, "--facts", "-f", exists=True, dir_okay=False, help="Load facts from JSON/YAML instead of probing")
_PROBE_OPT = typer.Option(True, "--probe/--no-probe", help="Probe the cache server over the network")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    json_out: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    markdown_out: bool = typer.Option(False, "--markdown", "-m", help="Output as Markdown"),
    only: Optional[List[str]] = typer.Option(None, "--only", "-o", help="Run only this check (repeatable)"),
    ci: bool = typer.Option(False, "--ci", help="CI mode: exit 1 if the worst verdict reaches --fail-on"),
    fail_on: Optional[str] = typer.Option(None, "--fail-on", help="In CI mode: fail on this severity or worse (recommended/critical)"),
    report: bool = typer.Option(False, "--report", "-r", help="Save a report snapshot locally"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Include check ids, details and debug logging"),
    config: Optional[Path] = _CONFIG_OPT,
    facts_file: Optional[Path] = _FACTS_OPT,
    probe: bool = _PROBE_OPT,
) -> None:
    """Evaluate all registered checks and print the report."""
    _setup_logging(verbose)
    if ctx.invoked_subcommand is not None:
        return

    settings, registry, facts = _load(config, facts_file, probe)
    threshold = settings.fail_on
    if fail_on:
        try:
            threshold = Severity.parse(fail_on)
        except ValueError as e:
            _err(str(e))

    selector = only or settings.select
    result = Evaluator().run(registry, facts, selector)

    if json_out:
        typer.echo(format_json(result, facts if verbose else None))
    elif markdown_out:
        typer.echo(format_markdown(result))
    else:
        typer.echo(format_human(result, verbose=verbose))

    if report:
        saved = save_report(result)
        if saved:
            typer.echo(f"Report saved: {saved}", err=True)

    if ci:
        _ci_exit(result, threshold)


def _ci_exit(result: Report, threshold: Severity) -> None:
    """Exit 1 if the worst verdict meets or exceeds threshold. GOOD never fails."""
    worst = result.worst()
    if worst is None or worst == Severity.GOOD:
        return
    if worst >= threshold:
        raise typer.Exit(1)


@app.command("list")
def list_cmd(
    config: Optional[Path] = _CONFIG_OPT,
) -> None:
    """List registered checks."""
    _, registry, _ = _load(config, None, probe=False)
    for check in registry:
        typer.echo(f"  {check.check_id:<20} {check.category:<22} {check.label}")


@app.command("facts")
def facts_cmd(
    config: Optional[Path] = _CONFIG_OPT,
    probe: bool = _PROBE_OPT,
) -> None:
    """Print gathered facts as JSON (reusable with --facts)."""
    _, _, facts = _load(config, None, probe)
    typer.echo(json.dumps({"facts": facts.as_dict()}, indent=2, default=str))


@app.command("info")
def info_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="JSON output"),
    config: Optional[Path] = _CONFIG_OPT,
    facts_file: Optional[Path] = _FACTS_OPT,
    probe: bool = _PROBE_OPT,
) -> None:
    """Show diagnostic information panels."""
    _, registry, facts = _load(config, facts_file, probe)
    sections = collect_info(facts, [*BUILTIN_PANELS, engine_panel(registry)])
    if json_out:
        typer.echo(json.dumps({k: s.to_dict() for k, s in sections.items()}, indent=2, default=str))
        return
    typer.echo(format_info(sections))


@app.command("stats")
def stats_cmd(
    json_out: bool = typer.Option(False, "--json", "-j", help="JSON output"),
) -> None:
    """Show stats from locally saved reports."""
    stats = get_stats()
    if json_out:
        typer.echo(json.dumps(stats, indent=2))
        return
    if stats["total_runs"] == 0:
        typer.echo("No reports yet. Run with --report to save one.")
        return
    typer.echo(f"Total saved runs: {stats['total_runs']}")
    typer.echo()
    typer.echo("Needs attention, by check:")
    for check_id, count in sorted(stats["by_check"].items(), key=lambda x: -x[1]):
        typer.echo(f"  {check_id}: {count}")
    typer.echo()
    typer.echo("Worst verdict per run:")
    for worst, count in sorted(stats["by_worst"].items(), key=lambda x: -x[1]):
        typer.echo(f"  {worst}: {count}")


if __name__ == "__main__":
    app()
