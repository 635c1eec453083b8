"""
Primer CLI

Command-line interface for building and inspecting startup state.

Usage::

    primer show                 # Node weights and the symbol table
    primer show -f json         # Same, as JSON
    primer check                # Runtime settings and required directories
    primer symbol 90            # Single table lookup
    primer numeral 1994         # Render a number from the table
"""

import json
import logging

import click

from primer.core.bootstrap import BootstrapPipeline, StartupState
from primer.core.config import PrimerConfig
from primer.core.environment import (
    DirectoryReport,
    OsEnvironment,
    resolve_settings,
)
from primer.core.symbols import build_symbol_table
from primer.exceptions import PrimerError


# ---------------------------------------------------------------------------
# Logging helpers
# ---------------------------------------------------------------------------

def _configure_logging(verbose: bool, config: PrimerConfig) -> None:
    """Set up logging for the CLI session."""
    level = logging.DEBUG if verbose else getattr(logging, config.log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=config.log_format)


# ---------------------------------------------------------------------------
# Top-level group
# ---------------------------------------------------------------------------

@click.group()
@click.version_option(package_name="primer-init")
@click.pass_context
def cli(ctx: click.Context):
    """Primer — explicit, run-once startup state."""
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = PrimerConfig.from_env()
    except PrimerError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# primer show
# ---------------------------------------------------------------------------

@cli.command()
@click.option("-f", "--format", "fmt", type=click.Choice(["console", "json"]),
              default="console", help="Output format.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def show(ctx: click.Context, fmt: str, verbose: bool):
    """Build the graph and symbol table and print them."""
    config: PrimerConfig = ctx.obj["config"]
    _configure_logging(verbose, config)

    state = _run_pipeline(BootstrapPipeline(config, include_environment=False))

    if fmt == "json":
        click.echo(json.dumps(state.to_dict(), indent=2))
        return
    _display_state(state)


def _display_state(state: StartupState) -> None:
    click.echo("─" * 50)
    click.echo("  PRIMER — Startup State")
    click.echo("─" * 50)
    click.echo("  Node weights:")
    for node_id, weight in sorted(state.weights.items()):
        targets = ", ".join(state.graph.edges_from(node_id)) or "-"
        click.echo(f"    {node_id:<10} {weight:>6}   → {targets}")
    click.echo()
    click.echo("  Symbol table:")
    for magnitude, sym in state.symbols.items():
        click.echo(f"    {magnitude:>6} = {sym}")
    click.echo("─" * 50)


# ---------------------------------------------------------------------------
# primer check
# ---------------------------------------------------------------------------

@cli.command()
@click.option("--base-dir", type=click.Path(file_okay=False), default=None,
              help="Directory holding the required directories (default: $PRIMER_BASE_DIR or '.').")
@click.option("--no-repair", is_flag=True, help="Report missing directories without creating them.")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def check(ctx: click.Context, base_dir: str | None, no_repair: bool, verbose: bool):
    """Resolve runtime settings and verify the required directories."""
    config: PrimerConfig = ctx.obj["config"]
    _configure_logging(verbose, config)

    if base_dir is not None:
        config.base_dir = base_dir

    if no_repair:
        settings = resolve_settings(OsEnvironment(), config)
        report = _inspect_directories(config)
    else:
        state = _run_pipeline(BootstrapPipeline(config))
        settings, report = state.settings, state.directories

    click.echo("─" * 50)
    click.echo("  PRIMER — Environment Check")
    click.echo("─" * 50)
    click.echo(f"  User      : {settings.user}")
    click.echo(f"  Home      : {settings.home}")
    click.echo(f"  Workspace : {settings.workspace}")
    if settings.defaults_applied:
        click.echo(f"  Defaults  : {', '.join(settings.defaults_applied)}")
    click.echo()
    click.echo("  Required directories:")
    for path in report.ensured:
        status = "created" if path in report.created else "exists"
        click.echo(f"    {path} ({status})")
    for path, message in report.failed.items():
        click.echo(f"    {path} (failed: {message})")
    click.echo("─" * 50)

    if not report.ok:
        raise SystemExit(1)


def _inspect_directories(config: PrimerConfig) -> DirectoryReport:
    """Build a report of which directories exist, touching nothing."""
    ensured, failed = [], {}
    for path in config.get_directory_paths():
        if path.is_dir():
            ensured.append(str(path))
        else:
            failed[str(path)] = "missing"
    return DirectoryReport(ensured=ensured, failed=failed)


# ---------------------------------------------------------------------------
# primer symbol / primer numeral
# ---------------------------------------------------------------------------

@cli.command()
@click.argument("magnitude", type=int)
def symbol(magnitude: int):
    """Look up the symbol for MAGNITUDE."""
    found = build_symbol_table().lookup(magnitude)
    if found is None:
        click.echo(f"No symbol for {magnitude}.", err=True)
        raise SystemExit(1)
    click.echo(found)


@cli.command()
@click.argument("number", type=int)
def numeral(number: int):
    """Render NUMBER (1-3999) using the symbol table."""
    rendered = build_symbol_table().compose(number)
    if rendered is None:
        click.echo(f"Cannot render {number}: expected 1-3999.", err=True)
        raise SystemExit(1)
    click.echo(rendered)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _run_pipeline(pipeline: BootstrapPipeline) -> StartupState:
    """Run *pipeline*, turning Primer errors into a clean exit."""
    try:
        return pipeline.run()
    except PrimerError as exc:
        click.echo(f"Error: {exc}", err=True)
        raise SystemExit(1)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
