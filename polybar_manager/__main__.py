"""
polybar-manager CLI

Loads polybar themes and bars.

Usage:
    polybar-manager launch [--theme NAME] [--select] [--no-gaps] [--json]
    polybar-manager themes
    polybar-manager monitors [--json]
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config import SettingsLoader, ThemeStateStore
from .display_catalog import DisplayCatalog
from .errors import PolybarManagerError
from .models import SupervisorReport
from .monitor_role_resolver import MonitorRoleResolver
from .orchestrator import Orchestrator, build_context
from .themes import list_themes

# Exit codes
EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BAR_FAILED = 2


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity level.

    Args:
        verbose: Enable verbose (DEBUG) logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def _print_error(console: Console, error: PolybarManagerError, output_json: bool = False) -> None:
    if output_json:
        console.print_json(json.dumps({"error": error.to_dict()}))
        return
    console.print(f"[red]Error: {escape(error.message)}[/red]")
    if error.suggestion:
        console.print(f"[dim]Tip: {escape(error.suggestion)}[/dim]")


def display_report(report: SupervisorReport, console: Console) -> None:
    """Render per-bar results as a table."""
    table = Table(title="Bars")
    table.add_column("Bar")
    table.add_column("Status")
    table.add_column("Exit", justify="right")
    table.add_column("Error")

    for result in report.results:
        style = "green" if result.ok else "red"
        table.add_row(
            result.bar,
            f"[{style}]{result.status.value}[/{style}]",
            "" if result.exit_code is None else str(result.exit_code),
            result.error or "",
        )

    console.print(table)


@click.group()
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose logging')
@click.option('--settings', 'settings_path', type=click.Path(path_type=Path),
              help='Settings file (default: ~/.config/polybar-manager/settings.toml)')
@click.pass_context
def cli(ctx: click.Context, verbose: bool, settings_path: Optional[Path]):
    """Loads polybar themes and bars."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["settings_path"] = settings_path


@cli.command()
@click.option('-t', '--theme', 'theme_name', help='Load a Polybar theme by name. It becomes the current theme.')
@click.option('-s', '--select', 'select', is_flag=True, help='Select a theme interactively with rofi.')
@click.option('--no-gaps', is_flag=True, help='Do not adjust i3 gaps.')
@click.option('--display', 'display_name', help='X display to query (default: $DISPLAY)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of a table')
@click.pass_context
def launch(ctx: click.Context, theme_name: Optional[str], select: bool, no_gaps: bool,
           display_name: Optional[str], output_json: bool):
    """
    Restart all bars of a theme.

    Kills running bars, exports MONITOR_MAIN / MONITOR_LEFT / MONITOR_RIGHT
    and polybar_theme, and starts one polybar per bar. Returns once every
    bar process has exited.

    Exit codes:
      0 - All bars exited cleanly
      1 - Nothing launched (settings, theme or display error)
      2 - At least one bar failed
    """
    console = Console()

    try:
        settings = SettingsLoader(ctx.obj["settings_path"]).load()
        context = build_context(
            settings,
            theme_name=theme_name,
            state_store=ThemeStateStore(),
            select=select,
            display_name=display_name,
            apply_gaps=not no_gaps,
        )
        report = asyncio.run(Orchestrator().run(context))
    except PolybarManagerError as e:
        _print_error(console, e, output_json)
        sys.exit(EXIT_ERROR)

    if output_json:
        console.print_json(report.model_dump_json())
    else:
        display_report(report, console)

    sys.exit(EXIT_OK if report.all_ok else EXIT_BAR_FAILED)


@cli.command()
@click.pass_context
def themes(ctx: click.Context):
    """List installed themes; the current theme is marked."""
    console = Console()

    try:
        settings = SettingsLoader(ctx.obj["settings_path"]).load()
        installed = list_themes(settings.themes_root())
    except PolybarManagerError as e:
        _print_error(console, e)
        sys.exit(EXIT_ERROR)

    current = ThemeStateStore().load().theme or settings.polybar.theme
    for name in installed:
        if name == current:
            console.print(f"[bold green]* {name}[/bold green]")
        else:
            console.print(f"  {name}")


@cli.command()
@click.option('--display', 'display_name', help='X display to query (default: $DISPLAY)')
@click.option('--json', 'output_json', is_flag=True, help='Output JSON instead of a table')
def monitors(display_name: Optional[str], output_json: bool):
    """Show connected outputs and the roles bars will see."""
    console = Console()

    try:
        outputs = DisplayCatalog(display_name).enumerate()
    except PolybarManagerError as e:
        _print_error(console, e, output_json)
        sys.exit(EXIT_ERROR)

    assignments = {a.output: a.role for a in MonitorRoleResolver().resolve(outputs)}

    if output_json:
        data = [
            {**o.model_dump(mode="json"), "role": assignments[o.name].value if o.name in assignments else None}
            for o in outputs
        ]
        console.print_json(json.dumps(data))
        return

    table = Table(title="Outputs")
    table.add_column("Output")
    table.add_column("Active")
    table.add_column("Position")
    table.add_column("Resolution")
    table.add_column("Primary")
    table.add_column("Role")

    for o in outputs:
        role = assignments.get(o.name)
        table.add_row(
            o.name,
            "yes" if o.active else "[dim]no[/dim]",
            f"{o.position[0]},{o.position[1]}" if o.position else "-",
            f"{o.resolution[0]}x{o.resolution[1]}" if o.resolution else "-",
            "yes" if o.is_primary else "",
            f"[cyan]{role.value}[/cyan]" if role else "",
        )

    console.print(table)


if __name__ == '__main__':
    cli()
