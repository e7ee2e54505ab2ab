"""
Command-line interface for the node packages inventory.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import click
import yaml

from . import __version__
from .config import get_config_manager, AppConfig
from .error_handling import NodePackagesError
from .logging import setup_logging, LoggerConfig
from .models import PackageManager, ScanReport
from .orchestrator import ScanOrchestrator
from .scanners import get_home_directory, select_managers
from .table import COLUMNS, TABLE_NAME, generate_rows

MANAGER_CHOICE = click.Choice([m.value for m in PackageManager], case_sensitive=False)


@click.group()
@click.version_option(version=__version__)
@click.option(
    '--config', '-c',
    type=click.Path(exists=True, path_type=Path),
    help='Path to configuration file'
)
@click.option(
    '--verbose', '-v',
    count=True,
    help='Increase verbosity (use -v or -vv)'
)
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int) -> None:
    """
    Node Packages Inventory - list packages found in npm, pnpm, yarn, bun and deno caches.
    """
    ctx.ensure_object(dict)

    try:
        app_config = get_config_manager(config).get_config()
    except NodePackagesError as e:
        raise click.ClickException(f"Invalid configuration: {e}")

    configure_logging(app_config, verbose)

    ctx.obj['config'] = app_config
    ctx.obj['verbose'] = verbose


@cli.command()
@click.option(
    '--manager', '-m', 'managers',
    type=MANAGER_CHOICE,
    multiple=True,
    help='Package manager to scan (repeatable, defaults to configured managers)'
)
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice(['table', 'json', 'yaml'], case_sensitive=False),
    help='Output format for inventory rows'
)
@click.pass_context
def scan(ctx: click.Context, managers: Tuple[str, ...], output_format: Optional[str]) -> None:
    """
    Scan package manager caches and print the inventory.

    An empty inventory is not an error; managers that fail are skipped.

    Examples:

        # Scan every configured manager
        node-packages scan

        # Scan only pnpm and yarn caches as JSON
        node-packages scan -m pnpm -m yarn -f json
    """
    config: AppConfig = ctx.obj['config']
    output_format = (output_format or config.output.format).lower()

    descriptors = select_managers(managers) if managers else None
    orchestrator = ScanOrchestrator(config, managers=descriptors)
    report = orchestrator.scan()

    rows = generate_rows(report.records)
    click.echo(format_rows(rows, output_format))

    if ctx.obj.get('verbose', 0) > 0:
        display_report_summary(report)


@cli.command()
@click.option(
    '--manager', '-m', 'managers',
    type=MANAGER_CHOICE,
    multiple=True,
    help='Package manager to show (repeatable)'
)
@click.pass_context
def paths(ctx: click.Context, managers: Tuple[str, ...]) -> None:
    """
    Show the candidate cache roots each manager would scan.
    """
    config: AppConfig = ctx.obj['config']
    descriptors = select_managers(managers or config.scanning.managers)
    home = get_home_directory()

    if home is None:
        click.echo("Home directory unknown: no cache roots will be scanned", err=True)

    for descriptor in descriptors:
        click.echo(f"[{descriptor.label}]")
        extra = config.scanning.extra_paths.get(descriptor.label, [])
        candidates = descriptor.candidate_paths(home, os.environ, extra)
        if not candidates:
            click.echo("  (none)")
        for path in candidates:
            marker = "found" if path.exists() else "missing"
            click.echo(f"  {path} ({marker})")


@cli.command()
@click.option(
    '--format', '-f', 'output_format',
    type=click.Choice(['table', 'json', 'yaml'], case_sensitive=False),
    default='table',
    help='Output format for configuration display'
)
@click.pass_context
def config(ctx: click.Context, output_format: str) -> None:
    """
    Display current configuration settings.

    Shows defaults merged with the configuration file and environment
    variable overrides.
    """
    app_config: AppConfig = ctx.obj['config']
    config_dict = app_config.to_dict()

    if output_format == 'json':
        click.echo(json.dumps(config_dict, indent=2, default=str))
    elif output_format == 'yaml':
        click.echo(yaml.safe_dump(config_dict, default_flow_style=False))
    else:
        display_config_table(config_dict)


def configure_logging(config: AppConfig, verbose: int) -> None:
    """Set up logging from configuration, raised by verbosity."""
    level = config.logging.level
    if verbose == 1:
        level = "INFO"
    elif verbose >= 2:
        level = "DEBUG"

    setup_logging(LoggerConfig(
        level=level,
        file_path=config.logging.file,
        format_string=config.logging.format,
        max_file_size=config.logging.max_file_size,
        backup_count=config.logging.backup_count,
        enable_structured=config.logging.structured
    ))


def format_rows(rows: List[Dict[str, str]], output_format: str) -> str:
    """
    Render inventory rows.

    Args:
        rows: Rows keyed by column name
        output_format: One of table, json, yaml

    Returns:
        Rendered text
    """
    if output_format == 'json':
        return json.dumps(rows, indent=2)
    if output_format == 'yaml':
        return yaml.safe_dump(rows, default_flow_style=False, sort_keys=False).rstrip()

    widths = {
        column: max([len(column)] + [len(row[column]) for row in rows])
        for column in COLUMNS
    }
    lines = [
        "  ".join(column.ljust(widths[column]) for column in COLUMNS).rstrip(),
        "  ".join("-" * widths[column] for column in COLUMNS),
    ]
    for row in rows:
        lines.append("  ".join(row[column].ljust(widths[column]) for column in COLUMNS).rstrip())
    return "\n".join(lines)


def display_report_summary(report: ScanReport) -> None:
    """Display scan statistics on stderr."""
    stats = report.get_statistics()
    click.echo(f"\n{TABLE_NAME}: {stats['total_packages']} packages in {stats['duration']}s", err=True)
    for manager, count in sorted(stats['packages_by_manager'].items()):
        click.echo(f"  {manager}: {count}", err=True)

    if report.failed_managers:
        click.echo(f"Failed managers: {', '.join(stats['failed_managers'])}", err=True)
    if report.diagnostics:
        click.echo(f"Skipped entries: {len(report.diagnostics)}", err=True)


def display_config_table(config_dict: Dict[str, Any]) -> None:
    """Display configuration in table format."""
    click.echo("\nCurrent Configuration:")
    click.echo("-" * 50)

    for section_name, section in config_dict.items():
        click.echo(f"\n[{section_name.capitalize()}]")
        for key, value in section.items():
            click.echo(f"  {key}: {value}")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == '__main__':
    main()
