"""
Command Line Interface for buildstamp.

Provides commands for computing the human-readable build version,
stamping it into archive manifests, and inspecting stamped artifacts.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple

import click
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from . import __version__
from .config import load_config
from .core.stamper import ManifestStamper


console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', type=click.Path(dir_okay=False), help="Path to configuration file")
@click.option('--repo', '-r', type=click.Path(file_okay=False),
              help="Git working tree and project root")
@click.option('--verbose', '-v', is_flag=True, help="Enable verbose output")
@click.pass_context
def cli(ctx, config: Optional[str], repo: Optional[str], verbose: bool):
    """
    buildstamp

    Stamps archive manifests with the project version, short git
    revision and CI build number.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s: %(message)s"
    )

    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose

    try:
        stamp_config = load_config(config, overrides={'root': repo})
        ctx.obj['stamper'] = ManifestStamper(stamp_config)
    except Exception as e:
        console.print(f"[red]Failed to load configuration: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.option('--project-version', '-p', help="Project version (overrides config)")
@click.option('--build-number', '-b', help="CI build number (overrides the configured environment variable)")
@click.pass_context
def version(ctx, project_version: Optional[str], build_number: Optional[str]):
    """Print the human-readable version for the current checkout."""
    stamper: ManifestStamper = ctx.obj['stamper']

    try:
        click.echo(stamper.compute_version(project_version, build_number))
    except Exception as e:
        console.print(f"[red]Failed to compute version: {escape(str(e))}[/red]")
        sys.exit(1)


@cli.command()
@click.argument('paths', nargs=-1, type=click.Path(exists=True))
@click.option('--project-version', '-p', help="Project version (overrides config)")
@click.option('--build-number', '-b', help="CI build number (overrides the configured environment variable)")
@click.option('--format', type=click.Choice(['table', 'json', 'summary']),
              default='table', help="Output format")
@click.option('--output', '-o', help="Output file for results (JSON format)")
@click.pass_context
def stamp(ctx, paths: Tuple[str, ...], project_version: Optional[str],
          build_number: Optional[str], format: str, output: Optional[str]):
    """
    Stamp archive manifests with the build version.

    Stamps PATHS, or the configured artifact patterns when none are given.
    """
    stamper: ManifestStamper = ctx.obj['stamper']

    try:
        outcome = stamper.stamp(
            paths=list(paths) if paths else None,
            project_version=project_version,
            build_number=build_number
        )
    except Exception as e:
        console.print(f"[red]Stamping failed: {escape(str(e))}[/red]")
        sys.exit(1)

    if format == 'json' and not output:
        click.echo(outcome.run.model_dump_json(indent=2))
    elif format == 'summary':
        _display_summary(outcome)
    else:
        _display_table(outcome)

    if output:
        _save_json_results(outcome, output)
        console.print(f"\n[green]Results saved to: {escape(output)}[/green]")

    if not outcome.passed:
        sys.exit(1)


@cli.command()
@click.argument('path', type=click.Path(exists=True))
@click.pass_context
def show(ctx, path: str):
    """Show the main manifest attributes of an archive."""
    stamper: ManifestStamper = ctx.obj['stamper']

    try:
        archive = stamper.archive_factory.get_archive(path)
        manifest = archive.read_manifest()
    except Exception as e:
        console.print(f"[red]Failed to read manifest: {escape(str(e))}[/red]")
        sys.exit(1)

    table = Table(title=f"Manifest - {escape(path)}")
    table.add_column("Attribute", style="bold")
    table.add_column("Value")

    for name, value in manifest.main.items():
        style = "green" if name.lower() == stamper.config.attribute.lower() else ""
        table.add_row(escape(name), Text(value, style=style))

    console.print(table)

    if stamper.config.attribute not in manifest.main:
        console.print(f"[yellow]{escape(stamper.config.attribute)} is not set[/yellow]")


def _display_summary(outcome):
    """Display a summary of stamping results."""
    run = outcome.run

    console.print(Panel(
        f"[bold]{escape(run.version)}[/bold]\n"
        f"Revision: {run.inputs.revision}\n"
        f"Build number: {escape(run.inputs.build_number or '-')}",
        title="Build Version"
    ))

    table = Table(title="Stamping Summary")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Total Artifacts", str(run.total_artifacts))
    table.add_row("Stamped", f"[green]{run.stamped_artifacts}[/green]")
    table.add_row("Unchanged", str(run.unchanged_artifacts))
    table.add_row("Errors", f"[red]{run.error_artifacts}[/red]" if run.error_artifacts else "0")

    console.print(table)

    if outcome.errors:
        console.print("\n[red bold]Failed Artifacts:[/red bold]")
        for result in outcome.errors:
            console.print(f"  • {escape(result.path)}: {escape(result.message or '')}")


def _display_table(outcome):
    """Display per-artifact results in table format."""
    table = Table(title="Stamping Results")
    table.add_column("Artifact", style="dim")
    table.add_column("Status")
    table.add_column("Previous")
    table.add_column("Message", max_width=40)

    for result in outcome.run.results:
        status_color = {
            "stamped": "green",
            "unchanged": "dim",
            "error": "red"
        }.get(result.status.value, "white")

        table.add_row(
            Text(result.path),
            f"[{status_color}]{result.status.value.upper()}[/{status_color}]",
            Text(result.previous_value or ""),
            Text(result.message or "")
        )

    console.print(table)
    _display_summary(outcome)


def _save_json_results(outcome, output_path: str):
    """Save results to JSON file."""
    output_file = Path(output_path)
    output_file.parent.mkdir(parents=True, exist_ok=True)

    with open(output_file, 'w') as f:
        json.dump(outcome.run.model_dump(mode='json'), f, indent=2)


def main():
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
