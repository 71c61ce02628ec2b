"""CLI interface using Typer."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Callable
from pathlib import Path
from typing import Annotated, get_args

import typer
from rich.console import Console
from rich.table import Table

from neighborhood_globe import __version__
from neighborhood_globe.config import NeighborhoodConfig, OutputFormat, SortType
from neighborhood_globe.exceptions import NeighborhoodError
from neighborhood_globe.exporters import export_csv, export_geojson, export_html, export_json
from neighborhood_globe.models import GlobeScene, MarkerColor
from neighborhood_globe.pipeline import build_scene, load_neighbors
from neighborhood_globe.roster import build_roster

Exporter = Callable[[GlobeScene, Path], Path]

EXPORTERS: dict[str, Exporter] = {
    "json": export_json,
    "geojson": export_geojson,
    "html": export_html,
    "csv": export_csv,
}

_COLOR_DISPLAY: dict[MarkerColor, str] = {
    MarkerColor.GREEN: "[green]approved[/green]",
    MarkerColor.YELLOW: "[yellow]100+ hours[/yellow]",
    MarkerColor.RED: "[red]under 100 hours[/red]",
}

app = typer.Typer(
    name="neighborhood-globe",
    help="Neighborhood roster and airport globe backed by Airtable.",
    add_completion=False,
)
console = Console()


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"neighborhood-globe {__version__}")
        raise typer.Exit()


def _choice(value: str, allowed: object, option: str) -> str:
    choices = get_args(allowed)
    if value not in choices:
        raise typer.BadParameter(
            f"{value!r} is not one of {', '.join(choices)}", param_hint=option
        )
    return value


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler()],
    )


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit.",
            callback=_version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Neighborhood Globe: who is building, and where they fly from."""


@app.command()
def neighbors(
    sort: Annotated[
        str,
        typer.Option("--sort", "-s", help="Ordering of the roster."),
    ] = "largest_logged",
    min_hours: Annotated[
        float,
        typer.Option("--min-hours", help="Minimum Hackatime hours to be listed."),
    ] = 1.0,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
) -> None:
    """Print the neighborhood roster."""
    sort = _choice(sort, SortType, "--sort")
    _setup_logging(verbose)
    config = NeighborhoodConfig(min_logged_hours=min_hours)

    try:
        persons = load_neighbors(config)
    except NeighborhoodError as exc:
        console.print(f"[red]Failed to load neighbors:[/red] {exc}")
        raise typer.Exit(code=1) from None

    entries = build_roster(persons, sort)
    if not entries:
        console.print("[yellow]No neighbors to show.[/yellow]")
        raise typer.Exit()

    table = Table(title="Neighborhood")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Name", style="bold")
    table.add_column("Logged", justify="right")
    table.add_column("Checked", justify="right")
    table.add_column("Profile", style="dim")
    for i, entry in enumerate(entries, start=1):
        table.add_row(
            str(i),
            entry.name,
            f"{entry.logged_hours:g}hr",
            f"{entry.checked_hours:.1f}hr",
            entry.href,
        )
    console.print(table)


@app.command()
def globe(
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Output file path."),
    ] = Path("neighborhood_globe.json"),
    output_format: Annotated[
        str,
        typer.Option("--format", "-f", help="Output format: json, geojson, html, csv."),
    ] = "json",
    airports: Annotated[
        str | None,
        typer.Option("--airports", help="URL or path of the airport table (JSON or CSV)."),
    ] = None,
    spread: Annotated[
        float,
        typer.Option("--spread", help="Offset radius for neighbors sharing an airport."),
    ] = 0.01,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging."),
    ] = False,
    no_cache: Annotated[
        bool,
        typer.Option("--no-cache", help="Disable disk caching of the airport table."),
    ] = False,
) -> None:
    """Lay out the globe markers and export them."""
    output_format = _choice(output_format, OutputFormat, "--format")
    _setup_logging(verbose)
    config = NeighborhoodConfig(
        airports_source=airports,
        cluster_spread=spread,
        output_file=output,
        output_format=output_format,
        cache_enabled=not no_cache,
    )

    try:
        scene = build_scene(config)
    except Exception as exc:
        console.print(f"[red]Globe build failed:[/red] {exc}")
        raise typer.Exit(code=1) from None

    EXPORTERS[config.output_format](scene, config.output_file)

    counts = Counter(m.color for m in scene.markers)
    table = Table(title="Globe Markers")
    table.add_column("Category")
    table.add_column("Markers", justify="right")
    for color in MarkerColor:
        table.add_row(_COLOR_DISPLAY[color], str(counts.get(color, 0)))

    console.print()
    console.print(table)
    console.print(
        f"\n{config.output_format.upper()} written to [bold]{config.output_file}[/bold]"
    )
    console.print(f"Airports: {len({m.airport_code for m in scene.markers})}")
    console.print(f"Without airport: {scene.excluded_count}")
    if scene.unmatched_codes:
        console.print(
            f"[yellow]Unmatched airport codes:[/yellow] {', '.join(scene.unmatched_codes)}"
        )
