"""Windsock CLI.

Generates the forecast site for every registered climb, or a single
segment's climb page.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import httpx
import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from windsock.climbs import Climb, ClimbRegistry, Segment
from windsock.config.settings import settings
from windsock.core.logger import setup_logger
from windsock.forecast.errors import ClimbNotFoundError
from windsock.forecast.models import GenerationContext
from windsock.forecast.pages import Site, SiteOptions
from windsock.forecast.pipeline import generate_site
from windsock.historical import load_historical_averages
from windsock.integrations.strava.client import StravaClient
from windsock.integrations.strava.schemas import map_strava_segment
from windsock.integrations.strava.tokens import TokenRefreshError, get_access_token
from windsock.integrations.weather.client import get_weather_client
from windsock.physics.wnf import WindNormalizedOracle
from windsock.site.writer import write_site

console = Console()

app = typer.Typer(
    name="windsock",
    help="Hourly wind forecasts for climbs, scored for cycling performance",
    add_completion=False,
)


def _context(min_hour: int, max_hour: int) -> GenerationContext:
    try:
        return GenerationContext(
            now=datetime.now(timezone.utc),
            timezone=settings.zone,
            min_hour=min_hour,
            max_hour=max_hour,
        )
    except ValueError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e


def _summarize(site: Site, output: str) -> None:
    climbs = sum(1 for p in site.pages if p.kind == "climb")
    ok = not site.failures
    console.print(
        Panel(
            Text(f"Wrote {climbs} climbs to {output}", style="bold green" if ok else "bold yellow"),
            subtitle=f"{site.hidden} visible, {len(site.pages)} pages, {len(site.aliases)} aliases",
            border_style="green" if ok else "yellow",
        )
    )
    if site.failures:
        console.print(f"\n[red]{len(site.failures)} climb(s) failed:[/red]")
        for failure in site.failures:
            console.print(f"  [red]{escape(failure.climb)}[/red]: {escape(failure.error)}")


@app.command()
def generate(
    climbs_file: str = typer.Option(settings.climbs_file, "--climbs", help="Climbs JSON file"),
    hidden_file: str = typer.Option(settings.hidden_file, "--hidden", help="Bonus hidden climbs to include in the output"),
    historical_file: str = typer.Option(settings.historical_file, "--historical-file", help="Historical averages JSON file"),
    output: str = typer.Option(settings.output_dir, "--output", "-o", help="Output directory"),
    min_hour: int = typer.Option(settings.min_hour, "--min", help="Minimum hour [0-23] to include in forecasts"),
    max_hour: int = typer.Option(settings.max_hour, "--max", help="Maximum hour [0-23] to include in forecasts"),
    historical: bool = typer.Option(
        settings.historical_default, "--historical/--baseline", help="Default to historical instead of baseline"
    ),
    absolute_url: str = typer.Option(settings.absolute_url, "--absolute-url", help="Absolute root URL of the site"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
    log_file: str | None = typer.Option(None, "--log-file", help="Also log to this file"),
) -> None:
    """Generate the site for every registered climb."""
    setup_logger(level="DEBUG" if debug else settings.log_level, log_file=log_file)
    ctx = _context(min_hour, max_hour)

    try:
        registry = ClimbRegistry.from_files(climbs_file, hidden_file or None)
        lookup = load_historical_averages(historical_file) if historical_file else None
    except (OSError, ValidationError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e

    site = generate_site(
        registry,
        get_weather_client().provider(ctx.now),
        ctx,
        WindNormalizedOracle(),
        lookup,
        SiteOptions(title=settings.title, absolute_url=absolute_url, historical_default=historical),
        max_workers=settings.max_workers,
    )
    write_site(site, output)
    _summarize(site, output)

    if site.failures:
        raise typer.Exit(code=1)


def _find_segment(segment_id: int, climbs_file: str) -> Segment:
    registry = ClimbRegistry(climbs=(), hidden=0)
    if Path(climbs_file).exists():
        registry = ClimbRegistry.from_files(climbs_file)
    try:
        return registry.find_segment(segment_id)
    except ClimbNotFoundError:
        logger.info(f"Segment {segment_id} not registered, fetching from Strava")
        return map_strava_segment(StravaClient(get_access_token()).get_segment(segment_id))


@app.command()
def segment(
    segment_id: int = typer.Argument(..., help="Strava segment id"),
    output: str = typer.Option(".", "--output", "-o", help="Output directory"),
    climbs_file: str = typer.Option(settings.climbs_file, "--climbs", help="Climbs JSON file"),
    min_hour: int = typer.Option(settings.min_hour, "--min"),
    max_hour: int = typer.Option(settings.max_hour, "--max"),
    absolute_url: str = typer.Option(settings.absolute_url, "--absolute-url"),
) -> None:
    """Render a single segment's climb page and exit."""
    setup_logger(level=settings.log_level)
    ctx = _context(min_hour, max_hour)

    try:
        seg = _find_segment(segment_id, climbs_file)
    except (OSError, ValidationError, TokenRefreshError, httpx.HTTPStatusError) as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=2) from e

    single = ClimbRegistry(climbs=(Climb(name=seg.name, segment=seg),), hidden=0)
    site = generate_site(
        single,
        get_weather_client().provider(ctx.now),
        ctx,
        WindNormalizedOracle(),
        options=SiteOptions(title=settings.title, absolute_url=absolute_url),
    )
    site.pages = [p for p in site.pages if p.kind == "climb"]
    write_site(site, output, clean=False)
    _summarize(site, output)

    if site.failures:
        raise typer.Exit(code=1)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
