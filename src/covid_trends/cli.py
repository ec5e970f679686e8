"""CLI entry point for covid-trends.

Commands:
- historical: Derived time series for a country or the global aggregate
- countries: Current per-country snapshot
- top: Top countries by a metric
- dashboard: Static HTML dashboard with charts and a table
"""

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from rich.console import Console
from rich.table import Table

from covid_trends import __version__
from covid_trends.config import Config, load_config
from covid_trends.logging import setup_logging
from covid_trends.report.build import format_number, format_percent, write_dashboard
from covid_trends.report.filters import filter_by_date_range
from covid_trends.service import (
    DashboardService,
    DataUnavailableError,
    create_client,
    create_service,
)
from covid_trends.sinks.trace import JSONLTraceSink

console = Console()

T = TypeVar("T")


def _run(cfg: Config, operation: Callable[[DashboardService], Awaitable[T]]) -> T:
    """Run a service operation inside an open provider client."""

    async def runner() -> T:
        async with create_client(cfg) as http_client:
            service = create_service(cfg, http_client)
            return await operation(service)

    try:
        return asyncio.run(runner())
    except DataUnavailableError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise click.Abort() from e


def _print_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))


@click.group()
@click.version_option(version=__version__, prog_name="covid-trends")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Enable verbose output")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to config.yaml file (defaults are used when omitted)",
)
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Path | None) -> None:
    """COVID-19 trends from the disease.sh API.

    Fetches cumulative statistics, derives active ratio, fatality rate and
    the 7-day average of new cases, and ranks countries.

    \b
    Quick Start:
        covid-trends historical --country Spain --last-days 60
        covid-trends top -k 5
        covid-trends dashboard --output site/index.html
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config"] = load_config(config_path)
    setup_logging(verbose=verbose)


@main.command()
@click.option("--country", default=None, help="Country name, or 'all' for the global aggregate")
@click.option("--last-days", type=click.IntRange(min=1), default=None, help="Days of history")
@click.option("--start", default=None, help="First date to show (inclusive)")
@click.option("--end", default=None, help="Last date to show (inclusive)")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON output")
@click.pass_context
def historical(
    ctx: click.Context,
    country: str | None,
    last_days: int | None,
    start: str | None,
    end: str | None,
    as_json: bool,
) -> None:
    """Show the derived time series for a country."""
    cfg: Config = ctx.obj["config"]
    country = country or cfg.query.country
    last_days = last_days or cfg.query.last_days

    points = _run(cfg, lambda service: service.historical(country, last_days))

    if start is not None or end is not None:
        try:
            points = filter_by_date_range(points, start, end)
        except ValueError as e:
            console.print(f"[bold red]Error:[/bold red] Invalid date range: {e}")
            raise click.Abort() from e

    if as_json:
        _print_json([point.to_dict() for point in points])
        return

    table = Table(title=f"Historical data: {country}")
    table.add_column("Date")
    table.add_column("Cases", justify="right")
    table.add_column("Deaths", justify="right")
    table.add_column("Recovered", justify="right")
    table.add_column("Active ratio", justify="right")
    table.add_column("Fatality rate", justify="right")
    table.add_column("7-day avg", justify="right")

    for point in points:
        table.add_row(
            point.date,
            format_number(point.cases),
            format_number(point.deaths),
            format_number(point.recovered),
            format_percent(point.active_ratio),
            format_percent(point.fatality_rate),
            format_number(point.weekly_average),
        )

    console.print(table)


@main.command()
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON output")
@click.pass_context
def countries(ctx: click.Context, as_json: bool) -> None:
    """List the current per-country snapshot."""
    cfg: Config = ctx.obj["config"]

    entries = _run(cfg, lambda service: service.countries())

    if as_json:
        _print_json([entry.to_dict() for entry in entries])
        return

    table = Table(title=f"Countries ({len(entries)})")
    table.add_column("Country")
    table.add_column("Cases", justify="right")
    table.add_column("Deaths", justify="right")
    table.add_column("Recovered", justify="right")

    for entry in entries:
        table.add_row(
            entry.country,
            format_number(entry.metric("cases")),
            format_number(entry.metric("deaths")),
            format_number(entry.metric("recovered")),
        )

    console.print(table)


@main.command()
@click.option("-k", "top_n", type=click.IntRange(min=1), default=None, help="Number of countries")
@click.option("--metric", default=None, help="Field to rank by (cases, deaths, active, ...)")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON output")
@click.pass_context
def top(ctx: click.Context, top_n: int | None, metric: str | None, as_json: bool) -> None:
    """Show the top countries by a metric."""
    cfg: Config = ctx.obj["config"]
    if metric is not None:
        cfg = cfg.model_copy(update={"query": cfg.query.model_copy(update={"metric": metric})})
    k = top_n or cfg.query.top_n

    entries = _run(cfg, lambda service: service.top_countries(k))

    if as_json:
        _print_json([entry.to_dict() for entry in entries])
        return

    table = Table(title=f"Top {k} countries by {cfg.query.metric}")
    table.add_column("#", justify="right")
    table.add_column("Country")
    table.add_column(cfg.query.metric.capitalize(), justify="right")

    for rank, entry in enumerate(entries, start=1):
        table.add_row(str(rank), entry.country, format_number(entry.metric(cfg.query.metric)))

    console.print(table)


@main.command()
@click.option("--country", default=None, help="Country name, or 'all' for the global aggregate")
@click.option("--last-days", type=click.IntRange(min=1), default=None, help="Days of history")
@click.option("-k", "top_n", type=click.IntRange(min=1), default=None, help="Countries to rank")
@click.option("--start", default=None, help="First date to show (inclusive)")
@click.option("--end", default=None, help="Last date to show (inclusive)")
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output HTML file (defaults to report.output)",
)
@click.pass_context
def dashboard(
    ctx: click.Context,
    country: str | None,
    last_days: int | None,
    top_n: int | None,
    start: str | None,
    end: str | None,
    output: Path | None,
) -> None:
    """Build a static HTML dashboard.

    Fetches the historical series, the country list and the top countries
    concurrently, then renders charts and a data table with Jinja2.
    """
    cfg: Config = ctx.obj["config"]
    country = country or cfg.query.country
    last_days = last_days or cfg.query.last_days
    k = top_n or cfg.query.top_n

    console.print(f"[bold]Building dashboard for {country}[/bold]")

    data = _run(cfg, lambda service: service.load_dashboard(country, last_days, k))

    try:
        path = write_dashboard(data, cfg, output=output, start=start, end=end)
    except ValueError as e:
        console.print(f"[bold red]Error:[/bold red] Invalid date range: {e}")
        raise click.Abort() from e

    console.print("[bold green]Dashboard written![/bold green]")
    console.print(f"  Points: {len(data.historical)}")
    console.print(f"  Output: {path}")
    if cfg.trace.enabled:
        console.print(f"  Trace records: {JSONLTraceSink.count_records(cfg.trace.path)}")


if __name__ == "__main__":
    main()
