"""Static HTML dashboard rendering.

Renders a single-page dashboard from DashboardData with Jinja2:
- Line chart of cumulative cases and the 7-day average of new cases
- Line chart of active ratio and fatality rate
- Bar chart of the top countries
- Table of the derived series
"""

import logging
from datetime import UTC, date, datetime
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader

from covid_trends.config import Config
from covid_trends.models import DashboardData
from covid_trends.report.charts import generate_chart_data
from covid_trends.report.filters import filter_by_date_range

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"
DASHBOARD_TEMPLATE = "dashboard.html"


def format_number(value: int | float | None) -> str:
    """Format a count with thousands separators."""
    if value is None:
        return "-"
    try:
        if isinstance(value, float):
            return f"{value:,.1f}"
        return f"{int(value):,}"
    except (ValueError, TypeError):
        return str(value)


def format_percent(value: float | None) -> str:
    """Format a percentage with two decimals."""
    if value is None:
        return "-"
    return f"{value:.2f}%"


def _create_environment(templates_dir: Path = TEMPLATES_DIR) -> Environment:
    env = Environment(
        loader=FileSystemLoader(templates_dir),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["format_number"] = format_number
    env.filters["format_percent"] = format_percent
    return env


def render_dashboard(
    data: DashboardData,
    config: Config,
    start: str | date | None = None,
    end: str | date | None = None,
) -> str:
    """Render the dashboard HTML.

    Args:
        data: Fetched and derived dashboard data.
        config: Application configuration.
        start: Optional first date to display (inclusive).
        end: Optional last date to display (inclusive).

    Returns:
        Rendered HTML document.

    Raises:
        ValueError: If start or end cannot be parsed.
    """
    points = data.historical
    if start is not None or end is not None:
        points = filter_by_date_range(points, start, end)

    metric = config.query.metric
    context: dict[str, Any] = {
        "title": config.report.title,
        "country": data.country,
        "metric": metric,
        "points": points,
        "countries": data.countries,
        "top_countries": data.top_countries,
        "chart_data": generate_chart_data(points, data.top_countries, metric=metric),
        "start": str(start) if start is not None else None,
        "end": str(end) if end is not None else None,
        "generated_at": datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC"),
    }

    env = _create_environment()
    template = env.get_template(DASHBOARD_TEMPLATE)
    html = template.render(**context)

    logger.info("Rendered dashboard for %s with %d points", data.country, len(points))
    return html


def write_dashboard(
    data: DashboardData,
    config: Config,
    output: Path | None = None,
    start: str | date | None = None,
    end: str | date | None = None,
) -> Path:
    """Render the dashboard and write it to disk.

    Args:
        data: Fetched and derived dashboard data.
        config: Application configuration.
        output: Output file. Defaults to config.report.output.
        start: Optional first date to display (inclusive).
        end: Optional last date to display (inclusive).

    Returns:
        Path the dashboard was written to.
    """
    output_path = output or config.report.output
    html = render_dashboard(data, config, start=start, end=end)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(html, encoding="utf-8")

    logger.info("Wrote dashboard to %s", output_path)
    return output_path
