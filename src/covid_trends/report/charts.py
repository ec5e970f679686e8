"""Chart data generation functions for D3.js visualization."""

import logging
from collections.abc import Sequence
from typing import Any

from covid_trends.models import CountryEntry, DerivedPoint

logger = logging.getLogger(__name__)

__all__ = ["generate_chart_data"]


def generate_chart_data(
    points: Sequence[DerivedPoint],
    top_countries: Sequence[CountryEntry],
    metric: str = "cases",
) -> dict[str, list[dict[str, Any]]]:
    """Generate chart-ready data for D3.js visualization.

    Args:
        points: Derived series, already filtered to the displayed range.
        top_countries: Ranked country entries.
        metric: Metric the countries were ranked by.

    Returns:
        Dictionary with chart data arrays:
        - trend_data: Cumulative cases and weekly average per date
        - rates_data: Active ratio and fatality rate per date
        - top_data: Bar chart of the ranked countries
    """
    chart_data: dict[str, list[dict[str, Any]]] = {
        "trend_data": [],
        "rates_data": [],
        "top_data": [],
    }

    for point in points:
        # None breaks the weekly average line instead of drawing it at zero
        chart_data["trend_data"].append(
            {
                "date": point.date,
                "cases": point.cases,
                "weekly_average": point.weekly_average,
            }
        )
        chart_data["rates_data"].append(
            {
                "date": point.date,
                "active_ratio": point.active_ratio,
                "fatality_rate": point.fatality_rate,
            }
        )

    chart_data["top_data"] = [
        {"country": entry.country, "value": entry.metric(metric)} for entry in top_countries
    ]

    logger.debug(
        "Generated chart data: %d points, %d countries",
        len(chart_data["trend_data"]),
        len(chart_data["top_data"]),
    )
    return chart_data
