"""Dashboard rendering: date filtering, chart data and HTML output."""

from covid_trends.report.build import render_dashboard, write_dashboard
from covid_trends.report.charts import generate_chart_data
from covid_trends.report.filters import filter_by_date_range

__all__ = [
    "filter_by_date_range",
    "generate_chart_data",
    "render_dashboard",
    "write_dashboard",
]
