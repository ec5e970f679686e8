"""Metrics calculators for derived time series and leaderboards."""

from covid_trends.metrics.leaderboards import rank_top_n
from covid_trends.metrics.timeseries import transform_timeline

__all__ = [
    "rank_top_n",
    "transform_timeline",
]
