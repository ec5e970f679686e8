"""Time series transformation for cumulative pandemic counters.

Turns a provider timeline of cumulative counters into a derived series with
one point per input date, in input order.

Derived fields:
    - active_ratio: (cases - deaths - recovered) / cases * 100, 0 when cases == 0
    - fatality_rate: deaths / cases * 100, 0 when cases == 0
    - weekly_average: mean of daily new cases over the trailing 7 points,
      present from the 7th point on and only when strictly positive

Daily new cases are positional differences of consecutive cumulative values.
The first point of the series has no predecessor and counts as a delta of 0,
so the first full window (index 6) averages six real deltas and a zero.
"""

import logging

import pandas as pd

from covid_trends.models import DerivedPoint, RawTimeline

logger = logging.getLogger(__name__)

ROLLING_WINDOW = 7


def transform_timeline(timeline: RawTimeline) -> list[DerivedPoint]:
    """Derive rates and the 7-point rolling average from a raw timeline.

    The input order is taken as chronological and is never re-sorted; the
    rolling window is positional, not calendar based.

    Args:
        timeline: Raw cumulative timeline.

    Returns:
        List of DerivedPoint, one per date, in input order.
    """
    dates = timeline.dates
    if not dates:
        logger.debug("Empty timeline, nothing to transform")
        return []

    df = pd.DataFrame(
        {
            "date": dates,
            "cases": [timeline.counter("cases", d) for d in dates],
            "deaths": [timeline.counter("deaths", d) for d in dates],
            "recovered": [timeline.counter("recovered", d) for d in dates],
        }
    )

    has_cases = df["cases"] > 0
    active = df["cases"] - df["deaths"] - df["recovered"]

    # Division by zero yields inf/nan here; those rows are replaced below
    df["active_ratio"] = (active / df["cases"] * 100).where(has_cases, 0.0)
    df["fatality_rate"] = (df["deaths"] / df["cases"] * 100).where(has_cases, 0.0)
    df["weekly_average"] = _rolling_new_cases_average(df["cases"])

    points = [
        DerivedPoint(
            date=row.date,
            cases=int(row.cases),
            deaths=int(row.deaths),
            recovered=int(row.recovered),
            active_ratio=float(row.active_ratio),
            fatality_rate=float(row.fatality_rate),
            weekly_average=_present_if_positive(row.weekly_average),
        )
        for row in df.itertuples(index=False)
    ]

    logger.debug("Transformed %d timeline points", len(points))
    return points


def _rolling_new_cases_average(cases: pd.Series) -> pd.Series:
    """Average daily new cases over a trailing window.

    Args:
        cases: Cumulative cases in series order.

    Returns:
        Series of window averages, NaN until a full window is available.
    """
    # First point has no predecessor: its delta is 0, not NaN
    daily_new = cases.diff().fillna(0)
    window_sum = daily_new.rolling(window=ROLLING_WINDOW, min_periods=ROLLING_WINDOW).sum()
    return window_sum / ROLLING_WINDOW


def _present_if_positive(value: float) -> float | None:
    if pd.isna(value) or value <= 0:
        return None
    return float(value)
