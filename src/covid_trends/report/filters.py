"""Date range filtering for derived series."""

import logging
from collections.abc import Sequence
from datetime import date

import pandas as pd

from covid_trends.models import DerivedPoint

logger = logging.getLogger(__name__)

__all__ = ["filter_by_date_range", "parse_date"]


def parse_date(value: str | date) -> pd.Timestamp:
    """Parse an ISO date ("2020-03-01") or provider date ("3/1/20").

    Args:
        value: Date string or date.

    Returns:
        Normalized timestamp (midnight).

    Raises:
        ValueError: If the value cannot be parsed.
    """
    timestamp = pd.Timestamp(value)
    # Empty strings parse to NaT, which compares False against everything
    if pd.isna(timestamp):
        msg = f"Invalid date: {value!r}"
        raise ValueError(msg)
    # Provider dates are naive; aware bounds are compared as UTC wall time
    if timestamp.tzinfo is not None:
        timestamp = timestamp.tz_convert(None)
    return timestamp.normalize()


def filter_by_date_range(
    points: Sequence[DerivedPoint],
    start: str | date | None,
    end: str | date | None,
) -> list[DerivedPoint]:
    """Keep points whose date falls within [start, end], inclusive.

    Order is preserved. Points with unparseable dates are dropped. A None
    bound leaves that side of the range open.

    Args:
        points: Derived series.
        start: First date to keep.
        end: Last date to keep.

    Returns:
        Filtered list of points.

    Raises:
        ValueError: If start or end cannot be parsed.
    """
    start_ts = parse_date(start) if start is not None else None
    end_ts = parse_date(end) if end is not None else None

    kept: list[DerivedPoint] = []
    for point in points:
        try:
            point_ts = parse_date(point.date)
        except ValueError:
            logger.debug("Skipping point with unparseable date %r", point.date)
            continue
        if start_ts is not None and point_ts < start_ts:
            continue
        if end_ts is not None and point_ts > end_ts:
            continue
        kept.append(point)

    return kept
