"""Top-N country leaderboard.

Ranks country snapshots by a numeric metric, highest first. Ties keep their
input order.
"""

import logging
from collections.abc import Sequence

from covid_trends.models import CountryEntry

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 5


def rank_top_n(
    entries: Sequence[CountryEntry],
    k: int = DEFAULT_TOP_N,
    metric: str = "cases",
) -> list[CountryEntry]:
    """Select the top k entries by metric, descending.

    Args:
        entries: Country snapshots. Not modified.
        k: Number of entries to return. Fewer are returned if the input is shorter.
        metric: Field to rank by. Entries missing it rank as 0.

    Returns:
        New list of at most k entries sorted by metric descending.

    Raises:
        ValueError: If k is negative.
    """
    if k < 0:
        msg = f"k must be non-negative, got {k}"
        raise ValueError(msg)

    # sorted() is stable with reverse=True, so ties keep input order
    ranked = sorted(entries, key=lambda entry: entry.metric(metric), reverse=True)
    top = ranked[:k]

    logger.debug("Ranked %d entries by %s, kept %d", len(entries), metric, len(top))
    return top
