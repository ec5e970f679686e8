"""disease.sh API endpoints.

Provides high-level methods for the snapshot and historical endpoints and
normalizes their payloads into the models the metrics layer consumes.
"""

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from covid_trends.models import CountryEntry, RawTimeline
from covid_trends.provider.http import (
    ProviderClient,
    ProviderDataError,
    ProviderResponse,
    ProviderStatusError,
)

logger = logging.getLogger(__name__)

ALL_COUNTRIES = "all"


def is_aggregate(country: str | None) -> bool:
    """Check whether a country selector means the global aggregate."""
    return not country or country == ALL_COUNTRIES


def historical_path(country: str | None) -> str:
    """Get the historical endpoint path for a country selector.

    Args:
        country: Country name, or "all"/None for the global aggregate.

    Returns:
        API path relative to the base URL.
    """
    if is_aggregate(country):
        return "/historical/all"
    return f"/historical/{quote(str(country), safe='')}"


def extract_timeline(payload: Any, country: str | None) -> RawTimeline:
    """Normalize a historical payload into a RawTimeline.

    The aggregate endpoint returns the timeline flat; the single-country
    endpoint nests it under a "timeline" key.

    Args:
        payload: Decoded JSON payload.
        country: Country selector the payload was requested with.

    Returns:
        RawTimeline for the transform.

    Raises:
        ProviderDataError: If the payload has no usable timeline.
    """
    timeline = payload if is_aggregate(country) else _get_nested_timeline(payload)

    if not isinstance(timeline, dict):
        msg = f"Historical payload for {country or ALL_COUNTRIES} has no timeline object"
        raise ProviderDataError(msg)

    try:
        return RawTimeline.model_validate(timeline)
    except ValidationError as e:
        msg = f"Malformed timeline for {country or ALL_COUNTRIES}: {e}"
        raise ProviderDataError(msg) from e


def _get_nested_timeline(payload: Any) -> Any:
    if isinstance(payload, dict):
        return payload.get("timeline")
    return None


class DiseaseAPI:
    """disease.sh endpoint wrapper.

    Wraps ProviderClient to provide:
    - The current per-country snapshot
    - Historical cumulative timelines for a country or the aggregate
    - Status checks and payload normalization
    """

    def __init__(self, http_client: ProviderClient) -> None:
        """Initialize API wrapper.

        Args:
            http_client: ProviderClient instance for HTTP requests.
        """
        self._http = http_client

    def snapshot_url(self) -> str:
        """Absolute URL of the per-country snapshot endpoint."""
        return self._http.url_for("/countries")

    def historical_url(self, country: str | None, last_days: int) -> str:
        """Absolute URL of the historical endpoint for a query."""
        return self._http.url_for(historical_path(country), {"lastdays": last_days})

    async def fetch_current_snapshot(self) -> tuple[list[CountryEntry], ProviderResponse]:
        """Fetch per-country cumulative totals.

        Returns:
            Tuple of (country entries, raw response).

        Raises:
            ProviderHTTPError: On request failure or non-2xx status.
            ProviderDataError: If the payload is not a list of countries.
        """
        response = await self._http.get("/countries")
        self._check_status(response)

        if not isinstance(response.data, list):
            raise ProviderDataError("Countries payload is not a list")

        try:
            entries = [CountryEntry.model_validate(item) for item in response.data]
        except ValidationError as e:
            raise ProviderDataError(f"Malformed country entry: {e}") from e

        logger.debug("Fetched %d country entries", len(entries))
        return entries, response

    async def fetch_historical(
        self, country: str | None, last_days: int
    ) -> tuple[RawTimeline, ProviderResponse]:
        """Fetch the cumulative timeline for a country or the aggregate.

        Args:
            country: Country name, or "all"/None for the global aggregate.
            last_days: Number of trailing days to request.

        Returns:
            Tuple of (normalized timeline, raw response).

        Raises:
            ProviderHTTPError: On request failure or non-2xx status.
            ProviderDataError: If the payload has no usable timeline.
        """
        response = await self._http.get(historical_path(country), params={"lastdays": last_days})
        self._check_status(response)

        timeline = extract_timeline(response.data, country)
        logger.debug(
            "Fetched %d historical dates for %s", len(timeline.dates), country or ALL_COUNTRIES
        )
        return timeline, response

    @staticmethod
    def _check_status(response: ProviderResponse) -> None:
        if response.is_success:
            return
        message = None
        if isinstance(response.data, dict):
            message = response.data.get("message")
        raise ProviderStatusError(response.status_code, response.url, message)
