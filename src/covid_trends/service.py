"""Dashboard service composing provider fetches, metrics and sinks.

Each operation:
1. Fetches from disease.sh and times the call
2. Records a trace entry (status on success, error message on failure)
3. Runs the pure transform or ranking
4. Sends a success or error notification

Upstream and payload failures are logged with their original message and
re-raised as DataUnavailableError carrying only a generic message.
"""

import asyncio
import logging
import time
from typing import Any

from covid_trends.config import Config
from covid_trends.metrics.leaderboards import DEFAULT_TOP_N, rank_top_n
from covid_trends.metrics.timeseries import transform_timeline
from covid_trends.models import CountryEntry, DashboardData, DerivedPoint
from covid_trends.provider.api import ALL_COUNTRIES, DiseaseAPI
from covid_trends.provider.http import ProviderClient, ProviderHTTPError, ProviderStatusError
from covid_trends.sinks.notify import Notifier, NullNotifier, WebhookNotifier
from covid_trends.sinks.trace import JSONLTraceSink, NullTraceSink, TraceRecord, TraceSink

logger = logging.getLogger(__name__)

DEFAULT_LAST_DAYS = 30


class DataUnavailableError(Exception):
    """Raised when upstream data could not be fetched or understood.

    The message is safe to show to end users; the original error is
    available as ``__cause__``.
    """


class DashboardService:
    """Fetch, derive and rank pandemic statistics for the presentation layer."""

    def __init__(
        self,
        api: DiseaseAPI,
        trace_sink: TraceSink | None = None,
        notifier: Notifier | None = None,
        metric: str = "cases",
    ) -> None:
        """Initialize service.

        Args:
            api: Provider endpoint wrapper.
            trace_sink: Sink for request traces. If None, traces are discarded.
            notifier: Event notifier. If None, notifications are discarded.
            metric: Field top_countries ranks by.
        """
        self._api = api
        self._trace = trace_sink or NullTraceSink()
        self._notifier = notifier or NullNotifier()
        self._metric = metric

    async def historical(
        self, country: str = ALL_COUNTRIES, last_days: int = DEFAULT_LAST_DAYS
    ) -> list[DerivedPoint]:
        """Fetch a timeline and derive rates and rolling averages.

        Args:
            country: Country name, or "all" for the global aggregate.
            last_days: Number of trailing days to request.

        Returns:
            Derived series in provider date order.

        Raises:
            DataUnavailableError: If the timeline could not be fetched.
        """
        url = self._api.historical_url(country, last_days)
        logger.info("Historical data requested: country=%s lastdays=%d", country, last_days)
        start = time.perf_counter()

        try:
            timeline, response = await self._api.fetch_historical(country, last_days)
        except ProviderHTTPError as e:
            raise await self._fail(
                url,
                start,
                e,
                event="historical_data_error",
                payload={"country": country, "lastdays": last_days},
                message="Failed to fetch historical data",
            ) from e

        self._record(url, start, status=response.status_code)
        points = transform_timeline(timeline)

        logger.info("Historical data fetched and transformed: %s (%d points)", url, len(points))
        await self._notifier.notify(
            "historical_data_transformed",
            {"country": country or ALL_COUNTRIES, "status": "success"},
        )
        return points

    async def countries(self) -> list[CountryEntry]:
        """Fetch the per-country snapshot.

        Returns:
            Country entries in provider order.

        Raises:
            DataUnavailableError: If the snapshot could not be fetched.
        """
        url = self._api.snapshot_url()
        logger.info("Countries data requested")
        start = time.perf_counter()

        try:
            entries, response = await self._api.fetch_current_snapshot()
        except ProviderHTTPError as e:
            raise await self._fail(
                url,
                start,
                e,
                event="countries_data_error",
                payload={},
                message="Failed to fetch countries data",
            ) from e

        self._record(url, start, status=response.status_code)

        logger.info("Countries data fetched: %d countries", len(entries))
        await self._notifier.notify(
            "countries_data_fetched",
            {"status": "success", "countriesCount": len(entries)},
        )
        return entries

    async def top_countries(self, k: int = DEFAULT_TOP_N) -> list[CountryEntry]:
        """Fetch the snapshot and keep the top k countries by the configured metric.

        Args:
            k: Number of countries to keep.

        Returns:
            At most k entries, highest metric first.

        Raises:
            DataUnavailableError: If the snapshot could not be fetched.
        """
        url = self._api.snapshot_url()
        logger.info("Top countries data requested: k=%d metric=%s", k, self._metric)
        start = time.perf_counter()

        try:
            entries, response = await self._api.fetch_current_snapshot()
        except ProviderHTTPError as e:
            raise await self._fail(
                url,
                start,
                e,
                event="top_countries_data_error",
                payload={},
                message="Failed to fetch top countries data",
            ) from e

        self._record(url, start, status=response.status_code)
        top = rank_top_n(entries, k=k, metric=self._metric)

        logger.info("Top countries data fetched and ranked: %d countries", len(top))
        await self._notifier.notify(
            "top_countries_data_fetched",
            {"status": "success", "countriesCount": len(top)},
        )
        return top

    async def load_dashboard(
        self,
        country: str = ALL_COUNTRIES,
        last_days: int = DEFAULT_LAST_DAYS,
        k: int = DEFAULT_TOP_N,
    ) -> DashboardData:
        """Fetch everything a dashboard view needs concurrently.

        Args:
            country: Country name, or "all" for the global aggregate.
            last_days: Number of trailing days to request.
            k: Number of top countries to keep.

        Returns:
            DashboardData bundle.

        Raises:
            DataUnavailableError: If any of the fetches failed. The remaining
                fetches are cancelled before this is raised.
        """
        try:
            async with asyncio.TaskGroup() as tg:
                historical = tg.create_task(self.historical(country, last_days))
                countries = tg.create_task(self.countries())
                top = tg.create_task(self.top_countries(k))
        except ExceptionGroup as eg:
            unavailable = [e for e in eg.exceptions if isinstance(e, DataUnavailableError)]
            if not unavailable:
                raise
            raise unavailable[0] from unavailable[0].__cause__

        return DashboardData(
            country=country,
            historical=historical.result(),
            countries=countries.result(),
            top_countries=top.result(),
        )

    def _record(
        self,
        url: str,
        start: float,
        status: int | None = None,
        error: str | None = None,
    ) -> None:
        duration_ms = int((time.perf_counter() - start) * 1000)
        self._trace.record(
            TraceRecord.create("GET", url, status=status, duration_ms=duration_ms, error=error)
        )

    async def _fail(
        self,
        url: str,
        start: float,
        error: ProviderHTTPError,
        event: str,
        payload: dict[str, Any],
        message: str,
    ) -> DataUnavailableError:
        """Trace, log and notify a failed fetch.

        Returns:
            The generic error for the caller to raise.
        """
        status = error.status_code if isinstance(error, ProviderStatusError) else None
        self._record(url, start, status=status, error=str(error))

        logger.error("%s: %s", message, error)
        await self._notifier.notify(event, {**payload, "error": str(error)})

        return DataUnavailableError(message)


def create_service(config: Config, http_client: ProviderClient) -> DashboardService:
    """Build a DashboardService wired from configuration.

    Args:
        config: Application configuration.
        http_client: Open provider client.

    Returns:
        Configured DashboardService.
    """
    trace_sink: TraceSink = (
        JSONLTraceSink(config.trace.path) if config.trace.enabled else NullTraceSink()
    )

    webhook_url = config.notify.resolve_webhook_url()
    notifier: Notifier = (
        WebhookNotifier(webhook_url, timeout=config.notify.timeout)
        if webhook_url
        else NullNotifier()
    )

    return DashboardService(
        DiseaseAPI(http_client),
        trace_sink=trace_sink,
        notifier=notifier,
        metric=config.query.metric,
    )


def create_client(config: Config) -> ProviderClient:
    """Build a ProviderClient from configuration."""
    return ProviderClient(
        timeout=config.provider.timeout,
        max_retries=config.provider.max_retries,
        base_url=config.provider.base_url,
    )
