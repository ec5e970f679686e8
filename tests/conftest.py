"""Test fixtures for covid-trends.

Provides fixtures for:
- Sample disease.sh payloads (historical timelines, country snapshot)
- Test configurations writing traces under a temp directory
- Recording sinks for service tests
"""

from pathlib import Path
from typing import Any

import pytest

from covid_trends.config import Config
from covid_trends.sinks.notify import Notifier
from covid_trends.sinks.trace import TraceRecord, TraceSink

BASE_URL = "https://disease.sh/v3/covid-19"


class RecordingTraceSink(TraceSink):
    """Trace sink keeping records in memory."""

    def __init__(self) -> None:
        self.records: list[TraceRecord] = []

    def record(self, entry: TraceRecord) -> None:
        self.records.append(entry)


class RecordingNotifier(Notifier):
    """Notifier keeping events in memory."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    async def notify(self, event: str, payload: dict[str, Any]) -> None:
        self.events.append((event, payload))


@pytest.fixture
def aggregate_timeline() -> dict[str, Any]:
    """Flat timeline as returned by /historical/all."""
    return {
        "cases": {
            "1/1/23": 100,
            "1/2/23": 110,
            "1/3/23": 125,
            "1/4/23": 130,
            "1/5/23": 150,
            "1/6/23": 160,
            "1/7/23": 170,
            "1/8/23": 184,
        },
        "deaths": {
            "1/1/23": 1,
            "1/2/23": 1,
            "1/3/23": 2,
            "1/4/23": 2,
            "1/5/23": 3,
            "1/6/23": 3,
            "1/7/23": 4,
            "1/8/23": 4,
        },
        "recovered": {
            "1/1/23": 50,
            "1/2/23": 55,
            "1/3/23": 60,
            "1/4/23": 65,
            "1/5/23": 70,
            "1/6/23": 75,
            "1/7/23": 80,
            "1/8/23": 85,
        },
    }


@pytest.fixture
def country_historical(aggregate_timeline: dict[str, Any]) -> dict[str, Any]:
    """Nested payload as returned by /historical/{country}."""
    return {
        "country": "Spain",
        "province": ["mainland"],
        "timeline": aggregate_timeline,
    }


@pytest.fixture
def countries_payload() -> list[dict[str, Any]]:
    """Country snapshot as returned by /countries."""
    return [
        {
            "country": "Andorra",
            "countryInfo": {"iso2": "AD", "iso3": "AND"},
            "cases": 48015,
            "deaths": 165,
            "recovered": 0,
            "active": 47850,
        },
        {
            "country": "Brazil",
            "countryInfo": {"iso2": "BR", "iso3": "BRA"},
            "cases": 38743918,
            "deaths": 711380,
            "recovered": 36249161,
            "active": 1783377,
        },
        {
            "country": "Chile",
            "countryInfo": {"iso2": "CL", "iso3": "CHL"},
            "cases": 5401126,
            "deaths": 64497,
            "recovered": 5300000,
            "active": 36629,
        },
        {
            "country": "Denmark",
            "countryInfo": {"iso2": "DK", "iso3": "DNK"},
            "cases": 3412127,
            "deaths": 9919,
            "recovered": 3400000,
            "active": 2208,
        },
        {
            "country": "Ecuador",
            "countryInfo": {"iso2": "EC", "iso3": "ECU"},
            "cases": 1075407,
            "deaths": 36084,
            "recovered": 1000000,
            "active": 39323,
        },
        {
            "country": "France",
            "countryInfo": {"iso2": "FR", "iso3": "FRA"},
            "cases": 40138560,
            "deaths": 167642,
            "recovered": 39970918,
            "active": 0,
        },
    ]


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """Config with traces under tmp_path, no retries and no webhook."""
    return Config.model_validate(
        {
            "provider": {"base_url": BASE_URL, "max_retries": 0},
            "trace": {"enabled": True, "path": str(tmp_path / "logs" / "http_trace.jsonl")},
            "notify": {"enabled": False},
            "report": {"title": "Test Dashboard", "output": str(tmp_path / "site" / "index.html")},
        }
    )


@pytest.fixture
def trace_sink() -> RecordingTraceSink:
    """In-memory trace sink."""
    return RecordingTraceSink()


@pytest.fixture
def notifier() -> RecordingNotifier:
    """In-memory notifier."""
    return RecordingNotifier()
