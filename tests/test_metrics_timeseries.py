"""Tests for the derived time series transform."""

import math
from datetime import date, timedelta
from typing import Any

import pytest

from covid_trends.metrics.timeseries import transform_timeline
from covid_trends.models import RawTimeline


def _iso_dates(count: int, start: date = date(2020, 3, 1)) -> list[str]:
    return [(start + timedelta(days=offset)).isoformat() for offset in range(count)]


def _timeline(
    cases: list[int],
    deaths: list[int] | None = None,
    recovered: list[int] | None = None,
    dates: list[str] | None = None,
) -> RawTimeline:
    """Build a RawTimeline from parallel lists."""
    dates = dates or _iso_dates(len(cases))
    deaths = deaths or [0] * len(cases)
    recovered = recovered or [0] * len(cases)
    return RawTimeline(
        cases=dict(zip(dates, cases, strict=True)),
        deaths=dict(zip(dates, deaths, strict=True)),
        recovered=dict(zip(dates, recovered, strict=True)),
    )


class TestOrderPreservation:
    """Tests that output mirrors input dates."""

    def test_one_point_per_date_in_order(self, aggregate_timeline: dict[str, Any]) -> None:
        """Test output length and dates match the input."""
        timeline = RawTimeline.model_validate(aggregate_timeline)

        points = transform_timeline(timeline)

        assert len(points) == len(timeline.dates)
        assert [p.date for p in points] == timeline.dates

    def test_unsorted_input_is_not_resorted(self) -> None:
        """Test that out-of-order dates keep their input order."""
        dates = ["2020-03-03", "2020-03-01", "2020-03-02"]
        timeline = _timeline([30, 10, 20], dates=dates)

        points = transform_timeline(timeline)

        assert [p.date for p in points] == dates
        assert [p.cases for p in points] == [30, 10, 20]

    def test_empty_timeline(self) -> None:
        """Test that an empty timeline yields no points."""
        assert transform_timeline(RawTimeline()) == []

    def test_cumulative_values_pass_through(self) -> None:
        """Test cases, deaths and recovered are cumulative, not deltas."""
        timeline = _timeline([10, 25], deaths=[1, 3], recovered=[2, 8])

        points = transform_timeline(timeline)

        assert (points[1].cases, points[1].deaths, points[1].recovered) == (25, 3, 8)


class TestRates:
    """Tests for active ratio and fatality rate."""

    def test_active_ratio_and_fatality_rate(self) -> None:
        """Test rates for 100 cases, 10 deaths, 50 recovered."""
        points = transform_timeline(_timeline([100], deaths=[10], recovered=[50]))

        assert points[0].active_ratio == pytest.approx(40.0)
        assert points[0].fatality_rate == pytest.approx(10.0)

    def test_zero_cases_gives_exact_zero_rates(self) -> None:
        """Test zero cases yields 0 rates, not None or NaN."""
        points = transform_timeline(_timeline([0], deaths=[0], recovered=[0]))

        assert points[0].active_ratio is not None
        assert points[0].fatality_rate is not None
        assert not math.isnan(points[0].active_ratio)
        assert points[0].active_ratio == 0
        assert points[0].fatality_rate == 0

    def test_zero_cases_with_nonzero_deaths(self) -> None:
        """Test the zero-case guard holds even with inconsistent counters."""
        points = transform_timeline(_timeline([0], deaths=[5], recovered=[3]))

        assert points[0].active_ratio == 0
        assert points[0].fatality_rate == 0

    def test_negative_active_is_not_clamped(self) -> None:
        """Test inconsistent upstream data gives a negative active ratio."""
        points = transform_timeline(_timeline([100], deaths=[30], recovered=[90]))

        assert points[0].active_ratio == pytest.approx(-20.0)


class TestWeeklyAverage:
    """Tests for the 7-point rolling average of new cases."""

    def test_absent_before_seventh_point(self, aggregate_timeline: dict[str, Any]) -> None:
        """Test weekly_average is None for the first six points."""
        points = transform_timeline(RawTimeline.model_validate(aggregate_timeline))

        assert all(p.weekly_average is None for p in points[:6])

    def test_first_window_counts_first_day_as_zero(self) -> None:
        """Test the first point contributes a zero delta to the window."""
        points = transform_timeline(_timeline([10, 10, 10, 10, 10, 10, 20]))

        assert points[6].weekly_average == pytest.approx(10 / 7)
        assert points[6].weekly_average == pytest.approx(1.43, abs=0.01)

    def test_first_day_delta_is_not_its_full_value(self) -> None:
        """Test the first day is not treated as growth from zero."""
        points = transform_timeline(_timeline([100, 110, 120, 130, 140, 150, 160]))

        # Six deltas of 10 plus a zero for the first day
        assert points[6].weekly_average == pytest.approx(60 / 7)

    def test_window_slides(self, aggregate_timeline: dict[str, Any]) -> None:
        """Test each window averages the trailing seven deltas."""
        points = transform_timeline(RawTimeline.model_validate(aggregate_timeline))

        assert points[6].weekly_average == pytest.approx(10.0)
        assert points[7].weekly_average == pytest.approx(12.0)

    def test_zero_average_is_absent(self) -> None:
        """Test a flat series yields None rather than 0."""
        points = transform_timeline(_timeline([50] * 9))

        assert all(p.weekly_average is None for p in points)

    def test_negative_average_is_absent(self) -> None:
        """Test a shrinking cumulative series yields None."""
        points = transform_timeline(_timeline([100, 90, 80, 70, 60, 50, 40]))

        assert points[6].weekly_average is None

    def test_reordering_changes_result(self) -> None:
        """Test the average depends on input order."""
        cases = [10, 12, 15, 20, 30, 45, 70]
        forward = transform_timeline(_timeline(cases))
        reversed_points = transform_timeline(_timeline(list(reversed(cases))))

        assert forward[6].weekly_average == pytest.approx(60 / 7)
        assert reversed_points[6].weekly_average is None

    def test_deterministic(self, aggregate_timeline: dict[str, Any]) -> None:
        """Test identical input gives identical output."""
        timeline = RawTimeline.model_validate(aggregate_timeline)

        assert transform_timeline(timeline) == transform_timeline(timeline)


class TestMissingCounters:
    """Tests for graceful handling of partial provider data."""

    def test_missing_dates_default_to_zero(self) -> None:
        """Test a date absent from deaths/recovered reads as 0."""
        timeline = RawTimeline(
            cases={"2020-03-01": 100, "2020-03-02": 200},
            deaths={"2020-03-01": 10},
            recovered={},
        )

        points = transform_timeline(timeline)

        assert points[1].deaths == 0
        assert points[1].recovered == 0
        assert points[1].active_ratio == pytest.approx(100.0)

    def test_null_counters_default_to_zero(self) -> None:
        """Test null values and a null mapping read as 0."""
        timeline = RawTimeline.model_validate(
            {
                "cases": {"2020-03-01": None, "2020-03-02": 40},
                "deaths": {"2020-03-01": None, "2020-03-02": 4},
                "recovered": None,
            }
        )

        points = transform_timeline(timeline)

        assert points[0].cases == 0
        assert points[0].fatality_rate == 0
        assert points[1].fatality_rate == pytest.approx(10.0)
