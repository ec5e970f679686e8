"""Tests for the top-N country leaderboard."""

from typing import Any

import pytest

from covid_trends.metrics.leaderboards import rank_top_n
from covid_trends.models import CountryEntry


def _entries(*pairs: tuple[str, int]) -> list[CountryEntry]:
    return [CountryEntry(country=name, cases=cases) for name, cases in pairs]


class TestRankTopN:
    """Tests for rank_top_n."""

    def test_top_k_descending(self) -> None:
        """Test the highest k entries come back in descending order."""
        entries = _entries(("A", 5), ("B", 50), ("C", 20))

        top = rank_top_n(entries, k=2)

        assert [(e.country, e.cases) for e in top] == [("B", 50), ("C", 20)]

    def test_fewer_than_k_returns_all_sorted(self) -> None:
        """Test a short input is returned whole and sorted."""
        entries = _entries(("A", 5), ("B", 50), ("C", 20))

        top = rank_top_n(entries, k=5)

        assert [e.country for e in top] == ["B", "C", "A"]

    def test_default_k_is_five(self, countries_payload: list[dict[str, Any]]) -> None:
        """Test the default keeps five entries."""
        entries = [CountryEntry.model_validate(item) for item in countries_payload]

        top = rank_top_n(entries)

        assert [e.country for e in top] == ["France", "Brazil", "Chile", "Denmark", "Ecuador"]

    def test_ties_keep_input_order(self) -> None:
        """Test equal metrics keep their relative input order."""
        entries = _entries(("A", 10), ("B", 30), ("C", 10), ("D", 30), ("E", 10))

        top = rank_top_n(entries, k=5)

        assert [e.country for e in top] == ["B", "D", "A", "C", "E"]

    def test_does_not_mutate_input(self) -> None:
        """Test the input list is left untouched."""
        entries = _entries(("A", 5), ("B", 50), ("C", 20))
        snapshot = list(entries)

        top = rank_top_n(entries, k=2)

        assert entries == snapshot
        assert top is not entries

    def test_result_is_subset_of_input(self, countries_payload: list[dict[str, Any]]) -> None:
        """Test every ranked entry comes from the input."""
        entries = [CountryEntry.model_validate(item) for item in countries_payload]

        top = rank_top_n(entries, k=3)

        assert len(top) == 3
        assert all(entry in entries for entry in top)

    def test_empty_input(self) -> None:
        """Test an empty input yields an empty list."""
        assert rank_top_n([], k=5) == []

    def test_k_zero(self) -> None:
        """Test k=0 yields an empty list."""
        assert rank_top_n(_entries(("A", 1)), k=0) == []

    def test_negative_k_raises(self) -> None:
        """Test a negative k is rejected."""
        with pytest.raises(ValueError, match="non-negative"):
            rank_top_n(_entries(("A", 1)), k=-1)


class TestRankByOtherMetrics:
    """Tests for ranking by fields other than cases."""

    def test_rank_by_deaths(self, countries_payload: list[dict[str, Any]]) -> None:
        """Test ranking by a passthrough provider field."""
        entries = [CountryEntry.model_validate(item) for item in countries_payload]

        top = rank_top_n(entries, k=2, metric="deaths")

        assert [e.country for e in top] == ["Brazil", "France"]

    def test_missing_metric_ranks_as_zero(self) -> None:
        """Test entries without the metric sort after those with it."""
        entries = [
            CountryEntry(country="A", cases=1),
            CountryEntry.model_validate({"country": "B", "cases": 1, "tests": 500}),
        ]

        top = rank_top_n(entries, k=2, metric="tests")

        assert [e.country for e in top] == ["B", "A"]

    def test_passthrough_fields_preserved(self, countries_payload: list[dict[str, Any]]) -> None:
        """Test ranked entries keep all provider fields."""
        entries = [CountryEntry.model_validate(item) for item in countries_payload]

        top = rank_top_n(entries, k=1)

        assert top[0].to_dict()["countryInfo"] == {"iso2": "FR", "iso3": "FRA"}
        assert top[0].to_dict()["active"] == 0
