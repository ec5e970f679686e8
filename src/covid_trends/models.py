"""Data models for raw provider timelines and derived analytics."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class RawTimeline(BaseModel):
    """Cumulative per-day counters as returned by the provider.

    Dates are the keys of ``cases`` in the order the provider sent them.
    Counters may be missing or null for a given date; they read as 0.
    """

    model_config = ConfigDict(frozen=True)

    cases: dict[str, int | None] = Field(default_factory=dict)
    deaths: dict[str, int | None] = Field(default_factory=dict)
    recovered: dict[str, int | None] = Field(default_factory=dict)

    @field_validator("cases", "deaths", "recovered", mode="before")
    @classmethod
    def default_missing_counter(cls, v: Any) -> Any:
        """Treat an absent or null counter mapping as empty."""
        return {} if v is None else v

    @property
    def dates(self) -> list[str]:
        """Dates in provider order."""
        return list(self.cases)

    def counter(self, name: str, date: str) -> int:
        """Get a cumulative counter value, defaulting to 0 when absent.

        Args:
            name: One of "cases", "deaths", "recovered".
            date: Date key.

        Returns:
            Counter value, or 0 if the date or value is missing.
        """
        value = getattr(self, name).get(date)
        return 0 if value is None else value


class DerivedPoint(BaseModel):
    """One date of the derived analytical series."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    date: str
    cases: int
    deaths: int
    recovered: int
    active_ratio: float | None = None
    fatality_rate: float | None = None
    weekly_average: float | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, omitting absent values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class CountryEntry(BaseModel):
    """Per-country cumulative snapshot.

    Only ``country`` and the ranked metric are read; every other provider
    field is kept as-is.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    country: str
    cases: int | float = 0

    def metric(self, name: str) -> float:
        """Get a numeric field by name, 0 when missing or non-numeric.

        Args:
            name: Field name, e.g. "cases" or "deaths".

        Returns:
            Metric value.
        """
        value = getattr(self, name, None)
        if isinstance(value, bool) or not isinstance(value, int | float):
            return 0
        return value

    def to_dict(self) -> dict[str, Any]:
        """Serialize including passthrough provider fields."""
        return self.model_dump()


class DashboardData(BaseModel):
    """Everything the presentation layer renders for one request."""

    country: str
    historical: list[DerivedPoint]
    countries: list[CountryEntry]
    top_countries: list[CountryEntry]
