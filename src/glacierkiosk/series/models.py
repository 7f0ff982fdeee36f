"""Typed records produced by the series parser.

Both record types are frozen dataclasses; a parsed series is a tuple of them
and is never mutated after construction. ``to_dict`` gives the plain record
shape consumed by the presentation adapter and the figure builders.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union


@dataclass(frozen=True)
class CumulativePoint:
    """One period of the multi-year cumulative series.

    Exactly one of ``values_by_year`` (wide form, one value per year label) or
    ``value`` (monthly aggregated form) is populated.
    """
    period_key: str                                    # "YYYY-MM-DD" (wide) or "YYYY-MM" (monthly)
    values_by_year: Optional[Mapping[str, float]] = None
    value: Optional[float] = None

    @property
    def is_monthly(self) -> bool:
        return self.values_by_year is None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain record."""
        d: dict[str, Any] = {"period_key": self.period_key}
        if self.values_by_year is not None:
            d["values_by_year"] = dict(self.values_by_year)
        else:
            d["value"] = self.value
        return d


@dataclass(frozen=True)
class DetailPoint:
    """One day of the current hydrological year course."""
    day_of_year: int
    current_value: Optional[float]  # only set for "this year" sample ids
    average: float
    stdev_lower: float
    stdev_upper: float

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a plain record."""
        return {
            "day_of_year": self.day_of_year,
            "current_value": self.current_value,
            "average": self.average,
            "stdev_lower": self.stdev_lower,
            "stdev_upper": self.stdev_upper,
        }


CumulativeSeries = tuple[CumulativePoint, ...]
DetailSeries = tuple[DetailPoint, ...]
Series = Union[CumulativeSeries, DetailSeries]


def year_labels(series: CumulativeSeries) -> list[str]:
    """Year labels of a wide series in order of first appearance; empty for monthly series."""
    labels: dict[str, None] = {}
    for p in series:
        for year in p.values_by_year or {}:
            labels.setdefault(year, None)
    return list(labels)


def reveal_length(series: Series) -> int:
    """Number of reveal steps N: one per year label for a wide series, else one per point."""
    if series and isinstance(series[0], CumulativePoint) and not series[0].is_monthly:
        return len(year_labels(series))  # type: ignore[arg-type]
    return len(series)
