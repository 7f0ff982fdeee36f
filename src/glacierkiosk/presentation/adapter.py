"""Projection of full series onto what the renderer may show.

Points at index ``< revealed_count`` pass through unchanged; every later
point keeps its key but has all numeric fields set to ``None``. A wide
cumulative series is revealed by year instead: the first ``revealed_count``
year labels keep their values on every date, later labels are ``None``. ``None`` is
the "not yet revealed" marker: it is never ``0`` and the field is never
omitted, so a renderer can tell a hidden point from a measured zero.
"""

from __future__ import annotations

from typing import Any, Sequence, Union

from glacierkiosk.context import KioskContext
from glacierkiosk.reveal.state import RevealState
from glacierkiosk.series.models import CumulativePoint, DetailPoint, year_labels

Record = dict[str, Any]

# numeric fields of a detail point, masked together
DETAIL_VALUE_FIELDS = ("current_value", "average", "stdev_lower", "stdev_upper")


def _clamp(revealed_count: int, n: int) -> int:
    return max(0, min(int(revealed_count), n))


def mask_cumulative(point: CumulativePoint, visible_years: frozenset[str] = frozenset()) -> Record:
    """Record for an unrevealed cumulative point: value(s) None, keys kept.

    For a wide point, years in ``visible_years`` keep their value.
    """
    d = point.to_dict()
    if "values_by_year" in d:
        d["values_by_year"] = {
            year: (v if year in visible_years else None) for year, v in d["values_by_year"].items()
        }
    else:
        d["value"] = None
    return d


def mask_detail(point: DetailPoint) -> Record:
    """Record for an unrevealed detail point: all four numeric fields None."""
    d = point.to_dict()
    for name in DETAIL_VALUE_FIELDS:
        d[name] = None
    return d


def project_cumulative(series: Sequence[CumulativePoint], revealed_count: int) -> list[Record]:
    if series and not series[0].is_monthly:
        labels = year_labels(tuple(series))
        visible_years = frozenset(labels[: _clamp(revealed_count, len(labels))])
        return [mask_cumulative(p, visible_years) for p in series]
    visible = _clamp(revealed_count, len(series))
    return [p.to_dict() if i < visible else mask_cumulative(p) for i, p in enumerate(series)]


def project_detail(series: Sequence[DetailPoint], revealed_count: int) -> list[Record]:
    visible = _clamp(revealed_count, len(series))
    return [p.to_dict() if i < visible else mask_detail(p) for i, p in enumerate(series)]


def project(
    series: Union[Sequence[CumulativePoint], Sequence[DetailPoint]],
    revealed_count: int,
) -> list[Record]:
    """Project either series type; the point type selects the masking rule."""
    if not series:
        return []
    if isinstance(series[0], DetailPoint):
        return project_detail(series, revealed_count)  # type: ignore[arg-type]
    return project_cumulative(series, revealed_count)  # type: ignore[arg-type]


def project_state(context: KioskContext, state: RevealState) -> list[Record]:
    """Records of the active view's series at the state's reveal boundary."""
    return project(context.series_for(state.active_view), state.revealed_count)
