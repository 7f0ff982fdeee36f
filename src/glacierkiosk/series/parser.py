"""Parsing of raw mass-balance text feeds into typed, sorted series.

Two feeds are supported:

- **Cumulative** (``mb-cum-cycle_*.txt``): either *wide* (one row per calendar
  date, one column per hydrological year label) or *long* (one row per
  ``(year, month, day, value)``). Long input is aggregated to one point per
  month, keeping the value of the last day of the month.
- **Detail** (``mb-course-avg_*.txt``): one row per day of the hydrological
  year with the current-year value, the period average and its standard
  deviation.

Malformed rows are skipped, never raised: a series is assembled from whatever
rows parse. An empty series is a valid result. Rows whose required numeric
fields do not parse are dropped here so NaN never reaches the controller or
the renderer.
"""

from __future__ import annotations

import re
from typing import Literal, Optional

import numpy as np
import pandas as pd

from glacierkiosk.series.bands import DEFAULT_STDEV_MULTIPLIER, compute_band
from glacierkiosk.series.models import CumulativePoint, CumulativeSeries, DetailPoint, DetailSeries
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)

CumulativeLayout = Literal["auto", "wide", "long"]

DEFAULT_YEAR_RANGE: tuple[int, int] = (2010, 2024)

# sample ids marking the current hydrological year in the detail feed
THIS_YEAR_SAMPLE_IDS: frozenset[int] = frozenset({1, 2})

LONG_COLUMNS = ["year", "month", "day", "value"]
DETAIL_COLUMNS = [
    "year", "month", "day", "day_of_year", "cum_mb", "sample_id", "period_avg", "period_stdev",
]

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _split_fields(line: str, keep_empty: bool = False) -> list[str]:
    """Split one line on any whitespace run.

    With ``keep_empty`` a line containing tabs is split on single tabs so an
    empty cell keeps its column position.
    """
    if keep_empty and "\t" in line:
        return [f.strip() for f in line.split("\t")]
    return line.split()


def _looks_numeric(field: str) -> bool:
    try:
        float(field)
    except ValueError:
        return False
    return True


def _is_header(fields: list[str]) -> bool:
    """A first row is a header if it carries a 'Year' token or does not start with data."""
    if not fields:
        return False
    if any("year" in f.lower() for f in fields):
        return True
    first = fields[0]
    return not (_DATE_RE.match(first) or _looks_numeric(first))


def _split_table(text: str, keep_empty: bool = False) -> tuple[Optional[list[str]], list[list[str]]]:
    """Split raw text into (header fields or None, data rows)."""
    lines = [ln for ln in text.splitlines() if ln.strip()]
    rows = [_split_fields(ln.strip("\r\n"), keep_empty) for ln in lines]
    if rows and _is_header(rows[0]):
        return rows[0], rows[1:]
    return None, rows


def _check_year_range(year_range: tuple[int, int]) -> tuple[int, int]:
    lo, hi = int(year_range[0]), int(year_range[1])
    if lo > hi:
        raise ValueError(f"year_range start {lo} is after end {hi}")
    return lo, hi


def _integral(s: pd.Series) -> pd.Series:
    """Boolean mask of finite values with no fractional part."""
    return np.isfinite(s) & (s == np.floor(s))


def detect_layout(text: str) -> Literal["wide", "long"]:
    """Guess the cumulative layout from the first data row: ISO date first field means wide."""
    _header, rows = _split_table(text)
    for r in rows:
        if r and r[0]:
            return "wide" if _DATE_RE.match(r[0]) else "long"
    return "long"


def parse_cumulative(
    text: str,
    year_range: tuple[int, int] = DEFAULT_YEAR_RANGE,
    *,
    layout: CumulativeLayout = "auto",
) -> CumulativeSeries:
    """Parse the cumulative feed.

    Args:
        text: Raw feed text, tab or whitespace delimited.
        year_range: Inclusive ``(first, last)`` hydrological year to keep.
        layout: ``"wide"``, ``"long"`` or ``"auto"`` (see ``detect_layout``).

    Returns:
        Tuple of CumulativePoint sorted by ``period_key`` with no duplicate keys.

    Raises:
        ValueError: If ``layout`` is unknown or ``year_range`` is reversed.
    """
    year_range = _check_year_range(year_range)
    if layout == "auto":
        layout = detect_layout(text)
    if layout == "wide":
        return _parse_cumulative_wide(text, year_range)
    if layout == "long":
        return _parse_cumulative_long(text, year_range)
    raise ValueError(f"Unknown cumulative layout {layout!r}")


def _parse_cumulative_long(text: str, year_range: tuple[int, int]) -> CumulativeSeries:
    """Monthly aggregation: per (year, month) keep the value with the largest day."""
    _header, rows = _split_table(text)
    kept = [r[:4] for r in rows if len(r) >= 4]
    n_short = len(rows) - len(kept)

    df = pd.DataFrame(kept, columns=LONG_COLUMNS)
    for col in LONG_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    valid = (
        _integral(df["year"])
        & _integral(df["month"])
        & _integral(df["day"])
        & np.isfinite(df["value"])
        & df["month"].between(1, 12)
    )
    n_bad = int((~valid).sum())
    df = df[valid]

    lo, hi = year_range
    df = df[df["year"].between(lo, hi)].astype({"year": int, "month": int, "day": int})

    # input order breaks ties on day: the last row seen wins
    df = df.assign(_order=np.arange(len(df)))
    df = df.sort_values(["year", "month", "day", "_order"])
    df = df.drop_duplicates(subset=["year", "month"], keep="last")

    if n_short or n_bad:
        logger.debug("cumulative (long): skipped %d short and %d unparsable row(s)", n_short, n_bad)

    return tuple(
        CumulativePoint(period_key=f"{row.year:04d}-{row.month:02d}", value=float(row.value))
        for row in df.itertuples(index=False)
    )


def _label_in_range(label: str, year_range: tuple[int, int]) -> bool:
    """Year labels that are plain integers must fall inside year_range; other labels are kept."""
    try:
        year = int(label)
    except ValueError:
        return True
    return year_range[0] <= year <= year_range[1]


def _parse_cumulative_wide(text: str, year_range: tuple[int, int]) -> CumulativeSeries:
    """One point per date; values_by_year from the header-to-column mapping."""
    header, rows = _split_table(text, keep_empty=True)
    if header is None or len(header) < 2:
        logger.warning("cumulative (wide): no header row with year labels, returning empty series")
        return ()

    width = len(header)
    labels = header[1:]
    kept = [(r + [""] * (width - len(r)))[:width] for r in rows if len(r) >= 2 and _DATE_RE.match(r[0])]
    n_skipped = len(rows) - len(kept)

    # positional columns: header labels are not guaranteed unique
    df = pd.DataFrame(kept, columns=range(width))
    keep_cols = [i for i, label in enumerate(labels, start=1) if _label_in_range(label, year_range)]
    values = pd.DataFrame(
        {col: pd.to_numeric(df[col], errors="coerce").astype(float) for col in keep_cols},
        index=df.index,
    )

    df = df.assign(_order=np.arange(len(df)))
    order = df.sort_values([0, "_order"]).drop_duplicates(subset=[0], keep="last").index

    if n_skipped:
        logger.debug("cumulative (wide): skipped %d malformed row(s)", n_skipped)

    points = []
    for idx in order:
        by_year: dict[str, float] = {}
        for col in keep_cols:
            v = values.at[idx, col]
            if np.isfinite(v):
                by_year[labels[col - 1]] = float(v)
        points.append(CumulativePoint(period_key=str(df.at[idx, 0]), values_by_year=by_year))
    return tuple(points)


def parse_detail(
    text: str,
    *,
    k: float = DEFAULT_STDEV_MULTIPLIER,
    merge_duplicate_days: bool = False,
) -> DetailSeries:
    """Parse the current-year detail feed.

    Every valid row emits one DetailPoint. ``current_value`` is the row's
    cumulative value only when its sample id is one of THIS_YEAR_SAMPLE_IDS.
    Output is sorted by ``day_of_year``; rows sharing a day keep input order
    unless ``merge_duplicate_days`` is set, in which case one point per day is
    kept (band from the last row, ``current_value`` the last one seen).

    Args:
        text: Raw feed text.
        k: Standard deviation multiplier for the band.
        merge_duplicate_days: Collapse rows sharing a ``day_of_year``.

    Returns:
        Tuple of DetailPoint.

    Raises:
        ValueError: If ``k`` is negative.
    """
    if k < 0:
        raise ValueError(f"stdev multiplier must be >= 0, got {k}")
    _header, rows = _split_table(text)
    kept = [r[:8] for r in rows if len(r) >= 8]
    n_short = len(rows) - len(kept)

    df = pd.DataFrame(kept, columns=DETAIL_COLUMNS)
    for col in DETAIL_COLUMNS:
        df[col] = pd.to_numeric(df[col], errors="coerce").astype(float)

    is_this_year = df["sample_id"].isin(sorted(THIS_YEAR_SAMPLE_IDS))
    valid = (
        _integral(df["day_of_year"])
        & df["day_of_year"].between(1, 366)
        & _integral(df["sample_id"])
        & np.isfinite(df["period_avg"])
        & np.isfinite(df["period_stdev"])
        & (df["period_stdev"] >= 0)
        & (~is_this_year | np.isfinite(df["cum_mb"]))
    )
    n_bad = int((~valid).sum())
    df = df[valid].assign(this_year=is_this_year[valid])
    df = df.sort_values("day_of_year", kind="stable")

    if n_short or n_bad:
        logger.debug("detail: skipped %d short and %d unparsable row(s)", n_short, n_bad)

    points: list[DetailPoint] = []
    for row in df.itertuples(index=False):
        lower, upper = compute_band(float(row.period_avg), float(row.period_stdev), k)
        points.append(
            DetailPoint(
                day_of_year=int(row.day_of_year),
                current_value=float(row.cum_mb) if row.this_year else None,
                average=float(row.period_avg),
                stdev_lower=lower,
                stdev_upper=upper,
            )
        )

    if merge_duplicate_days:
        points = _merge_by_day(points)
    return tuple(points)


def _merge_by_day(points: list[DetailPoint]) -> list[DetailPoint]:
    """Collapse sorted points sharing a day_of_year, keeping the last current_value seen."""
    merged: list[DetailPoint] = []
    for p in points:
        if merged and merged[-1].day_of_year == p.day_of_year:
            prev = merged[-1]
            current = p.current_value if p.current_value is not None else prev.current_value
            merged[-1] = DetailPoint(
                day_of_year=p.day_of_year,
                current_value=current,
                average=p.average,
                stdev_lower=p.stdev_lower,
                stdev_upper=p.stdev_upper,
            )
        else:
            merged.append(p)
    return merged
