"""Plotly figures for the two kiosk views.

Builders take the projected records from ``presentation.adapter`` and return
Plotly figure dicts (never go.Figure) for ``ui.plotly`` / ``update_figure``.
They are pure functions of their inputs; the renderer keeps no animation
state of its own.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping, Optional, Sequence, Union

import numpy as np
import plotly.graph_objects as go

from glacierkiosk.presentation.theme import (
    ThemeMode,
    get_grid_color,
    get_theme_colors,
    get_theme_template,
    resolve_theme,
)
from glacierkiosk.series.models import CumulativePoint, DetailPoint

CURRENT_COLOR = "#e53e3e"     # red: current / latest year
HISTORICAL_COLOR = "#3182ce"  # blue: average / earlier years
MONTHLY_COLOR = "#36DBFF"     # cyan: monthly aggregated cumulative line
BAND_FILL = "rgba(128,128,128,0.3)"

DEFAULT_DETAIL_NAMES = {
    "current_value": "Current value",
    "average": "Average",
    "stdev": "Standard deviation",
}


def _record_numbers(record: Mapping[str, Any]) -> Iterable[Optional[float]]:
    for key in ("value", "current_value", "average", "stdev_lower", "stdev_upper"):
        if key in record:
            yield record[key]
    by_year = record.get("values_by_year")
    if by_year:
        yield from by_year.values()


def series_y_range(
    series: Sequence[Union[CumulativePoint, DetailPoint, Mapping[str, Any]]],
    pad: float = 0.1,
) -> Optional[tuple[float, float]]:
    """Y axis range over the full series, always including 0.

    Computed from the unmasked series so the axes stay fixed while points
    are revealed. Returns None for a series without any value.
    """
    values: list[float] = []
    for item in series:
        record = item if isinstance(item, Mapping) else item.to_dict()
        values.extend(v for v in _record_numbers(record) if v is not None and math.isfinite(v))
    if not values:
        return None
    arr = np.asarray(values + [0.0], dtype=float)
    lo, hi = float(arr.min()), float(arr.max())
    span = (hi - lo) or 1.0
    return lo - pad * span, hi + pad * span


def _base_layout(
    fig: go.Figure,
    *,
    theme: ThemeMode,
    x_title: str,
    y_title: str,
    y_range: Optional[tuple[float, float]],
    showlegend: bool,
) -> None:
    bg_color, fg_color = get_theme_colors(theme)
    grid_color = get_grid_color(theme)
    yaxis: dict[str, Any] = dict(title=y_title, color=fg_color, gridcolor=grid_color, zeroline=False)
    if y_range is not None:
        yaxis["range"] = list(y_range)
    # zero reference line across the full plot width
    fig.add_shape(
        type="line",
        xref="paper",
        x0=0,
        x1=1,
        yref="y",
        y0=0,
        y1=0,
        line=dict(color=fg_color, width=1, dash="dash"),
    )
    fig.update_layout(
        template=get_theme_template(theme),
        paper_bgcolor=bg_color,
        plot_bgcolor=bg_color,
        font=dict(color=fg_color),
        xaxis=dict(title=x_title, color=fg_color, gridcolor=grid_color),
        yaxis=yaxis,
        margin=dict(l=70, r=30, t=20, b=60),
        showlegend=showlegend,
        legend=dict(x=0.99, xanchor="right", y=0.99),
    )


def _year_labels(records: Sequence[Mapping[str, Any]]) -> list[str]:
    """Year labels in order of first appearance."""
    labels: dict[str, None] = {}
    for r in records:
        for year in r.get("values_by_year") or {}:
            labels.setdefault(year, None)
    return list(labels)


def cumulative_figure(
    records: Sequence[Mapping[str, Any]],
    *,
    x_title: str = "",
    y_title: str = "",
    theme: Union[str, ThemeMode, None] = ThemeMode.DARK,
    y_range: Optional[tuple[float, float]] = None,
) -> dict:
    """Cumulative view.

    Monthly records (``value``) draw one line with markers. Wide records
    (``values_by_year``) draw one line per year; the latest year with a
    visible value is drawn red and thicker.
    """
    theme_mode = resolve_theme(theme)
    x = [r["period_key"] for r in records]
    fig = go.Figure()

    if records and "values_by_year" not in records[0]:
        fig.add_trace(
            go.Scatter(
                x=x,
                y=[r.get("value") for r in records],
                mode="lines+markers",
                line=dict(color=MONTHLY_COLOR, width=4),
                marker=dict(size=8, color=MONTHLY_COLOR, line=dict(width=2, color="#ffffff")),
                hovertemplate="%{y:.3f} m w.e.<extra></extra>",
                showlegend=False,
            )
        )
    else:
        years = _year_labels(records)
        visible = [
            y for y in years
            if any((r.get("values_by_year") or {}).get(y) is not None for r in records)
        ]
        latest = visible[-1] if visible else None
        for year in years:
            is_latest = year == latest
            fig.add_trace(
                go.Scatter(
                    x=x,
                    y=[(r.get("values_by_year") or {}).get(year) for r in records],
                    mode="lines",
                    name=year,
                    line=dict(
                        color=CURRENT_COLOR if is_latest else HISTORICAL_COLOR,
                        width=3 if is_latest else 1.5,
                    ),
                    hovertemplate=f"{year}: %{{y:.3f}} m w.e.<extra></extra>",
                    showlegend=False,
                )
            )

    _base_layout(fig, theme=theme_mode, x_title=x_title, y_title=y_title, y_range=y_range, showlegend=False)
    return fig.to_dict()


def detail_figure(
    records: Sequence[Mapping[str, Any]],
    *,
    x_title: str = "",
    y_title: str = "",
    names: Optional[Mapping[str, str]] = None,
    theme: Union[str, ThemeMode, None] = ThemeMode.DARK,
    y_range: Optional[tuple[float, float]] = None,
) -> dict:
    """Detail view: +/- band (lower trace, upper filled to it), average line, current-year line."""
    theme_mode = resolve_theme(theme)
    names = {**DEFAULT_DETAIL_NAMES, **(names or {})}
    x = [r["day_of_year"] for r in records]

    fig = go.Figure()
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[r["stdev_lower"] for r in records],
            mode="lines",
            line=dict(width=0),
            hoverinfo="skip",
            showlegend=False,
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[r["stdev_upper"] for r in records],
            mode="lines",
            line=dict(width=0),
            fill="tonexty",
            fillcolor=BAND_FILL,
            name=names["stdev"],
            hoverinfo="skip",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[r["average"] for r in records],
            mode="lines",
            line=dict(color=HISTORICAL_COLOR, width=3),
            name=names["average"],
            hovertemplate="%{y:.3f} m w.e.<extra></extra>",
        )
    )
    fig.add_trace(
        go.Scatter(
            x=x,
            y=[r["current_value"] for r in records],
            mode="lines",
            line=dict(color=CURRENT_COLOR, width=3),
            connectgaps=True,
            name=names["current_value"],
            hovertemplate="%{y:.3f} m w.e.<extra></extra>",
        )
    )

    _base_layout(fig, theme=theme_mode, x_title=x_title, y_title=y_title, y_range=y_range, showlegend=True)
    return fig.to_dict()
