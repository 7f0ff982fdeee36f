"""Projection of revealed series and Plotly figure builders."""

from glacierkiosk.presentation.adapter import (
    DETAIL_VALUE_FIELDS,
    project,
    project_cumulative,
    project_detail,
    project_state,
)
from glacierkiosk.presentation.figures import cumulative_figure, detail_figure, series_y_range
from glacierkiosk.presentation.theme import ThemeMode

__all__ = [
    "DETAIL_VALUE_FIELDS",
    "ThemeMode",
    "cumulative_figure",
    "detail_figure",
    "project",
    "project_cumulative",
    "project_detail",
    "project_state",
    "series_y_range",
]
