"""Mass-balance series: typed records, text feed parsing and statistical bands."""

from glacierkiosk.series.bands import compute_band
from glacierkiosk.series.models import (
    CumulativePoint,
    CumulativeSeries,
    DetailPoint,
    DetailSeries,
    reveal_length,
    year_labels,
)
from glacierkiosk.series.parser import (
    DEFAULT_YEAR_RANGE,
    THIS_YEAR_SAMPLE_IDS,
    detect_layout,
    parse_cumulative,
    parse_detail,
)

__all__ = [
    "CumulativePoint",
    "CumulativeSeries",
    "DEFAULT_YEAR_RANGE",
    "DetailPoint",
    "DetailSeries",
    "THIS_YEAR_SAMPLE_IDS",
    "compute_band",
    "detect_layout",
    "parse_cumulative",
    "parse_detail",
    "reveal_length",
    "year_labels",
]
