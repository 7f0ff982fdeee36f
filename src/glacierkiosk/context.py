"""Owned session context for the kiosk.

KioskContext replaces module-level globals (current language, raw series):
it is built once at startup, its series are swapped wholesale on every
successful fetch and it is dropped at shutdown.
"""

from __future__ import annotations

from typing import Optional

from glacierkiosk.reveal.state import ActiveView
from glacierkiosk.series.models import CumulativeSeries, DetailSeries, Series, reveal_length
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)


class KioskContext:
    """Holds the parsed series and presentation settings for one kiosk session.

    Attributes:
        language: Current UI language code ("de" or "en").
        generation: Incremented each time the series are replaced.
    """

    def __init__(self, *, language: str = "de") -> None:
        self.language = language
        self.generation = 0
        self._cumulative: Optional[CumulativeSeries] = None
        self._detail: Optional[DetailSeries] = None

    @property
    def cumulative(self) -> CumulativeSeries:
        return self._cumulative or ()

    @property
    def detail(self) -> DetailSeries:
        return self._detail or ()

    @property
    def has_series(self) -> bool:
        """True once at least one series was loaded (it may be empty)."""
        return self._cumulative is not None or self._detail is not None

    @property
    def last_update(self) -> Optional[str]:
        """Period key of the last cumulative point, shown as the feed's update date."""
        if not self.cumulative:
            return None
        return self.cumulative[-1].period_key

    def replace_series(
        self,
        *,
        cumulative: Optional[CumulativeSeries] = None,
        detail: Optional[DetailSeries] = None,
    ) -> None:
        """Swap in new series. A side passed as None keeps its previous series."""
        if cumulative is None and detail is None:
            return
        if cumulative is not None:
            self._cumulative = tuple(cumulative)
        if detail is not None:
            self._detail = tuple(detail)
        self.generation += 1
        logger.info(
            "series replaced (generation %d): cumulative=%d detail=%d",
            self.generation,
            len(self.cumulative),
            len(self.detail),
        )

    def series_for(self, view: ActiveView) -> Series:
        return self.cumulative if view is ActiveView.CUMULATIVE else self.detail

    def length_for(self, view: ActiveView) -> int:
        """Reveal steps for ``view``: year lines for a wide cumulative series, points otherwise."""
        return reveal_length(self.series_for(view))

    def lengths(self) -> Optional[dict[ActiveView, int]]:
        """Series length per view for RevealController.start, or None when nothing is loaded."""
        if not self.has_series:
            return None
        return {view: self.length_for(view) for view in ActiveView}

    def toggle_language(self) -> str:
        self.language = "en" if self.language == "de" else "de"
        return self.language
