"""NiceGUI view of the kiosk chart.

KioskView renders whatever RevealState it is handed: it projects the active
series, builds the Plotly dict and pushes it to a ``ui.plotly`` element. It
keeps no animation state; the RevealController drives it through ``render``.
"""

from __future__ import annotations

from typing import Callable, Optional, Union

from nicegui import ui

from glacierkiosk.context import KioskContext
from glacierkiosk.presentation.adapter import project_state
from glacierkiosk.presentation.figures import cumulative_figure, detail_figure, series_y_range
from glacierkiosk.presentation.theme import ThemeMode, resolve_theme
from glacierkiosk.reveal.state import ActiveView, RevealPhase, RevealState
from glacierkiosk.kiosk_app.translations import translate
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)

# chart container classes while the view is transitioning out
TRANSITION_CLASSES = "opacity-50 scale-90"


def _safe_call(func: Callable, *args, **kwargs) -> None:
    """Safely call a function, catching 'client deleted' RuntimeErrors only."""
    try:
        func(*args, **kwargs)
    except RuntimeError as e:
        if "deleted" not in str(e).lower():
            raise


class KioskView:
    """Title, chart and status line of the kiosk page."""

    def __init__(
        self,
        context: KioskContext,
        *,
        theme: Union[str, ThemeMode] = ThemeMode.DARK,
        year_range: tuple[int, int] = (2010, 2024),
    ) -> None:
        self._context = context
        self._theme = resolve_theme(theme)
        self._year_range = year_range
        self._state: Optional[RevealState] = None
        self._y_ranges: dict[tuple[int, ActiveView], Optional[tuple[float, float]]] = {}

        self._title: Optional[ui.label] = None
        self._chart_box: Optional[ui.element] = None
        self._plot: Optional[ui.plotly] = None
        self._status: Optional[ui.label] = None

    def build(self) -> None:
        """Create the view inside the current container."""
        self._title = ui.label("").classes("text-2xl text-white text-center w-full")
        with ui.element("div").classes("w-[90%] h-[70vh] transition-all duration-700") as box:
            self._chart_box = box
            self._plot = ui.plotly({"data": [], "layout": {}}).classes("w-full h-full")
        self._status = ui.label(translate(self._context.language, "loading")).classes("text-sm text-gray-300")

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------

    def render(self, state: RevealState) -> None:
        """RevealController on_change hook."""
        self._state = state
        _safe_call(self._render_impl, state)

    def refresh_labels(self) -> None:
        """Re-render text after a language switch or a new series."""
        if self._state is not None:
            self.render(self._state)
        else:
            _safe_call(self._update_status)

    def show_status(self, key: str) -> None:
        """Show a translated status message (e.g. "loading", "error")."""
        if self._status is not None:
            _safe_call(setattr, self._status, "text", translate(self._context.language, key))

    def _y_range(self, view: ActiveView) -> Optional[tuple[float, float]]:
        key = (self._context.generation, view)
        if key not in self._y_ranges:
            self._y_ranges = {k: v for k, v in self._y_ranges.items() if k[0] == key[0]}
            self._y_ranges[key] = series_y_range(self._context.series_for(view))
        return self._y_ranges[key]

    def make_figure(self, state: RevealState) -> dict:
        """Plotly dict for ``state`` (pure with respect to the context)."""
        lang = self._context.language
        records = project_state(self._context, state)
        y_range = self._y_range(state.active_view)
        if state.active_view is ActiveView.DETAIL:
            return detail_figure(
                records,
                x_title=translate(lang, "x_axis_detail"),
                y_title=translate(lang, "y_axis"),
                names={k: translate(lang, k) for k in ("current_value", "average", "stdev")},
                theme=self._theme,
                y_range=y_range,
            )
        return cumulative_figure(
            records,
            x_title=translate(lang, "x_axis_cumulative"),
            y_title=translate(lang, "y_axis"),
            theme=self._theme,
            y_range=y_range,
        )

    def title_for(self, view: ActiveView) -> str:
        lang = self._context.language
        if view is ActiveView.DETAIL:
            return translate(lang, "title_detail")
        lo, hi = self._year_range
        return f"{translate(lang, 'title')} ({lo}-{hi})"

    def _render_impl(self, state: RevealState) -> None:
        if self._title is not None:
            self._title.text = self.title_for(state.active_view)
        if self._chart_box is not None:
            if state.phase is RevealPhase.TRANSITIONING:
                self._chart_box.classes(add=TRANSITION_CLASSES)
            else:
                self._chart_box.classes(remove=TRANSITION_CLASSES)
        if self._plot is not None:
            self._plot.update_figure(self.make_figure(state))
            self._plot.update()
        self._update_status()

    def _update_status(self) -> None:
        if self._status is None:
            return
        last = self._context.last_update
        if last is not None:
            self._status.text = f"{translate(self._context.language, 'last_update')} {last}"
