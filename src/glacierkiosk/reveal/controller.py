"""Reveal controller: the timed state machine behind the kiosk animation.

One cycle per view::

    EMPTY --(hold_empty_ms)--> BUILDING
    BUILDING --(tick_ms, revealed_count += 1)--> BUILDING   while revealed_count < N
    BUILDING --(revealed_count == N)--> COMPLETE
    COMPLETE --(hold_complete_ms)--> TRANSITIONING
    TRANSITIONING --(transition_ms)--> EMPTY of the other view

The controller holds at most one pending scheduler handle. Every run carries
a generation number; ``start``, ``switch_view`` and ``stop`` cancel the handle
and bump the generation, so a callback from an older run that still fires is
ignored.

All state changes happen in scheduler callbacks (or in the public methods)
on the event loop thread. RevealController is the only writer of its state.
"""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from glacierkiosk.reveal.scheduler import CancelHandle, Scheduler
from glacierkiosk.reveal.state import ActiveView, RevealPhase, RevealState
from glacierkiosk.reveal.timing import RevealTiming
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)

OnRevealChange = Callable[[RevealState], None]


class RevealController:
    """Drives RevealState through the reveal cycle and alternates views forever.

    **Public API:**

    - **start(lengths, view=None)** : (Re)start from EMPTY with new series lengths.
    - **switch_view(view=None)** : Force a view switch, restarting its cycle.
    - **stop()** : Cancel pending work; the state is kept as-is.
    - **state** : Current RevealState snapshot.

    ``on_change`` is called with the new snapshot after every transition.
    Exceptions raised by it are logged and do not stop the cycle.
    """

    def __init__(
        self,
        *,
        scheduler: Scheduler,
        timing: Optional[RevealTiming] = None,
        first_view: ActiveView = ActiveView.CUMULATIVE,
        on_change: Optional[OnRevealChange] = None,
    ) -> None:
        self._scheduler = scheduler
        self._timing = timing or RevealTiming()
        self._first_view = first_view
        self._on_change = on_change

        self._state = RevealState.initial(first_view)
        self._lengths: dict[ActiveView, int] = {}
        self._handle: Optional[CancelHandle] = None
        self._generation = 0
        self._running = False

    @property
    def state(self) -> RevealState:
        return self._state

    @property
    def running(self) -> bool:
        return self._running

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def timing(self) -> RevealTiming:
        return self._timing

    def start(
        self,
        lengths: Optional[Mapping[ActiveView, int]],
        *,
        view: Optional[ActiveView] = None,
    ) -> bool:
        """Start a new run, cancelling any cycle in flight.

        Args:
            lengths: Series length per view. A view missing from the mapping
                counts as an empty series. None or an empty mapping means no
                series is available and the controller refuses to start.
            view: View to start with. Defaults to the active view when already
                running, else the configured first view.

        Returns:
            True if a run was started.
        """
        if not lengths:
            logger.warning("start refused: no series available")
            return False

        self._lengths = {v: max(0, int(n)) for v, n in lengths.items()}
        if view is None:
            view = self._state.active_view if self._running else self._first_view

        if self._cancel_pending():
            logger.info("start: cancelled pending cycle of the previous run")
        self._running = True
        logger.info(
            "start: view=%s lengths=%s",
            view.value,
            {v.value: n for v, n in self._lengths.items()},
        )
        self._begin_cycle(view)
        return True

    def switch_view(self, view: Optional[ActiveView] = None) -> bool:
        """Force the given view (default: the other one) and restart its cycle from EMPTY."""
        if not self._running:
            logger.debug("switch_view ignored: controller not running")
            return False
        target = view if view is not None else self._state.active_view.flipped()
        if self._cancel_pending():
            logger.info("switch_view: cancelled pending transition")
        self._begin_cycle(target)
        return True

    def stop(self) -> None:
        """Cancel pending work. A stale callback that still fires is a no-op."""
        self._cancel_pending()
        if self._running:
            logger.info("stopped in phase %s", self._state.phase.value)
        self._running = False

    # ------------------------------------------------------------------
    # internals
    # ------------------------------------------------------------------

    def _cancel_pending(self) -> bool:
        """Invalidate the current run. Returns True if a handle was pending."""
        self._generation += 1
        handle, self._handle = self._handle, None
        if handle is None:
            return False
        handle.cancel()
        return True

    def _schedule(self, delay_s: float, step: Callable[[], None]) -> None:
        generation = self._generation

        def _fire() -> None:
            if generation != self._generation:
                logger.debug("stale timer ignored (generation %d, current %d)", generation, self._generation)
                return
            self._handle = None
            step()

        self._handle = self._scheduler.call_later(delay_s, _fire)

    def _emit(self, state: RevealState) -> bool:
        """Publish ``state``. Returns False if the callback started another run."""
        generation = self._generation
        self._state = state
        logger.debug("%s %s %d/%d", state.active_view.value, state.phase.value, state.revealed_count, state.total)
        if self._on_change is not None:
            try:
                self._on_change(state)
            except Exception:
                logger.exception("on_change callback failed")
        return generation == self._generation

    def _begin_cycle(self, view: ActiveView) -> None:
        if self._emit(RevealState.initial(view)):
            self._schedule(self._timing.seconds("hold_empty_ms"), self._enter_building)

    def _enter_building(self) -> None:
        total = self._lengths.get(self._state.active_view, 0)
        if not self._emit(self._state.evolve(phase=RevealPhase.BUILDING, revealed_count=0, total=total)):
            return
        if total == 0:
            self._enter_complete()
            return
        self._schedule(self._timing.seconds("tick_ms"), self._tick)

    def _tick(self) -> None:
        state = self._state
        count = min(state.revealed_count + 1, state.total)
        if not self._emit(state.evolve(revealed_count=count)):
            return
        if count >= state.total:
            self._enter_complete()
        else:
            self._schedule(self._timing.seconds("tick_ms"), self._tick)

    def _enter_complete(self) -> None:
        state = self._state
        if self._emit(state.evolve(phase=RevealPhase.COMPLETE, revealed_count=state.total)):
            self._schedule(self._timing.seconds("hold_complete_ms"), self._enter_transitioning)

    def _enter_transitioning(self) -> None:
        if self._emit(self._state.evolve(phase=RevealPhase.TRANSITIONING)):
            self._schedule(self._timing.seconds("transition_ms"), self._finish_transition)

    def _finish_transition(self) -> None:
        self._begin_cycle(self._state.active_view.flipped())
