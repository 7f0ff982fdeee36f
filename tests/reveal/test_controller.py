"""Tests for RevealController driven by a manual scheduler."""

from __future__ import annotations

import asyncio

import pytest

from glacierkiosk.reveal.controller import RevealController
from glacierkiosk.reveal.scheduler import AsyncioScheduler
from glacierkiosk.reveal.state import ActiveView, RevealPhase, RevealState
from glacierkiosk.reveal.timing import RevealTiming

# whole seconds keep the manual clock exact
TIMING = RevealTiming(tick_ms=1000, hold_empty_ms=2000, hold_complete_ms=3000, transition_ms=4000)

CUM = ActiveView.CUMULATIVE
DET = ActiveView.DETAIL


def _controller(scheduler, **kwargs):
    seen: list[RevealState] = []
    c = RevealController(scheduler=scheduler, timing=TIMING, on_change=seen.append, **kwargs)
    return c, seen


def _summary(states):
    return [(s.active_view, s.phase, s.revealed_count, s.total) for s in states]


def test_full_cycle_then_flips_view(scheduler) -> None:
    """EMPTY -> BUILDING (one step per tick) -> COMPLETE -> TRANSITIONING -> other view."""
    c, seen = _controller(scheduler)
    assert c.start({CUM: 3, DET: 2}) is True

    scheduler.advance(2)  # hold empty
    scheduler.advance(3)  # three ticks
    scheduler.advance(3)  # hold complete
    scheduler.advance(4)  # transition

    assert _summary(seen) == [
        (CUM, RevealPhase.EMPTY, 0, 0),
        (CUM, RevealPhase.BUILDING, 0, 3),
        (CUM, RevealPhase.BUILDING, 1, 3),
        (CUM, RevealPhase.BUILDING, 2, 3),
        (CUM, RevealPhase.BUILDING, 3, 3),
        (CUM, RevealPhase.COMPLETE, 3, 3),
        (CUM, RevealPhase.TRANSITIONING, 3, 3),
        (DET, RevealPhase.EMPTY, 0, 0),
    ]


def test_phases_are_timed(scheduler) -> None:
    """Nothing happens before a hold elapses."""
    c, _seen = _controller(scheduler)
    c.start({CUM: 1, DET: 1})
    scheduler.advance(1.5)
    assert c.state.phase is RevealPhase.EMPTY
    scheduler.advance(0.5)
    assert c.state.phase is RevealPhase.BUILDING
    assert c.state.revealed_count == 0


def test_views_alternate_forever(scheduler) -> None:
    c, seen = _controller(scheduler)
    c.start({CUM: 2, DET: 2})
    for _ in range(200):
        scheduler.advance(1)
    empties = [s.active_view for s in seen if s.phase is RevealPhase.EMPTY]
    assert len(empties) >= 4
    for a, b in zip(empties, empties[1:]):
        assert a is not b


def test_revealed_count_monotonic_and_bounded(scheduler) -> None:
    c, seen = _controller(scheduler)
    c.start({CUM: 5, DET: 4})
    for _ in range(60):
        scheduler.advance(1)
        assert len(scheduler.pending) <= 1

    last_count = None
    for s in seen:
        assert 0 <= s.revealed_count <= s.total or s.total == 0
        if s.phase is RevealPhase.EMPTY:
            last_count = 0
            continue
        assert last_count is not None
        assert s.revealed_count >= last_count
        last_count = s.revealed_count
        if s.phase in (RevealPhase.COMPLETE, RevealPhase.TRANSITIONING):
            assert s.revealed_count == s.total


def test_empty_series_goes_straight_to_complete(scheduler) -> None:
    """N == 0: BUILDING is entered and left immediately."""
    c, seen = _controller(scheduler)
    c.start({CUM: 0, DET: 2})
    scheduler.advance(2)
    assert _summary(seen)[1:] == [
        (CUM, RevealPhase.BUILDING, 0, 0),
        (CUM, RevealPhase.COMPLETE, 0, 0),
    ]
    assert c.state.progress == 1.0
    scheduler.advance(3)
    assert c.state.phase is RevealPhase.TRANSITIONING
    scheduler.advance(4)
    assert c.state.active_view is DET


def test_missing_view_counts_as_empty(scheduler) -> None:
    c, _seen = _controller(scheduler, first_view=DET)
    c.start({CUM: 3})
    scheduler.advance(2)
    assert c.state.active_view is DET
    assert c.state.phase is RevealPhase.COMPLETE
    assert c.state.total == 0


@pytest.mark.parametrize("lengths", [None, {}])
def test_start_refused_without_series(scheduler, lengths) -> None:
    c, seen = _controller(scheduler)
    assert c.start(lengths) is False
    assert c.running is False
    assert seen == []
    assert scheduler.pending == []
    assert c.state == RevealState.initial(CUM)


def test_restart_cancels_cycle_in_flight(scheduler) -> None:
    c, _seen = _controller(scheduler)
    c.start({CUM: 5, DET: 5})
    scheduler.advance(3)
    assert c.state.phase is RevealPhase.BUILDING
    assert c.state.revealed_count == 1

    c.start({CUM: 2, DET: 2})
    assert c.state == RevealState.initial(CUM)
    assert len(scheduler.pending) == 1

    scheduler.advance(2)
    assert c.state.total == 2
    assert c.state.revealed_count == 0


def test_restart_keeps_active_view(scheduler) -> None:
    c, _seen = _controller(scheduler)
    c.start({CUM: 1, DET: 1})
    scheduler.advance(2 + 1 + 3 + 4)
    assert c.state.active_view is DET
    c.start({CUM: 1, DET: 1})
    assert c.state.active_view is DET
    assert c.state.phase is RevealPhase.EMPTY


def test_stop_then_stale_timer_is_noop(scheduler) -> None:
    c, seen = _controller(scheduler)
    c.start({CUM: 3, DET: 3})
    scheduler.advance(2)
    before = c.state
    n_seen = len(seen)

    c.stop()
    assert c.running is False
    scheduler.fire_all_including_cancelled()

    assert c.state == before
    assert len(seen) == n_seen


def test_stale_timer_after_restart_is_noop(scheduler) -> None:
    """A timer from a previous run that fires late does not touch the new run."""
    c, _seen = _controller(scheduler)
    c.start({CUM: 3, DET: 3})
    stale = scheduler.pending[0]
    c.start({CUM: 3, DET: 3})
    generation = c.generation

    stale.callback()
    assert c.state.phase is RevealPhase.EMPTY
    assert c.generation == generation


def test_switch_view_restarts_other_view(scheduler) -> None:
    c, seen = _controller(scheduler)
    c.start({CUM: 4, DET: 4})
    scheduler.advance(3)
    assert c.switch_view() is True
    assert c.state == RevealState.initial(DET)
    assert len(scheduler.pending) == 1

    scheduler.advance(2)
    assert c.state.active_view is DET
    assert c.state.phase is RevealPhase.BUILDING
    assert seen[-1].total == 4


def test_switch_view_explicit_target(scheduler) -> None:
    c, _seen = _controller(scheduler)
    c.start({CUM: 4, DET: 4})
    c.switch_view(CUM)
    assert c.state.active_view is CUM
    assert c.state.phase is RevealPhase.EMPTY


def test_switch_view_ignored_when_not_running(scheduler) -> None:
    c, seen = _controller(scheduler)
    assert c.switch_view() is False
    assert seen == []


def test_on_change_exception_does_not_stop_cycle(scheduler) -> None:
    calls: list[RevealPhase] = []

    def on_change(state: RevealState) -> None:
        calls.append(state.phase)
        raise RuntimeError("render failed")

    c = RevealController(scheduler=scheduler, timing=TIMING, on_change=on_change)
    c.start({CUM: 1, DET: 1})
    scheduler.advance(2 + 1 + 3 + 4)
    assert c.state.active_view is DET
    assert RevealPhase.TRANSITIONING in calls


def test_on_change_may_restart(scheduler) -> None:
    """A callback that calls start() wins over the transition that invoked it."""
    holder: dict[str, RevealController] = {}
    restarted = []

    def on_change(state: RevealState) -> None:
        if state.phase is RevealPhase.COMPLETE and not restarted:
            restarted.append(True)
            holder["c"].start({CUM: 2, DET: 2}, view=DET)

    c = RevealController(scheduler=scheduler, timing=TIMING, on_change=on_change)
    holder["c"] = c
    c.start({CUM: 1, DET: 1})
    scheduler.advance(3)
    assert c.state == RevealState.initial(DET)
    assert len(scheduler.pending) == 1


@pytest.mark.asyncio
async def test_asyncio_scheduler_runs_and_cancels() -> None:
    sched = AsyncioScheduler()
    fired: list[str] = []
    sched.call_later(0, lambda: fired.append("a"))
    handle = sched.call_later(0, lambda: fired.append("b"))
    handle.cancel()
    await asyncio.sleep(0.01)
    assert fired == ["a"]
