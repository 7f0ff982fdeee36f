"""Reveal state for the kiosk animation.

This module defines the RevealPhase and ActiveView enums and the immutable
RevealState snapshot emitted by RevealController on every transition.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class RevealPhase(Enum):
    """Phases of one reveal cycle."""
    EMPTY = "empty"
    BUILDING = "building"
    COMPLETE = "complete"
    TRANSITIONING = "transitioning"


class ActiveView(Enum):
    """The two alternating visualizations."""
    CUMULATIVE = "cumulative"
    DETAIL = "detail"

    def flipped(self) -> "ActiveView":
        return ActiveView.DETAIL if self is ActiveView.CUMULATIVE else ActiveView.CUMULATIVE


@dataclass(frozen=True)
class RevealState:
    """Snapshot of the controller state.

    ``total`` is the series length N of the active view, fixed when the cycle
    enters BUILDING (0 while EMPTY).
    """
    phase: RevealPhase = RevealPhase.EMPTY
    revealed_count: int = 0
    active_view: ActiveView = ActiveView.CUMULATIVE
    total: int = 0

    @classmethod
    def initial(cls, view: ActiveView = ActiveView.CUMULATIVE) -> "RevealState":
        return cls(phase=RevealPhase.EMPTY, revealed_count=0, active_view=view, total=0)

    def evolve(self, **changes: Any) -> "RevealState":
        """Return a copy with ``changes`` applied."""
        return replace(self, **changes)

    @property
    def progress(self) -> float:
        """Fraction revealed in [0, 1]; 1.0 for a degenerate empty series once complete."""
        if self.total == 0:
            return 1.0 if self.phase in (RevealPhase.COMPLETE, RevealPhase.TRANSITIONING) else 0.0
        return self.revealed_count / self.total

    def to_dict(self) -> dict[str, Any]:
        return {
            "phase": self.phase.value,
            "revealed_count": self.revealed_count,
            "active_view": self.active_view.value,
            "total": self.total,
        }
