"""Timing configuration for the reveal cycle."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any


@dataclass(frozen=True)
class RevealTiming:
    """Durations (milliseconds) of the reveal cycle phases.

    Args:
        tick_ms: Interval between reveal steps while BUILDING.
        hold_empty_ms: Hold on the empty chart before building starts.
        hold_complete_ms: Hold on the fully revealed chart.
        transition_ms: Duration of the transition before the view flips.
    """
    tick_ms: int = 200
    hold_empty_ms: int = 1500
    hold_complete_ms: int = 1500
    transition_ms: int = 800

    def __post_init__(self) -> None:
        for f in fields(self):
            v = getattr(self, f.name)
            if v < 0:
                raise ValueError(f"{f.name} must be >= 0, got {v}")

    def seconds(self, name: str) -> float:
        """Return the named duration in seconds (e.g. ``seconds("tick_ms")``)."""
        return getattr(self, name) / 1000.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick_ms": self.tick_ms,
            "hold_empty_ms": self.hold_empty_ms,
            "hold_complete_ms": self.hold_complete_ms,
            "transition_ms": self.transition_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "RevealTiming":
        """Tolerant loader: missing keys fall back to defaults, unknown keys are ignored."""
        default = cls()
        return cls(
            tick_ms=int(data.get("tick_ms", default.tick_ms)),
            hold_empty_ms=int(data.get("hold_empty_ms", default.hold_empty_ms)),
            hold_complete_ms=int(data.get("hold_complete_ms", default.hold_complete_ms)),
            transition_ms=int(data.get("transition_ms", default.transition_ms)),
        )
