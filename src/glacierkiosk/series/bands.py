"""Statistical band around a period average."""

from __future__ import annotations

DEFAULT_STDEV_MULTIPLIER = 2.0


def compute_band(avg: float, stdev: float, k: float = DEFAULT_STDEV_MULTIPLIER) -> tuple[float, float]:
    """Return ``(avg - k*stdev, avg + k*stdev)``.

    Total over floats: NaN inputs give NaN bounds. Callers that need finite
    bounds must reject NaN before calling.
    """
    spread = k * stdev
    return avg - spread, avg + spread
