# tests/reveal/conftest.py
"""Fixtures for reveal controller tests: a manual clock scheduler."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest


def pytest_configure() -> None:
    # Ensure glacierkiosk/src is importable when running tests from the repo root.
    repo_root = Path(__file__).resolve().parents[2]
    src_dir = repo_root / "src"
    if src_dir.exists() and str(src_dir) not in sys.path:
        sys.path.insert(0, str(src_dir))


class FakeHandle:
    def __init__(self, due: float, seq: int, callback: Callable[[], None]) -> None:
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Scheduler driven by advance(); callbacks fire in due order."""

    def __init__(self) -> None:
        self.now = 0.0
        self.handles: list[FakeHandle] = []
        self._seq = 0

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> FakeHandle:
        self._seq += 1
        h = FakeHandle(self.now + max(0.0, delay_s), self._seq, callback)
        self.handles.append(h)
        return h

    @property
    def pending(self) -> list[FakeHandle]:
        return [h for h in self.handles if not h.cancelled]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = [h for h in self.pending if h.due <= target + 1e-9]
            if not due:
                break
            h = min(due, key=lambda x: (x.due, x.seq))
            self.handles.remove(h)
            self.now = h.due
            h.callback()
        self.now = target

    def fire_all_including_cancelled(self) -> None:
        """Run every stored callback, as a late timer would after a lost cancel."""
        handles, self.handles = self.handles, []
        for h in handles:
            h.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()
