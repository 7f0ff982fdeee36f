"""Scheduling primitive used by RevealController.

The controller only needs "run this callback after D seconds and give me a
handle I can cancel". ``asyncio.TimerHandle`` already has that shape, so the
production scheduler is a thin wrapper around ``loop.call_later``.
"""

from __future__ import annotations

import asyncio
from typing import Callable, Optional, Protocol


class CancelHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay_s: float, callback: Callable[[], None]) -> CancelHandle: ...


class AsyncioScheduler:
    """Schedules callbacks on an asyncio event loop (the NiceGUI loop in the kiosk).

    The loop is resolved lazily on first use, so the scheduler can be built
    before the loop is running.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    def call_later(self, delay_s: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop.call_later(max(0.0, delay_s), callback)
