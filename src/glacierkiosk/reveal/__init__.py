"""Reveal state machine: phases, timing and the controller that drives them."""

from glacierkiosk.reveal.controller import OnRevealChange, RevealController
from glacierkiosk.reveal.scheduler import AsyncioScheduler, CancelHandle, Scheduler
from glacierkiosk.reveal.state import ActiveView, RevealPhase, RevealState
from glacierkiosk.reveal.timing import RevealTiming

__all__ = [
    "ActiveView",
    "AsyncioScheduler",
    "CancelHandle",
    "OnRevealChange",
    "RevealController",
    "RevealPhase",
    "RevealState",
    "RevealTiming",
    "Scheduler",
]
