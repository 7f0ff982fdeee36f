"""Kiosk session: wires context, feeds, controller and view together.

One KioskSession exists per page. It fetches both feeds, swaps the parsed
series into its KioskContext and restarts the RevealController on every
successful refresh. Refreshes are chained on an asyncio task: the next one
runs after ``refresh_interval_s`` when both feeds were retrieved, or after
``retry_delay_s`` when either feed failed.
"""

from __future__ import annotations

import asyncio
from typing import Optional, Protocol

from glacierkiosk.context import KioskContext
from glacierkiosk.feeds.fetch import FeedFetcher, load_into
from glacierkiosk.kiosk_app.kiosk_config import KioskConfigData
from glacierkiosk.reveal.controller import RevealController
from glacierkiosk.reveal.scheduler import AsyncioScheduler, Scheduler
from glacierkiosk.reveal.state import RevealState
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)


class KioskViewLike(Protocol):
    def render(self, state: RevealState) -> None: ...

    def refresh_labels(self) -> None: ...

    def show_status(self, key: str) -> None: ...


class KioskSession:
    """Owns the kiosk lifecycle for one page: startup, refresh, language, shutdown."""

    def __init__(
        self,
        config: KioskConfigData,
        *,
        context: Optional[KioskContext] = None,
        view: Optional[KioskViewLike] = None,
        fetcher: Optional[FeedFetcher] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config
        self.context = context if context is not None else KioskContext(language=config.language)
        self.view = view
        self.fetcher = fetcher or FeedFetcher(timeout=config.http_timeout_s)
        self.controller = RevealController(
            scheduler=scheduler or AsyncioScheduler(),
            timing=config.get_timing(),
            first_view=config.get_first_view(),
            on_change=self._on_state,
        )
        self._refresh_task: Optional[asyncio.Task[None]] = None
        self.complete = False
        self._closed = False

    def _on_state(self, state: RevealState) -> None:
        if self.view is not None:
            self.view.render(state)

    async def refresh(self) -> bool:
        """Fetch both feeds once. Returns True if different series were loaded.

        ``complete`` is set when both feeds were retrieved; otherwise the
        refresh chain retries after ``retry_delay_s``.
        """
        bundle = await self.fetcher.fetch_all(self.config.cumulative_url, self.config.detail_url)
        self.complete = not bundle.failures
        if self._closed:
            return False
        had_series = self.context.has_series
        before = (self.context.cumulative, self.context.detail)
        changed = load_into(
            self.context,
            bundle,
            year_range=self.config.get_year_range(),
            layout=self.config.cumulative_layout,  # type: ignore[arg-type]
        )
        # identical data from a retry must not restart the cycle in flight
        changed = changed and (not had_series or (self.context.cumulative, self.context.detail) != before)
        if changed:
            self.controller.start(self.context.lengths())
            if self.view is not None:
                self.view.refresh_labels()
        elif not self.context.has_series and self.view is not None:
            self.view.show_status("error")
        return changed

    def start(self) -> None:
        """Begin the refresh chain with an immediate fetch."""
        self._schedule_refresh(0.0)

    def _cancel_refresh_task(self) -> None:
        t = self._refresh_task
        self._refresh_task = None
        if t is not None and not t.done():
            t.cancel()

    def _schedule_refresh(self, delay_s: float) -> None:
        self._cancel_refresh_task()

        async def _refresh_later() -> None:
            try:
                await asyncio.sleep(delay_s)
                try:
                    await self.refresh()
                except Exception:
                    logger.exception("refresh failed")
                    self.complete = False
                if self._closed:
                    return
                next_delay = self.config.refresh_interval_s if self.complete else self.config.retry_delay_s
                logger.info("next refresh in %.0fs", next_delay)
                self._refresh_task = None
                self._schedule_refresh(next_delay)
            except asyncio.CancelledError:
                return

        self._refresh_task = asyncio.create_task(_refresh_later())

    def toggle_language(self) -> str:
        language = self.context.toggle_language()
        if self.view is not None:
            self.view.refresh_labels()
        return language

    def shutdown(self) -> None:
        """Stop the controller and the refresh chain."""
        self._closed = True
        self._cancel_refresh_task()
        self.controller.stop()
        logger.info("session closed")
