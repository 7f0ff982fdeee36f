"""
Retrieval of the two mass-balance text feeds.

FeedFetcher never raises on transport problems: each feed yields either
``FetchSuccess(text)`` or ``FetchFailure(reason)``. ``load_into`` parses the
successful bodies and swaps them into a KioskContext.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import httpx

from glacierkiosk.context import KioskContext
from glacierkiosk.feeds.exceptions import FeedConnectionError, FeedError, FeedStatusError
from glacierkiosk.series.parser import DEFAULT_YEAR_RANGE, CumulativeLayout, parse_cumulative, parse_detail
from glacierkiosk.utils.logging import get_logger

logger = get_logger(__name__)

BASE_URL = "https://doi.glamos.ch/figures/massbalance_current"
DEFAULT_CUMULATIVE_URL = f"{BASE_URL}/mb-cum-cycle_2010-2024.txt"
DEFAULT_DETAIL_URL = f"{BASE_URL}/mb-course-avg_2025.txt"


@dataclass(frozen=True)
class FetchSuccess:
    url: str
    text: str

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class FetchFailure:
    url: str
    reason: str

    @property
    def ok(self) -> bool:
        return False


FetchResult = Union[FetchSuccess, FetchFailure]


@dataclass(frozen=True)
class FeedBundle:
    """Results for both feeds of one refresh."""
    cumulative: FetchResult
    detail: FetchResult

    @property
    def ok(self) -> bool:
        """True if at least one feed was retrieved."""
        return self.cumulative.ok or self.detail.ok

    @property
    def failures(self) -> list[FetchFailure]:
        return [r for r in (self.cumulative, self.detail) if isinstance(r, FetchFailure)]


class FeedFetcher:
    """
    Async client for the plain-text mass-balance feeds.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        self.timeout = timeout
        self._transport = transport
        self._headers = {"User-Agent": "glacierkiosk/0.1.0", "Accept": "text/plain"}
        if headers:
            self._headers.update(headers)

    def _make_client(self) -> httpx.AsyncClient:
        kwargs: Dict[str, Any] = {
            "timeout": self.timeout,
            "headers": self._headers,
            "follow_redirects": True,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    async def _get_text(self, client: httpx.AsyncClient, url: str) -> str:
        """GET ``url`` and return the body, mapping httpx errors to FeedError."""
        try:
            response = await client.get(url)
            response.raise_for_status()
            return response.text

        except httpx.TimeoutException as e:
            raise FeedConnectionError(f"Request timeout after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                raise FeedStatusError("Feed not found", status) from e
            elif status >= 500:
                raise FeedStatusError("Feed server temporarily unavailable", status) from e
            else:
                raise FeedStatusError(f"HTTP error {status}", status) from e
        except httpx.RequestError as e:
            raise FeedConnectionError(f"Network error: {e}") from e

    async def _fetch_with(self, client: httpx.AsyncClient, url: str) -> FetchResult:
        try:
            text = await self._get_text(client, url)
        except FeedError as e:
            logger.warning("fetch failed for %s: %s", url, e)
            return FetchFailure(url=url, reason=str(e))
        logger.debug("fetched %s (%d chars)", url, len(text))
        return FetchSuccess(url=url, text=text)

    async def fetch_text(self, url: str) -> FetchResult:
        """Fetch a single feed."""
        async with self._make_client() as client:
            return await self._fetch_with(client, url)

    async def fetch_all(
        self,
        cumulative_url: str = DEFAULT_CUMULATIVE_URL,
        detail_url: str = DEFAULT_DETAIL_URL,
    ) -> FeedBundle:
        """Fetch both feeds with one client, sequentially."""
        async with self._make_client() as client:
            cumulative = await self._fetch_with(client, cumulative_url)
            detail = await self._fetch_with(client, detail_url)
        return FeedBundle(cumulative=cumulative, detail=detail)


def load_into(
    context: KioskContext,
    bundle: FeedBundle,
    *,
    year_range: tuple[int, int] = DEFAULT_YEAR_RANGE,
    layout: CumulativeLayout = "auto",
) -> bool:
    """Parse the successful feeds of ``bundle`` and replace them in ``context``.

    A failed side keeps its previous series.

    Returns:
        True if the context changed.
    """
    cumulative = None
    detail = None
    if isinstance(bundle.cumulative, FetchSuccess):
        cumulative = parse_cumulative(bundle.cumulative.text, year_range, layout=layout)
    if isinstance(bundle.detail, FetchSuccess):
        detail = parse_detail(bundle.detail.text)
    if cumulative is None and detail is None:
        logger.warning("no feed retrieved, keeping previous series")
        return False
    context.replace_series(cumulative=cumulative, detail=detail)
    return True
