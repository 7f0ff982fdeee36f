"""Tests for FeedFetcher (httpx MockTransport) and load_into."""

from __future__ import annotations

import httpx
import pytest

from glacierkiosk.context import KioskContext
from glacierkiosk.feeds.exceptions import FeedStatusError
from glacierkiosk.feeds.fetch import (
    DEFAULT_CUMULATIVE_URL,
    DEFAULT_DETAIL_URL,
    FeedBundle,
    FeedFetcher,
    FetchFailure,
    FetchSuccess,
    load_into,
)

CUM_URL = "https://feeds.test/cum.txt"
DET_URL = "https://feeds.test/detail.txt"

CUM_TEXT = "2012 3 10 -1.20\n2012 3 25 -1.35\n2012 4 2 -1.40\n"
DET_TEXT = "2025 1 5 5 -0.10 1 -0.05 0.20\n2025 1 6 6 -0.12 1 -0.06 0.20\n"


def _fetcher(routes: dict[str, httpx.Response]) -> FeedFetcher:
    def handler(request: httpx.Request) -> httpx.Response:
        response = routes.get(str(request.url))
        if response is None:
            return httpx.Response(404)
        return response

    return FeedFetcher(timeout=5.0, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_all_success() -> None:
    fetcher = _fetcher({CUM_URL: httpx.Response(200, text=CUM_TEXT), DET_URL: httpx.Response(200, text=DET_TEXT)})
    bundle = await fetcher.fetch_all(CUM_URL, DET_URL)
    assert bundle.ok
    assert bundle.failures == []
    assert isinstance(bundle.cumulative, FetchSuccess)
    assert bundle.cumulative.text == CUM_TEXT
    assert bundle.detail.ok


@pytest.mark.asyncio
async def test_fetch_status_errors_become_failures() -> None:
    fetcher = _fetcher({CUM_URL: httpx.Response(503), DET_URL: httpx.Response(200, text=DET_TEXT)})
    bundle = await fetcher.fetch_all(CUM_URL, DET_URL)
    assert bundle.ok
    assert len(bundle.failures) == 1
    failure = bundle.failures[0]
    assert failure.url == CUM_URL
    assert "unavailable" in failure.reason


@pytest.mark.asyncio
async def test_fetch_not_found() -> None:
    result = await _fetcher({}).fetch_text(CUM_URL)
    assert isinstance(result, FetchFailure)
    assert result.reason == "Feed not found"


@pytest.mark.asyncio
async def test_fetch_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = FeedFetcher(transport=httpx.MockTransport(handler))
    bundle = await fetcher.fetch_all(CUM_URL, DET_URL)
    assert not bundle.ok
    assert all("Network error" in f.reason for f in bundle.failures)


@pytest.mark.asyncio
async def test_fetch_timeout() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("too slow", request=request)

    result = await FeedFetcher(timeout=2.0, transport=httpx.MockTransport(handler)).fetch_text(DET_URL)
    assert isinstance(result, FetchFailure)
    assert "timeout" in result.reason.lower()


@pytest.mark.asyncio
async def test_fetch_sends_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="")

    fetcher = FeedFetcher(transport=httpx.MockTransport(handler), headers={"X-Kiosk": "lobby"})
    await fetcher.fetch_text(CUM_URL)
    assert seen[0].headers["X-Kiosk"] == "lobby"
    assert seen[0].headers["Accept"] == "text/plain"


def test_status_error_carries_code() -> None:
    e = FeedStatusError("HTTP error 418", 418)
    assert e.status_code == 418


def test_default_urls() -> None:
    assert DEFAULT_CUMULATIVE_URL.endswith("mb-cum-cycle_2010-2024.txt")
    assert DEFAULT_DETAIL_URL.endswith("mb-course-avg_2025.txt")


# --- load_into ---


def test_load_into_parses_both() -> None:
    ctx = KioskContext()
    bundle = FeedBundle(FetchSuccess(CUM_URL, CUM_TEXT), FetchSuccess(DET_URL, DET_TEXT))
    assert load_into(ctx, bundle) is True
    assert [p.period_key for p in ctx.cumulative] == ["2012-03", "2012-04"]
    assert len(ctx.detail) == 2
    assert ctx.generation == 1


def test_load_into_keeps_previous_side_on_failure() -> None:
    ctx = KioskContext()
    load_into(ctx, FeedBundle(FetchSuccess(CUM_URL, CUM_TEXT), FetchSuccess(DET_URL, DET_TEXT)))
    previous_detail = ctx.detail

    changed = load_into(ctx, FeedBundle(FetchSuccess(CUM_URL, "2013 1 31 -2.0\n"), FetchFailure(DET_URL, "down")))
    assert changed is True
    assert [p.period_key for p in ctx.cumulative] == ["2013-01"]
    assert ctx.detail == previous_detail


def test_load_into_nothing_retrieved() -> None:
    ctx = KioskContext()
    bundle = FeedBundle(FetchFailure(CUM_URL, "down"), FetchFailure(DET_URL, "down"))
    assert load_into(ctx, bundle) is False
    assert not ctx.has_series
    assert ctx.generation == 0


def test_load_into_respects_year_range() -> None:
    ctx = KioskContext()
    bundle = FeedBundle(FetchSuccess(CUM_URL, CUM_TEXT), FetchFailure(DET_URL, "down"))
    load_into(ctx, bundle, year_range=(2013, 2024))
    assert ctx.cumulative == ()
    assert ctx.has_series
