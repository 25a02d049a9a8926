from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Dict, List, Optional

import pytest

from price_compare.adapters.base import ComparisonResult, RawListing


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakePage:
    """Stands in for a Playwright page: serves canned HTML per URL."""

    def __init__(self, responder: Callable[[str], str], **options) -> None:
        self.responder = responder
        self.options = options
        self.url = "about:blank"
        self.goto_calls: List[Dict] = []
        self.closed = False
        self._html = ""

    async def goto(self, url: str, **kwargs):
        self.goto_calls.append({"url": url, **kwargs})
        html = self.responder(url)
        if isinstance(html, Exception):
            raise html
        self.url = url
        self._html = html
        return None

    async def content(self) -> str:
        return self._html

    async def close(self) -> None:
        self.closed = True


class FakeBrowser:
    def __init__(self, responder: Callable[[str], str] = lambda url: "<html></html>") -> None:
        self.responder = responder
        self.pages: List[FakePage] = []
        self.closed = False
        self.fail_new_page: Optional[Exception] = None

    async def new_page(self, **options) -> FakePage:
        if self.fail_new_page is not None:
            raise self.fail_new_page
        page = FakePage(self.responder, **options)
        self.pages.append(page)
        return page


class StubAdapter:
    """Adapter double that returns a canned listing, raises, or stalls."""

    def __init__(self, name: str, listing=None, *, error: Exception | None = None, delay: float = 0.0, log=None) -> None:
        self.name = name
        self.listing = listing
        self.error = error
        self.delay = delay
        self.log = log if log is not None else []
        self.calls = 0

    async def search(self, page, query):
        self.calls += 1
        self.log.append(("start", self.name))
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.error is not None:
                raise self.error
            return self.listing
        finally:
            self.log.append(("end", self.name))


class FakeEngine:
    """Engine double for API and CLI tests."""

    def __init__(self, results: List[ComparisonResult] | None = None, error: Exception | None = None) -> None:
        self.results = results or []
        self.error = error
        self.queries: List[str] = []

    async def compare(self, query: str) -> List[ComparisonResult]:
        self.queries.append(query)
        if self.error is not None:
            raise self.error
        return list(self.results)


def make_listing(retailer: str, price: str | None, shipping: int = 0, *, available: bool | None = None, delivery_days=None) -> RawListing:
    return RawListing(
        retailer=retailer,
        link=f"https://{retailer.lower().replace(' ', '')}.example/item",
        title=f"{retailer} item",
        price_text=price,
        shipping=shipping,
        delivery_days=delivery_days,
        available=bool(price) if available is None else available,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_browser_factory():
    """Returns (factory, state) where state records launched browsers."""
    state = {"browsers": [], "exits": 0}

    def build(responder: Callable[[str], str] = lambda url: "<html></html>") -> Callable:
        @asynccontextmanager
        async def factory(config):
            browser = FakeBrowser(responder)
            state["browsers"].append(browser)
            try:
                yield browser
            finally:
                browser.closed = True
                state["exits"] += 1

        return factory

    return build, state


@pytest.fixture
def listing_factory():
    return make_listing


@pytest.fixture
def stub_adapter():
    return StubAdapter


@pytest.fixture
def fake_page():
    return FakePage


@pytest.fixture
def fake_engine():
    return FakeEngine


@pytest.fixture
def fake_browser_cls():
    return FakeBrowser
