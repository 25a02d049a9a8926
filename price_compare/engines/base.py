from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, AsyncContextManager, Callable, Iterable, List, Optional

from ..adapters.base import ComparisonResult, RawListing, RetailerAdapter
from ..adapters.registry import AdapterRegistry
from ..config import CompareConfig
from .browser_engine import launch_browser

logger = logging.getLogger(__name__)

BrowserFactory = Callable[[CompareConfig], AsyncContextManager[Any]]


def rank_listings(listings: Iterable[RawListing]) -> List[ComparisonResult]:
    """Cheapest total cost first; ties keep adapter order."""
    ordered = sorted(listings, key=lambda listing: listing.total_cost)
    return [listing.to_result() for listing in ordered]


class ComparisonEngine(ABC):
    """
    Abstract engine interface. Implementations decide how adapters are scheduled;
    the base class owns the browser, the per-adapter page and the ranking.
    """
    def __init__(
        self,
        config: CompareConfig,
        registry: AdapterRegistry | None = None,
        browser_factory: BrowserFactory | None = None,
    ) -> None:
        self.config = config
        if registry is None:
            registry = AdapterRegistry(navigation_timeout=config.navigation_timeout)
        self.registry = registry
        self.browser_factory = browser_factory or launch_browser

    async def compare(self, query: str) -> List[ComparisonResult]:
        async with self.browser_factory(self.config) as browser:
            listings = await self.collect(browser, query)
        results = rank_listings(listings)
        logger.info("Compared %r: %s of %s retailers returned an offer", query, len(results), len(self.registry))
        return results

    @abstractmethod
    async def collect(self, browser: Any, query: str) -> List[RawListing]:  # pragma: no cover - interface
        ...

    async def run_adapter(self, browser: Any, adapter: RetailerAdapter, query: str) -> Optional[RawListing]:
        """
        Run one adapter in its own page and return its listing if available.
        Adapter errors are logged and yield None; page creation errors propagate.
        """
        page = await browser.new_page(user_agent=self.config.user_agent, viewport=self.config.viewport)
        try:
            listing = await adapter.search(page, query)
        except Exception as exc:
            logger.warning("Adapter %s failed for %r: %r", adapter.name, query, exc)
            return None
        finally:
            await page.close()

        if listing is None or not listing.available:
            return None
        return listing
