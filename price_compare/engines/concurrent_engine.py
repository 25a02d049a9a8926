from __future__ import annotations

import asyncio
import logging
from typing import Any, List, Optional

from .base import ComparisonEngine
from ..adapters.base import RawListing, RetailerAdapter

logger = logging.getLogger(__name__)


class ConcurrentCompareEngine(ComparisonEngine):
    """
    Fans adapters out as tasks inside one browser.
    - Concurrency capped by a semaphore.
    - Each task has its own timeout and failure capture.
    - Results are joined in registry order before ranking.
    - An infrastructure failure in one task cancels and awaits the others.
    """
    async def collect(self, browser: Any, query: str) -> List[RawListing]:
        sem = asyncio.Semaphore(self.config.max_concurrency)

        async def bounded(adapter: RetailerAdapter) -> Optional[RawListing]:
            async with sem:
                try:
                    return await asyncio.wait_for(
                        self.run_adapter(browser, adapter, query),
                        timeout=self.config.adapter_timeout,
                    )
                except asyncio.TimeoutError:
                    logger.warning("Adapter %s timed out after %ss for %r", adapter.name, self.config.adapter_timeout, query)
                    return None

        tasks = [asyncio.create_task(bounded(adapter)) for adapter in self.registry.adapters]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            # Infrastructure failure in one task: stop the rest before the browser goes away.
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return [listing for listing in results if listing is not None]
