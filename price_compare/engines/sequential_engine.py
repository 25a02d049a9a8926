from __future__ import annotations

import logging
from typing import Any, List

from .base import ComparisonEngine
from ..adapters.base import RawListing

logger = logging.getLogger(__name__)


class SequentialCompareEngine(ComparisonEngine):
    """
    Runs adapters one after another in registry order, one page open at a time.
    """
    async def collect(self, browser: Any, query: str) -> List[RawListing]:
        kept: List[RawListing] = []
        for adapter in self.registry.adapters:
            listing = await self.run_adapter(browser, adapter, query)
            if listing is not None:
                kept.append(listing)
            else:
                logger.debug("Adapter %s returned no available offer for %r", adapter.name, query)
        return kept
