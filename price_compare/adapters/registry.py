from __future__ import annotations

import logging
from typing import Iterable, List, Optional
from importlib import metadata

from .base import DEFAULT_NAVIGATION_TIMEOUT, RetailerAdapter, SelectorAdapter
from .official import OfficialStoreAdapter
from .retailers import RETAILER_PROFILES

logger = logging.getLogger(__name__)


def default_adapters(navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT) -> List[RetailerAdapter]:
    adapters: List[RetailerAdapter] = [
        SelectorAdapter(profile, navigation_timeout=navigation_timeout) for profile in RETAILER_PROFILES
    ]
    adapters.append(OfficialStoreAdapter(navigation_timeout=navigation_timeout))
    return adapters


class AdapterRegistry:
    """
    Ordered registry of retailer adapters. Order is the order engines run them in.
    Supports built-ins, config-defined dotted classes, and entry-point plugins.
    """
    def __init__(
        self,
        adapters: Optional[Iterable[RetailerAdapter]] = None,
        *,
        navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT,
    ) -> None:
        if adapters is None:
            adapters = default_adapters(navigation_timeout)
        self._adapters: List[RetailerAdapter] = list(adapters)

    # ---- Introspection / Management ----

    def register(self, adapter: RetailerAdapter) -> None:
        if self.get(adapter.name) is not None:
            raise ValueError(f"Adapter already registered: {adapter.name}")
        self._adapters.append(adapter)

    def unregister(self, name: str) -> bool:
        before = len(self._adapters)
        self._adapters = [a for a in self._adapters if a.name != name]
        return len(self._adapters) != before

    def get(self, name: str) -> Optional[RetailerAdapter]:
        for a in self._adapters:
            if a.name == name:
                return a
        return None

    @property
    def adapters(self) -> List[RetailerAdapter]:
        return list(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)

    # ---- Discovery ----

    def discover_entry_points(self, group: str = "price_compare.adapters") -> int:
        """
        Discover third-party adapters installed as entry points.
        Returns count of newly registered adapters.
        """
        added = 0
        for ep in metadata.entry_points().select(group=group):
            try:
                adapter_cls = ep.load()
                self.register(adapter_cls())
            except Exception as exc:
                # Plugins are optional
                logger.warning("Failed to load adapter plugin %s: %r", ep.name, exc)
                continue
            added += 1
        return added
