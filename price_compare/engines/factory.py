from __future__ import annotations

import logging

from .base import BrowserFactory, ComparisonEngine
from ..adapters.registry import AdapterRegistry
from ..config import CompareConfig
from ..utils.loader import load_symbol

logger = logging.getLogger(__name__)


def build_registry(config: CompareConfig) -> AdapterRegistry:
    registry = AdapterRegistry(navigation_timeout=config.navigation_timeout)
    # Allow runtime registration of additional adapters
    for dotted in config.extra_adapters:
        try:
            adapter_cls = load_symbol(dotted)
            registry.register(adapter_cls())
        except Exception as exc:
            logger.warning("Failed to load adapter %s: %r", dotted, exc)
    registry.discover_entry_points()
    for name in config.disabled_adapters:
        if not registry.unregister(name):
            logger.warning("Cannot disable unknown adapter %s", name)
    return registry


def build_engine(config: CompareConfig, browser_factory: BrowserFactory | None = None) -> ComparisonEngine:
    """
    Dynamic engine loading so swapping the scheduling strategy needs no code edits.
    """
    engine_cls = load_symbol(config.engine, expected=ComparisonEngine)
    return engine_cls(config, registry=build_registry(config), browser_factory=browser_factory)
