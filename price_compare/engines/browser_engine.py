from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from playwright.async_api import Browser, async_playwright

from ..config import CompareConfig

logger = logging.getLogger(__name__)


def app_data_dir() -> Path:
    base = os.getenv("LOCALAPPDATA") or str(Path.home() / ".price-compare")
    p = Path(base) / "price-compare"
    p.mkdir(parents=True, exist_ok=True)
    return p


def configure_browsers_path() -> str:
    """Point Playwright at a per-user browser cache unless the caller already chose one."""
    return os.environ.setdefault("PLAYWRIGHT_BROWSERS_PATH", str(app_data_dir() / "ms-playwright"))


@asynccontextmanager
async def launch_browser(config: CompareConfig) -> AsyncIterator[Browser]:
    """
    One Chromium process for the lifetime of the block, closed on every exit path.
    """
    configure_browsers_path()
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=config.headless, args=list(config.browser_args))
        logger.debug("Browser launched (headless=%s)", config.headless)
        try:
            yield browser
        finally:
            await browser.close()
