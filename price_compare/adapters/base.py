from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

from bs4 import BeautifulSoup, Tag

from ..utils.parsing import absolute_url, encode_query, parse_price, text_of

logger = logging.getLogger(__name__)

DEFAULT_NAVIGATION_TIMEOUT = 30.0
LINK_TEXT = "Open"


@dataclass(frozen=True)
class ComparisonResult:
    """One retailer's normalized offer, the unit that is ranked and cached."""

    retailer: str
    price: int
    shipping: int
    total_cost: int
    available: bool
    link: str
    link_text: str = LINK_TEXT
    delivery_days: Optional[int] = None
    title: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "retailer": self.retailer,
            "title": self.title,
            "price": self.price,
            "shipping": self.shipping,
            "totalCost": self.total_cost,
            "available": self.available,
            "link": self.link,
            "linkText": self.link_text,
            "deliveryDays": self.delivery_days,
        }


@dataclass
class RawListing:
    """What a single adapter pulled off a results page, before normalization."""

    retailer: str
    link: str
    title: Optional[str] = None
    price_text: Optional[str] = None
    shipping: int = 0
    delivery_days: Optional[int] = None
    available: bool = False

    @property
    def price(self) -> Optional[int]:
        return parse_price(self.price_text)

    @property
    def total_cost(self) -> int:
        return (self.price or 0) + self.shipping

    def to_result(self) -> ComparisonResult:
        return ComparisonResult(
            retailer=self.retailer,
            title=self.title,
            price=self.price or 0,
            shipping=self.shipping or 0,
            total_cost=self.total_cost,
            available=self.available,
            link=self.link,
            delivery_days=self.delivery_days or None,
        )


class Page(Protocol):
    """The slice of a Playwright page the adapters rely on."""

    url: str

    async def goto(self, url: str, **kwargs: Any) -> Any:
        ...

    async def content(self) -> str:
        ...


class RetailerAdapter(Protocol):
    """
    Interface for retailer-specific search logic.
    Keep this small and stable so adapters rarely break across upgrades.
    """

    name: str

    async def search(self, page: Page, query: str) -> Optional[RawListing]:
        """
        Run a search on the retailer and return its top listing, or None when the
        results page has no matching container. Navigation errors propagate.
        """
        ...


@dataclass(frozen=True)
class RetailerProfile:
    """Selector set and business constants for one retailer."""

    name: str
    search_url: str  # template with a "{query}" placeholder
    item_selector: str
    title_selector: Optional[str] = None
    title_attr: Optional[str] = None  # read an attribute instead of the text
    price_selector: Optional[str] = None
    price_fraction_selector: Optional[str] = None
    link_selector: Optional[str] = None  # None means the item itself is the anchor
    shipping: int = 0
    delivery_days: Optional[int] = None


class SelectorAdapter:
    """
    Generic adapter driven by a RetailerProfile.

    navigate -> locate -> extract. The browser renders the results page; the
    rendered DOM is then queried with BeautifulSoup so each field lookup is
    isolated from the others.
    """

    def __init__(self, profile: RetailerProfile, *, navigation_timeout: float = DEFAULT_NAVIGATION_TIMEOUT) -> None:
        self.profile = profile
        self.navigation_timeout = navigation_timeout

    @property
    def name(self) -> str:
        return self.profile.name

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return f"{type(self).__name__}({self.profile.name!r})"

    def search_url(self, query: str) -> str:
        return self.profile.search_url.format(query=encode_query(query))

    async def search(self, page: Page, query: str) -> Optional[RawListing]:
        url = self.search_url(query)
        html = await self.navigate(page, url)
        base_url = getattr(page, "url", None) or url
        item = self.locate(html)
        if item is None:
            logger.debug("%s: no result container on %s", self.name, url)
            return None
        return self.extract(item, query=query, base_url=base_url, search_url=url)

    async def navigate(self, page: Page, url: str) -> str:
        await page.goto(url, wait_until="domcontentloaded", timeout=self.navigation_timeout * 1000)
        return await page.content()

    def locate(self, html: str) -> Optional[Tag]:
        soup = BeautifulSoup(html, "html.parser")
        return soup.select_one(self.profile.item_selector)

    def extract(self, item: Tag, *, query: str, base_url: str, search_url: str) -> RawListing:
        p = self.profile
        title = self._field("title", lambda: self._read(item, p.title_selector, p.title_attr))
        price_text = self._field("price", lambda: self._price_text(item))
        href = self._field("link", lambda: self._read(item, p.link_selector, "href"))
        return RawListing(
            retailer=p.name,
            title=title,
            price_text=price_text,
            link=absolute_url(href, base_url) or search_url,
            shipping=p.shipping,
            delivery_days=p.delivery_days,
            available=bool(price_text),
        )

    # ---- Extraction helpers -------------------------------------------------

    def _field(self, label: str, getter: Callable[[], Optional[str]]) -> Optional[str]:
        try:
            return getter()
        except Exception as exc:
            logger.debug("%s: could not read %s: %r", self.name, label, exc)
            return None

    def _price_text(self, item: Tag) -> Optional[str]:
        whole = self._read(item, self.profile.price_selector)
        if not whole:
            return None
        fraction = self._read(item, self.profile.price_fraction_selector) if self.profile.price_fraction_selector else None
        return whole + (fraction or "")

    def _read(self, item: Tag, selector: Optional[str], attr: Optional[str] = None) -> Optional[str]:
        node = item.select_one(selector) if selector else item
        if node is None:
            return None
        if attr:
            value = node.get(attr)
            return value.strip() if isinstance(value, str) and value.strip() else None
        return text_of(node)
