from __future__ import annotations

from bs4 import Tag

from .base import RawListing, RetailerProfile, SelectorAdapter
from ..utils.parsing import absolute_url

OFFICIAL_STORE = RetailerProfile(
    name="Official Store",
    search_url="https://www.google.com/search?q={query}",
    item_selector="div.g a",
    shipping=0,
    delivery_days=5,
)


class OfficialStoreAdapter(SelectorAdapter):
    """
    Web-search fallback that points at the brand's own store.
    Prices are not scraped here, so the listing is never marked available.
    """

    def __init__(self, profile: RetailerProfile = OFFICIAL_STORE, **kwargs) -> None:
        super().__init__(profile, **kwargs)

    def search_url(self, query: str) -> str:
        return super().search_url(f"{query} official site")

    def extract(self, item: Tag, *, query: str, base_url: str, search_url: str) -> RawListing:
        href = self._field("link", lambda: self._read(item, None, "href"))
        return RawListing(
            retailer=self.profile.name,
            title=query,
            price_text=None,
            link=absolute_url(href, base_url) or search_url,
            shipping=self.profile.shipping,
            delivery_days=self.profile.delivery_days,
            available=False,
        )
