from __future__ import annotations

from typing import Tuple

from .base import RetailerProfile

# Selectors track each site's current search markup; expect to touch them when a site redesigns.

AMAZON_IN = RetailerProfile(
    name="Amazon.in",
    search_url="https://www.amazon.in/s?k={query}",
    item_selector='div.s-main-slot div[data-component-type="s-search-result"]',
    title_selector="h2 a span",
    price_selector=".a-price-whole",
    price_fraction_selector=".a-price-fraction",
    link_selector="h2 a",
    shipping=0,
)

FLIPKART = RetailerProfile(
    name="Flipkart",
    search_url="https://www.flipkart.com/search?q={query}",
    item_selector="div[data-id]",
    title_selector="a[title]",
    title_attr="title",
    price_selector="div._30jeq3",
    link_selector="a[title]",
    shipping=599,
    delivery_days=2,
)

RELIANCE_DIGITAL = RetailerProfile(
    name="Reliance Digital",
    search_url="https://www.reliancedigital.in/search?q={query}",
    item_selector="div.sp__product",
    title_selector="p.sp__name",
    price_selector="span.TextWeb__Text-sc-1cyx778-0",
    link_selector="a",
    shipping=499,
    delivery_days=3,
)

CROMA = RetailerProfile(
    name="Croma",
    search_url="https://www.croma.com/search/?text={query}",
    item_selector="li.product-item",
    title_selector="a.product__list--name",
    price_selector="span.amount",
    link_selector="a.product__list--name",
    shipping=799,
    delivery_days=4,
)

RETAILER_PROFILES: Tuple[RetailerProfile, ...] = (AMAZON_IN, FLIPKART, RELIANCE_DIGITAL, CROMA)
