from __future__ import annotations

import math
import re
from typing import Any, Optional
from urllib.parse import quote, urljoin

_PRICE_CHARS = re.compile(r"[^\d.,]")
# Leading numeric prefix, the way a lenient float parser reads "1299.50.00" as 1299.5.
_NUMBER_PREFIX = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_price(text: Any) -> Optional[int]:
    """
    Turn free-text price into whole currency units.

    Everything except digits, commas and periods is dropped, commas are treated
    as thousands separators and the remainder is rounded half-up:

      "₹1,299.50" -> 1300
      "free" -> None
    """
    if text is None:
        return None
    cleaned = _PRICE_CHARS.sub("", str(text)).replace(",", "")
    match = _NUMBER_PREFIX.match(cleaned)
    if not match:
        return None
    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return int(math.floor(value + 0.5))


def encode_query(query: str) -> str:
    """Percent-encode a query for use inside a URL template."""
    return quote(query, safe="~!*'()")


def absolute_url(href: Optional[str], base_url: str) -> Optional[str]:
    """Resolve a possibly relative href against the page it came from."""
    if not href:
        return None
    return urljoin(base_url, href.strip())


def text_of(node) -> Optional[str]:
    """Visible text of a BeautifulSoup node with whitespace collapsed."""
    if node is None:
        return None
    text = node.get_text(" ", strip=True)
    return " ".join(text.split()) or None
