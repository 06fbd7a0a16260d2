"""Read-through pricing: product cache first, external price search on a miss.

The price search itself (HTTP client, quota handling) lives outside this
package and is passed in as anything implementing PriceLookup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Tuple

from mealplan.ingredients.canonicalize import canonicalize
from mealplan.pricing.cache import CachedProductEntry, ProductCache

logger = logging.getLogger(__name__)

SOURCE_CACHE = "cache"
SOURCE_API = "api"
SOURCE_NONE = "none"


class PriceLookup(Protocol):
    def search(self, term: str) -> List[Mapping[str, Any]]:
        """Return matching priced products, best match first."""
        ...


@dataclass(frozen=True)
class PriceResolution:
    name: str
    entry: Optional[CachedProductEntry]
    source: str

    @property
    def found(self) -> bool:
        return self.entry is not None


def resolve_price(
    cache: ProductCache,
    normalized_name: str,
    quantity: float,
    unit: str,
    lookup: Optional[PriceLookup] = None,
) -> PriceResolution:
    """Find a priced product for an already-normalized ingredient name.

    On a cache miss the lookup is searched with the name itself and its first
    result is written back to the cache. A failing lookup yields source "none".
    """
    cached = cache.get(normalized_name)
    if cached is not None:
        return PriceResolution(normalized_name, cached, SOURCE_CACHE)
    if lookup is None:
        return PriceResolution(normalized_name, None, SOURCE_NONE)

    try:
        results = lookup.search(normalized_name)
    except Exception:
        logger.exception("Price lookup failed for '%s'", normalized_name)
        return PriceResolution(normalized_name, None, SOURCE_NONE)

    if not results:
        logger.info("No priced products found for '%s'", normalized_name)
        return PriceResolution(normalized_name, None, SOURCE_NONE)

    entry = cache.put(normalized_name, results[0], quantity, unit, normalized_name)
    return PriceResolution(normalized_name, entry, SOURCE_API)


def price_shopping_list(
    cache: ProductCache,
    items: Iterable[Tuple[str, float, str]],
    lookup: Optional[PriceLookup] = None,
) -> List[PriceResolution]:
    """Resolve (ingredient name, quantity, unit) items; names are canonicalized first.

    Items whose name canonicalizes to nothing are skipped. Each distinct name is
    resolved once, in first-seen order.
    """
    resolved: List[PriceResolution] = []
    seen = set()
    for name, quantity, unit in items:
        key = canonicalize(name)
        if not key or key in seen:
            continue
        seen.add(key)
        resolved.append(resolve_price(cache, key, quantity, unit, lookup))
    hits = sum(1 for r in resolved if r.source == SOURCE_CACHE)
    logger.info("Priced %d ingredients (%d from cache)", len(resolved), hits)
    return resolved
