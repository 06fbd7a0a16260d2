"""Priced-product cache keyed by normalized ingredient name.

Entries expire a fixed TTL after they are written. The cache lives in memory
and is owned by whoever constructs it: it is hydrated explicitly from a
snapshot and is never written back to disk on its own. Use
`export_snapshot()` (or mealplan.pricing.maintenance) to persist writes.

Times are epoch milliseconds, matching the snapshot format.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from mealplan.errors import CacheContractError, CacheStateError, SnapshotError

logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000
DEFAULT_TTL_MS = 30 * DAY_MS
SNAPSHOT_VERSION = "1.0.0"


class CachedProductEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    product: Any
    quantity: float
    unit: str
    created_at: int = Field(alias="timestamp")
    expires_at: int = Field(alias="expiresAt")
    search_term: str = Field(alias="searchTerm")

    def is_expired(self, now_ms: int) -> bool:
        return self.expires_at <= now_ms


class CacheMeta(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    version: str = SNAPSHOT_VERSION
    last_updated: Optional[int] = Field(default=None, alias="lastUpdated")
    ttl: int = Field(default=DEFAULT_TTL_MS, alias="cacheTTL")
    description: str = "Persistent cache for priced grocery products"


class CacheSnapshot(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    meta: CacheMeta = Field(default_factory=CacheMeta)
    products: Dict[str, CachedProductEntry] = Field(default_factory=dict)

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


@dataclass(frozen=True)
class CacheStats:
    total: int
    valid: int
    expired: int
    oldest: Optional[int] = None
    newest: Optional[int] = None


class ProductCache:
    def __init__(self, ttl_ms: int = DEFAULT_TTL_MS, clock: Callable[[], float] = time.time):
        if ttl_ms <= 0:
            raise ValueError("ttl_ms must be positive")
        self._clock = clock
        self._meta = CacheMeta(ttl=ttl_ms)
        self._products: Dict[str, CachedProductEntry] = {}
        self._hydrated = False

    @classmethod
    def from_snapshot(
        cls,
        snapshot: Union[CacheSnapshot, Mapping[str, Any]],
        ttl_ms: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ) -> "ProductCache":
        """Build and hydrate a cache; TTL defaults to the snapshot's cacheTTL."""
        if ttl_ms is None:
            ttl_ms = _read_meta(snapshot).ttl
        cache = cls(ttl_ms=ttl_ms, clock=clock)
        cache.hydrate(snapshot)
        return cache

    @property
    def ttl_ms(self) -> int:
        return self._meta.ttl

    @property
    def last_updated(self) -> Optional[int]:
        return self._meta.last_updated

    @property
    def hydrated(self) -> bool:
        return self._hydrated

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def __len__(self) -> int:
        return len(self._products)

    def hydrate(self, snapshot: Union[CacheSnapshot, Mapping[str, Any]]) -> int:
        """Load entries from a snapshot. Allowed once, before any writes.

        Malformed product entries are skipped with a warning. Returns the
        number of entries loaded.
        """
        if self._hydrated or self._products:
            raise CacheStateError("cache is already populated; hydrate must be the first operation")

        meta = _read_meta(snapshot)
        if isinstance(snapshot, CacheSnapshot):
            products = dict(snapshot.products)
        else:
            raw_products = snapshot.get("products") or {}
            if not isinstance(raw_products, Mapping):
                raise SnapshotError("snapshot 'products' must be a mapping")
            products = {}
            for name, value in raw_products.items():
                try:
                    products[name] = CachedProductEntry.model_validate(value)
                except ValidationError as e:
                    logger.warning("Skipping malformed cache entry '%s': %s", name, e.errors()[0].get("msg"))

        self._products = products
        self._meta = CacheMeta(
            version=meta.version,
            last_updated=meta.last_updated,
            ttl=self._meta.ttl,
            description=meta.description,
        )
        self._hydrated = True
        logger.info("Hydrated product cache with %d entries", len(products))
        return len(products)

    def get(self, normalized_name: str) -> Optional[CachedProductEntry]:
        """Return the entry for a name, or None when absent or expired."""
        entry = self._products.get(normalized_name)
        if entry is None:
            logger.debug("Product cache miss for '%s'", normalized_name)
            return None
        if entry.is_expired(self._now_ms()):
            logger.debug("Product cache entry expired for '%s'", normalized_name)
            return None
        logger.debug("Product cache hit for '%s'", normalized_name)
        return entry

    def put(
        self,
        normalized_name: str,
        product: Any,
        quantity: float,
        unit: str,
        search_term: str,
    ) -> CachedProductEntry:
        """Store (overwrite) the entry for a name, expiring one TTL from now."""
        if not isinstance(normalized_name, str) or not normalized_name:
            raise CacheContractError("normalized_name is required")
        if product is None:
            raise CacheContractError(f"product is required for '{normalized_name}'")
        if isinstance(quantity, bool) or not isinstance(quantity, (int, float)) or not math.isfinite(quantity):
            raise CacheContractError(f"quantity must be a finite number for '{normalized_name}'")
        if not isinstance(unit, str):
            raise CacheContractError(f"unit must be a string for '{normalized_name}'")
        if not isinstance(search_term, str) or not search_term:
            raise CacheContractError(f"search_term is required for '{normalized_name}'")

        now = self._now_ms()
        entry = CachedProductEntry(
            product=product,
            quantity=quantity,
            unit=unit,
            created_at=now,
            expires_at=now + self._meta.ttl,
            search_term=search_term,
        )
        self._products[normalized_name] = entry
        self._meta.last_updated = now
        logger.debug("Saved '%s' to product cache (in-memory)", normalized_name)
        return entry

    def sweep(self) -> int:
        """Remove every expired entry; returns how many were removed."""
        now = self._now_ms()
        expired = [name for name, entry in self._products.items() if entry.is_expired(now)]
        for name in expired:
            del self._products[name]
        if expired:
            self._meta.last_updated = now
            logger.info("Cleared %d expired entries from product cache", len(expired))
        return len(expired)

    def stats(self) -> CacheStats:
        now = self._now_ms()
        entries = list(self._products.values())
        expired = sum(1 for e in entries if e.is_expired(now))
        timestamps = [e.created_at for e in entries if e.created_at > 0]
        return CacheStats(
            total=len(entries),
            valid=len(entries) - expired,
            expired=expired,
            oldest=min(timestamps) if timestamps else None,
            newest=max(timestamps) if timestamps else None,
        )

    def keys(self) -> List[str]:
        """All stored names, expired or not, in insertion order."""
        return list(self._products)

    def export_snapshot(self) -> CacheSnapshot:
        return CacheSnapshot(meta=self._meta.model_copy(), products=dict(self._products))


def _read_meta(snapshot: Union[CacheSnapshot, Mapping[str, Any]]) -> CacheMeta:
    if isinstance(snapshot, CacheSnapshot):
        return snapshot.meta
    if not isinstance(snapshot, Mapping):
        raise SnapshotError(f"snapshot must be a mapping, got {type(snapshot).__name__}")
    raw_meta = snapshot.get("meta") or {}
    try:
        return CacheMeta.model_validate(raw_meta)
    except ValidationError as e:
        raise SnapshotError(f"invalid snapshot meta: {e}") from e
