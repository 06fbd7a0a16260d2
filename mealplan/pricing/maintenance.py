"""Helpers around ProductCache: key listing, sweeps and snapshot files.

Nothing here keeps state of its own. Writing a snapshot to disk is always an
explicit call; the cache never persists itself.
"""

from __future__ import annotations

import json
import logging
import os
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from mealplan.errors import SnapshotError
from mealplan.pricing.cache import CacheStats, ProductCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SweepReport:
    removed: int
    remaining: CacheStats


def list_keys(cache: ProductCache) -> List[str]:
    return cache.keys()


def export_json(cache: ProductCache, indent: int = 2) -> str:
    """Serialized snapshot suitable for writing back to the snapshot file."""
    return json.dumps(cache.export_snapshot().to_json_dict(), ensure_ascii=False, indent=indent)


def sweep_and_report(cache: ProductCache) -> SweepReport:
    removed = cache.sweep()
    return SweepReport(removed=removed, remaining=cache.stats())


def load_snapshot(path: str) -> Dict[str, Any]:
    """Read a snapshot file. A missing file is an empty snapshot."""
    if not os.path.exists(path):
        logger.warning("Product cache snapshot %s not found; starting empty", path)
        return {}
    with open(path, "r", encoding="utf8") as fh:
        try:
            data = json.load(fh)
        except json.JSONDecodeError as e:
            raise SnapshotError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SnapshotError(f"{path} must contain a JSON object")
    return data


def open_cache(
    path: str,
    ttl_ms: Optional[int] = None,
    clock: Callable[[], float] = time.time,
) -> ProductCache:
    """Load a snapshot file into a freshly constructed, hydrated cache."""
    return ProductCache.from_snapshot(load_snapshot(path), ttl_ms=ttl_ms, clock=clock)


def write_snapshot(cache: ProductCache, path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf8") as fh:
        fh.write(export_json(cache))
    logger.info("Wrote product cache snapshot (%d entries) -> %s", len(cache), path)
