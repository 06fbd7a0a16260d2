"""Application settings loaded from environment (and .env).

This module provides a small Settings holder backed by environment variables.
Keep this file simple and import `settings` from other modules.
"""
from __future__ import annotations

from dataclasses import dataclass
import os


def _get(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    if v is None:
        return default
    return v


def _get_float(name: str, default: float) -> float:
    raw = _get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {name} must be a number, got {raw!r}")


@dataclass
class Settings:
    # Recipe library produced by the chef indexer: <LIBRARY_DIR>/<chef>/<id>.json
    LIBRARY_DIR: str = _get("LIBRARY_DIR", os.path.join("data", "library"))
    # Catalogue written by build-library and read by the planner UI
    CATALOGUE_PATH: str = _get("CATALOGUE_PATH", os.path.join("data", "recipes.generated.json"))

    # Priced-product cache snapshot (hydrated on start, exported on demand)
    CACHE_SNAPSHOT_PATH: str = _get("CACHE_SNAPSHOT_PATH", os.path.join("data", "product_cache.json"))
    CACHE_TTL_DAYS: float = _get_float("CACHE_TTL_DAYS", 30.0)

    # Per-serve cost heuristic. Placeholder constants, not a validated pricing model.
    COST_BASE: float = _get_float("COST_BASE", 2.50)
    COST_PER_INGREDIENT: float = _get_float("COST_PER_INGREDIENT", 0.35)
    COST_MIN: float = _get_float("COST_MIN", 2.00)
    COST_MAX: float = _get_float("COST_MAX", 8.00)

    # Logging configuration
    # LOG_LEVEL can be DEBUG, INFO, WARNING, ERROR, or CRITICAL
    LOG_LEVEL: str = _get("LOG_LEVEL", "INFO")
    # Optional path to write logs to a file; if unset, logs go to stderr
    LOG_FILE: str | None = _get("LOG_FILE", None)


settings = Settings()
