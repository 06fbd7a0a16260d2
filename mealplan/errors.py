"""Exceptions raised by the meal planning core.

Dirty source data never raises; these are reserved for contract violations by
callers and for snapshot files that cannot be read at all.
"""

from __future__ import annotations


class MealPlanError(Exception):
    """Base class for errors raised by mealplan."""


class CacheContractError(MealPlanError, ValueError):
    """A cache write was attempted with a missing or empty required field."""


class CacheStateError(MealPlanError, RuntimeError):
    """The cache was used in a way its lifecycle does not allow (e.g. hydrated twice)."""


class SnapshotError(MealPlanError, ValueError):
    """A persisted cache snapshot does not have the expected top-level shape."""
