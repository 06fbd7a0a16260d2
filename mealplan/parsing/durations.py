"""Recipe time parsing for ISO-8601-like durations (PT1H30M, PT45M, ...)."""

from __future__ import annotations

import re
from typing import Any

DEFAULT_MINUTES = 30

_HOURS_RE = re.compile(r"(\d+)H")
_MINUTES_RE = re.compile(r"(\d+)M")


def _duration_minutes(text: Any) -> int:
    """Hour and minute components summed; 0 when neither is present."""
    if not text or not isinstance(text, str):
        return 0
    hours = _HOURS_RE.search(text)
    minutes = _MINUTES_RE.search(text)
    return (int(hours.group(1)) if hours else 0) * 60 + (int(minutes.group(1)) if minutes else 0)


def parse_duration(text: Any = None) -> int:
    """Return minutes for a duration string, or DEFAULT_MINUTES.

    A zero duration also falls back to the default: a recipe is never
    recorded as taking no time.
    """
    return _duration_minutes(text) or DEFAULT_MINUTES


def recipe_minutes(total: Any = None, prep: Any = None, cook: Any = None) -> int:
    """Minutes for a recipe: totalTime, else prepTime + cookTime, else the default."""
    minutes = _duration_minutes(total)
    if minutes:
        return minutes
    return (_duration_minutes(prep) + _duration_minutes(cook)) or DEFAULT_MINUTES
