"""Servings and ingredient-line parsing.

Both parsers are best-effort heuristics over free text. They never raise for
string input and never drop text: a line that does not look like
"<qty> [unit] <name>" comes back as an UnparsedIngredient carrying the
original line.
"""

from __future__ import annotations

import math
import re
from typing import Any, Optional, Union

from mealplan.models.recipe_schema import ParsedIngredient, UnparsedIngredient

DEFAULT_SERVINGS = 4

# Units accepted directly after a leading quantity. Anything else is treated
# as part of the ingredient name ("2 large eggs" -> name "large eggs").
KNOWN_UNITS = {
    "g", "gram", "grams", "kg", "kilogram", "kilograms", "mg",
    "oz", "ounce", "ounces", "lb", "lbs", "pound", "pounds",
    "ml", "l", "litre", "litres", "liter", "liters",
    "tsp", "teaspoon", "teaspoons", "tbsp", "tablespoon", "tablespoons",
    "cup", "cups", "pinch", "pinches", "dash",
    "clove", "cloves", "can", "cans", "tin", "tins",
    "bunch", "bunches", "handful", "handfuls", "sprig", "sprigs",
    "slice", "slices", "stick", "sticks", "piece", "pieces",
    "packet", "packets", "pkt", "sachet", "sachets",
}

_NUMBER_RE = re.compile(r"\d+")
_LINE_RE = re.compile(
    r"^(?P<qty>\d+\s+\d+/\d+|\d+/\d+|\d+(?:\.\d+)?)"
    r"(?:\s*(?P<unit>[A-Za-z]+))?"
    r"\s+(?P<name>\S.*)$"
)


def _servings_from_scalar(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_SERVINGS
    if isinstance(value, (int, float)):
        if not math.isfinite(value):
            return DEFAULT_SERVINGS
        count = int(value)
    elif isinstance(value, str):
        match = _NUMBER_RE.search(value)
        if not match:
            return DEFAULT_SERVINGS
        count = int(match.group(0))
    else:
        return DEFAULT_SERVINGS
    return count if count >= 1 else DEFAULT_SERVINGS


def parse_servings(value: Any = None) -> int:
    """Serving count from a recipeYield value (number, text, or list of either).

    For lists only the first element is consulted.
    """
    if isinstance(value, (list, tuple)):
        if not value:
            return DEFAULT_SERVINGS
        return _servings_from_scalar(value[0])
    return _servings_from_scalar(value)


def parse_quantity(text: str) -> Optional[float]:
    """'2' -> 2.0, '1.5' -> 1.5, '1/2' -> 0.5, '1 1/2' -> 1.5; None if not a quantity."""
    parts = text.split()
    total = 0.0
    for part in parts:
        if "/" in part:
            num, _, den = part.partition("/")
            try:
                numerator, denominator = float(num), float(den)
            except ValueError:
                return None
            if denominator == 0:
                return None
            total += numerator / denominator
        else:
            try:
                total += float(part)
            except ValueError:
                return None
    return total if parts else None


def parse_ingredient_line(line: str) -> Union[ParsedIngredient, UnparsedIngredient]:
    text = line.strip()
    m = _LINE_RE.match(text)
    if not m:
        return UnparsedIngredient(raw_text=line)
    qty = parse_quantity(m.group("qty"))
    if qty is None:
        return UnparsedIngredient(raw_text=line)

    unit = m.group("unit")
    name = m.group("name").strip()
    if unit is not None and unit.lower() not in KNOWN_UNITS:
        # "7Up" style: letters glued to the number are not a unit we know
        if not text[m.end("qty")].isspace():
            return UnparsedIngredient(raw_text=line)
        unit = None
        name = text[m.end("qty"):].strip()
    return ParsedIngredient(qty=qty, unit=unit, name=name)
