"""Convert indexed schema.org recipe records into the app's Recipe model.

`normalize` is total for any record that passes RawRecipeRecord validation:
missing or oddly-typed payload fields fall back to documented defaults
instead of raising.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from mealplan.models.recipe_schema import (
    INGREDIENTS_PLACEHOLDER,
    UNTITLED_RECIPE,
    Chef,
    KnownChef,
    OtherChef,
    RawRecipePayload,
    RawRecipeRecord,
    Recipe,
    RecipeSource,
    UnparsedIngredient,
)
from mealplan.parsing.durations import recipe_minutes
from mealplan.parsing.quantities import parse_ingredient_line, parse_servings
from mealplan.settings import settings

QUICK_MAX_MINUTES = 40
SIMPLE_MAX_INGREDIENTS = 12
# Used by the cost estimate when a record lists no ingredients at all.
ASSUMED_INGREDIENT_COUNT = 10

CHEF_ALIASES = {
    "nagi": Chef.RECIPE_TIN_EATS,
    "recipe_tin_eats": Chef.RECIPE_TIN_EATS,
    "jamie-oliver": Chef.JAMIE_OLIVER,
    "jamie_oliver": Chef.JAMIE_OLIVER,
}

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


@dataclass(frozen=True)
class CostModel:
    """Linear per-serve cost heuristic.

    This is a placeholder with no pricing data behind it; treat the result as
    a rough ranking signal, not a price.
    """

    base: float = 2.50
    per_ingredient: float = 0.35
    min_cost: float = 2.00
    max_cost: float = 8.00

    @classmethod
    def from_settings(cls, s=settings) -> "CostModel":
        return cls(
            base=s.COST_BASE,
            per_ingredient=s.COST_PER_INGREDIENT,
            min_cost=s.COST_MIN,
            max_cost=s.COST_MAX,
        )


def _round2(value: float) -> float:
    # half-up: 3.125 -> 3.13
    return math.floor(value * 100 + 0.5) / 100


def estimate_cost(ingredient_count: int, serves: int, model: Optional[CostModel] = None) -> float:
    model = model or CostModel()
    count = max(ingredient_count, 0)
    serves = serves if serves >= 1 else 1
    per_serve = _round2((model.base + count * model.per_ingredient) / serves)
    return max(model.min_cost, min(model.max_cost, per_serve))


def normalize_chef(identifier: Any) -> Union[KnownChef, OtherChef]:
    raw = identifier if isinstance(identifier, str) else ""
    slug = CHEF_ALIASES.get(raw.strip().lower())
    if slug is None:
        return OtherChef(raw=raw)
    return KnownChef(slug=slug)


def _categories(value: Any) -> List[str]:
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [v for v in value if isinstance(v, str)]
    return []


def _ingredient_lines(value: Any) -> List[str]:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    lines = []
    for item in value:
        if item is None:
            continue
        text = item if isinstance(item, str) else str(item)
        if text.strip():
            lines.append(text)
    return lines


def _ingredient_count(value: Any) -> int:
    if isinstance(value, str):
        return 1
    if isinstance(value, (list, tuple)):
        return len(value)
    return 0


def extract_tags(payload: RawRecipePayload, time_mins: int, ingredient_count: int) -> List[str]:
    tags: List[str] = []
    for category in _categories(payload.category):
        tag = _NON_ALNUM.sub("_", category.lower())
        if tag not in tags:
            tags.append(tag)
    if time_mins <= QUICK_MAX_MINUTES and "quick" not in tags:
        tags.append("quick")
    if ingredient_count <= SIMPLE_MAX_INGREDIENTS and "simple" not in tags:
        tags.append("simple")
    return tags


def _title(name: Any) -> str:
    if isinstance(name, str) and name.strip():
        return name.strip()
    return UNTITLED_RECIPE


def normalize(
    raw: Union[RawRecipeRecord, Mapping[str, Any]],
    cost_model: Optional[CostModel] = None,
) -> Recipe:
    """Build a Recipe from an indexed record.

    Mappings are validated as RawRecipeRecord first; that validation is the
    only step allowed to raise (pydantic.ValidationError).
    """
    record = raw if isinstance(raw, RawRecipeRecord) else RawRecipeRecord.model_validate(raw)
    payload = record.recipe

    lines = _ingredient_lines(payload.ingredients)
    ingredients = [parse_ingredient_line(line) for line in lines]
    if not ingredients:
        ingredients = [UnparsedIngredient(raw_text=INGREDIENTS_PLACEHOLDER)]

    count = _ingredient_count(payload.ingredients)
    time_mins = recipe_minutes(payload.total_time, payload.prep_time, payload.cook_time)
    serves = parse_servings(payload.recipe_yield)

    return Recipe(
        id=record.id,
        title=_title(payload.name),
        source=RecipeSource(
            url=record.source_url,
            domain=record.domain,
            chef=normalize_chef(record.chef),
            fetched_at=record.indexed_at,
        ),
        time_mins=time_mins,
        serves=serves,
        tags=extract_tags(payload, time_mins, count),
        ingredients=ingredients,
        cost_per_serve_est=estimate_cost(
            count or ASSUMED_INGREDIENT_COUNT, serves, cost_model or CostModel.from_settings()
        ),
    )
