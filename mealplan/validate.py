"""Integrity checks for a generated recipe catalogue.

Run after build-library to catch bad data before the planner sees it.
Works on the serialized (camelCase) catalogue records so it can check files
produced by older builds too.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional, Sequence

LONG_RECIPE_MINUTES = 240

_URL_RE = re.compile(r"^https?://.+")


@dataclass(frozen=True)
class ValidationIssue:
    recipe_id: Optional[str]
    field: str
    issue: str


@dataclass
class ValidationReport:
    checked: int = 0
    errors: List[ValidationIssue] = field(default_factory=list)
    warnings: List[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


def _blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def _number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_source(rid: str, source: Any, report: ValidationReport) -> None:
    if not isinstance(source, Mapping):
        report.errors.append(ValidationIssue(rid, "source", "Recipe source is required and must be an object"))
        return
    url = source.get("url")
    if _blank(url):
        report.errors.append(ValidationIssue(rid, "source.url", "Source URL is required"))
    elif not _URL_RE.match(url):
        report.errors.append(ValidationIssue(rid, "source.url", f"Invalid URL format: {url}"))
    for key in ("domain", "license", "fetchedAt"):
        if _blank(source.get(key)):
            report.errors.append(ValidationIssue(rid, f"source.{key}", f"Source {key} is required"))
    if not source.get("chef"):
        report.errors.append(ValidationIssue(rid, "source.chef", "Source chef is required"))


def _check_ingredients(rid: str, ingredients: Any, report: ValidationReport) -> None:
    if not isinstance(ingredients, list):
        report.errors.append(ValidationIssue(rid, "ingredients", "Ingredients must be an array"))
        return
    if not ingredients:
        report.errors.append(ValidationIssue(rid, "ingredients", "Recipe must have at least one ingredient"))
        return
    for i, ing in enumerate(ingredients):
        where = f"ingredients[{i}]"
        if not isinstance(ing, Mapping):
            report.errors.append(ValidationIssue(rid, where, "Ingredient must be an object"))
        elif ing.get("kind") == "unparsed":
            if _blank(ing.get("rawText")):
                report.errors.append(ValidationIssue(rid, f"{where}.rawText", "Unparsed ingredient text is required"))
        else:
            if _blank(ing.get("name")):
                report.errors.append(ValidationIssue(rid, f"{where}.name", "Ingredient name is required"))
            qty = ing.get("qty")
            if not _number(qty) or qty < 0:
                report.errors.append(ValidationIssue(rid, f"{where}.qty", f"Invalid quantity: {qty}"))


def validate_recipe(recipe: Mapping[str, Any], report: ValidationReport) -> None:
    rid = recipe.get("id") if isinstance(recipe.get("id"), str) else None
    if _blank(recipe.get("id")):
        report.errors.append(ValidationIssue(rid, "id", "Recipe ID is required and must be a non-empty string"))
    if _blank(recipe.get("title")):
        report.errors.append(ValidationIssue(rid, "title", "Recipe title is required"))

    _check_source(rid, recipe.get("source"), report)

    time_mins = recipe.get("timeMins")
    if not _number(time_mins) or time_mins < 0:
        report.errors.append(ValidationIssue(rid, "timeMins", f"Invalid time: {time_mins}"))
    elif time_mins > LONG_RECIPE_MINUTES:
        report.warnings.append(
            ValidationIssue(rid, "timeMins", f"Very long recipe: {time_mins} minutes ({time_mins / 60:.1f} hours)")
        )

    tags = recipe.get("tags")
    if not isinstance(tags, list):
        report.errors.append(ValidationIssue(rid, "tags", "Tags must be an array"))
    elif not tags:
        report.warnings.append(ValidationIssue(rid, "tags", "Recipe has no tags"))

    _check_ingredients(rid, recipe.get("ingredients"), report)

    serves = recipe.get("serves")
    if not isinstance(serves, int) or isinstance(serves, bool) or serves < 1:
        report.errors.append(ValidationIssue(rid, "serves", f"Invalid serves value: {serves}"))

    cost = recipe.get("costPerServeEst")
    if not _number(cost) or cost < 0:
        report.errors.append(ValidationIssue(rid, "costPerServeEst", f"Invalid cost estimate: {cost}"))


def validate_catalogue(recipes: Sequence[Any]) -> ValidationReport:
    report = ValidationReport(checked=len(recipes))
    ids = Counter(
        r.get("id") for r in recipes if isinstance(r, Mapping) and isinstance(r.get("id"), str)
    )
    for rid, count in ids.items():
        if rid and count > 1:
            report.errors.append(ValidationIssue(rid, "id", f"Duplicate recipe ID found {count} times"))
    for recipe in recipes:
        if not isinstance(recipe, Mapping):
            report.errors.append(ValidationIssue(None, "record", "Recipe must be an object"))
            continue
        validate_recipe(recipe, report)
    return report
