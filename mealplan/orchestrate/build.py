"""Build the recipe catalogue from the indexed chef library.

Library layout: <root>/<chef>/<recipe-id>.json, one indexed record per file.
The catalogue is a JSON list of normalized recipes.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Iterator, List, Optional, Tuple

from mealplan.models.recipe_schema import Recipe
from mealplan.normalize.batch import BatchResult, normalize_batch
from mealplan.normalize.recipe import CostModel

logger = logging.getLogger(__name__)


def iter_library(root: str) -> Iterator[Tuple[str, Any]]:
    """Yield ("<chef>/<file>", record) pairs in sorted order.

    Files that are not valid JSON yield None as the record so the batch
    reports them instead of silently dropping them.
    """
    for chef in sorted(os.listdir(root)):
        chef_dir = os.path.join(root, chef)
        if not os.path.isdir(chef_dir):
            continue
        for fname in sorted(os.listdir(chef_dir)):
            if not fname.endswith(".json"):
                continue
            key = f"{chef}/{fname}"
            try:
                with open(os.path.join(chef_dir, fname), "r", encoding="utf-8") as fh:
                    record = json.load(fh)
            except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
                logger.warning("Could not read %s: %s", key, e)
                record = None
            yield key, record


def write_catalogue(recipes: List[Recipe], path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([r.to_catalogue_dict() for r in recipes], f, ensure_ascii=False, indent=2)


def load_catalogue(path: str) -> List[Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of recipes")
    return data


def build_library(root: str, output: str, cost_model: Optional[CostModel] = None) -> BatchResult:
    """Normalize every record under root and write the catalogue to output."""
    if not os.path.isdir(root):
        raise FileNotFoundError(f"Recipe library not found at {root}")
    logger.info("Build start | library=%s", root)
    result = normalize_batch(iter_library(root), cost_model)
    write_catalogue(result.recipes, output)
    logger.info(
        "Build complete | recipes=%d skipped=%d output=%s",
        result.succeeded,
        result.failed,
        output,
    )
    for group, count in sorted(result.failures_by_group().items()):
        logger.warning("Build skipped %d records from %s", count, group)
    return result
