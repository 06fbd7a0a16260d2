"""Batch normalization with per-record failure reporting."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import ValidationError

from mealplan.models.recipe_schema import Recipe
from mealplan.normalize.recipe import CostModel, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BatchFailure:
    key: str
    reason: str

    @property
    def group(self) -> str:
        """Source group of the key ("nagi/pasta.json" -> "nagi")."""
        return self.key.split("/", 1)[0]


@dataclass
class BatchResult:
    recipes: List[Recipe] = field(default_factory=list)
    failures: List[BatchFailure] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return len(self.recipes)

    @property
    def failed(self) -> int:
        return len(self.failures)

    def failures_by_group(self) -> Dict[str, int]:
        return dict(Counter(f.group for f in self.failures))


def _summarize(err: ValidationError) -> str:
    parts = []
    for e in err.errors():
        loc = ".".join(str(p) for p in e.get("loc", ())) or "record"
        parts.append(f"{loc}: {e.get('msg')}")
    return "; ".join(parts)


def normalize_batch(
    items: Iterable[Tuple[str, Any]],
    cost_model: Optional[CostModel] = None,
) -> BatchResult:
    """Normalize (key, raw record) pairs; bad records are skipped and reported."""
    result = BatchResult()
    for key, raw in items:
        try:
            recipe = normalize(raw, cost_model)
        except ValidationError as e:
            reason = _summarize(e)
            logger.warning("Skipping %s: invalid record (%s)", key, reason)
            result.failures.append(BatchFailure(key, reason))
            continue
        except Exception as e:
            logger.exception("Skipping %s: normalization failed", key)
            result.failures.append(BatchFailure(key, f"{type(e).__name__}: {e}"))
            continue
        result.recipes.append(recipe)
    logger.info("Normalized %d records (%d skipped)", result.succeeded, result.failed)
    return result
