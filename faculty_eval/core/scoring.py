from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass


@dataclass(frozen=True)
class ScoredRating:
    rating: float
    category_id: int
    category_weight: float | None = None
    question_weight: float | None = None


def effective_weight(weight: float | None) -> float:
    """NULL or zero weights count as 1."""
    if weight is None or weight == 0:
        return 1.0
    return float(weight)


def category_means(items: list[ScoredRating]) -> dict[int, float]:
    """Question-weighted mean rating per category."""
    sums: dict[int, float] = defaultdict(float)
    weights: dict[int, float] = defaultdict(float)
    for it in items:
        w = effective_weight(it.question_weight)
        sums[it.category_id] += it.rating * w
        weights[it.category_id] += w
    return {cid: sums[cid] / weights[cid] for cid in sums}


def overall_score(items: list[ScoredRating], ndigits: int = 2) -> float | None:
    """
    Weighted average across categories:
      sum(category_weight * category_mean) / sum(category_weight)
    """
    if not items:
        return None

    means = category_means(items)
    cat_weight: dict[int, float] = {}
    for it in items:
        cat_weight.setdefault(it.category_id, effective_weight(it.category_weight))

    total_weight = sum(cat_weight[cid] for cid in means)
    weighted = sum(cat_weight[cid] * mean for cid, mean in means.items())
    return round(weighted / total_weight, ndigits)
