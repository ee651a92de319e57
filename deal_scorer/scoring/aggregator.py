"""
Weighted aggregation of sub-scores into the overall deal score.

    score = round_half_up(Σ sub.score × weight[sub.name])

The weight table is a ``WeightsConfig``; its validator guarantees the weights
sum to 1.0, so a weighted mean of [0, 100] scores stays in [0, 100].
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from deal_scorer.config import WeightsConfig
from deal_scorer.models.result import SubScore
from deal_scorer.utils.numbers import clamp, round_half_up


def weighted_total(subs: Iterable[SubScore], weights: WeightsConfig) -> float:
    """Unrounded weighted sum.  Factors without a weight contribute 0."""
    table = weights.as_dict()
    return math.fsum(s.score * table.get(str(s.name), 0.0) for s in subs)


def aggregate(subs: Iterable[SubScore], weights: WeightsConfig) -> int:
    """Overall integer score in [0, 100]."""
    return int(clamp(round_half_up(weighted_total(subs, weights)), 0, 100))
