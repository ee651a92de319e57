"""
Deal score engine: the single entry point that wires the pipeline together.

    report ─► map_report_to_inputs ─► ScoreInputs
                                         │
                       five calculators (canonical order)
                                         │
              aggregate + estimate_confidence + rank_drivers
                                         │
                                    ScoreResult

Pure and synchronous: no I/O, no shared state.  Safe to call concurrently.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from deal_scorer.config import DEFAULT_SCORING_CONFIG, ScoringConfig
from deal_scorer.mapping.report_mapper import map_report_to_inputs
from deal_scorer.models.inputs import ScoreInputs
from deal_scorer.models.report import REPORT_KEYS, PropertyReport
from deal_scorer.models.result import ScoreResult, SubScore
from deal_scorer.scoring.aggregator import aggregate
from deal_scorer.scoring.calculators import PRIMARY_METRICS, FactorResult, run_calculators
from deal_scorer.scoring.confidence import estimate_confidence
from deal_scorer.scoring.drivers import rank_drivers

logger = logging.getLogger(__name__)

EngineInput = ScoreInputs | PropertyReport | Mapping[str, Any]


def to_sub_score(result: FactorResult) -> SubScore:
    return SubScore(
        name=result.name,
        score=result.score,
        label=result.label,
        detail=result.detail,
        metric=result.metrics.get(PRIMARY_METRICS[result.name]),
    )


def coerce_inputs(data: EngineInput) -> ScoreInputs:
    """Normalise any accepted input form into ``ScoreInputs``.

    A mapping carrying any report key (``valueSnapshot``, ``watchOuts``, ...)
    is treated as a report and run through the Input Mapper; any other
    mapping is validated as ``ScoreInputs`` fields.
    """
    if isinstance(data, ScoreInputs):
        return data
    if isinstance(data, PropertyReport):
        return map_report_to_inputs(data)
    if REPORT_KEYS.intersection(data):
        return map_report_to_inputs(data)
    return ScoreInputs.model_validate(data)


def compute_deal_score(
    data: EngineInput,
    config: ScoringConfig | None = None,
) -> ScoreResult:
    """Score one property.

    Args:
        data:   ``ScoreInputs``, a ``PropertyReport``, or a dict of either.
        config: Scoring configuration; ``None`` uses the canonical defaults.

    Returns:
        ``ScoreResult`` with score, confidence, breakdown and drivers.
    """
    cfg = config or DEFAULT_SCORING_CONFIG
    inputs = coerce_inputs(data)

    factors = run_calculators(inputs, cfg)
    subs = tuple(to_sub_score(f) for f in factors)
    available = sum(1 for f in factors if f.available)

    score = aggregate(subs, cfg.weights)
    estimate = estimate_confidence(score, available, len(factors), cfg.confidence)
    drivers = rank_drivers(subs, cfg.drivers.top_n)

    logger.debug(
        "Deal score=%d confidence=%.2f (%s) available=%d/%d",
        score,
        estimate.confidence,
        estimate.label,
        available,
        len(factors),
    )

    return ScoreResult(
        score=score,
        score_range=estimate.score_range,
        confidence=estimate.confidence,
        confidence_label=estimate.label,
        subs=subs,
        drivers=drivers,
    )
