"""
Deal Scorer — composite real-estate investment scoring.

Quick use::

    from deal_scorer import ScoreInputs, compute_deal_score

    result = compute_deal_score(ScoreInputs(purchase_price=800_000, yield_percent=5.5))
    result.score, result.confidence_label, result.score_range
"""

from deal_scorer.config import AppConfig, ScoringConfig, WeightsConfig, load_config
from deal_scorer.mapping.report_mapper import map_report_to_inputs
from deal_scorer.models.inputs import ConstraintFlag, ScoreInputs, UpliftScenario
from deal_scorer.models.report import PropertyReport
from deal_scorer.models.result import Drivers, ScoreRange, ScoreResult, SubScore
from deal_scorer.reporting.summary import build_summary
from deal_scorer.scoring.engine import compute_deal_score
from deal_scorer.taxonomy.factors import (
    ConfidenceLabel,
    ConstraintSeverity,
    SubScoreName,
)

__version__ = "0.1.0"

__all__ = [
    "AppConfig",
    "ConfidenceLabel",
    "ConstraintFlag",
    "ConstraintSeverity",
    "Drivers",
    "PropertyReport",
    "ScoreInputs",
    "ScoreRange",
    "ScoreResult",
    "ScoringConfig",
    "SubScore",
    "SubScoreName",
    "UpliftScenario",
    "WeightsConfig",
    "build_summary",
    "compute_deal_score",
    "load_config",
    "map_report_to_inputs",
]
