"""
Confidence estimator.

Confidence is the share of factors scored from genuinely available data:

    confidence = available_count / factor_count      (0.20 per factor for 5)

Label thresholds (canonical): >= 0.75 "High", >= 0.50 "Medium", else "Low".

Below the high threshold the score is widened into a symmetric range:

    spread = round_half_up((high_threshold − confidence) × spread_multiplier)
    range  = [clamp(score − spread), clamp(score + spread)]

At or above the threshold no range is reported.
"""

from __future__ import annotations

from dataclasses import dataclass

from deal_scorer.config import ConfidenceConfig
from deal_scorer.models.result import ScoreRange
from deal_scorer.taxonomy.factors import ConfidenceLabel
from deal_scorer.utils.numbers import clamp, round_half_up


@dataclass(frozen=True)
class ConfidenceEstimate:
    confidence: float
    label: ConfidenceLabel
    score_range: ScoreRange | None


def confidence_from_availability(available: int, total: int) -> float:
    """Share of available factors, in [0, 1], rounded to 4 dp."""
    if total <= 0:
        return 0.0
    return round(clamp(available / total, 0.0, 1.0), 4)


def confidence_label(confidence: float, config: ConfidenceConfig) -> ConfidenceLabel:
    if confidence >= config.high_threshold:
        return ConfidenceLabel.HIGH
    if confidence >= config.medium_threshold:
        return ConfidenceLabel.MEDIUM
    return ConfidenceLabel.LOW


def score_range_for(score: int, confidence: float, config: ConfidenceConfig) -> ScoreRange | None:
    """Uncertainty range around ``score``, or ``None`` at high confidence."""
    if confidence >= config.high_threshold:
        return None
    spread = round_half_up((config.high_threshold - confidence) * config.spread_multiplier)
    return ScoreRange(
        low=int(clamp(score - spread, 0, 100)),
        high=int(clamp(score + spread, 0, 100)),
    )


def estimate_confidence(
    score: int,
    available: int,
    total: int,
    config: ConfidenceConfig,
) -> ConfidenceEstimate:
    """Compute confidence, its label and the optional score range."""
    confidence = confidence_from_availability(available, total)
    return ConfidenceEstimate(
        confidence=confidence,
        label=confidence_label(confidence, config),
        score_range=score_range_for(score, confidence, config),
    )
