"""
Tests for deal_scorer/scoring/engine.py.

What we test
------------
compute_deal_score() on five reference deals:
  - Strong deal (one missing factor):   77, High, no range.
  - Price only:                         57 (56.5 rounded up), Low, range 42–72.
  - Negative cash flow and uplift:      44, Medium, range 41–47.
  - Overpriced:                         value 15 "Avoid", overall 65.
  - Heavily constrained:                constraints 22, overall 64.

Plus the result invariants that hold for any input:
  - exactly five subs in canonical order, each in [0, 100];
  - overall score equals the rounded weighted sum of subs;
  - score_range present iff confidence below the high threshold;
  - Unknown-labelled subs match the missing-factor count.

And input forms: ScoreInputs, raw dicts (camelCase / snake_case), reports.
"""

from __future__ import annotations

import logging

import pytest

from deal_scorer.config import ConfidenceConfig, ConstraintsConfig, ScoringConfig, WeightsConfig
from deal_scorer.models.inputs import ScoreInputs
from deal_scorer.models.report import PropertyReport
from deal_scorer.scoring.aggregator import aggregate
from deal_scorer.scoring.engine import coerce_inputs, compute_deal_score
from deal_scorer.taxonomy.factors import FACTOR_ORDER, ConfidenceLabel, SubScoreName


def _names(subs) -> list[str]:
    return [str(s.name) for s in subs]


# ── Reference deals ───────────────────────────────────────────────────────────

class TestReferenceDeals:
    def test_strong_deal(self, strong_inputs):
        result = compute_deal_score(strong_inputs)
        assert result.score == 77
        assert result.confidence == pytest.approx(0.8)
        assert result.confidence_label == ConfidenceLabel.HIGH
        assert result.score_range is None
        assert [s.score for s in result.subs] == [60, 88, 80, 70, 94]
        assert result.sub(SubScoreName.VALUE).label == "Unknown"
        assert _names(result.drivers.positive) == ["constraints", "yield"]
        assert _names(result.drivers.negative) == ["value", "uplift"]

    def test_price_only(self, price_only_inputs):
        result = compute_deal_score(price_only_inputs)
        assert [s.score for s in result.subs] == [60, 55, 55, 55, 60]
        assert result.score == 57
        assert result.confidence == 0.0
        assert result.confidence_label == ConfidenceLabel.LOW
        assert (result.score_range.low, result.score_range.high) == (42, 72)
        assert all(s.label == "Unknown" for s in result.subs)
        assert _names(result.drivers.positive) == ["value", "constraints"]
        assert _names(result.drivers.negative) == ["uplift", "cashFlow"]

    def test_negative_cash_flow_and_uplift(self, negative_inputs):
        result = compute_deal_score(negative_inputs)
        assert [s.score for s in result.subs] == [60, 55, 20, 45, 60]
        assert result.score == 44
        assert result.confidence == pytest.approx(0.6)
        assert result.confidence_label == ConfidenceLabel.MEDIUM
        assert (result.score_range.low, result.score_range.high) == (41, 47)
        assert result.sub(SubScoreName.CASH_FLOW).detail == "-$300/wk"
        assert _names(result.drivers.negative) == ["cashFlow", "uplift"]

    def test_overpriced(self, overpriced_inputs):
        result = compute_deal_score(overpriced_inputs)
        value = result.sub(SubScoreName.VALUE)
        assert value.score == 15
        assert value.label == "Avoid"
        assert result.score == 65
        assert result.confidence == pytest.approx(0.8)

    def test_heavily_constrained(self, heavily_constrained_inputs):
        result = compute_deal_score(heavily_constrained_inputs)
        constraints = result.sub(SubScoreName.CONSTRAINTS)
        assert constraints.score == 22
        assert constraints.label == "Major Issues"
        assert result.score == 64
        assert result.confidence_label == ConfidenceLabel.HIGH


# ── Invariants ────────────────────────────────────────────────────────────────

_ALL_SCENARIOS = [
    "strong_inputs",
    "price_only_inputs",
    "negative_inputs",
    "overpriced_inputs",
    "heavily_constrained_inputs",
]


class TestResultInvariants:
    @pytest.mark.parametrize("fixture_name", _ALL_SCENARIOS)
    def test_five_subs_in_canonical_order(self, fixture_name, request):
        result = compute_deal_score(request.getfixturevalue(fixture_name))
        assert tuple(s.name for s in result.subs) == FACTOR_ORDER
        assert all(0 <= s.score <= 100 for s in result.subs)

    @pytest.mark.parametrize("fixture_name", _ALL_SCENARIOS)
    def test_score_is_rounded_weighted_sum(self, fixture_name, request):
        result = compute_deal_score(request.getfixturevalue(fixture_name))
        assert result.score == aggregate(result.subs, WeightsConfig())

    @pytest.mark.parametrize("fixture_name", _ALL_SCENARIOS)
    def test_range_present_only_below_high_threshold(self, fixture_name, request):
        result = compute_deal_score(request.getfixturevalue(fixture_name))
        assert (result.score_range is None) == (result.confidence >= 0.75)

    @pytest.mark.parametrize("fixture_name", _ALL_SCENARIOS)
    def test_unknown_count_matches_confidence(self, fixture_name, request):
        result = compute_deal_score(request.getfixturevalue(fixture_name))
        unknown = sum(1 for s in result.subs if s.label == "Unknown")
        assert result.confidence == pytest.approx((5 - unknown) / 5)

    def test_empty_inputs_never_raise(self):
        result = compute_deal_score(ScoreInputs())
        assert result.score == 57
        assert result.confidence_label == ConfidenceLabel.LOW

    def test_deterministic(self, strong_inputs):
        assert compute_deal_score(strong_inputs) == compute_deal_score(strong_inputs)

    def test_garbage_numbers_treated_as_missing(self):
        result = compute_deal_score({
            "purchasePrice": float("nan"),
            "yieldPercent": "5.5",
            "cashFlowWeekly": float("inf"),
        })
        assert result.confidence == 0.0
        assert result.score == 57


# ── Configuration ─────────────────────────────────────────────────────────────

class TestConfiguration:
    def test_alternative_weights(self, price_only_inputs):
        cfg = ScoringConfig(
            weights=WeightsConfig(
                value=0.0, yield_=0.25, cash_flow=0.35, uplift=0.25, constraints=0.15
            )
        )
        assert compute_deal_score(price_only_inputs, cfg).score == 56

    def test_empty_constraints_clear(self, negative_inputs):
        cfg = ScoringConfig(constraints=ConstraintsConfig(empty_list_is_clear=True))
        result = compute_deal_score(negative_inputs, cfg)
        assert result.sub(SubScoreName.CONSTRAINTS).score == 100
        assert result.confidence == pytest.approx(0.8)
        assert result.score_range is None

    def test_none_config_uses_defaults(self, strong_inputs, scoring_config):
        assert compute_deal_score(strong_inputs, None) == compute_deal_score(
            strong_inputs, scoring_config
        )


# ── Input forms ───────────────────────────────────────────────────────────────

class TestInputForms:
    def test_camel_case_dict(self):
        result = compute_deal_score({
            "purchasePrice": 800_000,
            "yieldPercent": 5.5,
            "cashFlowWeekly": 150,
            "uplift": {"conservative": 40_000, "base": 80_000, "upside": 120_000},
            "constraints": [
                {"key": "minor_setback", "label": "Minor setback", "severity": "low"},
            ],
        })
        assert result.score == 77

    def test_snake_case_dict(self):
        inputs = coerce_inputs({"purchase_price": 500_000})
        assert inputs.purchase_price == 500_000

    def test_report_dict_is_mapped(self, sample_report):
        inputs = coerce_inputs(sample_report)
        assert inputs.purchase_price == 1_200_000
        assert inputs.asking_price == 1_260_000

    def test_report_model_is_mapped(self, sample_report):
        report = PropertyReport.model_validate(sample_report)
        assert coerce_inputs(report) == coerce_inputs(sample_report)

    def test_score_inputs_pass_through(self, strong_inputs):
        assert coerce_inputs(strong_inputs) is strong_inputs

    def test_full_report(self, sample_report):
        result = compute_deal_score(sample_report)
        assert [s.score for s in result.subs] == [70, 55, 40, 70, 24]
        assert result.sub(SubScoreName.VALUE).label == "Fair"
        assert result.sub(SubScoreName.UPLIFT).label == "OK"
        assert result.score == 53
        assert result.confidence == 1.0
        assert result.confidence_label == ConfidenceLabel.HIGH
        assert _names(result.drivers.positive) == ["value", "uplift"]
        assert _names(result.drivers.negative) == ["constraints", "cashFlow"]


class TestLooseConstraintFlags:
    def test_severity_only_flags(self):
        result = compute_deal_score({
            "purchasePrice": 800_000,
            "yieldPercent": 5.5,
            "cashFlowWeekly": 150,
            "uplift": {"conservative": 40_000, "base": 80_000, "upside": 120_000},
            "constraints": [{"severity": "low"}],
        })
        assert result.score == 77
        assert result.confidence_label == ConfidenceLabel.HIGH
        assert result.sub(SubScoreName.CONSTRAINTS).score == 94
        assert result.sub(SubScoreName.CONSTRAINTS).detail == "low"

    def test_unrecognised_severity_scored_as_low(self):
        result = compute_deal_score({
            "constraints": [
                {"key": "x", "label": "X", "severity": "critical"},
                {"label": "Y", "severity": "High"},
            ],
        })
        constraints = result.sub(SubScoreName.CONSTRAINTS)
        assert constraints.score == 100 - 6 - 22
        assert constraints.detail == "X, Y"


class TestSubScoreMetrics:
    def test_raw_figures_attached(self, strong_inputs):
        result = compute_deal_score(strong_inputs)
        assert result.sub(SubScoreName.CASH_FLOW).metric == pytest.approx(150.0)
        assert result.sub(SubScoreName.YIELD).metric == pytest.approx(5.5)
        assert result.sub(SubScoreName.UPLIFT).metric == pytest.approx(10.0)
        assert result.sub(SubScoreName.CONSTRAINTS).metric == 6
        assert result.sub(SubScoreName.VALUE).metric is None

    def test_metric_not_serialised(self, strong_inputs):
        data = compute_deal_score(strong_inputs).model_dump(mode="json", by_alias=True)
        assert all("metric" not in sub for sub in data["subs"])


class TestRangeFollowsConfiguredThreshold:
    def test_lower_high_threshold_drops_range(self, negative_inputs):
        cfg = ScoringConfig(confidence=ConfidenceConfig(high_threshold=0.6, medium_threshold=0.5))
        result = compute_deal_score(negative_inputs, cfg)
        assert result.confidence == pytest.approx(0.6)
        assert result.confidence_label == ConfidenceLabel.HIGH
        assert result.score_range is None

    def test_higher_high_threshold_adds_range(self, strong_inputs):
        cfg = ScoringConfig(confidence=ConfidenceConfig(high_threshold=0.9))
        result = compute_deal_score(strong_inputs, cfg)
        assert result.confidence == pytest.approx(0.8)
        # spread = round_half_up(0.1 * 20) = 2
        assert (result.score_range.low, result.score_range.high) == (75, 79)


class TestLogging:
    def test_logs_debug_summary(self, strong_inputs, caplog):
        with caplog.at_level(logging.DEBUG, logger="deal_scorer.scoring.engine"):
            compute_deal_score(strong_inputs)
        assert "Deal score=77" in caplog.text
