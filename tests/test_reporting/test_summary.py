"""
Tests for deal_scorer/reporting/summary.py.

What we test
------------
build_summary():
  - Opens with the overall band sentence.
  - Cash-flow sentence is banded on the raw weekly figure (SubScore.metric).
  - Uplift/constraints sentence reflects which of the two are known.
  - Missing factors are listed by display name.
  - Low and Medium confidence add a precision note; High does not.
  - Never gives advice ("should", "recommend", "buy").
"""

from __future__ import annotations

import pytest

from deal_scorer.models.result import Drivers, ScoreRange, ScoreResult, SubScore
from deal_scorer.reporting.summary import build_summary
from deal_scorer.scoring.engine import compute_deal_score
from deal_scorer.taxonomy.factors import FACTOR_ORDER, ConfidenceLabel, SubScoreName


def _result_with_cash_flow(cash_flow: SubScore) -> ScoreResult:
    subs = tuple(
        cash_flow if name == SubScoreName.CASH_FLOW
        else SubScore(name=name, score=60, label="Unknown", detail="")
        for name in FACTOR_ORDER
    )
    return ScoreResult(
        score=58,
        score_range=ScoreRange(low=53, high=63),
        confidence=0.2,
        confidence_label=ConfidenceLabel.LOW,
        subs=subs,
        drivers=Drivers(),
    )


class TestBuildSummary:
    def test_strong_deal(self, strong_inputs):
        text = build_summary(compute_deal_score(strong_inputs))
        assert text.startswith("This property shows moderate scores with variation across metrics.")
        assert "Cash flow is positive at +$150/wk" in text
        assert "Uplift scenarios show base uplift: 10% (conservative: 5%)." in text
        assert "Identified constraints are minimal." in text
        assert "Estimated gross yield: 5.5%, above typical market averages." in text
        assert "Data for value was not available for this analysis." in text
        assert "precision" not in text

    def test_price_only(self, price_only_inputs):
        text = build_summary(compute_deal_score(price_only_inputs))
        assert text.startswith("This property shows mixed results")
        assert "Cash flow" not in text
        assert (
            "Data for value and yield and cash flow and uplift potential and constraints "
            "was not available" in text
        )
        assert text.endswith("Limited data availability affects scoring precision.")

    def test_negative_deal(self, negative_inputs):
        text = build_summary(compute_deal_score(negative_inputs))
        assert text.startswith("This property scores below average on several metrics.")
        assert "significant negative position at -$300/wk" in text
        assert "Uplift data is incomplete" not in text
        assert "Uplift scenarios show base uplift: 2% (conservative: -5%). Constraint data is incomplete." in text
        assert text.endswith("Some data points were unavailable, affecting scoring precision.")

    def test_multiple_constraints(self, heavily_constrained_inputs):
        text = build_summary(compute_deal_score(heavily_constrained_inputs))
        assert "Uplift scenarios show limited potential. Multiple constraints have been identified." in text

    def test_mildly_negative_cash_flow(self, sample_report):
        text = build_summary(compute_deal_score(sample_report))
        assert "Cash flow is negative at -$180/wk" in text
        assert "Multiple planning or site constraints have been identified." in text
        assert "within typical market range" in text
        assert "was not available" not in text

    def test_constraints_known_uplift_missing(self):
        text = build_summary(compute_deal_score({
            "constraints": [{"key": "x", "label": "X", "severity": "low"}],
        }))
        assert "Uplift data is incomplete. Few constraints identified." in text

    @pytest.mark.parametrize(
        "weekly, expected",
        [
            (100.0, "Cash flow is positive"),
            (99.6, "Cash flow is positive"),
            (0.0, "approximately neutral"),
            (-0.4, "approximately neutral"),
            (-200.0, "Cash flow is negative"),
            (-200.6, "significant negative position"),
        ],
    )
    def test_cash_flow_band_uses_metric(self, weekly, expected):
        # The detail text carries no figure, so only the metric can drive the band.
        result = _result_with_cash_flow(SubScore(
            name=SubScoreName.CASH_FLOW, score=50, label="OK", detail="see report", metric=weekly,
        ))
        assert expected in build_summary(result)

    @pytest.mark.parametrize(
        "fixture_name",
        ["strong_inputs", "price_only_inputs", "negative_inputs", "overpriced_inputs"],
    )
    def test_no_advice(self, fixture_name, request):
        text = build_summary(compute_deal_score(request.getfixturevalue(fixture_name))).lower()
        for word in ("should", "recommend", " buy", "avoid this"):
            assert word not in text
