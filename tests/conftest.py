"""
Shared pytest fixtures for the deal scorer test suite.

Provides:
  - ``scoring_config``: the canonical ``ScoringConfig`` (built-in defaults).
  - Scenario ``ScoreInputs`` factories used across engine and reporting tests.
  - ``sample_report``: a realistic upstream report dict (camelCase).
"""

from __future__ import annotations

import pytest

from deal_scorer.config import ScoringConfig
from deal_scorer.models.inputs import ConstraintFlag, ScoreInputs, UpliftScenario
from deal_scorer.taxonomy.factors import ConstraintSeverity


def make_flag(label: str, severity: str) -> ConstraintFlag:
    return ConstraintFlag(
        key=label.lower().replace(" ", "_"),
        label=label,
        severity=ConstraintSeverity(severity),
    )


@pytest.fixture
def scoring_config() -> ScoringConfig:
    return ScoringConfig()


# ── Scenario inputs ───────────────────────────────────────────────────────────

@pytest.fixture
def strong_inputs() -> ScoreInputs:
    """High yield, positive cash flow, good uplift, one minor constraint."""
    return ScoreInputs(
        purchase_price=800_000,
        yield_percent=5.5,
        cash_flow_weekly=150,
        uplift=UpliftScenario(conservative=40_000, base=80_000, upside=120_000),
        constraints=(make_flag("Minor setback requirement", "low"),),
    )


@pytest.fixture
def price_only_inputs() -> ScoreInputs:
    """Everything missing except the purchase price."""
    return ScoreInputs(purchase_price=500_000)


@pytest.fixture
def negative_inputs() -> ScoreInputs:
    """Negative weekly cash flow and a negative conservative uplift."""
    return ScoreInputs(
        purchase_price=1_000_000,
        yield_percent=3.5,
        cash_flow_weekly=-300,
        uplift=UpliftScenario(conservative=-50_000, base=20_000, upside=80_000),
        constraints=(),
    )


@pytest.fixture
def overpriced_inputs() -> ScoreInputs:
    """Asking price 37.5% above the estimated value."""
    return ScoreInputs(
        purchase_price=800_000,
        asking_price=1_100_000,
        yield_percent=5.0,
        cash_flow_weekly=100,
        uplift=UpliftScenario(base=80_000),
        constraints=(),
    )


@pytest.fixture
def heavily_constrained_inputs() -> ScoreInputs:
    """Three high-severity constraints and one medium."""
    return ScoreInputs(
        purchase_price=600_000,
        yield_percent=4.5,
        cash_flow_weekly=50,
        uplift=UpliftScenario(base=30_000),
        constraints=(
            make_flag("Heritage overlay", "high"),
            make_flag("Flood zone", "high"),
            make_flag("Bushfire prone", "high"),
            make_flag("Easement restriction", "medium"),
        ),
    )


# ── Upstream report ───────────────────────────────────────────────────────────

@pytest.fixture
def sample_report() -> dict:
    """A trimmed upstream property-analysis report (extra keys included)."""
    return {
        "address": "12 Example St, Marrickville NSW",
        "valueSnapshot": {
            "estimateMin": 1_150_000,
            "estimateMax": 1_250_000,
            "indicativeMidpoint": 1_200_000,
            "askingPrice": 1_260_000,
            "confidenceLevel": "Medium",
        },
        "rentalPosition": {
            "estimatedWeeklyRent": 900,
            "estimatedAnnualRent": 46_800,
            "grossYieldPercent": 3.9,
            "estimatedCashPositionWeekly": -180,
        },
        "valueAddStrategies": [
            {
                "title": "Kitchen and bathroom refresh",
                "estimatedUplift": {"low": 60_000, "high": 100_000, "upliftNotes": "comps"},
                "saleProfitEstimate": {"low": 10_000, "high": 30_000},
            },
            {
                "title": "Granny flat",
                "saleProfitEstimate": {"low": 40_000, "high": 80_000},
            },
        ],
        "developmentScenarios": [
            {
                "title": "Duplex",
                "estimatedNetProfit": {"low": 150_000, "high": 300_000},
                "keyConstraints": ["Minimum lot width", "Heritage overlay"],
                "keyRisks": ["Construction cost blowout"],
            },
        ],
        "watchOuts": [
            {"title": "Flood Zone", "severity": "Critical", "description": "1:100"},
            {"title": "Aircraft noise", "severity": "Warning"},
            {"title": "Strata levies", "severity": "Info"},
        ],
    }
