"""
Sub-score calculators: five pure functions, one per factor.

Each calculator has the signature ``(ScoreInputs, ScoringConfig) -> FactorResult``
and never raises.  When its required inputs are missing it returns the
factor's configured neutral score with ``available=False``; the engine turns
that into a ``SubScore`` labelled ``"Unknown"``.

Factor rules (tables live in ``ScoringConfig``)
-----------------------------------------------
value:
    premium_pct = (asking − purchase) / purchase × 100.
    Needs both prices and purchase != 0.  Table read with ``>=``.

yield:
    Direct ``yield_percent`` wins.  Otherwise needs purchase > 0 and rent;
    net yield when expenses are known, else gross.  Table read with ``<``.

cashFlow:
    Annual figure from: cash_flow_annual → cash_flow_weekly × 52 →
    rent − expenses − debt (missing costs count as 0; rent required).
    Scored on the weekly figure.  Table read with ``>=``.

uplift:
    Needs purchase > 0 and uplift.base.  base_pct table read with ``<=``;
    a negative conservative percentage subtracts a penalty (read with ``>=``),
    then the score is clamped to [0, 100].

constraints:
    100 − Σ per-severity penalty, clamped.  An empty or absent list is
    "unknown" unless ``empty_list_is_clear`` is set.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from deal_scorer.config import ScoringConfig
from deal_scorer.models.inputs import ScoreInputs
from deal_scorer.scoring.breakpoints import score_at_least, score_at_most, score_below
from deal_scorer.taxonomy.factors import UNKNOWN_LABEL, SubScoreName
from deal_scorer.utils.numbers import clamp, round_half_up
from deal_scorer.utils.resolvers import first_resolved

MISSING_INPUTS = "Missing inputs"

# Label bands: first row with score >= threshold wins.
VALUE_LABELS: tuple[tuple[int, str], ...] = (
    (85, "Great Value"),
    (70, "Fair"),
    (50, "Overpriced"),
    (30, "Poor Value"),
)
VALUE_LABEL_FLOOR = "Avoid"

STRENGTH_LABELS: tuple[tuple[int, str], ...] = ((75, "Strong"), (45, "OK"))
STRENGTH_LABEL_FLOOR = "Weak"

CONSTRAINT_LABELS: tuple[tuple[int, str], ...] = ((75, "Few Issues"), (45, "Some Issues"))
CONSTRAINT_LABEL_FLOOR = "Major Issues"


@dataclass(frozen=True)
class FactorResult:
    """Common result shape of every calculator.

    Attributes:
        name:      Factor identifier.
        score:     Integer score in [0, 100].
        available: False when the neutral fallback was used.
        label:     Category label, ``"Unknown"`` when not available.
        detail:    Explanation string.
        metrics:   Raw intermediate figures (premium_pct, weekly, ...) for
                   logging and tests.
    """

    name: SubScoreName
    score: int
    available: bool
    label: str
    detail: str
    metrics: dict[str, Any] = field(default_factory=dict)


def _band_label(score: int, bands: tuple[tuple[int, str], ...], floor: str) -> str:
    for threshold, label in bands:
        if score >= threshold:
            return label
    return floor


def _unavailable(name: SubScoreName, neutral: int, detail: str = MISSING_INPUTS) -> FactorResult:
    return FactorResult(
        name=name,
        score=int(clamp(neutral, 0, 100)),
        available=False,
        label=UNKNOWN_LABEL,
        detail=detail,
    )


def _to_score(raw: float) -> int:
    return int(clamp(round_half_up(raw), 0, 100))


# ── Value (price premium) ─────────────────────────────────────────────────────

def value_label(score: int) -> str:
    return _band_label(score, VALUE_LABELS, VALUE_LABEL_FLOOR)


def compute_value(inputs: ScoreInputs, config: ScoringConfig) -> FactorResult:
    cfg = config.value
    purchase = inputs.purchase_price
    asking = inputs.asking_price

    if asking is None:
        return _unavailable(SubScoreName.VALUE, cfg.neutral_score, "No asking price available")
    if purchase is None:
        return _unavailable(
            SubScoreName.VALUE, cfg.neutral_score, "No market value estimate available"
        )
    if purchase == 0:
        return _unavailable(SubScoreName.VALUE, cfg.neutral_score, "Market value estimate is zero")

    premium_pct = (asking - purchase) / purchase * 100.0
    score = _to_score(score_at_least(premium_pct, cfg.table, cfg.floor_score))

    if premium_pct > 0:
        detail = f"Asking {premium_pct:.1f}% above estimated value"
    elif premium_pct < 0:
        detail = f"Asking {abs(premium_pct):.1f}% below estimated value"
    else:
        detail = "Asking at estimated value"

    return FactorResult(
        name=SubScoreName.VALUE,
        score=score,
        available=True,
        label=value_label(score),
        detail=detail,
        metrics={"premium_pct": premium_pct},
    )


# ── Yield ─────────────────────────────────────────────────────────────────────

def strength_label(score: int) -> str:
    """Label bands shared by yield, cash flow and uplift."""
    return _band_label(score, STRENGTH_LABELS, STRENGTH_LABEL_FLOOR)


def compute_yield(inputs: ScoreInputs, config: ScoringConfig) -> FactorResult:
    cfg = config.yield_
    is_net = False

    if inputs.yield_percent is not None:
        yield_pct = inputs.yield_percent
    else:
        price = inputs.purchase_price
        rent = inputs.annual_rent
        if price is None or price <= 0 or rent is None:
            return _unavailable(SubScoreName.YIELD, cfg.neutral_score)
        is_net = inputs.annual_expenses is not None
        net_rent = rent - inputs.annual_expenses if is_net else rent
        yield_pct = net_rent / price * 100.0

    score = _to_score(score_below(yield_pct, cfg.table, cfg.ceiling_score))
    kind = "Net" if is_net else "Gross"

    return FactorResult(
        name=SubScoreName.YIELD,
        score=score,
        available=True,
        label=strength_label(score),
        detail=f"{kind} yield: {yield_pct:.1f}%",
        metrics={"yield_pct": yield_pct, "is_net": is_net},
    )


# ── Cash flow ─────────────────────────────────────────────────────────────────

def resolve_annual_cash_flow(
    inputs: ScoreInputs, weeks_per_year: int = 52
) -> tuple[float | None, str | None]:
    """Resolve the annual cash position and name the source it came from."""

    def from_weekly() -> float | None:
        if inputs.cash_flow_weekly is None:
            return None
        return inputs.cash_flow_weekly * weeks_per_year

    def from_components() -> float | None:
        if inputs.annual_rent is None:
            return None
        return (
            inputs.annual_rent
            - (inputs.annual_expenses or 0.0)
            - (inputs.annual_debt_service or 0.0)
        )

    return first_resolved([
        ("cash_flow_annual", lambda: inputs.cash_flow_annual),
        ("cash_flow_weekly", from_weekly),
        ("components", from_components),
    ])


def compute_cash_flow(inputs: ScoreInputs, config: ScoringConfig) -> FactorResult:
    cfg = config.cash_flow
    annual, source = resolve_annual_cash_flow(inputs, cfg.weeks_per_year)
    if annual is None:
        return _unavailable(SubScoreName.CASH_FLOW, cfg.neutral_score)

    weekly = annual / cfg.weeks_per_year
    score = _to_score(score_at_least(weekly, cfg.table, cfg.floor_score))
    rounded = round_half_up(weekly)
    sign = "+" if rounded >= 0 else "-"

    return FactorResult(
        name=SubScoreName.CASH_FLOW,
        score=score,
        available=True,
        label=strength_label(score),
        detail=f"{sign}${abs(rounded)}/wk",
        metrics={"weekly": weekly, "annual": annual, "source": source},
    )


# ── Uplift ────────────────────────────────────────────────────────────────────

def compute_uplift(inputs: ScoreInputs, config: ScoringConfig) -> FactorResult:
    cfg = config.uplift
    price = inputs.purchase_price
    base = inputs.uplift.base if inputs.uplift is not None else None
    conservative = inputs.uplift.conservative if inputs.uplift is not None else None

    if price is None or price <= 0 or base is None:
        return _unavailable(SubScoreName.UPLIFT, cfg.neutral_score)

    base_pct = base / price * 100.0
    conservative_pct = conservative / price * 100.0 if conservative is not None else None

    raw = score_at_most(base_pct, cfg.table, cfg.ceiling_score)
    penalty = 0.0
    if conservative_pct is not None and conservative_pct < 0:
        penalty = score_at_least(conservative_pct, cfg.penalty_table, cfg.max_penalty)
    score = _to_score(raw - penalty)

    detail = f"Base uplift: {base_pct:.0f}%"
    if conservative_pct is not None:
        detail += f" (conservative: {conservative_pct:.0f}%)"

    return FactorResult(
        name=SubScoreName.UPLIFT,
        score=score,
        available=True,
        label=strength_label(score),
        detail=detail,
        metrics={
            "base_pct": base_pct,
            "conservative_pct": conservative_pct,
            "penalty": penalty,
        },
    )


# ── Constraints ───────────────────────────────────────────────────────────────

def constraints_label(score: int) -> str:
    return _band_label(score, CONSTRAINT_LABELS, CONSTRAINT_LABEL_FLOOR)


def compute_constraints(inputs: ScoreInputs, config: ScoringConfig) -> FactorResult:
    cfg = config.constraints
    flags = inputs.constraints

    if not flags:
        if flags is not None and cfg.empty_list_is_clear:
            return FactorResult(
                name=SubScoreName.CONSTRAINTS,
                score=100,
                available=True,
                label=constraints_label(100),
                detail="No major constraints",
                metrics={"penalty": 0, "count": 0},
            )
        return _unavailable(
            SubScoreName.CONSTRAINTS, cfg.neutral_score, "No constraint data provided"
        )

    penalty = sum(cfg.penalties.get(str(flag.severity), 0) for flag in flags)
    score = _to_score(100 - penalty)
    detail = ", ".join(flag.label for flag in flags[: cfg.detail_max_labels])

    return FactorResult(
        name=SubScoreName.CONSTRAINTS,
        score=score,
        available=True,
        label=constraints_label(score),
        detail=detail,
        metrics={"penalty": penalty, "count": len(flags)},
    )


# ── Registry ──────────────────────────────────────────────────────────────────

Calculator = Callable[[ScoreInputs, ScoringConfig], FactorResult]

# Canonical order: value, yield, cashFlow, uplift, constraints.
CALCULATORS: tuple[tuple[SubScoreName, Calculator], ...] = (
    (SubScoreName.VALUE,       compute_value),
    (SubScoreName.YIELD,       compute_yield),
    (SubScoreName.CASH_FLOW,   compute_cash_flow),
    (SubScoreName.UPLIFT,      compute_uplift),
    (SubScoreName.CONSTRAINTS, compute_constraints),
)


# The metric each factor's score is read from; carried onto SubScore.metric.
PRIMARY_METRICS: dict[SubScoreName, str] = {
    SubScoreName.VALUE:       "premium_pct",
    SubScoreName.YIELD:       "yield_pct",
    SubScoreName.CASH_FLOW:   "weekly",
    SubScoreName.UPLIFT:      "base_pct",
    SubScoreName.CONSTRAINTS: "penalty",
}


def run_calculators(inputs: ScoreInputs, config: ScoringConfig) -> list[FactorResult]:
    """Run every calculator in canonical order."""
    return [calculate(inputs, config) for _, calculate in CALCULATORS]
