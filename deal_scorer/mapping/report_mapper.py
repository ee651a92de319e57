"""
Input Mapper: external property-analysis report → ``ScoreInputs``.

Field mapping
-------------
    valueSnapshot.indicativeMidpoint             → purchase_price
    valueSnapshot.askingPrice                    → asking_price
    rentalPosition.grossYieldPercent             → yield_percent
    rentalPosition.estimatedAnnualRent           → annual_rent
    rentalPosition.estimatedCashPositionWeekly   → cash_flow_weekly

Uplift (first source that yields a range wins)
----------------------------------------------
    1. value-add strategies — per strategy ``estimatedUplift``, else
       ``saleProfitEstimate``; strategies with neither are skipped.
    2. development scenarios — ``estimatedNetProfit``.
    The chosen ranges are averaged: conservative = mean(low),
    upside = mean(high), base = midpoint of the two.  A missing bound inside
    a present range counts as 0.

Constraints
-----------
    Every development scenario's ``keyConstraints`` then ``keyRisks``
    (severity medium), followed by every watch-out (Critical → high,
    Warning → medium, anything else → low).  No deduplication.  An empty
    list maps to ``None`` ("unknown").

Absent facts stay ``None``; nothing is defaulted to zero.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from deal_scorer.models.inputs import (
    ConstraintFlag,
    ScoreInputs,
    UpliftScenario,
    constraint_key,
)
from deal_scorer.models.report import MoneyRange, PropertyReport, ValueAddStrategy
from deal_scorer.taxonomy.factors import ConstraintSeverity, watch_out_to_constraint_severity
from deal_scorer.utils.resolvers import first_resolved

logger = logging.getLogger(__name__)


def _average_ranges(ranges: Iterable[MoneyRange]) -> UpliftScenario | None:
    ranges = list(ranges)
    if not ranges:
        return None
    avg_low = sum(r.low or 0.0 for r in ranges) / len(ranges)
    avg_high = sum(r.high or 0.0 for r in ranges) / len(ranges)
    return UpliftScenario(
        conservative=avg_low,
        base=(avg_low + avg_high) / 2,
        upside=avg_high,
    )


def _strategy_range(strategy: ValueAddStrategy) -> MoneyRange | None:
    if strategy.estimated_uplift is not None:
        return strategy.estimated_uplift
    return strategy.sale_profit_estimate


def _strategy_uplift(report: PropertyReport) -> UpliftScenario | None:
    ranges = (_strategy_range(s) for s in report.value_add_strategies)
    return _average_ranges(r for r in ranges if r is not None)


def _development_uplift(report: PropertyReport) -> UpliftScenario | None:
    return _average_ranges(
        d.estimated_net_profit
        for d in report.development_scenarios
        if d.estimated_net_profit is not None
    )


def resolve_uplift(report: PropertyReport) -> tuple[UpliftScenario | None, str | None]:
    """Return the averaged uplift scenario and the name of its source."""
    return first_resolved([
        ("value_add_strategies", lambda: _strategy_uplift(report)),
        ("development_scenarios", lambda: _development_uplift(report)),
    ])


def collect_constraints(report: PropertyReport) -> list[ConstraintFlag]:
    """Assemble constraint flags from scenarios and watch-outs, in report order."""
    flags: list[ConstraintFlag] = []

    for scenario in report.development_scenarios:
        for text in (*scenario.key_constraints, *scenario.key_risks):
            flags.append(
                ConstraintFlag(
                    key=constraint_key(text),
                    label=text,
                    severity=ConstraintSeverity.MEDIUM,
                )
            )

    for watch_out in report.watch_outs:
        flags.append(
            ConstraintFlag(
                key=constraint_key(watch_out.title),
                label=watch_out.title,
                severity=watch_out_to_constraint_severity(watch_out.severity),
            )
        )

    return flags


def map_report_to_inputs(report: PropertyReport | Mapping[str, Any]) -> ScoreInputs:
    """Translate an upstream report into canonical ``ScoreInputs``.

    Args:
        report: A ``PropertyReport`` or a raw dict in the upstream (camelCase)
            shape.  Unknown keys are ignored.

    Returns:
        ``ScoreInputs`` with every fact the report carries.

    Raises:
        pydantic.ValidationError: If a raw dict is structurally malformed.
    """
    if not isinstance(report, PropertyReport):
        report = PropertyReport.model_validate(report)

    snapshot = report.value_snapshot
    rental = report.rental_position

    uplift, uplift_source = resolve_uplift(report)
    constraints = collect_constraints(report)

    logger.debug(
        "Mapped report: uplift_source=%s constraints=%d strategies=%d scenarios=%d",
        uplift_source,
        len(constraints),
        len(report.value_add_strategies),
        len(report.development_scenarios),
    )

    return ScoreInputs(
        purchase_price=snapshot.indicative_midpoint if snapshot else None,
        asking_price=snapshot.asking_price if snapshot else None,
        yield_percent=rental.gross_yield_percent if rental else None,
        annual_rent=rental.estimated_annual_rent if rental else None,
        cash_flow_weekly=rental.estimated_cash_position_weekly if rental else None,
        uplift=uplift,
        constraints=tuple(constraints) if constraints else None,
    )
