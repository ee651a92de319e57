"""
External property-analysis report models (Input Mapper input).

These mirror only the parts of the upstream report that the scorer reads.
Unknown keys are ignored, so a full upstream report can be passed as-is.
Numeric fields use the same safe-number guard as ``ScoreInputs``; list
fields default to empty.

The report shape is owned by the upstream pipeline.  A structurally wrong
report (e.g. ``watchOuts`` that is not a list) raises
``pydantic.ValidationError``; the scorer does not try to repair it.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from deal_scorer.utils.numbers import safe_number

_REPORT_CONFIG = ConfigDict(
    frozen=True,
    extra="ignore",
    alias_generator=to_camel,
    populate_by_name=True,
)


class MoneyRange(BaseModel):
    """A low/high currency range.  Either bound may be missing."""

    model_config = _REPORT_CONFIG

    low: Optional[float] = None
    high: Optional[float] = None

    @field_validator("low", "high", mode="before")
    @classmethod
    def guard_numbers(cls, v: Any) -> float | None:
        return safe_number(v)


class ValueSnapshot(BaseModel):
    model_config = _REPORT_CONFIG

    indicative_midpoint: Optional[float] = None
    asking_price: Optional[float] = None

    @field_validator("indicative_midpoint", "asking_price", mode="before")
    @classmethod
    def guard_numbers(cls, v: Any) -> float | None:
        return safe_number(v)


class RentalPosition(BaseModel):
    model_config = _REPORT_CONFIG

    gross_yield_percent: Optional[float] = None
    estimated_annual_rent: Optional[float] = None
    estimated_cash_position_weekly: Optional[float] = None

    @field_validator(
        "gross_yield_percent",
        "estimated_annual_rent",
        "estimated_cash_position_weekly",
        mode="before",
    )
    @classmethod
    def guard_numbers(cls, v: Any) -> float | None:
        return safe_number(v)


class ValueAddStrategy(BaseModel):
    """A renovation / value-add strategy with its uplift estimates."""

    model_config = _REPORT_CONFIG

    title: Optional[str] = None
    estimated_uplift: Optional[MoneyRange] = None
    sale_profit_estimate: Optional[MoneyRange] = None


class DevelopmentScenario(BaseModel):
    """A knockdown / duplex / townhouse scenario with profit and risk text."""

    model_config = _REPORT_CONFIG

    title: Optional[str] = None
    estimated_net_profit: Optional[MoneyRange] = None
    key_constraints: list[str] = []
    key_risks: list[str] = []

    @field_validator("key_constraints", "key_risks", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class WatchOut(BaseModel):
    """A severity-tagged warning (``Critical`` / ``Warning`` / ``Info``)."""

    model_config = _REPORT_CONFIG

    title: str
    severity: Optional[str] = None


class PropertyReport(BaseModel):
    """The subset of an upstream property-analysis report used for scoring."""

    model_config = _REPORT_CONFIG

    value_snapshot: Optional[ValueSnapshot] = None
    rental_position: Optional[RentalPosition] = None
    value_add_strategies: list[ValueAddStrategy] = []
    development_scenarios: list[DevelopmentScenario] = []
    watch_outs: list[WatchOut] = []

    @field_validator(
        "value_add_strategies", "development_scenarios", "watch_outs", mode="before"
    )
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# camelCase keys that identify a dict as a report rather than ScoreInputs.
REPORT_KEYS: frozenset[str] = frozenset({
    "valueSnapshot",
    "rentalPosition",
    "valueAddStrategies",
    "developmentScenarios",
    "watchOuts",
    "value_snapshot",
    "rental_position",
    "value_add_strategies",
    "development_scenarios",
    "watch_outs",
})
