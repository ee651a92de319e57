"""
Canonical engine input models.

``ScoreInputs`` is what the five calculators read.  It is built either
directly by a caller or by the Input Mapper from a ``PropertyReport``.

Every numeric field passes through the safe-number guard before validation:
NaN, infinities, strings, booleans and containers become ``None`` instead of
raising.  ``0`` survives the guard and is treated as a real value, distinct
from "absent", by every calculator.

All models are frozen and accept either snake_case names or the camelCase
aliases used by upstream JSON (``purchasePrice``, ``cashFlowWeekly``, ...).
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from deal_scorer.taxonomy.factors import ConstraintSeverity
from deal_scorer.utils.numbers import safe_number


_WHITESPACE_RE = re.compile(r"\s+")


def constraint_key(label: str) -> str:
    """``"Heritage overlay"`` → ``"heritage_overlay"``."""
    return _WHITESPACE_RE.sub("_", label.strip().lower())


def coerce_severity(value: Any) -> ConstraintSeverity:
    """Case-insensitive severity lookup.  Anything unrecognised is ``LOW``."""
    if isinstance(value, ConstraintSeverity):
        return value
    if isinstance(value, str):
        try:
            return ConstraintSeverity(value.strip().lower())
        except ValueError:
            pass
    return ConstraintSeverity.LOW


class ConstraintFlag(BaseModel):
    """A single identified risk or planning/physical limitation.

    Only ``severity`` is required in practice: ``{"severity": "low"}`` is a
    valid flag.  ``label`` falls back to the severity text and ``key`` is
    derived from ``label``.

    Attributes:
        key: Machine identifier, e.g. ``"heritage_overlay"``.
        label: Display text, e.g. ``"Heritage overlay"``.
        severity: ``low``, ``medium`` or ``high``.  Unrecognised values
            become ``low``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    severity: ConstraintSeverity

    @model_validator(mode="before")
    @classmethod
    def fill_identity(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        data["severity"] = coerce_severity(data.get("severity"))
        if not data.get("label"):
            data["label"] = str(data["severity"])
        if not data.get("key"):
            data["key"] = constraint_key(data["label"])
        return data


class UpliftScenario(BaseModel):
    """Absolute value uplift for three scenario points.  Amounts may be negative."""

    model_config = ConfigDict(frozen=True)

    conservative: Optional[float] = None
    base: Optional[float] = None
    upside: Optional[float] = None

    @field_validator("conservative", "base", "upside", mode="before")
    @classmethod
    def guard_numbers(cls, v: Any) -> float | None:
        return safe_number(v)


class ScoreInputs(BaseModel):
    """Canonical scoring input.  Every field is optional.

    Attributes:
        purchase_price: Estimated market value / purchase price.
        asking_price: Vendor asking price (for the price-premium factor).
        annual_rent: Gross annual rent.
        annual_expenses: Annual holding costs excluding debt service.
        annual_debt_service: Annual loan repayments.
        cash_flow_annual: Pre-computed annual cash position.
        cash_flow_weekly: Pre-computed weekly cash position.
        yield_percent: Pre-computed yield in percent (e.g. ``5.5``).
        uplift: Conservative / base / upside uplift amounts.
        constraints: Identified constraint flags, or ``None`` when unknown.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    purchase_price: Optional[float] = None
    asking_price: Optional[float] = None
    annual_rent: Optional[float] = None
    annual_expenses: Optional[float] = None
    annual_debt_service: Optional[float] = None
    cash_flow_annual: Optional[float] = None
    cash_flow_weekly: Optional[float] = None
    yield_percent: Optional[float] = None
    uplift: Optional[UpliftScenario] = None
    constraints: Optional[tuple[ConstraintFlag, ...]] = None

    @field_validator(
        "purchase_price",
        "asking_price",
        "annual_rent",
        "annual_expenses",
        "annual_debt_service",
        "cash_flow_annual",
        "cash_flow_weekly",
        "yield_percent",
        mode="before",
    )
    @classmethod
    def guard_numbers(cls, v: Any) -> float | None:
        return safe_number(v)
