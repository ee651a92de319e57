"""
Factor taxonomy for the deal score.

Four small vocabularies describe every scoring call:
  - ``SubScoreName``       — the five scored factors, in canonical order.
  - ``ConstraintSeverity`` — severity tier of a single constraint flag.
  - ``WatchOutSeverity``   — severity vocabulary used by upstream reports.
  - ``ConfidenceLabel``    — discrete bucket for the 0–1 confidence value.

The declaration order of ``SubScoreName`` is significant: it is the order of
``ScoreResult.subs`` and the tie-break order used by the driver ranker.

This module has NO imports from any other ``deal_scorer`` package.
"""

from enum import StrEnum


class SubScoreName(StrEnum):
    """The five independent factors that make up the deal score."""

    VALUE = "value"
    """Price premium: asking price relative to the estimated market value."""

    YIELD = "yield"
    """Rental yield, net when expenses are known, otherwise gross."""

    CASH_FLOW = "cashFlow"
    """Weekly cash position after expenses and debt service."""

    UPLIFT = "uplift"
    """Renovation / development value uplift relative to price."""

    CONSTRAINTS = "constraints"
    """Planning, physical and market risks identified for the site."""


class ConstraintSeverity(StrEnum):
    """Severity tier of a ``ConstraintFlag``."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class WatchOutSeverity(StrEnum):
    """Severity vocabulary of upstream watch-outs."""

    CRITICAL = "Critical"
    WARNING = "Warning"
    INFO = "Info"


class ConfidenceLabel(StrEnum):
    """Discrete confidence bucket shown next to the score."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


# Canonical factor order (definition order of the enum).
FACTOR_ORDER: tuple[SubScoreName, ...] = tuple(SubScoreName)

UNKNOWN_LABEL = "Unknown"

# Watch-out severity → constraint severity. Anything unrecognised maps to LOW.
WATCH_OUT_SEVERITY_MAP: dict[str, ConstraintSeverity] = {
    WatchOutSeverity.CRITICAL: ConstraintSeverity.HIGH,
    WatchOutSeverity.WARNING:  ConstraintSeverity.MEDIUM,
    WatchOutSeverity.INFO:     ConstraintSeverity.LOW,
}

FACTOR_DISPLAY_NAMES: dict[SubScoreName, str] = {
    SubScoreName.VALUE:       "Value",
    SubScoreName.YIELD:       "Yield",
    SubScoreName.CASH_FLOW:   "Cash Flow",
    SubScoreName.UPLIFT:      "Uplift Potential",
    SubScoreName.CONSTRAINTS: "Constraints",
}


def watch_out_to_constraint_severity(severity: str | None) -> ConstraintSeverity:
    """Map an upstream watch-out severity string to a ``ConstraintSeverity``."""
    return WATCH_OUT_SEVERITY_MAP.get(severity or "", ConstraintSeverity.LOW)
