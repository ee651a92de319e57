"""
Ordered breakpoint tables.

A table is a sequence of ``(threshold, score)`` rows read top to bottom; the
first row whose comparison holds wins, otherwise the fallback applies.  The
comparison operator is chosen by the caller, so the same table format serves
every factor:

    score_at_least(37.5, ((40, 5), (30, 15)), fallback=100)   -> 15
    score_below(3.5, ((2, 10), (3, 30), (4, 55)), fallback=95) -> 55
    score_at_most(7.0, ((0, 35), (5, 55), (10, 70)), fallback=95) -> 70
"""

from __future__ import annotations

import operator
from collections.abc import Callable, Sequence

Row = tuple[float, float]


def _first_match(
    value: float,
    table: Sequence[Row],
    fallback: float,
    compare: Callable[[float, float], bool],
) -> float:
    for threshold, score in table:
        if compare(value, threshold):
            return score
    return fallback


def score_at_least(value: float, table: Sequence[Row], fallback: float) -> float:
    """First row with ``value >= threshold`` (descending thresholds)."""
    return _first_match(value, table, fallback, operator.ge)


def score_below(value: float, table: Sequence[Row], fallback: float) -> float:
    """First row with ``value < threshold`` (ascending thresholds)."""
    return _first_match(value, table, fallback, operator.lt)


def score_at_most(value: float, table: Sequence[Row], fallback: float) -> float:
    """First row with ``value <= threshold`` (ascending thresholds)."""
    return _first_match(value, table, fallback, operator.le)
