"""
Driver ranker: the strongest and weakest factors for explanatory display.

``sorted()`` is stable, so factors with equal scores keep their canonical
order (value, yield, cashFlow, uplift, constraints) on the positive side.
The negative side is the tail of the same ordering, reversed, so the single
worst factor comes first.
"""

from __future__ import annotations

from collections.abc import Sequence

from deal_scorer.models.result import Drivers, SubScore


def rank_drivers(subs: Sequence[SubScore], top_n: int = 2) -> Drivers:
    """Return the top-``top_n`` and bottom-``top_n`` sub-scores.

    Args:
        subs:  Sub-scores in canonical order.
        top_n: Entries per side.

    Returns:
        ``Drivers`` with ``positive`` descending and ``negative`` worst-first.
    """
    if top_n <= 0 or not subs:
        return Drivers()
    ranked = sorted(subs, key=lambda s: s.score, reverse=True)
    positive = ranked[:top_n]
    negative = list(reversed(ranked[-top_n:]))
    return Drivers(positive=tuple(positive), negative=tuple(negative))
