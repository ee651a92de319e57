"""
Numeric helpers shared by the models and the scoring engine.

  - ``safe_number``   — the "safe-number" guard: anything that is not a finite
                        real number becomes ``None``.
  - ``clamp``         — bound a value into ``[lo, hi]``.
  - ``round_half_up`` — integer rounding with ``.5`` always rounded upward,
                        so ``56.5 -> 57`` and ``-2.5 -> -2``.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any


def safe_number(value: Any) -> float | None:
    """Return ``value`` as a float, or ``None`` if it is not a finite number.

    ``bool`` is rejected even though it subclasses ``int``: a flag is not an
    amount.  Numeric strings are rejected too; upstream reports are JSON and
    carry real numbers where a number is meant.

    Examples::

        safe_number(5)             -> 5.0
        safe_number(0)             -> 0.0
        safe_number(float("nan"))  -> None
        safe_number(float("inf"))  -> None
        safe_number("12")          -> None
        safe_number(None)          -> None
    """
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    result = float(value)
    if not math.isfinite(result):
        return None
    return result


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
