"""
Scoring output models.

``ScoreResult`` is the single output of the engine.  It is frozen and
validated on construction so an inconsistent result cannot be produced:

  - every ``SubScore.score`` and the overall ``score`` lie in ``[0, 100]``;
  - ``confidence`` lies in ``[0, 1]``;
  - a ``score_range`` brackets the score (``low <= score <= high``);
  - each driver list holds at most ``MAX_DRIVERS`` entries.

Whether a range must be present depends on the configured confidence
threshold, so that rule is applied by the engine rather than here.

``model_dump(by_alias=True)`` emits the camelCase shape consumed by the
display layer (``scoreRange``, ``confidenceLabel``, ...).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from deal_scorer.taxonomy.factors import UNKNOWN_LABEL, ConfidenceLabel, SubScoreName

MAX_DRIVERS = 2

_RESULT_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
)


def _check_score(v: int, field: str) -> int:
    if not 0 <= v <= 100:
        raise ValueError(f"{field} must be in [0, 100], got {v}.")
    return v


class SubScore(BaseModel):
    """One factor's contribution.

    Attributes:
        name: Factor identifier.
        score: Integer score in ``[0, 100]``.
        label: Short category (``"Strong"``, ``"Fair"``, ...) or ``"Unknown"``
            when the factor's inputs were unavailable.
        detail: Human-readable explanation for tooltips.
        metric: The raw figure the score was read from (weekly cash flow,
            yield %, ...).  Not serialised; ``None`` when unavailable.
    """

    model_config = _RESULT_CONFIG

    name: SubScoreName
    score: int
    label: str
    detail: str
    metric: Optional[float] = Field(default=None, exclude=True)

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: int) -> int:
        return _check_score(v, "score")

    @property
    def is_known(self) -> bool:
        return self.label != UNKNOWN_LABEL


class ScoreRange(BaseModel):
    """Uncertainty band around the score, shown when confidence is low."""

    model_config = _RESULT_CONFIG

    low: int
    high: int

    @model_validator(mode="after")
    def validate_bounds(self) -> "ScoreRange":
        _check_score(self.low, "low")
        _check_score(self.high, "high")
        if self.low > self.high:
            raise ValueError(f"low ({self.low}) must be <= high ({self.high}).")
        return self


class Drivers(BaseModel):
    """Top positive and top negative factors (negative is worst-first)."""

    model_config = _RESULT_CONFIG

    positive: tuple[SubScore, ...] = ()
    negative: tuple[SubScore, ...] = ()

    @field_validator("positive", "negative")
    @classmethod
    def validate_length(cls, v: tuple[SubScore, ...]) -> tuple[SubScore, ...]:
        if len(v) > MAX_DRIVERS:
            raise ValueError(f"at most {MAX_DRIVERS} drivers allowed, got {len(v)}.")
        return v


class ScoreResult(BaseModel):
    """The deal score with its confidence, breakdown and drivers."""

    model_config = _RESULT_CONFIG

    score: int
    score_range: Optional[ScoreRange] = None
    confidence: float
    confidence_label: ConfidenceLabel
    subs: tuple[SubScore, ...]
    drivers: Drivers

    @field_validator("score")
    @classmethod
    def validate_score(cls, v: int) -> int:
        return _check_score(v, "score")

    @field_validator("confidence")
    @classmethod
    def validate_confidence(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {v}.")
        return v

    @model_validator(mode="after")
    def validate_consistency(self) -> "ScoreResult":
        if self.score_range is not None and not (
            self.score_range.low <= self.score <= self.score_range.high
        ):
            raise ValueError(
                f"score_range ({self.score_range.low}-{self.score_range.high}) "
                f"must contain score ({self.score})."
            )
        names = {s.name for s in self.subs}
        for driver in (*self.drivers.positive, *self.drivers.negative):
            if driver.name not in names:
                raise ValueError(f"driver '{driver.name}' is not one of subs.")
        return self

    def sub(self, name: SubScoreName | str) -> SubScore:
        """Return the sub-score for ``name``.

        Raises:
            KeyError: If no sub-score has that name.
        """
        for s in self.subs:
            if s.name == name:
                return s
        raise KeyError(name)

    @property
    def display_score(self) -> str:
        """``"41–71"`` when a range is present, else ``"77"``."""
        if self.score_range is not None:
            return f"{self.score_range.low}–{self.score_range.high}"
        return str(self.score)
