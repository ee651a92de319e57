"""
Application configuration management.

Load order (each layer overrides the previous):
  1. ``config/default.toml``      — committed static defaults
  2. ``config/local.toml``        — optional local overrides (gitignored)
  3. ``.env``                     — local env overrides (gitignored)
  4. Environment variables        — ``DEAL_SCORER_*`` prefix

Entry point: ``load_config(config_path=None) -> AppConfig``

The scoring engine itself only needs a ``ScoringConfig``.  Every model below
has defaults equal to the canonical scheme, so ``ScoringConfig()`` is a valid
configuration even when no TOML file is present (library use).

Breakpoint tables are stored as ordered ``[threshold, score]`` pairs.  How a
table is read (``>=``, ``<`` or ``<=`` comparison) is fixed per factor by the
calculator; only the numbers live here.
"""

from __future__ import annotations

import math
import os
import tomllib
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator, model_validator

# ── Table helpers ─────────────────────────────────────────────────────────────

Table = tuple[tuple[float, float], ...]


def _validate_table(v: Table, name: str) -> Table:
    if not v:
        raise ValueError(f"{name} table must not be empty.")
    for threshold, score in v:
        if not math.isfinite(threshold):
            raise ValueError(f"{name} thresholds must be finite, got {threshold}.")
        if not 0.0 <= score <= 100.0:
            raise ValueError(f"{name} scores must be in [0, 100], got {score}.")
    return v


def _validate_score(v: int, name: str) -> int:
    if not 0 <= v <= 100:
        raise ValueError(f"{name} must be in [0, 100], got {v}.")
    return v


def _validate_order(v: Table, name: str, descending: bool) -> Table:
    thresholds = [t for t, _ in v]
    expected = sorted(thresholds, reverse=descending)
    if thresholds != expected:
        order = "descending" if descending else "ascending"
        raise ValueError(f"{name} thresholds must be in {order} order, got {thresholds}.")
    return v


# ── Sub-config models ─────────────────────────────────────────────────────────


class WeightsConfig(BaseModel):
    """Aggregation weights per factor.  Must sum to exactly 1.0.

    Canonical five-factor scheme: value 0.20, yield 0.20, cashFlow 0.30,
    uplift 0.20, constraints 0.10.
    """

    model_config = ConfigDict(frozen=True)

    value: float = 0.20
    yield_: float = 0.20
    cash_flow: float = 0.30
    uplift: float = 0.20
    constraints: float = 0.10

    @model_validator(mode="after")
    def validate_weights(self) -> "WeightsConfig":
        weights = self.as_dict()
        for name, w in weights.items():
            if not 0.0 <= w <= 1.0:
                raise ValueError(f"weight '{name}' must be in [0.0, 1.0], got {w}.")
        total = math.fsum(weights.values())
        if abs(total - 1.0) > 1e-9:
            raise ValueError(f"weights must sum to 1.0, got {total}.")
        return self

    def as_dict(self) -> dict[str, float]:
        """Weights keyed by ``SubScoreName`` value (``"cashFlow"``, ...)."""
        return {
            "value":       self.value,
            "yield":       self.yield_,
            "cashFlow":    self.cash_flow,
            "uplift":      self.uplift,
            "constraints": self.constraints,
        }


class ValueConfig(BaseModel):
    """Price-premium table: first row with ``premium_pct >= threshold`` wins."""

    model_config = ConfigDict(frozen=True)

    table: Table = (
        (40.0, 5.0), (30.0, 15.0), (20.0, 30.0), (10.0, 50.0),
        (0.0, 70.0), (-10.0, 85.0), (-20.0, 95.0),
    )
    floor_score: int = 100       # premium below the last threshold
    neutral_score: int = 60

    @field_validator("table")
    @classmethod
    def validate_table(cls, v: Table) -> Table:
        return _validate_order(_validate_table(v, "value"), "value", descending=True)

    @field_validator("floor_score", "neutral_score")
    @classmethod
    def validate_scores(cls, v: int, info: ValidationInfo) -> int:
        return _validate_score(v, info.field_name)


class YieldConfig(BaseModel):
    """Yield table: first row with ``yield_pct < threshold`` wins."""

    model_config = ConfigDict(frozen=True)

    table: Table = ((2.0, 10.0), (3.0, 30.0), (4.0, 55.0), (5.0, 75.0), (6.0, 88.0))
    ceiling_score: int = 95
    neutral_score: int = 55

    @field_validator("table")
    @classmethod
    def validate_table(cls, v: Table) -> Table:
        return _validate_order(_validate_table(v, "yield"), "yield", descending=False)

    @field_validator("ceiling_score", "neutral_score")
    @classmethod
    def validate_scores(cls, v: int, info: ValidationInfo) -> int:
        return _validate_score(v, info.field_name)


class CashFlowConfig(BaseModel):
    """Weekly cash-flow table: first row with ``weekly >= threshold`` wins."""

    model_config = ConfigDict(frozen=True)

    table: Table = ((200.0, 95.0), (50.0, 80.0), (-49.0, 65.0), (-199.0, 40.0), (-499.0, 20.0))
    floor_score: int = 10
    neutral_score: int = 55
    weeks_per_year: int = 52

    @field_validator("table")
    @classmethod
    def validate_table(cls, v: Table) -> Table:
        return _validate_order(_validate_table(v, "cash_flow"), "cash_flow", descending=True)

    @field_validator("floor_score", "neutral_score")
    @classmethod
    def validate_scores(cls, v: int, info: ValidationInfo) -> int:
        return _validate_score(v, info.field_name)

    @field_validator("weeks_per_year")
    @classmethod
    def validate_weeks(cls, v: int) -> int:
        if v <= 0:
            raise ValueError(f"weeks_per_year must be positive, got {v}.")
        return v


class UpliftConfig(BaseModel):
    """Uplift tables.

    ``table``: first row with ``base_pct <= threshold`` wins.
    ``penalty_table``: applied only when the conservative percentage is
    negative; first row with ``conservative_pct >= threshold`` wins.
    Penalty values are points subtracted from the base score.
    """

    model_config = ConfigDict(frozen=True)

    table: Table = ((0.0, 35.0), (5.0, 55.0), (10.0, 70.0), (20.0, 85.0))
    ceiling_score: int = 95
    penalty_table: Table = ((-5.0, 10.0), (-10.0, 18.0))
    max_penalty: int = 25
    neutral_score: int = 55

    @field_validator("table")
    @classmethod
    def validate_table(cls, v: Table) -> Table:
        return _validate_order(_validate_table(v, "uplift"), "uplift", descending=False)

    @field_validator("penalty_table")
    @classmethod
    def validate_penalty_table(cls, v: Table) -> Table:
        return _validate_order(
            _validate_table(v, "uplift penalty"), "uplift penalty", descending=True
        )

    @field_validator("ceiling_score", "max_penalty", "neutral_score")
    @classmethod
    def validate_scores(cls, v: int, info: ValidationInfo) -> int:
        return _validate_score(v, info.field_name)


class ConstraintsConfig(BaseModel):
    """Per-severity penalties subtracted from 100."""

    model_config = ConfigDict(frozen=True)

    penalties: dict[str, int] = {"high": 22, "medium": 12, "low": 6}
    neutral_score: int = 60
    empty_list_is_clear: bool = False
    detail_max_labels: int = 3

    @field_validator("penalties")
    @classmethod
    def validate_penalties(cls, v: dict[str, int]) -> dict[str, int]:
        missing = {"high", "medium", "low"} - set(v)
        if missing:
            raise ValueError(f"penalties missing severities: {sorted(missing)}.")
        if any(p < 0 for p in v.values()):
            raise ValueError("penalties must be non-negative.")
        return v

    @field_validator("neutral_score")
    @classmethod
    def validate_neutral(cls, v: int) -> int:
        return _validate_score(v, "neutral_score")


class ConfidenceConfig(BaseModel):
    """Confidence labelling and score-range widening."""

    model_config = ConfigDict(frozen=True)

    high_threshold: float = 0.75
    medium_threshold: float = 0.50
    spread_multiplier: float = 20.0

    @model_validator(mode="after")
    def validate_thresholds(self) -> "ConfidenceConfig":
        if not 0.0 <= self.medium_threshold <= self.high_threshold <= 1.0:
            raise ValueError(
                "thresholds must satisfy 0 <= medium_threshold <= high_threshold <= 1, "
                f"got medium={self.medium_threshold}, high={self.high_threshold}."
            )
        if self.spread_multiplier < 0:
            raise ValueError("spread_multiplier must be non-negative.")
        return self


class DriversConfig(BaseModel):
    """Driver ranker settings."""

    model_config = ConfigDict(frozen=True)

    top_n: int = 2

    @field_validator("top_n")
    @classmethod
    def validate_top_n(cls, v: int) -> int:
        if not 0 <= v <= 2:
            raise ValueError(f"top_n must be in [0, 2], got {v}.")
        return v


class ScoringConfig(BaseModel):
    """Everything the engine needs.  Defaults are the canonical scheme."""

    model_config = ConfigDict(frozen=True)

    weights: WeightsConfig = WeightsConfig()
    value: ValueConfig = ValueConfig()
    yield_: YieldConfig = YieldConfig()
    cash_flow: CashFlowConfig = CashFlowConfig()
    uplift: UpliftConfig = UpliftConfig()
    constraints: ConstraintsConfig = ConstraintsConfig()
    confidence: ConfidenceConfig = ConfidenceConfig()
    drivers: DriversConfig = DriversConfig()


class LoggingConfig(BaseModel):
    """Logging output settings."""

    model_config = ConfigDict(frozen=True)

    level: str = "INFO"
    log_file: str = ""
    json_format: bool = False

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"Log level must be one of {sorted(valid)}, got '{v}'.")
        return v.upper()


class AppConfig(BaseModel):
    """Complete application configuration, built by ``load_config()``."""

    model_config = ConfigDict(frozen=True)

    scoring: ScoringConfig = ScoringConfig()
    logging: LoggingConfig = LoggingConfig()
    debug: bool = False


DEFAULT_SCORING_CONFIG = ScoringConfig()


# ── Loader ────────────────────────────────────────────────────────────────────

_PROJECT_ROOT = Path(__file__).parent.parent

# TOML keys that collide with Python keywords are stored with a trailing
# underscore on the model.
_KEYWORD_KEYS = {"yield": "yield_"}


def _find_project_root() -> Path:
    """Walk up from this file to find the project root (contains pyproject.toml)."""
    candidate = Path(__file__).parent
    for _ in range(5):
        if (candidate / "pyproject.toml").exists():
            return candidate
        candidate = candidate.parent
    return _PROJECT_ROOT


def load_config(config_path: Optional[Path] = None) -> AppConfig:
    """Load and merge application configuration.

    Args:
        config_path: Explicit path to a TOML config file. Defaults to
            ``<project_root>/config/default.toml``.  When the default file
            is absent, built-in defaults are used.

    Returns:
        Fully validated ``AppConfig`` instance.

    Raises:
        FileNotFoundError: If an explicit ``config_path`` does not exist.
        pydantic.ValidationError: If merged config values fail validation.
    """
    root = _find_project_root()

    # 1. Load .env file (silently skip if missing)
    load_dotenv(dotenv_path=root / ".env", override=False)

    # 2. Load TOML config
    raw: dict[str, Any] = {}
    if config_path is None:
        config_path = root / "config" / "default.toml"
        explicit = False
    else:
        config_path = Path(config_path)
        explicit = True

    if config_path.exists():
        with open(config_path, "rb") as f:
            raw = tomllib.load(f)
    elif explicit:
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Also merge local.toml if present (gitignored local overrides)
    local_config_path = config_path.parent / "local.toml"
    if local_config_path.exists():
        with open(local_config_path, "rb") as f:
            local_raw: dict[str, Any] = tomllib.load(f)
        raw = _deep_merge(raw, local_raw)

    # 3. Apply DEAL_SCORER_* environment variable overrides
    raw = _apply_env_overrides(raw)

    # 4. Build and validate AppConfig
    return _build_app_config(raw)


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into ``base``."""
    result = dict(base)
    for key, val in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(val, dict):
            result[key] = _deep_merge(result[key], val)
        else:
            result[key] = val
    return result


def _apply_env_overrides(raw: dict[str, Any]) -> dict[str, Any]:
    """Apply DEAL_SCORER_* env vars to the raw config dict.

    Supported overrides:
      DEAL_SCORER_LOG_LEVEL                → raw["logging"]["level"]
      DEAL_SCORER_DEBUG                    → raw["debug"]
      DEAL_SCORER_EMPTY_CONSTRAINTS_CLEAR  → raw["scoring"]["constraints"]["empty_list_is_clear"]
    """
    if log_level := os.environ.get("DEAL_SCORER_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    if debug := os.environ.get("DEAL_SCORER_DEBUG"):
        raw["debug"] = debug.lower() in ("1", "true", "yes")

    if clear := os.environ.get("DEAL_SCORER_EMPTY_CONSTRAINTS_CLEAR"):
        scoring = raw.setdefault("scoring", {})
        scoring.setdefault("constraints", {})["empty_list_is_clear"] = (
            clear.lower() in ("1", "true", "yes")
        )

    return raw


def _rename_keyword_keys(section: dict[str, Any]) -> dict[str, Any]:
    return {_KEYWORD_KEYS.get(k, k): v for k, v in section.items()}


def _build_scoring_config(raw: dict[str, Any]) -> ScoringConfig:
    """Map the raw ``[scoring]`` TOML table to ``ScoringConfig``."""
    section = _rename_keyword_keys(raw)
    return ScoringConfig(
        weights=WeightsConfig(**_rename_keyword_keys(section.get("weights", {}))),
        value=ValueConfig(**section.get("value", {})),
        yield_=YieldConfig(**section.get("yield_", {})),
        cash_flow=CashFlowConfig(**section.get("cash_flow", {})),
        uplift=UpliftConfig(**section.get("uplift", {})),
        constraints=ConstraintsConfig(**section.get("constraints", {})),
        confidence=ConfidenceConfig(**section.get("confidence", {})),
        drivers=DriversConfig(**section.get("drivers", {})),
    )


def _build_app_config(raw: dict[str, Any]) -> AppConfig:
    """Map raw TOML dict to ``AppConfig`` model structure."""
    project = raw.pop("project", {})

    return AppConfig(
        scoring=_build_scoring_config(raw.get("scoring", {})),
        logging=LoggingConfig(**raw.get("logging", {})),
        debug=raw.get("debug", project.get("debug", False)),
    )
