"""
Deal Scorer — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Read and validate inputs.
  4. Score / report.
  5. Print the result to stdout.

Install and run::

    pip install -e .
    deal-scorer --help
    deal-scorer validate-config
    deal-scorer score report.json
    deal-scorer score inputs.json --inputs --json
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError

app = typer.Typer(
    name="deal-scorer",
    help="Composite real-estate deal scoring engine.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from deal_scorer.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        return load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except (ValidationError, ValueError) as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)


def _configure_logging(config):
    """Set up logging from config."""
    from deal_scorer.utils.logging import configure_logging
    configure_logging(config.logging)


def _read_json_or_exit(path: Path) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        typer.echo(f"[ERROR] File not found: {path}", err=True)
        raise typer.Exit(code=1)
    except json.JSONDecodeError as exc:
        typer.echo(f"[ERROR] Invalid JSON in {path}: {exc}", err=True)
        raise typer.Exit(code=1)
    if not isinstance(data, dict):
        typer.echo(f"[ERROR] Expected a JSON object in {path}.", err=True)
        raise typer.Exit(code=1)
    return data


# ── Commands ──────────────────────────────────────────────────────────────────

@app.command("score")
def score(
    file: Path = typer.Argument(..., help="JSON property report (or ScoreInputs with --inputs)."),
    as_inputs: bool = typer.Option(
        False,
        "--inputs",
        help="Treat the file as pre-built ScoreInputs instead of a report.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the ScoreResult as camelCase JSON.",
    ),
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file.",
    ),
) -> None:
    """Score a property and print the deal score, breakdown and drivers."""
    from deal_scorer.mapping.report_mapper import map_report_to_inputs
    from deal_scorer.models.inputs import ScoreInputs
    from deal_scorer.reporting.formatters import format_score_result
    from deal_scorer.scoring.engine import compute_deal_score

    config = _load_config_or_exit(config_path)
    _configure_logging(config)

    data = _read_json_or_exit(file)
    try:
        inputs = ScoreInputs.model_validate(data) if as_inputs else map_report_to_inputs(data)
    except ValidationError as exc:
        typer.echo(f"[ERROR] Input validation failed: {exc}", err=True)
        raise typer.Exit(code=1)

    result = compute_deal_score(inputs, config.scoring)

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json", by_alias=True), indent=2))
    else:
        typer.echo(format_score_result(result))


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = typer.Option(
        None,
        "--config",
        help="Path to TOML config file (default: config/default.toml).",
    ),
    show_full: bool = typer.Option(
        False,
        "--full",
        help="Print full config including all fields.",
    ),
) -> None:
    """Validate the configuration file and print the weight table.

    Exits with code 1 if the config fails validation.
    """
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo("  Weights:")
    for name, weight in config.scoring.weights.as_dict().items():
        typer.echo(f"    {name:<12} {weight:.2f}")
    typer.echo(f"  High confidence at: {config.scoring.confidence.high_threshold:.2f}")
    typer.echo(f"  Empty constraints clear: {config.scoring.constraints.empty_list_is_clear}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(config.model_dump(), indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
