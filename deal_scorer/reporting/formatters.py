"""
ASCII terminal formatter for the ``score`` CLI command.

Returns plain multi-line strings suitable for ``typer.echo()``.
No third-party dependencies (no ``rich``, no ``colorama``).

Layout::

    === Deal Score ===
      Score:       41–71 / 100
      Confidence:  Low (0.00)

      Factor              Score  Label        Detail
      --------------------------------------------------------------
      Value                  60  Unknown      No asking price available
      ...

      Strengths:       Value (60), Constraints (60)
      Areas to watch:  Uplift Potential (55), Cash Flow (55)

      Summary:
        This property shows mixed results ...
"""

from __future__ import annotations

import textwrap

from deal_scorer.models.result import ScoreResult, SubScore
from deal_scorer.reporting.summary import build_summary
from deal_scorer.taxonomy.factors import FACTOR_DISPLAY_NAMES


def _driver_list(drivers: tuple[SubScore, ...]) -> str:
    if not drivers:
        return "(none)"
    return ", ".join(f"{FACTOR_DISPLAY_NAMES[d.name]} ({d.score})" for d in drivers)


def format_sub_score_table(subs: tuple[SubScore, ...]) -> str:
    """One row per factor in canonical order."""
    lines = [
        f"  {'Factor':<18}  {'Score':>5}  {'Label':<12}  Detail",
        "  " + "-" * 62,
    ]
    for s in subs:
        lines.append(
            f"  {FACTOR_DISPLAY_NAMES[s.name]:<18}  {s.score:>5}  {s.label:<12}  {s.detail}"
        )
    return "\n".join(lines)


def format_score_result(result: ScoreResult, include_summary: bool = True) -> str:
    """Format a ``ScoreResult`` as an ASCII block."""
    lines: list[str] = []
    lines.append("")
    lines.append("=== Deal Score ===")
    lines.append(f"  Score:       {result.display_score} / 100")
    lines.append(f"  Confidence:  {result.confidence_label} ({result.confidence:.2f})")
    lines.append("")
    lines.append(format_sub_score_table(result.subs))
    lines.append("")
    lines.append(f"  Strengths:       {_driver_list(result.drivers.positive)}")
    lines.append(f"  Areas to watch:  {_driver_list(result.drivers.negative)}")

    if include_summary:
        lines.append("")
        lines.append("  Summary:")
        lines.append(
            textwrap.fill(
                build_summary(result),
                width=78,
                initial_indent="    ",
                subsequent_indent="    ",
            )
        )

    return "\n".join(lines)
