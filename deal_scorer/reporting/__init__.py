"""
deal_scorer.reporting — Presentation helpers for a computed ScoreResult.

It does NOT compute scores; every function takes a finished ScoreResult.

Modules:
  summary    — Factual narrative paragraph (no advice).
  formatters — ASCII terminal formatter for the Typer CLI.
"""
