"""Scoring engine: converts ScoreInputs into a ScoreResult.

Modules
-------
breakpoints — ordered (threshold, score) table lookups.
calculators — five pure factor calculators + CALCULATORS registry.
aggregator  — weighted sum of sub-scores using WeightsConfig.
confidence  — confidence value, label, and low-confidence score range.
drivers     — top-2 / bottom-2 driver ranking.
engine      — compute_deal_score(): the single entry point.
"""
