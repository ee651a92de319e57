"""Input mapping: upstream property reports -> canonical ScoreInputs."""
