"""Pydantic data models: engine inputs, upstream report shape, and results."""
