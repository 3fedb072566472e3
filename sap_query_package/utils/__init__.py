"""Utility helpers shared across the engine."""
