"""Domain layer for the query package engine."""
