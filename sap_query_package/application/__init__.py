"""Application layer for the query package engine."""
