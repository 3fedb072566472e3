"""Use cases orchestrating the engine's domain operations."""
