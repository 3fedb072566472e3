"""Boundary adapters translating plain payloads into domain entities."""
