"""Exceptions raised by the query package engine."""

from __future__ import annotations

from typing import Any


class InvalidDateError(ValueError):
    """Raised when a caller supplied date cannot be parsed into a calendar date."""

    def __init__(self, value: Any, message: str = "Fecha inválida") -> None:
        self.value = value
        super().__init__(f"{message}: {value!r}")


class StorageGatewayError(RuntimeError):
    """Base error for failures reported by the storage gateway."""


class StorageNotFoundError(StorageGatewayError):
    """Raised when the requested remote file does not exist."""


class StorageAlreadyExistsError(StorageGatewayError):
    """Raised when a write would replace an existing file without ``overwrite``."""


class StorageTransportError(StorageGatewayError):
    """Raised when the remote store cannot be reached or rejects the request."""


__all__ = [
    "InvalidDateError",
    "StorageAlreadyExistsError",
    "StorageGatewayError",
    "StorageNotFoundError",
    "StorageTransportError",
]
