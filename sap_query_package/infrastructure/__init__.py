"""Infrastructure adapters used by the engine."""

from .storage import InMemoryStorageGateway, StorageGateway, join_remote_path

__all__ = ["InMemoryStorageGateway", "StorageGateway", "join_remote_path"]
