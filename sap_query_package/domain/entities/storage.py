"""Domain entities exchanged with the remote file store."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class StoredFile:
    """Entry returned when listing a remote directory."""

    name: str
    path: str
    size: int
    modified_date: datetime | None
    is_directory: bool = False


@dataclass(frozen=True)
class WriteResult:
    """Response returned by the storage gateway after a write."""

    saved_as: str
    status: bool = True
    message: str | None = None
    size: int | None = None


__all__ = ["StoredFile", "WriteResult"]
