"""Storage gateway contract and an in-memory implementation.

The engine never talks to the remote file store directly. Every read, write,
listing and deletion goes through an object implementing
:class:`StorageGateway`. Generated file names are not deduplicated against the
remote listing and writes failing with ``StorageAlreadyExistsError`` are not
retried; both are accepted risks given the 1/2**32 identifier collision odds.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Protocol, runtime_checkable

from sap_query_package.domain.entities import StoredFile, WriteResult
from sap_query_package.domain.exceptions import (
    StorageAlreadyExistsError,
    StorageNotFoundError,
    StorageTransportError,
)
from sap_query_package.utils.datetime import now_in_app_timezone

logger = logging.getLogger(__name__)


def join_remote_path(directory: str | None, file_name: str) -> str:
    """Return ``file_name`` placed under ``directory`` using ``/`` separators."""

    if not directory:
        return file_name
    return posixpath.join(directory.rstrip("/"), file_name)


@runtime_checkable
class StorageGateway(Protocol):
    """Asynchronous access to the remote file store."""

    async def list_files(self, directory: str) -> list[StoredFile]:
        ...

    async def read_file(self, path: str) -> str:
        """Return the content at ``path``.

        Raises ``StorageNotFoundError`` or ``StorageTransportError``.
        """

    async def write_file(
        self, directory: str, file_name: str, content: str, overwrite: bool = False
    ) -> WriteResult:
        """Write ``content`` and return where it was saved.

        Raises ``StorageAlreadyExistsError`` when ``overwrite`` is false and
        the file exists, or ``StorageTransportError``.
        """

    async def exists(self, name: str, directory: str) -> bool:
        ...

    async def delete_file(self, path: str, directory: str | None = None) -> None:
        ...


class InMemoryStorageGateway:
    """Dictionary backed gateway used by tests and local embedding."""

    def __init__(self, files: dict[str, str] | None = None) -> None:
        self._files: dict[str, str] = dict(files or {})
        self._modified = {path: now_in_app_timezone() for path in self._files}
        self._failures: dict[str, Exception] = {}

    def fail_on(self, file_name: str, error: Exception) -> None:
        """Make every later write of ``file_name`` raise ``error``."""

        self._failures[file_name] = error

    @property
    def files(self) -> dict[str, str]:
        return dict(self._files)

    async def list_files(self, directory: str) -> list[StoredFile]:
        prefix = directory.rstrip("/") + "/" if directory else ""
        entries: list[StoredFile] = []
        for path, content in sorted(self._files.items()):
            if not path.startswith(prefix):
                continue
            name = path[len(prefix):]
            if "/" in name:
                continue
            entries.append(
                StoredFile(
                    name=name,
                    path=path,
                    size=len(content.encode("utf-8")),
                    modified_date=self._modified.get(path),
                )
            )
        return entries

    async def read_file(self, path: str) -> str:
        try:
            return self._files[path]
        except KeyError as exc:
            raise StorageNotFoundError(f"Archivo no encontrado: {path}") from exc

    async def write_file(
        self, directory: str, file_name: str, content: str, overwrite: bool = False
    ) -> WriteResult:
        failure = self._failures.get(file_name)
        if failure is not None:
            raise failure
        if not file_name:
            raise StorageTransportError("El nombre del archivo es obligatorio")

        path = join_remote_path(directory, file_name)
        if path in self._files and not overwrite:
            raise StorageAlreadyExistsError(f"El archivo ya existe: {path}")

        self._files[path] = content
        self._modified[path] = now_in_app_timezone()
        size = len(content.encode("utf-8"))
        logger.debug("Stored %s (%d bytes)", path, size)
        return WriteResult(saved_as=file_name, size=size)

    async def exists(self, name: str, directory: str) -> bool:
        return join_remote_path(directory, name) in self._files

    async def delete_file(self, path: str, directory: str | None = None) -> None:
        full_path = join_remote_path(directory, path) if directory else path
        if full_path not in self._files:
            raise StorageNotFoundError(f"Archivo no encontrado: {full_path}")
        del self._files[full_path]
        self._modified.pop(full_path, None)


__all__ = ["InMemoryStorageGateway", "StorageGateway", "join_remote_path"]
