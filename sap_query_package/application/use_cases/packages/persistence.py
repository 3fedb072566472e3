"""Loading and saving stored package documents through the storage gateway."""

from __future__ import annotations

import logging

from sap_query_package.config import get_settings
from sap_query_package.domain.entities import Package, WriteResult
from sap_query_package.domain.exceptions import (
    StorageAlreadyExistsError,
    StorageGatewayError,
)
from sap_query_package.infrastructure.storage import StorageGateway

from .documents import (
    PACKAGE_DOCUMENT_EXTENSION,
    dump_package_document,
    load_package_document,
    package_document_name,
)

logger = logging.getLogger(__name__)


async def save_package_document(
    package: Package,
    gateway: StorageGateway,
    *,
    directory: str | None = None,
    overwrite: bool = False,
) -> WriteResult:
    """Store ``package`` as a combined document.

    An existing document is only replaced when ``overwrite`` is true;
    otherwise ``StorageAlreadyExistsError`` is raised before writing.
    """

    if not package.forms:
        raise ValueError("El paquete no tiene formularios para guardar.")

    target = directory or get_settings().packages_directory
    file_name = package_document_name(package.name)
    exists = await gateway.exists(file_name, target)
    if exists and not overwrite:
        raise StorageAlreadyExistsError(f'El paquete "{package.name}" ya existe')

    result = await gateway.write_file(
        target, file_name, dump_package_document(package), overwrite=exists
    )
    if not result.status:
        raise StorageGatewayError(result.message or "Error al guardar el paquete")
    logger.info(
        "Package %s %s as %s",
        package.name,
        "updated" if exists else "saved",
        result.saved_as,
    )
    return result


async def load_packages(
    gateway: StorageGateway, *, directory: str | None = None
) -> list[Package]:
    """Return every package document stored in ``directory``.

    Unreadable or malformed files are logged and skipped.
    """

    target = directory or get_settings().packages_directory
    packages: list[Package] = []
    for entry in await gateway.list_files(target):
        if entry.is_directory or not entry.name.endswith(PACKAGE_DOCUMENT_EXTENSION):
            continue
        try:
            content = await gateway.read_file(entry.path)
            packages.append(load_package_document(entry.name, content))
        except (StorageGatewayError, ValueError):
            logger.exception("Could not load package %s", entry.path)
    return packages


__all__ = ["load_packages", "save_package_document"]
