"""Loading and saving template documents through the storage gateway."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from sap_query_package.config import get_settings
from sap_query_package.domain.entities import Template, ValidationResult
from sap_query_package.domain.exceptions import StorageGatewayError
from sap_query_package.infrastructure.storage import StorageGateway

from .documents import (
    TEMPLATE_FILE_EXTENSION,
    dump_template_document,
    load_template_document,
    template_file_name,
)
from .validators import validate_template

logger = logging.getLogger(__name__)


@dataclass
class TemplateSaveOutcome:
    validation: ValidationResult
    saved_as: str | None = None

    @property
    def saved(self) -> bool:
        return self.saved_as is not None


async def save_template(
    template: Template,
    gateway: StorageGateway,
    *,
    directory: str | None = None,
    available_flow_names: Sequence[str] | None = None,
    allow_warnings: bool = True,
) -> TemplateSaveOutcome:
    """Validate ``template`` and store it as ``<name>.json``.

    Templates are overwritten in place. Nothing is written when validation
    reports errors, or warnings while ``allow_warnings`` is false.
    """

    validation = validate_template(template, available_flow_names)
    if not validation.is_valid or (validation.warnings and not allow_warnings):
        return TemplateSaveOutcome(validation=validation)

    target = directory or get_settings().templates_directory
    result = await gateway.write_file(
        target,
        template_file_name(template),
        dump_template_document(template),
        overwrite=True,
    )
    if not result.status:
        raise StorageGatewayError(result.message or "Error al guardar la plantilla")
    logger.info("Template %s saved as %s", template.name, result.saved_as)
    return TemplateSaveOutcome(validation=validation, saved_as=result.saved_as)


async def load_templates(
    gateway: StorageGateway,
    *,
    directory: str | None = None,
    flows: Mapping[str, dict[str, Any]] | None = None,
) -> list[Template]:
    """Return every template stored in ``directory``.

    Unreadable or malformed files are logged and skipped so one broken
    document does not hide the others.
    """

    target = directory or get_settings().templates_directory
    templates: list[Template] = []
    for entry in await gateway.list_files(target):
        if entry.is_directory or not entry.name.endswith(TEMPLATE_FILE_EXTENSION):
            continue
        try:
            content = await gateway.read_file(entry.path)
            templates.append(load_template_document(entry.name, content, flows))
        except (StorageGatewayError, ValueError):
            logger.exception("Could not load template %s", entry.path)
    return templates


__all__ = ["TemplateSaveOutcome", "load_templates", "save_template"]
