"""Serialization of packages into generated files and stored documents.

A stored package document is a JSON object keyed by form custom name. Each
value holds the form ``tcode`` and the operator values of every parameter.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from sap_query_package.domain.entities import DateRange, Form, Package, PlannedFile
from sap_query_package.utils.identifiers import new_short_id

from .naming import file_name_for_form

logger = logging.getLogger(__name__)

PACKAGE_DOCUMENT_EXTENSION = ".json"


def form_content(form: Form) -> dict[str, Any]:
    """Return the document written for a single form."""

    content: dict[str, Any] = {"tcode": form.tcode}
    for key, value in form.values.items():
        if key != "tcode":
            content[key] = value
    return content


def render_form_content(form: Form) -> str:
    return json.dumps(form_content(form), indent=2, ensure_ascii=False)


def serialize_package_document(package: Package) -> dict[str, dict[str, Any]]:
    """Return the legacy combined document with one key per form."""

    return {form.display_name: form_content(form) for form in package.forms}


def dump_package_document(package: Package) -> str:
    return json.dumps(serialize_package_document(package), indent=2, ensure_ascii=False)


def package_document_name(package_name: str) -> str:
    """Return the stored file name for a package, with spaces as underscores."""

    name = package_name.strip()
    if not name:
        raise ValueError("El paquete debe tener un nombre")
    return f"{name.replace(' ', '_')}{PACKAGE_DOCUMENT_EXTENSION}"


def package_name_from_file(file_name: str) -> str:
    name = file_name
    if name.lower().endswith(PACKAGE_DOCUMENT_EXTENSION):
        name = name[: -len(PACKAGE_DOCUMENT_EXTENSION)]
    return name.replace("_", " ")


def parse_package_document(file_name: str, document: Any) -> Package:
    """Build a package from a stored document.

    Parameters are the keys of each entry other than ``tcode``. Stored
    documents carry no flow definition, so every form gets a minimal
    ``jsonData`` holding only ``$meta``.
    """

    if not isinstance(document, dict):
        raise ValueError("El documento del paquete debe ser un objeto JSON")

    forms: list[Form] = []
    for custom_name, entry in document.items():
        if not isinstance(entry, dict):
            logger.warning(
                "Skipping entry %s in %s: expected an object", custom_name, file_name
            )
            continue
        tcode = str(entry.get("tcode") or "")
        values = {key: value for key, value in entry.items() if key != "tcode"}
        forms.append(
            Form(
                id=new_short_id(),
                tcode=tcode,
                custom_name=custom_name,
                json_data={"$meta": {"tcode": tcode, "description": custom_name}},
                parameters=list(values),
                values=values,
            )
        )

    return Package(id=new_short_id(), name=package_name_from_file(file_name), forms=forms)


def load_package_document(file_name: str, content: str) -> Package:
    try:
        document = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ValueError(f"El archivo {file_name} no contiene JSON válido") from exc
    return parse_package_document(file_name, document)


def plan_package_files(package: Package, date_range: DateRange) -> list[PlannedFile]:
    """Return one named file per form of ``package``, in form order."""

    return [
        PlannedFile(
            form_id=form.id,
            form_name=form.display_name,
            tcode=form.tcode,
            file_name=file_name_for_form(form, date_range),
            content=render_form_content(form),
        )
        for form in package.forms
    ]


__all__ = [
    "PACKAGE_DOCUMENT_EXTENSION",
    "dump_package_document",
    "form_content",
    "load_package_document",
    "package_document_name",
    "package_name_from_file",
    "parse_package_document",
    "plan_package_files",
    "render_form_content",
    "serialize_package_document",
]
