"""Conversion between templates and their stored JSON documents.

A template document is a JSON object keyed by form custom name. Every value
holds the form ``tcode`` plus every declared parameter; parameters without a
value are written as empty strings so the schema survives a reload.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any

from sap_query_package.domain.entities import (
    TEMPLATE_TYPE_CUSTOM,
    TEMPLATE_TYPE_DETAILS_SYNC,
    TEMPLATE_TYPE_SUMMARY_SYNC,
    Template,
    TemplateForm,
)
from sap_query_package.utils.identifiers import new_short_id

logger = logging.getLogger(__name__)

TEMPLATE_FILE_EXTENSION = ".json"
_RESERVED_KEYS = frozenset({"tcode", "jsonData"})


def template_file_name(template: Template) -> str:
    return f"{template.name}{TEMPLATE_FILE_EXTENSION}"


def serialize_template_document(template: Template) -> dict[str, dict[str, Any]]:
    """Return the stored document for ``template``."""

    document: dict[str, dict[str, Any]] = {}
    for form in template.forms:
        entry: dict[str, Any] = {"tcode": form.tcode}
        values = form.default_values or {}
        for parameter in form.parameters or []:
            value = values.get(parameter)
            entry[parameter] = "" if value is None else value
        document[form.custom_name or form.tcode] = entry
    return document


def dump_template_document(template: Template) -> str:
    return json.dumps(serialize_template_document(template), indent=2, ensure_ascii=False)


def infer_template_type(file_name: str) -> str:
    """Return the template type implied by a stored file name."""

    upper = file_name.upper()
    if "SUMMARY" in upper or "ZFIR" in upper or "STATSLOAD" in upper:
        return TEMPLATE_TYPE_SUMMARY_SYNC
    if "DETAILS" not in upper:
        return TEMPLATE_TYPE_CUSTOM
    return TEMPLATE_TYPE_DETAILS_SYNC


def _strip_extension(file_name: str) -> str:
    if file_name.lower().endswith(TEMPLATE_FILE_EXTENSION):
        return file_name[: -len(TEMPLATE_FILE_EXTENSION)]
    return file_name


def _form_from_entry(
    custom_name: str,
    entry: Mapping[str, Any],
    flows: Mapping[str, dict[str, Any]] | None,
) -> TemplateForm:
    tcode = str(entry.get("tcode") or "")
    json_data = entry.get("jsonData")
    if not isinstance(json_data, dict):
        json_data = (flows or {}).get(f"{tcode.lower()}.json", {})
    parameters = [key for key in entry if key not in _RESERVED_KEYS]
    return TemplateForm(
        id=new_short_id(),
        tcode=tcode,
        custom_name=custom_name,
        json_data=json_data,
        parameters=parameters,
        default_values={key: entry[key] for key in parameters},
    )


def parse_template_document(
    file_name: str,
    document: Any,
    flows: Mapping[str, dict[str, Any]] | None = None,
) -> Template:
    """Build a template from a stored document.

    Two shapes are accepted: an object of forms keyed by custom name, or a
    flat object describing a single form named after the file. ``flows`` maps
    lowercase flow file names (``ksb1.json``) to their definitions and is used
    to attach ``jsonData`` to forms stored without it.
    """

    if not isinstance(document, dict):
        raise ValueError("El documento de la plantilla debe ser un objeto JSON")

    name = _strip_extension(file_name)
    forms: list[TemplateForm] = []
    keys = list(document)
    first = document[keys[0]] if keys else None
    if isinstance(first, dict):
        for custom_name, entry in document.items():
            if not isinstance(entry, dict):
                logger.warning(
                    "Skipping entry %s in %s: expected an object", custom_name, file_name
                )
                continue
            forms.append(_form_from_entry(custom_name, entry, flows))
    elif keys:
        forms.append(_form_from_entry(name, document, flows))

    if not forms:
        raise ValueError(f"No se pudieron crear formularios desde {file_name}")

    return Template(
        id=new_short_id(),
        name=name,
        type=infer_template_type(file_name),
        forms=forms,
    )


def load_template_document(
    file_name: str,
    content: str,
    flows: Mapping[str, dict[str, Any]] | None = None,
) -> Template:
    try:
        document = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ValueError(f"El archivo {file_name} no contiene JSON válido") from exc
    return parse_template_document(file_name, document, flows)


__all__ = [
    "TEMPLATE_FILE_EXTENSION",
    "dump_template_document",
    "infer_template_type",
    "load_template_document",
    "parse_template_document",
    "serialize_template_document",
    "template_file_name",
]
