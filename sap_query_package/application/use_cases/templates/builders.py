"""Construction of templates from base SAP GUI flow definitions."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from typing import Any

from sap_query_package.application.use_cases.transactions import (
    CHECKBOX_PARAMETERS,
    apply_profile_defaults,
    parameters_with_extras,
    resolve_profile,
)
from sap_query_package.domain.entities import (
    TEMPLATE_TYPE_CUSTOM,
    TEMPLATE_TYPE_DETAILS_SYNC,
    TEMPLATE_TYPE_SUMMARY_SYNC,
    Template,
    TemplateForm,
)
from sap_query_package.domain.exceptions import StorageGatewayError
from sap_query_package.infrastructure.storage import StorageGateway
from sap_query_package.utils.identifiers import new_short_id

logger = logging.getLogger(__name__)

FlowDefinitions = Mapping[str, dict[str, Any]]

SUMMARY_SYNC_FLOW = ("ZFIR_STATSLOAD", "ZFIR_STATSLOAD")
DETAILS_SYNC_FLOWS: tuple[tuple[str, str], ...] = (
    ("KSB1", "KSB1"),
    ("KOB1", "KOB1"),
    ("CJI3", "CJI3_ALLCOST"),
    ("CJI3", "CJI3_CANDALL"),
)


def extract_flow_parameters(flow: Mapping[str, Any]) -> list[str]:
    """Return the parameter names filled by the ``set`` actions of ``flow``.

    ``paramKey`` takes precedence and may list alternatives separated by
    ``|``. Otherwise the action ``target`` is used unless it is a SAP control
    path (``/app...``). ``Columns`` and ``NoSum`` are always appended.
    """

    steps = flow.get("steps")
    if not isinstance(steps, dict) or not steps:
        return []

    parameters: list[str] = []
    for step in steps.values():
        if not isinstance(step, dict):
            continue
        for action in step.values():
            if not isinstance(action, dict) or action.get("action") != "set":
                continue
            param_key = action.get("paramKey")
            target = action.get("target")
            if param_key:
                candidates = [part.strip() for part in str(param_key).split("|")]
            elif target and not str(target).startswith("/app"):
                candidates = [str(target)]
            else:
                candidates = []
            for candidate in candidates:
                if candidate and candidate not in parameters:
                    parameters.append(candidate)

    for name in CHECKBOX_PARAMETERS:
        if name not in parameters:
            parameters.append(name)
    return parameters


def find_flow(flows: FlowDefinitions, tcode: str) -> dict[str, Any] | None:
    """Return the flow stored as ``<tcode>.json`` ignoring case."""

    wanted = f"{tcode.lower()}.json"
    for name, flow in flows.items():
        if name.lower() == wanted:
            return flow
    return None


def build_profile_form(tcode: str, custom_name: str, flow: dict[str, Any]) -> TemplateForm:
    """Return a form whose default values come from its transaction profile."""

    profile = resolve_profile(tcode, custom_name)
    parameters = parameters_with_extras(profile, extract_flow_parameters(flow))
    return TemplateForm(
        id=new_short_id(),
        tcode=tcode,
        custom_name=custom_name,
        json_data=flow,
        parameters=parameters,
        default_values=apply_profile_defaults(profile, parameters),
    )


def build_summary_sync_template(flows: FlowDefinitions) -> Template:
    """Return the standard ``SUMMARY_SYNC`` template.

    Raises ``ValueError`` when the ``zfir_statsload.json`` flow is missing.
    """

    tcode, custom_name = SUMMARY_SYNC_FLOW
    flow = find_flow(flows, tcode)
    if flow is None:
        available = ", ".join(sorted(flows)) or "ninguno"
        raise ValueError(
            f"No se encontró el flujo {tcode}. Flujos disponibles: {available}"
        )
    return Template(
        id=new_short_id(),
        name=TEMPLATE_TYPE_SUMMARY_SYNC,
        type=TEMPLATE_TYPE_SUMMARY_SYNC,
        forms=[build_profile_form(tcode, custom_name, flow)],
    )


def build_details_sync_template(flows: FlowDefinitions) -> Template:
    """Return the standard ``DETAILS_SYNC`` template.

    Forms whose flow is missing are skipped. Raises ``ValueError`` when none of
    the flows is available.
    """

    forms: list[TemplateForm] = []
    for tcode, custom_name in DETAILS_SYNC_FLOWS:
        flow = find_flow(flows, tcode)
        if flow is None:
            logger.warning("Flow %s not found while building DETAILS_SYNC", tcode)
            continue
        forms.append(build_profile_form(tcode, custom_name, flow))
    if not forms:
        raise ValueError("No se encontró ningún flujo para la plantilla DETAILS_SYNC")
    return Template(
        id=new_short_id(),
        name=TEMPLATE_TYPE_DETAILS_SYNC,
        type=TEMPLATE_TYPE_DETAILS_SYNC,
        forms=forms,
    )


def _custom_form(flow: dict[str, Any]) -> TemplateForm | None:
    meta = flow.get("$meta")
    tcode = meta.get("tcode") if isinstance(meta, dict) else None
    if not tcode:
        return None
    return TemplateForm(
        id=new_short_id(),
        tcode=tcode,
        custom_name=tcode,
        json_data=flow,
        parameters=extract_flow_parameters(flow),
        default_values={},
    )


def add_flows_to_template(template: Template, flows: Iterable[dict[str, Any]]) -> list[TemplateForm]:
    """Append one form per new flow to ``template`` and return the added forms.

    Flows without ``$meta.tcode`` or whose code is already present are skipped.
    """

    existing = {form.tcode for form in template.forms}
    added: list[TemplateForm] = []
    for flow in flows:
        form = _custom_form(flow)
        if form is None:
            logger.warning("Skipping flow without $meta.tcode")
            continue
        if form.tcode in existing:
            continue
        existing.add(form.tcode)
        template.forms.append(form)
        added.append(form)
    return added


def build_custom_template(name: str, flows: Iterable[dict[str, Any]]) -> Template:
    """Return a ``CUSTOM`` template with one form per selected flow."""

    if not name or not name.strip():
        raise ValueError("El nombre de la plantilla es obligatorio")
    template = Template(id=new_short_id(), name=name.strip(), type=TEMPLATE_TYPE_CUSTOM)
    if not add_flows_to_template(template, flows):
        raise ValueError("No se pudieron cargar los flujos seleccionados")
    return template


async def load_flow_definitions(
    gateway: StorageGateway, directory: str
) -> dict[str, dict[str, Any]]:
    """Return every ``.json`` flow of ``directory`` keyed by its file name.

    Files that cannot be read or parsed are logged and skipped.
    """

    flows: dict[str, dict[str, Any]] = {}
    for entry in await gateway.list_files(directory):
        if entry.is_directory or not entry.name.lower().endswith(".json"):
            continue
        try:
            content = await gateway.read_file(entry.path)
        except StorageGatewayError:
            logger.exception("Could not read flow %s", entry.path)
            continue
        try:
            flow = json.loads(content)
        except json.JSONDecodeError:
            logger.warning("Flow %s is not valid JSON", entry.path)
            continue
        if isinstance(flow, dict):
            flows[entry.name] = flow
    return flows


__all__ = [
    "DETAILS_SYNC_FLOWS",
    "add_flows_to_template",
    "build_custom_template",
    "build_details_sync_template",
    "build_profile_form",
    "build_summary_sync_template",
    "extract_flow_parameters",
    "find_flow",
    "load_flow_definitions",
]
