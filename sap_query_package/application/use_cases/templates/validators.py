"""Validation rules applied to templates before they are saved."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from sap_query_package.application.use_cases.validation import (
    ValidationCollector,
    check_form_structure,
    check_forms_present,
    check_name,
    is_blank,
    meta_tcode,
)
from sap_query_package.domain.entities import (
    TEMPLATE_TYPES,
    Template,
    TemplateForm,
    ValidationResult,
)

logger = logging.getLogger(__name__)

MAX_TEMPLATE_NAME_LENGTH = 100
_INVALID_NAME_CHARACTERS = re.compile(r'[<>:"/\\|?*]')


def validate_template(
    template: Template | None,
    available_flow_names: Sequence[str] | None = None,
) -> ValidationResult:
    """Return the validation result for ``template``.

    ``available_flow_names`` is the listing of the flows directory. When it is
    supplied, every form whose flow is missing from it receives a warning.
    """

    collector = ValidationCollector()
    if template is None:
        collector.error("La plantilla está vacía o no es válida")
        return collector.finalize(0)

    check_name(collector, template.name, "La plantilla debe tener un nombre")
    if template.type not in TEMPLATE_TYPES:
        collector.error(
            "La plantilla debe tener un tipo válido (SUMMARY_SYNC, DETAILS_SYNC o CUSTOM)",
            field="type",
        )
    if not is_blank(template.name):
        _check_name_format(collector, template.name)

    forms = template.forms
    if not check_forms_present(
        collector,
        forms,
        not_a_list_message="La plantilla debe tener una lista de formularios",
        empty_message="La plantilla no tiene formularios. No se generará ningún archivo.",
    ):
        return collector.finalize(0)

    for form in forms:
        check_form_structure(
            collector,
            form,
            flow_counter="invalid_flow_references",
            missing_parameters_message="El formulario no tiene parámetros definidos",
        )
        _check_default_values(collector, form)

    _check_duplicate_names(collector, forms)
    if available_flow_names:
        _check_flow_references(collector, forms, available_flow_names)
    else:
        collector.note(
            "No se proporcionó la lista de flujos disponibles; "
            "no se verificaron las referencias a flujos"
        )

    result = collector.finalize(len(forms))
    logger.debug(
        "Validated template %s: %d errors, %d warnings",
        template.id,
        len(result.errors),
        len(result.warnings),
    )
    return result


def _check_name_format(collector: ValidationCollector, name: str) -> None:
    if " " in name:
        collector.warning(
            "El nombre de la plantilla contiene espacios. Se recomienda usar guiones "
            "o guiones bajos.",
            field="name",
        )
    if _INVALID_NAME_CHARACTERS.search(name):
        collector.error(
            f"El nombre de la plantilla contiene caracteres inválidos: {name}",
            field="name",
        )
    if len(name) > MAX_TEMPLATE_NAME_LENGTH:
        collector.warning(
            "El nombre de la plantilla es muy largo (más de 100 caracteres)",
            field="name",
        )


def _check_default_values(collector: ValidationCollector, form: TemplateForm) -> None:
    if not isinstance(form.default_values, dict) or not form.parameters:
        return
    for parameter in form.parameters:
        if parameter not in form.default_values:
            collector.warning(
                f'El parámetro "{parameter}" no tiene un valor por defecto',
                field=f"defaultValues.{parameter}",
                form=form,
            )


def _check_duplicate_names(
    collector: ValidationCollector, forms: Sequence[TemplateForm]
) -> None:
    grouped: dict[str, list[TemplateForm]] = {}
    for form in forms:
        if is_blank(form.custom_name):
            continue
        grouped.setdefault(form.custom_name, []).append(form)

    for custom_name, duplicates in grouped.items():
        if len(duplicates) < 2:
            continue
        collector.error(
            f'El nombre personalizado "{custom_name}" está duplicado en '
            f"{len(duplicates)} formularios",
            field="customName",
            form=duplicates[0],
        )
        collector.summary.duplicate_names += 1


def _check_flow_references(
    collector: ValidationCollector,
    forms: Sequence[TemplateForm],
    available_flow_names: Sequence[str],
) -> None:
    known = {name.lower() for name in available_flow_names}
    for form in forms:
        tcode = meta_tcode(form)
        if tcode is None:
            continue
        if f"{tcode.lower()}.json" not in known:
            collector.warning(
                f"El flujo referenciado ({tcode}) no se encontró en el servidor",
                field="jsonData.$meta.tcode",
                form=form,
            )
            collector.summary.invalid_flow_references += 1


__all__ = ["MAX_TEMPLATE_NAME_LENGTH", "validate_template"]
