"""Validation skeleton shared by template and package validators.

Both entity shapes run the same structural and JSON checks. The entity
specific validators add their own rules on top of a ``ValidationCollector``
and call :meth:`ValidationCollector.finalize` to obtain the result.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol

from sap_query_package.domain.entities import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARNING,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
)


class FormLike(Protocol):
    id: str
    tcode: str
    custom_name: str
    json_data: dict[str, Any] | None
    parameters: list[str] | None


class ValidationCollector:
    """Accumulate issues and summary counters for a single validation run."""

    def __init__(self) -> None:
        self.errors: list[ValidationIssue] = []
        self.warnings: list[ValidationIssue] = []
        self.info: list[ValidationIssue] = []
        self.summary = ValidationSummary()

    def _issue(
        self,
        severity: str,
        message: str,
        field: str | None,
        form: FormLike | None,
        form_id: str | None,
    ) -> ValidationIssue:
        if form is not None:
            return ValidationIssue(
                severity=severity,
                message=message,
                field=field,
                form_id=form_id if form_id is not None else (form.id or None),
                tcode=form.tcode or None,
            )
        return ValidationIssue(
            severity=severity, message=message, field=field, form_id=form_id
        )

    def error(
        self,
        message: str,
        *,
        field: str | None = None,
        form: FormLike | None = None,
        form_id: str | None = None,
    ) -> None:
        self.errors.append(self._issue(SEVERITY_ERROR, message, field, form, form_id))

    def warning(
        self,
        message: str,
        *,
        field: str | None = None,
        form: FormLike | None = None,
        form_id: str | None = None,
    ) -> None:
        self.warnings.append(
            self._issue(SEVERITY_WARNING, message, field, form, form_id)
        )

    def note(
        self,
        message: str,
        *,
        field: str | None = None,
        form: FormLike | None = None,
    ) -> None:
        self.info.append(self._issue(SEVERITY_INFO, message, field, form, None))

    def finalize(self, total_forms: int) -> ValidationResult:
        """Return the collected issues with distinct form counters filled in."""

        self.summary.total_forms = total_forms
        self.summary.forms_with_errors = len(
            {issue.form_id for issue in self.errors if issue.form_id}
        )
        self.summary.forms_with_warnings = len(
            {issue.form_id for issue in self.warnings if issue.form_id}
        )
        return ValidationResult(
            errors=list(self.errors),
            warnings=list(self.warnings),
            info=list(self.info),
            summary=self.summary,
        )


def is_blank(value: Any) -> bool:
    return not isinstance(value, str) or not value.strip()


def check_name(collector: ValidationCollector, name: Any, message: str) -> None:
    if is_blank(name):
        collector.error(message, field="name")


def check_forms_present(
    collector: ValidationCollector,
    forms: Any,
    *,
    not_a_list_message: str,
    empty_message: str,
) -> bool:
    """Return ``True`` when ``forms`` can be iterated by the per-form checks."""

    if not isinstance(forms, Sequence) or isinstance(forms, (str, bytes)):
        collector.error(not_a_list_message, field="forms")
        return False
    if not forms:
        collector.warning(empty_message, field="forms")
    return True


def check_form_structure(
    collector: ValidationCollector,
    form: FormLike,
    *,
    flow_counter: str,
    missing_parameters_message: str,
) -> None:
    """Run the required field checks shared by templates and packages.

    ``flow_counter`` names the summary counter incremented when the form has
    no flow definition attached.
    """

    if is_blank(form.id):
        collector.error("Un formulario no tiene ID", field="id", form=form)

    if is_blank(form.tcode):
        collector.error("El formulario debe tener un T-Code", field="tcode", form=form)
        collector.summary.missing_required_fields += 1

    if is_blank(form.custom_name):
        collector.warning(
            "El formulario no tiene un nombre personalizado. Se usará el T-Code.",
            field="customName",
            form=form,
        )

    if form.json_data is None:
        collector.error("El formulario no tiene datos JSON", field="jsonData", form=form)
        _increment(collector, flow_counter)
    elif not isinstance(form.json_data, dict):
        collector.error(
            "Los datos JSON del formulario no son un objeto", field="jsonData", form=form
        )
        _increment(collector, flow_counter)
    else:
        check_json_shape(collector, form, flow_counter=flow_counter)

    if not isinstance(form.parameters, list) or not form.parameters:
        collector.warning(missing_parameters_message, field="parameters", form=form)


def check_json_shape(
    collector: ValidationCollector,
    form: FormLike,
    *,
    flow_counter: str,
) -> None:
    """Validate the flow definition attached to ``form``.

    A mismatch between ``$meta.tcode`` and the form code is only a warning.
    """

    json_data = form.json_data or {}
    meta = json_data.get("$meta")
    if not isinstance(meta, dict):
        collector.error(
            "El JSON del formulario no tiene sección $meta", field="jsonData.$meta", form=form
        )
        _increment(collector, flow_counter)
    else:
        meta_tcode = meta.get("tcode")
        if is_blank(meta_tcode):
            collector.error(
                "El JSON del formulario no tiene $meta.tcode",
                field="jsonData.$meta.tcode",
                form=form,
            )
            _increment(collector, flow_counter)
        elif form.tcode and meta_tcode != form.tcode:
            collector.warning(
                f"El T-Code del formulario ({form.tcode}) no coincide con el T-Code "
                f"del JSON ({meta_tcode})",
                field="jsonData.$meta.tcode",
                form=form,
            )

    if not isinstance(json_data.get("targetContext"), dict):
        collector.warning(
            "El JSON del formulario no tiene targetContext definido",
            field="jsonData.targetContext",
            form=form,
        )
    if not isinstance(json_data.get("steps"), dict):
        collector.warning(
            "El JSON del formulario no tiene steps definidos",
            field="jsonData.steps",
            form=form,
        )


def meta_tcode(form: FormLike) -> str | None:
    """Return ``jsonData.$meta.tcode`` when present."""

    if not isinstance(form.json_data, dict):
        return None
    meta = form.json_data.get("$meta")
    if not isinstance(meta, dict):
        return None
    value = meta.get("tcode")
    return value if isinstance(value, str) and value.strip() else None


def _increment(collector: ValidationCollector, counter: str) -> None:
    setattr(collector.summary, counter, getattr(collector.summary, counter) + 1)


__all__ = [
    "FormLike",
    "ValidationCollector",
    "check_form_structure",
    "check_forms_present",
    "check_json_shape",
    "check_name",
    "is_blank",
    "meta_tcode",
]
