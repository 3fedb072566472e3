"""Use case that turns a template and a date range into a package."""

from __future__ import annotations

import logging
from copy import deepcopy
from typing import Any

from sap_query_package.application.use_cases.transactions import (
    apply_profile_defaults,
    parameters_with_extras,
    resolve_profile,
)
from sap_query_package.domain.entities import (
    DateRange,
    Form,
    Package,
    Template,
    TemplateForm,
)
from sap_query_package.utils.datetime import format_for_kind, parse_calendar_date
from sap_query_package.utils.identifiers import new_short_id

logger = logging.getLogger(__name__)

IMPLICIT_START_DATE_KEY = "startDate"


def is_start_date_target(parameter: str) -> bool:
    lowered = parameter.lower()
    return (
        ("posting" in lowered and "low" in lowered)
        or ("budat" in lowered and "low" in lowered)
        or lowered == "startdate"
    )


def is_end_date_target(parameter: str) -> bool:
    lowered = parameter.lower()
    return (
        ("posting" in lowered and "high" in lowered)
        or ("budat" in lowered and "high" in lowered)
        or lowered == "enddate"
    )


def instantiate_form(form: TemplateForm, date_range: DateRange) -> Form:
    """Return the realized form for ``form`` stamped with ``date_range``."""

    profile = resolve_profile(form.tcode, form.custom_name)
    start = format_for_kind(date_range.start_date, profile.date_kind)
    end = (
        format_for_kind(date_range.end_date, profile.date_kind)
        if date_range.end_date
        else None
    )

    parameters = parameters_with_extras(profile, form.parameters)
    values: dict[str, Any] = deepcopy(form.default_values or {})

    candidates = list(parameters) + [key for key in values if key not in parameters]
    start_applied = False
    for name in candidates:
        if is_start_date_target(name):
            values[name] = start
            start_applied = True
        elif end is not None and is_end_date_target(name):
            values[name] = end
    if not start_applied:
        values[IMPLICIT_START_DATE_KEY] = start

    values = apply_profile_defaults(profile, parameters, values)
    for name in parameters:
        values.setdefault(name, "")
        if values[name] is None:
            values[name] = ""

    return Form(
        id=form.id,
        tcode=form.tcode,
        custom_name=form.custom_name,
        json_data=deepcopy(form.json_data),
        parameters=parameters,
        values=values,
    )


def instantiate_template(template: Template, date_range: DateRange) -> Package:
    """Return a package with one realized form per template form.

    The start date (and the end date, when present) is parsed before any
    form is processed, so an invalid date aborts the whole template with
    ``InvalidDateError``. A template without forms yields an empty package.
    """

    parse_calendar_date(date_range.start_date)
    if date_range.end_date:
        parse_calendar_date(date_range.end_date)

    forms = [instantiate_form(form, date_range) for form in template.forms]
    logger.debug(
        "Instantiated template %s with %d forms for %s",
        template.id,
        len(forms),
        date_range.start_date,
    )
    return Package(id=new_short_id(), name=template.name, forms=forms)


def preview_template_dates(template: Template, date_range: DateRange) -> dict[str, dict[str, Any]]:
    """Return the realized values of every form keyed by its display name."""

    package = instantiate_template(template, date_range)
    return {form.display_name: form.values for form in package.forms}


__all__ = [
    "IMPLICIT_START_DATE_KEY",
    "instantiate_form",
    "instantiate_template",
    "is_end_date_target",
    "is_start_date_target",
    "preview_template_dates",
]
