"""Validation rules applied to packages before and after they are saved."""

from __future__ import annotations

import logging
from datetime import date

from sap_query_package.application.use_cases.validation import (
    ValidationCollector,
    check_form_structure,
    check_forms_present,
    check_name,
    is_blank,
)
from sap_query_package.domain.entities import (
    PERIOD_TYPES,
    DateRange,
    FileValidationResult,
    Package,
    ValidationResult,
)
from sap_query_package.domain.exceptions import InvalidDateError
from sap_query_package.utils.datetime import parse_calendar_date

from .naming import FILE_NAME_PATTERN, PACKAGE_FILE_EXTENSION

logger = logging.getLogger(__name__)

_MIN_SIZE_RATIO = 0.5
_MAX_SIZE_RATIO = 2


def validate_package(
    package: Package | None, date_range: DateRange | None = None
) -> ValidationResult:
    """Return the validation result for ``package``.

    The date range is only checked when supplied. The function keeps no state
    between calls, so validating the same input twice yields equal results.
    """

    collector = ValidationCollector()
    if package is None:
        collector.error("El paquete está vacío o no es válido")
        return collector.finalize(0)

    check_name(collector, package.name, "El paquete debe tener un nombre")
    forms = package.forms
    total_forms = 0
    if check_forms_present(
        collector,
        forms,
        not_a_list_message="El paquete debe tener una lista de formularios",
        empty_message="El paquete no tiene formularios. No se generará ningún archivo.",
    ):
        total_forms = len(forms)
        for form in forms:
            check_form_structure(
                collector,
                form,
                flow_counter="missing_flows",
                missing_parameters_message=(
                    "El formulario no tiene parámetros definidos. "
                    "Algunos parámetros pueden ser requeridos."
                ),
            )

    if date_range is not None:
        validate_date_range(collector, date_range)

    return collector.finalize(total_forms)


def validate_date_range(collector: ValidationCollector, date_range: DateRange) -> None:
    """Append date range issues to ``collector``."""

    start: date | None = None
    if date_range.start_date is None or (
        isinstance(date_range.start_date, str) and is_blank(date_range.start_date)
    ):
        collector.error("La fecha de inicio es requerida", field="startDate")
        collector.summary.invalid_dates += 1
    else:
        try:
            start = parse_calendar_date(date_range.start_date)
        except InvalidDateError:
            collector.error(
                f"La fecha de inicio tiene un formato inválido: {date_range.start_date}",
                field="startDate",
            )
            collector.summary.invalid_dates += 1

    if date_range.end_date is not None and not (
        isinstance(date_range.end_date, str) and is_blank(date_range.end_date)
    ):
        try:
            end = parse_calendar_date(date_range.end_date)
        except InvalidDateError:
            collector.error(
                f"La fecha de fin tiene un formato inválido: {date_range.end_date}",
                field="endDate",
            )
            collector.summary.invalid_dates += 1
        else:
            if start is not None and start > end:
                collector.error(
                    "La fecha de inicio no puede ser posterior a la fecha de fin",
                    field="endDate",
                )
                collector.summary.invalid_dates += 1

    if date_range.period_type not in PERIOD_TYPES:
        collector.error(
            "El tipo de período debe ser 'month' o 'day', se recibió: "
            f"{date_range.period_type}",
            field="periodType",
        )


def validate_generated_file(
    file_name: str | None, file_size: int, expected_size: int | None = None
) -> FileValidationResult:
    """Check a file after it was written by the storage gateway.

    A wrong extension is an error while a name that drifts from the expected
    pattern is only a warning, because the file already exists remotely.
    """

    result = FileValidationResult()
    if is_blank(file_name):
        result.errors.append("El nombre del archivo está vacío")
    else:
        if not file_name.endswith(PACKAGE_FILE_EXTENSION):
            result.errors.append(
                f"El nombre del archivo no tiene la extensión correcta: {file_name}"
            )
        if not FILE_NAME_PATTERN.match(file_name):
            result.warnings.append(
                f"El nombre del archivo no sigue el formato esperado: {file_name}"
            )

    if file_size <= 0:
        result.errors.append("El archivo generado está vacío")
    elif expected_size and file_size < expected_size * _MIN_SIZE_RATIO:
        result.warnings.append(
            f"El tamaño del archivo ({file_size} bytes) es significativamente menor "
            f"al esperado ({expected_size} bytes)"
        )
    elif expected_size and file_size > expected_size * _MAX_SIZE_RATIO:
        result.warnings.append(
            f"El tamaño del archivo ({file_size} bytes) es significativamente mayor "
            f"al esperado ({expected_size} bytes)"
        )

    if result.errors or result.warnings:
        logger.info(
            "Generated file %s: %d errors, %d warnings",
            file_name,
            len(result.errors),
            len(result.warnings),
        )
    return result


__all__ = ["validate_date_range", "validate_generated_file", "validate_package"]
