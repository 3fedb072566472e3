"""Helpers that build the names of generated package files."""

from __future__ import annotations

import re

from sap_query_package.application.use_cases.transactions import (
    canonical_code_for_form,
    date_kind_for_code,
)
from sap_query_package.domain.entities import DateRange, Form
from sap_query_package.utils.datetime import format_for_kind
from sap_query_package.utils.identifiers import new_short_id

PACKAGE_FILE_EXTENSION = ".sqpr"
FILE_NAME_PATTERN = re.compile(r"^[A-F0-9]{8}-[A-Z0-9_#]+@startDate=[\d.]+\.sqpr$")


def build_package_file_name(canonical_code: str, date_range: DateRange) -> str:
    """Return ``<8-hex-id>-<code>@startDate=<date>.sqpr`` for ``canonical_code``.

    Summary codes encode the start date as ``YYYYMM`` and every other code as
    ``DD.MM.YYYY``. The end date never takes part in the name. Raises
    ``InvalidDateError`` when the start date cannot be parsed.
    """

    code = canonical_code.strip()
    if not code:
        raise ValueError("El código de transacción es obligatorio")
    formatted = format_for_kind(date_range.start_date, date_kind_for_code(code))
    return f"{new_short_id()}-{code}@startDate={formatted}{PACKAGE_FILE_EXTENSION}"


def file_name_for_form(form: Form, date_range: DateRange) -> str:
    """Return the generated file name for ``form`` using its transaction profile."""

    return build_package_file_name(
        canonical_code_for_form(form.tcode, form.custom_name), date_range
    )


__all__ = [
    "FILE_NAME_PATTERN",
    "PACKAGE_FILE_EXTENSION",
    "build_package_file_name",
    "file_name_for_form",
]
