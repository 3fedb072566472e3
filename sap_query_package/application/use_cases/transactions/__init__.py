"""Transaction profile resolution."""

from .profiles import (
    CHECKBOX_PARAMETERS,
    COLUMNS_PARAMETER,
    FURTHER_SETTINGS_PARAMETER,
    NO_SUM_PARAMETER,
    PROFILES,
    SUMMARY_CANONICAL_CODES,
    apply_profile_defaults,
    canonical_code_for_form,
    date_kind_for_code,
    has_value,
    parameters_with_extras,
    resolve_default,
    resolve_profile,
)

__all__ = [
    "CHECKBOX_PARAMETERS",
    "COLUMNS_PARAMETER",
    "FURTHER_SETTINGS_PARAMETER",
    "NO_SUM_PARAMETER",
    "PROFILES",
    "SUMMARY_CANONICAL_CODES",
    "apply_profile_defaults",
    "canonical_code_for_form",
    "date_kind_for_code",
    "has_value",
    "parameters_with_extras",
    "resolve_default",
    "resolve_profile",
]
