"""Static rule table resolving transaction specific defaults.

Parameter names are matched against ordered ``DefaultRule`` entries. Exact
rules are evaluated before substring rules and, inside each group, the first
matching rule wins. A default never replaces a value that is already set.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from sap_query_package.domain.entities import (
    DATE_KIND_DETAIL,
    DATE_KIND_SUMMARY,
    CheckboxValue,
    DefaultRule,
    TransactionProfile,
)

COLUMNS_PARAMETER = "Columns"
NO_SUM_PARAMETER = "NoSum"
CHECKBOX_PARAMETERS: tuple[str, ...] = (COLUMNS_PARAMETER, NO_SUM_PARAMETER)
FURTHER_SETTINGS_PARAMETER = "FurtherSettings"

SUMMARY_CANONICAL_CODES = frozenset({"ZFIR_STATSLOAD", "ZFIR_STATLOAD"})

_CHECKBOX_RULES: tuple[DefaultRule, ...] = (
    DefaultRule(exact=COLUMNS_PARAMETER, value=CheckboxValue(True)),
    DefaultRule(exact=NO_SUM_PARAMETER, value=CheckboxValue(True)),
)
_CONTROLLING_AREA = DefaultRule(all_of=("controlling", "area"), value="2000")
_COST_ELEMENT_GROUP = DefaultRule(all_of=("cost", "element", "group"), value="CE_STD")


def _cji3_rules(project_low: str, project_high: str, layout: str) -> tuple[DefaultRule, ...]:
    return _CHECKBOX_RULES + (
        _CONTROLLING_AREA,
        DefaultRule(all_of=("database", "prof"), value="000000000001"),
        DefaultRule(all_of=("network", "order", "low"), value="2100*"),
        DefaultRule(all_of=("project", "low"), value=project_low),
        DefaultRule(all_of=("project", "high"), value=project_high),
        _COST_ELEMENT_GROUP,
        DefaultRule(all_of=("layout",), value=layout),
        DefaultRule(all_of=("further", "settings"), value="99999999"),
    )


PROFILES: tuple[TransactionProfile, ...] = (
    TransactionProfile(
        canonical_code="KSB1",
        date_kind=DATE_KIND_DETAIL,
        match_tokens=(("KSB1",),),
        rules=_CHECKBOX_RULES
        + (
            _CONTROLLING_AREA,
            DefaultRule(all_of=("cost", "center", "group"), value="0001"),
            _COST_ELEMENT_GROUP,
            DefaultRule(all_of=("layout",), value="/ALLDETAIL"),
        ),
    ),
    TransactionProfile(
        canonical_code="KOB1",
        date_kind=DATE_KIND_DETAIL,
        match_tokens=(("KOB1",),),
        rules=_CHECKBOX_RULES
        + (
            _CONTROLLING_AREA,
            DefaultRule(all_of=("order", "low"), value="50000000"),
            DefaultRule(all_of=("order", "high"), value="59999999"),
            _COST_ELEMENT_GROUP,
            DefaultRule(all_of=("layout",), value="/ALL_COST"),
        ),
    ),
    TransactionProfile(
        canonical_code="CJI3#ALLCOST",
        date_kind=DATE_KIND_DETAIL,
        match_tokens=(("CJI3", "ALLCOST"),),
        rules=_cji3_rules("2000*", "2100*", "/ALLCOST"),
    ),
    TransactionProfile(
        canonical_code="CJI3#1CANDALL",
        date_kind=DATE_KIND_DETAIL,
        match_tokens=(("CJI3", "CANDALL"),),
        rules=_cji3_rules("2000-CAP*", "2100-CAP*", "/1CANDALL"),
        extra_parameters=(FURTHER_SETTINGS_PARAMETER,),
    ),
    TransactionProfile(
        canonical_code="CJI3",
        date_kind=DATE_KIND_DETAIL,
        match_tokens=(("CJI3",),),
        rules=_CHECKBOX_RULES
        + (
            _CONTROLLING_AREA,
            DefaultRule(all_of=("database", "prof"), value="000000000001"),
            _COST_ELEMENT_GROUP,
        ),
    ),
    TransactionProfile(
        canonical_code="ZFIR_STATSLOAD",
        date_kind=DATE_KIND_SUMMARY,
        match_tokens=(("ZFIR_STATSLOAD",), ("ZFIR_STATLOAD",)),
        rules=_CHECKBOX_RULES
        + (
            DefaultRule(all_of=("controlling", "area", "low"), value="2000"),
            DefaultRule(all_of=("company", "code", "low"), none_of=("high",), value="2000"),
            DefaultRule(all_of=("company", "code", "high"), value="2100"),
            DefaultRule(all_of=("profit", "center"), none_of=("category",), value="2000"),
            DefaultRule(all_of=("cost", "element", "group", "low"), value="CE_STD"),
        ),
    ),
)


def _generic_profile(code: str) -> TransactionProfile:
    return TransactionProfile(
        canonical_code=code,
        date_kind=date_kind_for_code(code),
        rules=_CHECKBOX_RULES,
    )


def resolve_profile(tcode: str | None, custom_name: str | None = None) -> TransactionProfile:
    """Return the profile matching ``custom_name`` and ``tcode``.

    Unknown transactions resolve to a generic detail profile whose canonical
    code is the transaction code (or the custom name when no code is set).
    """

    haystack = f"{custom_name or ''} {tcode or ''}".upper()
    for profile in PROFILES:
        if profile.matches(haystack):
            return profile
    return _generic_profile((tcode or custom_name or "").strip())


def canonical_code_for_form(tcode: str | None, custom_name: str | None = None) -> str:
    """Return the code used in generated file names for a form."""

    return resolve_profile(tcode, custom_name).canonical_code


def date_kind_for_code(code: str) -> str:
    """Return the date kind associated with a canonical code."""

    if code.strip().upper() in SUMMARY_CANONICAL_CODES:
        return DATE_KIND_SUMMARY
    return DATE_KIND_DETAIL


def has_value(value: Any) -> bool:
    """Return whether ``value`` counts as set for defaulting purposes.

    ``None`` and blank strings are unset. Empty lists and ``False`` are real
    checkbox selections and therefore count as set.
    """

    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    return True


def _encode(value: Any, date_kind: str) -> Any:
    if isinstance(value, CheckboxValue):
        return value.encode(date_kind)
    return value


def resolve_default(
    profile: TransactionProfile,
    parameter: str,
    current: Any = None,
) -> Any:
    """Return the value ``parameter`` should hold after defaulting.

    ``current`` is returned untouched when it is already set or when no rule
    matches the parameter name.
    """

    if has_value(current):
        return current

    exact_rules = (rule for rule in profile.rules if rule.is_exact)
    pattern_rules = (rule for rule in profile.rules if not rule.is_exact)
    for group in (exact_rules, pattern_rules):
        for rule in group:
            if rule.matches(parameter):
                return _encode(rule.value, profile.date_kind)
    return current


def apply_profile_defaults(
    profile: TransactionProfile,
    parameters: Iterable[str],
    values: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Return ``values`` with every defaultable parameter filled in."""

    result = dict(values or {})
    for parameter in parameters:
        resolved = resolve_default(profile, parameter, result.get(parameter))
        if resolved is not None:
            result[parameter] = resolved
    return result


def parameters_with_extras(
    profile: TransactionProfile, parameters: Iterable[str] | None
) -> list[str]:
    """Return ``parameters`` plus checkbox and profile specific parameters.

    Order is preserved and duplicates are dropped.
    """

    ordered: list[str] = []
    for name in list(parameters or []) + list(CHECKBOX_PARAMETERS) + list(
        profile.extra_parameters
    ):
        if name not in ordered:
            ordered.append(name)
    return ordered


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
