import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from sap_query_package.application.use_cases.transactions import (
    apply_profile_defaults,
    canonical_code_for_form,
    has_value,
    parameters_with_extras,
    resolve_default,
    resolve_profile,
)
from sap_query_package.domain.entities import (
    DATE_KIND_DETAIL,
    DATE_KIND_SUMMARY,
    CheckboxValue,
    DefaultRule,
    TransactionProfile,
)


@pytest.mark.parametrize(
    ("tcode", "custom_name", "expected_code", "expected_kind"),
    [
        ("KSB1", "KSB1", "KSB1", DATE_KIND_DETAIL),
        ("KOB1", "KOB1", "KOB1", DATE_KIND_DETAIL),
        ("CJI3", "CJI3_ALLCOST", "CJI3#ALLCOST", DATE_KIND_DETAIL),
        ("CJI3", "CJI3_CANDALL", "CJI3#1CANDALL", DATE_KIND_DETAIL),
        ("CJI3", "Proyectos", "CJI3", DATE_KIND_DETAIL),
        ("ZFIR_STATSLOAD", "ZFIR_STATSLOAD", "ZFIR_STATSLOAD", DATE_KIND_SUMMARY),
        ("ZFIR_STATLOAD", "", "ZFIR_STATSLOAD", DATE_KIND_SUMMARY),
        ("ME2N", "Pedidos", "ME2N", DATE_KIND_DETAIL),
    ],
)
def test_profiles_resolve_code_and_date_kind(tcode, custom_name, expected_code, expected_kind):
    profile = resolve_profile(tcode, custom_name)

    assert profile.canonical_code == expected_code
    assert profile.date_kind == expected_kind


def test_matching_is_case_insensitive_on_custom_name():
    assert canonical_code_for_form("cji3", "cji3_allcost") == "CJI3#ALLCOST"


def test_unknown_form_without_tcode_uses_custom_name():
    assert canonical_code_for_form("", "MiConsulta") == "MiConsulta"


def test_checkbox_defaults_depend_on_date_kind():
    detail = resolve_profile("KSB1")
    summary = resolve_profile("ZFIR_STATSLOAD")

    assert resolve_default(detail, "Columns") == ["All"]
    assert resolve_default(detail, "NoSum") == ["All"]
    assert resolve_default(summary, "Columns") is True
    assert resolve_default(summary, "NoSum") is True


def test_unchecked_checkbox_encoding():
    assert CheckboxValue(False).encode(DATE_KIND_DETAIL) == []
    assert CheckboxValue(False).encode(DATE_KIND_SUMMARY) is False


def test_substring_rules_match_parameter_naming_variants():
    profile = resolve_profile("KSB1")

    assert resolve_default(profile, "ControllingArea") == "2000"
    assert resolve_default(profile, "Controlling Area") == "2000"
    assert resolve_default(profile, "CostCenterGroup") == "0001"
    assert resolve_default(profile, "CostElementGroup") == "CE_STD"
    assert resolve_default(profile, "Layout") == "/ALLDETAIL"
    assert resolve_default(profile, "PostingDateLOW") is None


def test_defaults_never_overwrite_present_values():
    profile = resolve_profile("KOB1")

    assert resolve_default(profile, "Layout", "/MINE") == "/MINE"
    assert resolve_default(profile, "Columns", []) == []
    assert resolve_default(profile, "Layout", "  ") == "/ALL_COST"
    assert resolve_default(profile, "Layout", None) == "/ALL_COST"


def test_exact_rules_win_over_substring_rules():
    profile = TransactionProfile(
        canonical_code="TEST",
        date_kind=DATE_KIND_DETAIL,
        rules=(
            DefaultRule(all_of=("sum",), value="pattern"),
            DefaultRule(exact="NoSum", value=CheckboxValue(True)),
        ),
    )

    assert resolve_default(profile, "NoSum") == ["All"]
    assert resolve_default(profile, "SubtotalSum") == "pattern"


def test_cji3_variants_use_their_own_project_ranges():
    allcost = resolve_profile("CJI3", "CJI3_ALLCOST")
    candall = resolve_profile("CJI3", "CJI3_CANDALL")

    assert resolve_default(allcost, "ProjectLOW") == "2000*"
    assert resolve_default(allcost, "ProjectHIGH") == "2100*"
    assert resolve_default(candall, "ProjectLOW") == "2000-CAP*"
    assert resolve_default(candall, "ProjectHIGH") == "2100-CAP*"
    assert resolve_default(allcost, "Network/OrderLOW") == "2100*"
    assert resolve_default(allcost, "Database prof.") == "000000000001"
    assert resolve_default(candall, "Layout") == "/1CANDALL"
    assert resolve_default(candall, "FurtherSettings") == "99999999"


def test_summary_rules_exclude_high_and_category_variants():
    profile = resolve_profile("ZFIR_STATSLOAD")
    defaults = apply_profile_defaults(
        profile,
        [
            "ControllingAreaLOW",
            "CompanyCodeLOW",
            "CompanyCodeHIGH",
            "ProfitCenter",
            "ProfitCenterCategory",
            "CostElementGroupLOW",
        ],
    )

    assert defaults == {
        "ControllingAreaLOW": "2000",
        "CompanyCodeLOW": "2000",
        "CompanyCodeHIGH": "2100",
        "ProfitCenter": "2000",
        "CostElementGroupLOW": "CE_STD",
    }


def test_candall_adds_further_settings_parameter_once():
    profile = resolve_profile("CJI3", "CJI3_CANDALL")

    assert parameters_with_extras(profile, ["Layout"]) == [
        "Layout",
        "Columns",
        "NoSum",
        "FurtherSettings",
    ]
    assert parameters_with_extras(profile, ["FurtherSettings", "NoSum"]) == [
        "FurtherSettings",
        "NoSum",
        "Columns",
    ]


def test_has_value_treats_false_and_empty_list_as_set():
    assert has_value(False)
    assert has_value([])
    assert not has_value(None)
    assert not has_value("")
