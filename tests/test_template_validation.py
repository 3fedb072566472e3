import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sap_query_package.application.use_cases.templates import validate_template
from sap_query_package.domain.entities import (
    TEMPLATE_TYPE_CUSTOM,
    Template,
    TemplateForm,
)


def _build_form(form_id, tcode="KSB1", custom_name=None, parameters=None, default_values=None, json_data=None):
    return TemplateForm(
        id=form_id,
        tcode=tcode,
        custom_name=tcode if custom_name is None else custom_name,
        json_data=json_data
        if json_data is not None
        else {"$meta": {"tcode": tcode}, "targetContext": {}, "steps": {}},
        parameters=parameters,
        default_values=default_values or {},
    )


def _build_template(*forms, name="Plantilla_Base", template_type=TEMPLATE_TYPE_CUSTOM):
    return Template(id="tpl", name=name, type=template_type, forms=list(forms))


def _messages(issues):
    return [issue.message for issue in issues]


def test_duplicate_custom_names_are_errors():
    template = _build_template(
        _build_form("f1", custom_name="KSB1", parameters=["Layout"], default_values={"Layout": ""}),
        _build_form("f2", custom_name="KSB1", parameters=["Layout"], default_values={"Layout": ""}),
    )

    result = validate_template(template)

    assert result.is_valid is False
    assert result.summary.duplicate_names == 1
    assert 'El nombre personalizado "KSB1" está duplicado en 2 formularios' in _messages(result.errors)
    assert result.errors[0].form_id == "f1"


def test_missing_parameters_only_warn():
    template = _build_template(
        _build_form("f1", "KSB1", parameters=None),
        _build_form("f2", "KOB1", parameters=None),
    )

    result = validate_template(template)

    assert result.is_valid is True
    assert result.errors == []
    assert _messages(result.warnings).count("El formulario no tiene parámetros definidos") == 2
    assert result.summary.forms_with_warnings == 2


def test_missing_template_is_invalid():
    result = validate_template(None)

    assert _messages(result.errors) == ["La plantilla está vacía o no es válida"]


def test_name_and_type_rules():
    template = _build_template(name='Mi plantilla: "v2"', template_type="OTHER")

    result = validate_template(template)

    errors = _messages(result.errors)
    assert any(message.startswith("La plantilla debe tener un tipo válido") for message in errors)
    assert any("caracteres inválidos" in message for message in errors)
    assert any("contiene espacios" in message for message in _messages(result.warnings))
    assert "La plantilla no tiene formularios. No se generará ningún archivo." in _messages(result.warnings)


def test_long_name_warns():
    result = validate_template(_build_template(name="A" * 101))

    assert "El nombre de la plantilla es muy largo (más de 100 caracteres)" in _messages(result.warnings)
    assert result.is_valid


def test_blank_name_and_non_list_forms_are_errors():
    template = Template(id="tpl", name=" ", type=TEMPLATE_TYPE_CUSTOM, forms=None)

    result = validate_template(template)

    assert _messages(result.errors) == [
        "La plantilla debe tener un nombre",
        "La plantilla debe tener una lista de formularios",
    ]


def test_blank_tcode_counts_as_missing_required_field():
    form = _build_form("f1", tcode="", custom_name="Consulta", parameters=["A"], default_values={"A": ""})
    form.json_data = {"$meta": {"tcode": "KSB1"}, "targetContext": {}, "steps": {}}

    result = validate_template(_build_template(form))

    assert "El formulario debe tener un T-Code" in _messages(result.errors)
    assert result.summary.missing_required_fields == 1
    assert result.summary.forms_with_errors == 1


def test_json_shape_issues():
    form = _build_form(
        "f1",
        "KSB1",
        parameters=["A"],
        default_values={"A": "1"},
        json_data={"$meta": {"tcode": "KOB1"}},
    )

    result = validate_template(_build_template(form))

    warnings = _messages(result.warnings)
    assert "El T-Code del formulario (KSB1) no coincide con el T-Code del JSON (KOB1)" in warnings
    assert "El JSON del formulario no tiene targetContext definido" in warnings
    assert "El JSON del formulario no tiene steps definidos" in warnings
    assert result.is_valid


def test_missing_meta_and_json_data_are_errors():
    without_meta = _build_form("f1", "KSB1", parameters=["A"], default_values={"A": ""}, json_data={"steps": {}})
    without_json = _build_form("f2", "KOB1", parameters=["A"], default_values={"A": ""})
    without_json.json_data = None

    result = validate_template(_build_template(without_meta, without_json))

    errors = _messages(result.errors)
    assert "El JSON del formulario no tiene sección $meta" in errors
    assert "El formulario no tiene datos JSON" in errors
    assert result.summary.forms_with_errors == 2
    assert result.summary.invalid_flow_references == 2


def test_parameters_without_defaults_warn():
    form = _build_form("f1", parameters=["Layout", "Columns"], default_values={"Layout": ""})

    result = validate_template(_build_template(form))

    assert _messages(result.warnings) == ['El parámetro "Columns" no tiene un valor por defecto']
    assert result.warnings[0].field == "defaultValues.Columns"
    assert result.warnings[0].tcode == "KSB1"


def test_flow_references_are_checked_case_insensitively():
    known = _build_form("f1", "KSB1", parameters=["A"], default_values={"A": ""})
    unknown = _build_form("f2", "ME2N", parameters=["A"], default_values={"A": ""})

    result = validate_template(_build_template(known, unknown), ["KSB1.JSON", "kob1.json"])

    assert _messages(result.warnings) == ["El flujo referenciado (ME2N) no se encontró en el servidor"]
    assert result.summary.invalid_flow_references == 1
    assert result.info == []


def test_missing_flow_listing_is_reported_as_info():
    result = validate_template(_build_template(_build_form("f1", parameters=["A"], default_values={"A": ""})))

    assert len(result.info) == 1
    assert result.is_valid


def test_forms_with_errors_counts_distinct_forms():
    form = _build_form("f1", tcode="", custom_name="", parameters=["A"], default_values={"A": ""})
    form.json_data = {}

    result = validate_template(_build_template(form))

    assert len(result.errors) > 1
    assert result.summary.forms_with_errors == 1
    assert result.summary.total_forms == 1
