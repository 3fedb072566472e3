import pathlib
import sys

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from sap_query_package.domain.entities import (
    SEVERITY_ERROR,
    STEP_STATUS_COMPLETED,
    ExecutionStep,
    FileValidationResult,
    Template,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
)
from sap_query_package.interfaces.schemas import (
    DateRangePayload,
    ExecutionStepRead,
    PackagePayload,
    TemplatePayload,
    ValidationResultRead,
)


def test_template_payload_accepts_camel_case_keys():
    payload = TemplatePayload.model_validate(
        {
            "id": "t1",
            "name": "Mis_consultas",
            "type": "CUSTOM",
            "forms": [
                {
                    "id": "f1",
                    "tcode": "KSB1",
                    "customName": "KSB1_DETALLE",
                    "jsonData": {"$meta": {"tcode": "KSB1"}},
                    "parameters": ["Layout"],
                    "defaultValues": {"Layout": "/ALLDETAIL"},
                }
            ],
        }
    )

    template = payload.to_entity()

    assert isinstance(template, Template)
    assert template.forms[0].custom_name == "KSB1_DETALLE"
    assert template.forms[0].default_values == {"Layout": "/ALLDETAIL"}
    assert payload.model_dump(by_alias=True)["forms"][0]["customName"] == "KSB1_DETALLE"


def test_package_payload_keeps_missing_parameters_as_none():
    payload = PackagePayload.model_validate(
        {"id": "p1", "name": "Paquete", "forms": [{"id": "f1", "tcode": "KOB1"}]}
    )

    package = payload.to_entity()

    assert package.forms[0].parameters is None
    assert package.forms[0].values == {}


def test_date_range_payload_keeps_raw_strings():
    date_range = DateRangePayload.model_validate(
        {"startDate": "2025-13-01", "endDate": "", "periodType": "month"}
    ).to_entity()

    assert date_range.start_date == "2025-13-01"
    assert date_range.end_date is None
    assert date_range.period_type == "month"


def test_validation_result_is_serialized_from_attributes():
    result = ValidationResult(
        errors=[
            ValidationIssue(
                severity=SEVERITY_ERROR,
                message="El nombre es obligatorio",
                field="name",
            )
        ],
        summary=ValidationSummary(total_forms=1),
    )

    dumped = ValidationResultRead.model_validate(result).model_dump(by_alias=True)

    assert dumped["isValid"] is False
    assert dumped["errors"][0]["message"] == "El nombre es obligatorio"
    assert dumped["errors"][0]["formId"] is None
    assert dumped["summary"]["totalForms"] == 1


def test_execution_step_read_includes_file_validation():
    step = ExecutionStep(
        id="step_1",
        form_id="f1",
        form_name="KSB1",
        file_name="0A1B2C3D-KSB1@startDate=01.03.2025.sqpr",
        status=STEP_STATUS_COMPLETED,
        file_size=12,
        validation=FileValidationResult(warnings=["Archivo pequeño"]),
    )

    dumped = ExecutionStepRead.model_validate(step).model_dump(by_alias=True)

    assert dumped["fileSize"] == 12
    assert dumped["validation"] == {
        "isValid": True,
        "errors": [],
        "warnings": ["Archivo pequeño"],
    }
