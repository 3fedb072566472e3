"""Schemas used to report validation and execution results."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_READ_CONFIG = ConfigDict(
    alias_generator=to_camel, populate_by_name=True, from_attributes=True
)


class ValidationIssueRead(BaseModel):
    model_config = _READ_CONFIG

    severity: str
    message: str
    field: str | None = None
    form_id: str | None = None
    tcode: str | None = None


class ValidationSummaryRead(BaseModel):
    model_config = _READ_CONFIG

    total_forms: int
    forms_with_errors: int
    forms_with_warnings: int
    missing_required_fields: int
    invalid_flow_references: int
    duplicate_names: int
    invalid_dates: int
    missing_flows: int


class ValidationResultRead(BaseModel):
    """Validation result serialized with camelCase keys."""

    model_config = _READ_CONFIG

    is_valid: bool
    errors: list[ValidationIssueRead]
    warnings: list[ValidationIssueRead]
    info: list[ValidationIssueRead]
    summary: ValidationSummaryRead


class FileValidationRead(BaseModel):
    model_config = _READ_CONFIG

    is_valid: bool
    errors: list[str]
    warnings: list[str]


class ExecutionStepRead(BaseModel):
    model_config = _READ_CONFIG

    id: str
    form_id: str
    form_name: str
    file_name: str
    status: str
    started_at: datetime | None = None
    finished_at: datetime | None = None
    duration: float | None = None
    file_size: int | None = None
    error: str | None = None
    validation: FileValidationRead | None = None


__all__ = [
    "ExecutionStepRead",
    "FileValidationRead",
    "ValidationIssueRead",
    "ValidationResultRead",
    "ValidationSummaryRead",
]
