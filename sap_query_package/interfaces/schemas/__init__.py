"""Pydantic schemas for payloads exchanged with the application shell."""

from .package import DateRangePayload, FormPayload, PackagePayload
from .template import TemplateFormPayload, TemplatePayload
from .validation import (
    ExecutionStepRead,
    FileValidationRead,
    ValidationIssueRead,
    ValidationResultRead,
    ValidationSummaryRead,
)

__all__ = [
    "DateRangePayload",
    "ExecutionStepRead",
    "FileValidationRead",
    "FormPayload",
    "PackagePayload",
    "TemplateFormPayload",
    "TemplatePayload",
    "ValidationIssueRead",
    "ValidationResultRead",
    "ValidationSummaryRead",
]
