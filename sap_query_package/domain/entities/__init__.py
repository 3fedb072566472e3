"""Domain entities exposed by the engine."""

from .date_range import DateRange, PERIOD_TYPES, PERIOD_TYPE_DAY, PERIOD_TYPE_MONTH
from .execution import (
    LOG_SEVERITY_ERROR,
    LOG_SEVERITY_INFO,
    LOG_SEVERITY_SUCCESS,
    LOG_SEVERITY_WARNING,
    STEP_STATUS_COMPLETED,
    STEP_STATUS_ERROR,
    STEP_STATUS_EXECUTING,
    STEP_STATUS_PENDING,
    TERMINAL_STEP_STATUSES,
    ExecutionLogEntry,
    ExecutionStep,
    ExecutionTally,
)
from .package import Form, Package
from .scheduling import (
    SCHEDULE_STATUSES,
    SCHEDULE_STATUS_CANCELLED,
    SCHEDULE_STATUS_COMPLETED,
    SCHEDULE_STATUS_ERROR,
    SCHEDULE_STATUS_EXECUTING,
    SCHEDULE_STATUS_PENDING,
    SCHEDULE_STATUS_SCHEDULED,
    DatePackage,
    PlannedFile,
    ScheduledPackage,
)
from .storage import StoredFile, WriteResult
from .template import (
    TEMPLATE_TYPES,
    TEMPLATE_TYPE_CUSTOM,
    TEMPLATE_TYPE_DETAILS_SYNC,
    TEMPLATE_TYPE_SUMMARY_SYNC,
    Template,
    TemplateForm,
)
from .transaction_profile import (
    CHECKBOX_ALL_MARKER,
    DATE_KIND_DETAIL,
    DATE_KIND_SUMMARY,
    CheckboxValue,
    DefaultRule,
    TransactionProfile,
)
from .validation import (
    SEVERITY_ERROR,
    SEVERITY_INFO,
    SEVERITY_WARNING,
    FileValidationResult,
    ValidationIssue,
    ValidationResult,
    ValidationSummary,
)

__all__ = [
    "CHECKBOX_ALL_MARKER",
    "CheckboxValue",
    "DATE_KIND_DETAIL",
    "DATE_KIND_SUMMARY",
    "DatePackage",
    "DateRange",
    "DefaultRule",
    "ExecutionLogEntry",
    "ExecutionStep",
    "ExecutionTally",
    "FileValidationResult",
    "Form",
    "LOG_SEVERITY_ERROR",
    "LOG_SEVERITY_INFO",
    "LOG_SEVERITY_SUCCESS",
    "LOG_SEVERITY_WARNING",
    "PERIOD_TYPES",
    "PERIOD_TYPE_DAY",
    "PERIOD_TYPE_MONTH",
    "Package",
    "PlannedFile",
    "SCHEDULE_STATUSES",
    "SCHEDULE_STATUS_CANCELLED",
    "SCHEDULE_STATUS_COMPLETED",
    "SCHEDULE_STATUS_ERROR",
    "SCHEDULE_STATUS_EXECUTING",
    "SCHEDULE_STATUS_PENDING",
    "SCHEDULE_STATUS_SCHEDULED",
    "SEVERITY_ERROR",
    "SEVERITY_INFO",
    "SEVERITY_WARNING",
    "STEP_STATUS_COMPLETED",
    "STEP_STATUS_ERROR",
    "STEP_STATUS_EXECUTING",
    "STEP_STATUS_PENDING",
    "ScheduledPackage",
    "StoredFile",
    "TEMPLATE_TYPES",
    "TEMPLATE_TYPE_CUSTOM",
    "TEMPLATE_TYPE_DETAILS_SYNC",
    "TEMPLATE_TYPE_SUMMARY_SYNC",
    "TERMINAL_STEP_STATUSES",
    "Template",
    "TemplateForm",
    "TransactionProfile",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSummary",
    "WriteResult",
]
