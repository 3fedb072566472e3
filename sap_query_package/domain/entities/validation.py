"""Domain entities describing validation outcomes."""

from dataclasses import dataclass, field

SEVERITY_ERROR = "error"
SEVERITY_WARNING = "warning"
SEVERITY_INFO = "info"


@dataclass(frozen=True)
class ValidationIssue:
    """Single problem detected while validating a template or package."""

    severity: str
    message: str
    field: str | None = None
    form_id: str | None = None
    tcode: str | None = None


@dataclass
class ValidationSummary:
    """Aggregated counters attached to a validation result."""

    total_forms: int = 0
    forms_with_errors: int = 0
    forms_with_warnings: int = 0
    missing_required_fields: int = 0
    invalid_flow_references: int = 0
    duplicate_names: int = 0
    invalid_dates: int = 0
    missing_flows: int = 0


@dataclass
class ValidationResult:
    """Tiered validation outcome; warnings and info never block."""

    errors: list[ValidationIssue] = field(default_factory=list)
    warnings: list[ValidationIssue] = field(default_factory=list)
    info: list[ValidationIssue] = field(default_factory=list)
    summary: ValidationSummary = field(default_factory=ValidationSummary)

    @property
    def is_valid(self) -> bool:
        return not self.errors


@dataclass
class FileValidationResult:
    """Outcome of the post-save check performed on a generated file."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


__all__ = [
    "FileValidationResult",
    "SEVERITY_ERROR",
    "SEVERITY_INFO",
    "SEVERITY_WARNING",
    "ValidationIssue",
    "ValidationResult",
    "ValidationSummary",
]
