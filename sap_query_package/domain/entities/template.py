"""Domain entities describing reusable query templates."""

from dataclasses import dataclass, field
from typing import Any

TEMPLATE_TYPE_SUMMARY_SYNC = "SUMMARY_SYNC"
TEMPLATE_TYPE_DETAILS_SYNC = "DETAILS_SYNC"
TEMPLATE_TYPE_CUSTOM = "CUSTOM"
TEMPLATE_TYPES = (
    TEMPLATE_TYPE_SUMMARY_SYNC,
    TEMPLATE_TYPE_DETAILS_SYNC,
    TEMPLATE_TYPE_CUSTOM,
)


@dataclass
class TemplateForm:
    """One transaction form declared by a template."""

    id: str
    tcode: str
    custom_name: str
    json_data: dict[str, Any] | None
    parameters: list[str] | None = field(default_factory=list)
    default_values: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.custom_name or self.tcode or self.id


@dataclass
class Template:
    """Date-agnostic definition of the forms a package executes."""

    id: str
    name: str
    type: str
    forms: list[TemplateForm] = field(default_factory=list)


__all__ = [
    "TEMPLATE_TYPES",
    "TEMPLATE_TYPE_CUSTOM",
    "TEMPLATE_TYPE_DETAILS_SYNC",
    "TEMPLATE_TYPE_SUMMARY_SYNC",
    "Template",
    "TemplateForm",
]
