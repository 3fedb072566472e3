"""Schemas for template payloads exchanged with the application shell."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sap_query_package.domain.entities import Template, TemplateForm


class TemplateFormPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    tcode: str = ""
    custom_name: str = ""
    json_data: dict[str, Any] | None = None
    parameters: list[str] | None = Field(default=None)
    default_values: dict[str, Any] = Field(default_factory=dict)

    def to_entity(self) -> TemplateForm:
        return TemplateForm(
            id=self.id,
            tcode=self.tcode,
            custom_name=self.custom_name,
            json_data=self.json_data,
            parameters=list(self.parameters) if self.parameters is not None else None,
            default_values=dict(self.default_values),
        )


class TemplatePayload(BaseModel):
    """Template as sent by the editor."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str = ""
    type: str
    forms: list[TemplateFormPayload] = Field(default_factory=list)

    def to_entity(self) -> Template:
        return Template(
            id=self.id,
            name=self.name,
            type=self.type,
            forms=[form.to_entity() for form in self.forms],
        )


__all__ = ["TemplateFormPayload", "TemplatePayload"]
