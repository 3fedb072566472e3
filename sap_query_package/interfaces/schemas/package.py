"""Schemas for package and date range payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sap_query_package.domain.entities import PERIOD_TYPE_DAY, DateRange, Form, Package


class DateRangePayload(BaseModel):
    """Date range as typed by the operator.

    Dates stay as strings so malformed values are reported by validation
    instead of being rejected while parsing the payload.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    start_date: str | None = None
    end_date: str | None = None
    period_type: str = PERIOD_TYPE_DAY

    def to_entity(self) -> DateRange:
        return DateRange(
            start_date=self.start_date,
            end_date=self.end_date or None,
            period_type=self.period_type,
        )


class FormPayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    tcode: str = ""
    custom_name: str = ""
    json_data: dict[str, Any] | None = None
    parameters: list[str] | None = Field(default=None)
    values: dict[str, Any] = Field(default_factory=dict)

    def to_entity(self) -> Form:
        return Form(
            id=self.id,
            tcode=self.tcode,
            custom_name=self.custom_name,
            json_data=self.json_data,
            parameters=list(self.parameters) if self.parameters is not None else None,
            values=dict(self.values),
        )


class PackagePayload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str = ""
    forms: list[FormPayload] = Field(default_factory=list)

    def to_entity(self) -> Package:
        return Package(
            id=self.id,
            name=self.name,
            forms=[form.to_entity() for form in self.forms],
        )


__all__ = ["DateRangePayload", "FormPayload", "PackagePayload"]
