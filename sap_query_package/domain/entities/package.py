"""Domain entities describing dated, ready to execute packages."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Form:
    """Realized form with dates substituted and defaults merged."""

    id: str
    tcode: str
    custom_name: str
    json_data: dict[str, Any] | None
    parameters: list[str] | None = field(default_factory=list)
    values: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.custom_name or self.tcode or self.id


@dataclass
class Package:
    """Instantiation of a template for a concrete date range."""

    id: str
    name: str
    forms: list[Form] = field(default_factory=list)


__all__ = ["Form", "Package"]
