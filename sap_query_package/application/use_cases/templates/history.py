"""Bounded snapshot histories used while editing templates."""

from __future__ import annotations

from collections import deque
from copy import deepcopy
from typing import Generic, TypeVar

from sap_query_package.config import get_settings
from sap_query_package.domain.entities import Template

from .compare import TemplateComparison, compare_templates

StateT = TypeVar("StateT")


class SnapshotHistory(Generic[StateT]):
    """Fixed capacity list of deep copied states.

    The newest snapshot is the current state. Undoing discards it and returns a
    copy of the one recorded before, so no snapshot is ever shared with the
    caller.
    """

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is None:
            capacity = get_settings().edit_history_capacity
        if capacity < 1:
            raise ValueError("La capacidad del historial debe ser mayor que cero")
        self._snapshots: deque[StateT] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._snapshots)

    @property
    def capacity(self) -> int:
        return self._snapshots.maxlen or 0

    def record(self, state: StateT) -> None:
        self._snapshots.append(deepcopy(state))

    def can_undo(self) -> bool:
        return len(self._snapshots) > 1

    def undo(self) -> StateT | None:
        if not self.can_undo():
            return None
        self._snapshots.pop()
        return deepcopy(self._snapshots[-1])

    def clear(self) -> None:
        self._snapshots.clear()


class TemplateVersionHistory:
    """Saved versions of each template, oldest first."""

    def __init__(self, capacity: int | None = None) -> None:
        if capacity is None:
            capacity = get_settings().template_version_capacity
        if capacity < 1:
            raise ValueError("La capacidad del historial debe ser mayor que cero")
        self._capacity = capacity
        self._versions: dict[str, deque[Template]] = {}

    def record(self, template: Template) -> None:
        versions = self._versions.setdefault(template.id, deque(maxlen=self._capacity))
        versions.append(deepcopy(template))

    def versions(self, template_id: str) -> list[Template]:
        return [deepcopy(version) for version in self._versions.get(template_id, ())]

    def compare_with_version(self, template: Template, index: int) -> TemplateComparison:
        """Compare ``template`` against the saved version at ``index``."""

        versions = self._versions.get(template.id)
        if not versions or not 0 <= index < len(versions):
            raise ValueError("Versión de plantilla no encontrada")
        return compare_templates(versions[index], template)


__all__ = ["SnapshotHistory", "TemplateVersionHistory"]
