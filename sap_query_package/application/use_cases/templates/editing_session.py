"""In-memory editing workflow for templates.

Per-form parameter values live in an explicit ``form_state`` map owned by the
session. Every structural edit records a deep copied snapshot so it can be
undone.
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any

from sap_query_package.domain.entities import Template, TemplateForm

from .history import SnapshotHistory, TemplateVersionHistory

logger = logging.getLogger(__name__)


@dataclass
class _SessionState:
    templates: list[Template] = field(default_factory=list)
    form_state: dict[str, dict[str, Any]] = field(default_factory=dict)


class TemplateEditingSession:
    """Own the templates being edited together with their form values."""

    def __init__(
        self,
        templates: list[Template] | None = None,
        *,
        history: SnapshotHistory[_SessionState] | None = None,
        versions: TemplateVersionHistory | None = None,
    ) -> None:
        self._state = _SessionState()
        for template in templates or []:
            self._register(template)
        self._history = history if history is not None else SnapshotHistory()
        self._versions = versions if versions is not None else TemplateVersionHistory()
        self._history.record(self._state)

    @property
    def templates(self) -> list[Template]:
        return list(self._state.templates)

    @property
    def versions(self) -> TemplateVersionHistory:
        return self._versions

    def _register(self, template: Template) -> None:
        self._state.templates.append(template)
        for form in template.forms:
            self._state.form_state[form.id] = dict(form.default_values or {})

    def _snapshot(self) -> None:
        self._history.record(self._state)

    def get_template(self, template_id: str) -> Template:
        for template in self._state.templates:
            if template.id == template_id:
                return template
        raise ValueError("Plantilla no encontrada")

    def _get_form(self, template: Template, form_id: str) -> TemplateForm:
        for form in template.forms:
            if form.id == form_id:
                return form
        raise ValueError("Formulario no encontrado")

    def add_template(self, template: Template) -> Template:
        if any(existing.id == template.id for existing in self._state.templates):
            raise ValueError("Ya existe una plantilla con el mismo identificador")
        self._register(template)
        self._snapshot()
        return template

    def remove_template(self, template_id: str) -> None:
        template = self.get_template(template_id)
        self._state.templates.remove(template)
        for form in template.forms:
            self._state.form_state.pop(form.id, None)
        self._snapshot()

    def rename_template(self, template_id: str, name: str) -> Template:
        if not name or not name.strip():
            raise ValueError("El nombre de la plantilla es obligatorio")
        template = self.get_template(template_id)
        template.name = name.strip()
        self._snapshot()
        return template

    def add_form(self, template_id: str, form: TemplateForm) -> TemplateForm:
        template = self.get_template(template_id)
        if any(existing.id == form.id for existing in template.forms):
            raise ValueError("Ya existe un formulario con el mismo identificador")
        template.forms.append(form)
        self._state.form_state[form.id] = dict(form.default_values or {})
        self._snapshot()
        return form

    def remove_form(self, template_id: str, form_id: str) -> None:
        template = self.get_template(template_id)
        template.forms.remove(self._get_form(template, form_id))
        self._state.form_state.pop(form_id, None)
        self._snapshot()

    def rename_form(self, template_id: str, form_id: str, custom_name: str) -> TemplateForm:
        if not custom_name or not custom_name.strip():
            raise ValueError("El nombre personalizado es obligatorio")
        form = self._get_form(self.get_template(template_id), form_id)
        form.custom_name = custom_name.strip()
        self._snapshot()
        return form

    def set_value(self, form_id: str, parameter: str, value: Any) -> None:
        if form_id not in self._state.form_state:
            raise ValueError("Formulario no encontrado")
        self._state.form_state[form_id][parameter] = value
        self._snapshot()

    def form_values(self, form_id: str) -> dict[str, Any]:
        try:
            return deepcopy(self._state.form_state[form_id])
        except KeyError as exc:
            raise ValueError("Formulario no encontrado") from exc

    def prepare_for_save(self, template_id: str) -> Template:
        """Write the edited values back into the template's default values.

        Every declared parameter ends up present; missing values become empty
        strings. The previous version of the template is kept in the version
        history before it is modified.
        """

        template = self.get_template(template_id)
        self._versions.record(template)
        for form in template.forms:
            values = dict(self._state.form_state.get(form.id, form.default_values or {}))
            for parameter in form.parameters or []:
                if values.get(parameter) is None:
                    values[parameter] = ""
            self._state.form_state[form.id] = values
            form.default_values = dict(values)
        self._snapshot()
        logger.debug("Prepared template %s for saving", template_id)
        return template

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def undo(self) -> bool:
        """Restore the state before the last edit. Returns ``False`` if none."""

        previous = self._history.undo()
        if previous is None:
            return False
        self._state = previous
        return True


__all__ = ["TemplateEditingSession"]
