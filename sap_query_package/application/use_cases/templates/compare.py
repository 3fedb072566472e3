"""Comparison of two versions of a template."""

from __future__ import annotations

from dataclasses import dataclass, field

from sap_query_package.domain.entities import Template, TemplateForm


@dataclass
class TemplateComparison:
    differences: list[str] = field(default_factory=list)
    added_forms: list[str] = field(default_factory=list)
    removed_forms: list[str] = field(default_factory=list)
    modified_forms: list[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.differences)


def _form_changed(old: TemplateForm, new: TemplateForm) -> bool:
    # Parameter order is not significant and dict equality ignores key order.
    return (
        old.tcode != new.tcode
        or old.custom_name != new.custom_name
        or set(old.parameters or []) != set(new.parameters or [])
        or (old.default_values or {}) != (new.default_values or {})
    )


def compare_templates(old: Template, new: Template) -> TemplateComparison:
    """Return the differences between ``old`` and ``new``.

    Forms are matched by identifier. Comparing a template with itself yields
    no added, removed or modified forms.
    """

    comparison = TemplateComparison()
    if old.name != new.name:
        comparison.differences.append(f'Nombre: "{old.name}" → "{new.name}"')
    if old.type != new.type:
        comparison.differences.append(f'Tipo: "{old.type}" → "{new.type}"')

    old_forms = {form.id: form for form in old.forms}
    new_forms = {form.id: form for form in new.forms}

    for form_id, form in new_forms.items():
        if form_id not in old_forms:
            comparison.added_forms.append(form.display_name)
    for form_id, form in old_forms.items():
        if form_id not in new_forms:
            comparison.removed_forms.append(form.display_name)
    for form_id, form in new_forms.items():
        previous = old_forms.get(form_id)
        if previous is not None and _form_changed(previous, form):
            comparison.modified_forms.append(form.display_name)

    if comparison.added_forms:
        comparison.differences.append(
            f"Formularios agregados: {', '.join(comparison.added_forms)}"
        )
    if comparison.removed_forms:
        comparison.differences.append(
            f"Formularios eliminados: {', '.join(comparison.removed_forms)}"
        )
    if comparison.modified_forms:
        comparison.differences.append(
            f"Formularios modificados: {', '.join(comparison.modified_forms)}"
        )
    return comparison


__all__ = ["TemplateComparison", "compare_templates"]
