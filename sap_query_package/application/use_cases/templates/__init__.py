"""Use cases for building, validating and editing templates."""

from .builders import (
    add_flows_to_template,
    build_custom_template,
    build_details_sync_template,
    build_summary_sync_template,
    extract_flow_parameters,
    load_flow_definitions,
)
from .compare import TemplateComparison, compare_templates
from .documents import (
    infer_template_type,
    load_template_document,
    parse_template_document,
    serialize_template_document,
)
from .editing_session import TemplateEditingSession
from .history import SnapshotHistory, TemplateVersionHistory
from .instantiate import instantiate_form, instantiate_template, preview_template_dates
from .persistence import TemplateSaveOutcome, load_templates, save_template
from .validators import validate_template

__all__ = [
    "SnapshotHistory",
    "TemplateComparison",
    "TemplateEditingSession",
    "TemplateSaveOutcome",
    "TemplateVersionHistory",
    "add_flows_to_template",
    "build_custom_template",
    "build_details_sync_template",
    "build_summary_sync_template",
    "compare_templates",
    "extract_flow_parameters",
    "infer_template_type",
    "instantiate_form",
    "instantiate_template",
    "load_flow_definitions",
    "load_template_document",
    "load_templates",
    "parse_template_document",
    "preview_template_dates",
    "save_template",
    "serialize_template_document",
    "validate_template",
]
