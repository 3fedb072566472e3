"""Use cases for naming, validating and saving packages."""

from .documents import (
    PACKAGE_DOCUMENT_EXTENSION,
    dump_package_document,
    form_content,
    load_package_document,
    package_document_name,
    package_name_from_file,
    parse_package_document,
    plan_package_files,
    render_form_content,
    serialize_package_document,
)
from .execution import (
    ExecutionTracker,
    PackageSaveOutcome,
    execute_file_saves,
    save_package,
)
from .naming import (
    FILE_NAME_PATTERN,
    PACKAGE_FILE_EXTENSION,
    build_package_file_name,
    file_name_for_form,
)
from .persistence import load_packages, save_package_document
from .validators import validate_date_range, validate_generated_file, validate_package

__all__ = [
    "ExecutionTracker",
    "FILE_NAME_PATTERN",
    "PACKAGE_DOCUMENT_EXTENSION",
    "PACKAGE_FILE_EXTENSION",
    "PackageSaveOutcome",
    "build_package_file_name",
    "dump_package_document",
    "execute_file_saves",
    "file_name_for_form",
    "form_content",
    "load_package_document",
    "load_packages",
    "package_document_name",
    "package_name_from_file",
    "parse_package_document",
    "plan_package_files",
    "render_form_content",
    "save_package",
    "save_package_document",
    "serialize_package_document",
    "validate_date_range",
    "validate_generated_file",
    "validate_package",
]
