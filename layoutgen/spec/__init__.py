"""Specification model, parsing, validation and managed-path collection."""

from layoutgen.spec.models import (
    CodeFile,
    Language,
    LayoutSpec,
    Module,
    Project,
    Visibility,
)
from layoutgen.spec.parser import SpecParseError, parse_file, parse_string, spec_exists
from layoutgen.spec.paths import ManagedPath, collect_entries, collect_files
from layoutgen.spec.validator import SpecValidationError, ValidationIssue, validate_spec

__all__ = [
    "CodeFile",
    "Language",
    "LayoutSpec",
    "ManagedPath",
    "Module",
    "Project",
    "SpecParseError",
    "SpecValidationError",
    "ValidationIssue",
    "Visibility",
    "collect_entries",
    "collect_files",
    "parse_file",
    "parse_string",
    "spec_exists",
    "validate_spec",
]
