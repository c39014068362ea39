"""Formatting-preserving edits of the specification text.

Usage::

    from layoutgen.editor import add_entry, remove_entry

    text = add_entry(text, 0, ["src", "domain", "repository.rs"], False, "rust")
"""

from layoutgen.editor.children import AddChild
from layoutgen.editor.modifier import (
    EditError,
    add_entry,
    has_entry,
    remove_entries,
    remove_entry,
    strip_standard_extension,
)

__all__ = [
    "AddChild",
    "EditError",
    "add_entry",
    "has_entry",
    "remove_entries",
    "remove_entry",
    "strip_standard_extension",
]
