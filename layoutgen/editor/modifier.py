"""Structural editor for ``layout.yml``.

Adds and removes tree entries by splicing the line vector of the
specification text.  Only the lines that make up the inserted or removed
entry change (plus a ``file:``/``tree:`` key that has to be created or has
become empty); comments, blank lines and formatting elsewhere survive
untouched.

Both operations fail closed: when a required node cannot be located an
:class:`EditError` is raised and no text is returned.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Sequence

from layoutgen.editor.children import AddChild
from layoutgen.editor.lines import Node, SpecLines, format_scalar, indent_of
from layoutgen.spec.models import CodeFile, default_extension
from layoutgen.spec.paths import ManagedPath, filter_redundant_removals

_INLINE_EMPTY_RE = re.compile(r":\s*(\[\s*\]|~|null)\s*(#.*)?$")


class EditError(Exception):
    """Raised when an edit cannot locate the node it needs."""

    def __init__(self, message: str, segment: str, operation: str):
        self.segment = segment
        self.operation = operation
        super().__init__(message)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def strip_standard_extension(filename: str, language: str) -> str:
    """Drop the extension *language* would append to a bare name.

    ``model.rs`` in a rust project is stored as ``model``; ``README.md`` or
    ``App.test.ts`` keep their names because the bare form would not resolve
    back to the same file.
    """
    extension = default_extension(language)
    if extension is None:
        return filename
    suffix = f".{extension}"
    if filename.endswith(suffix):
        stem = filename[: -len(suffix)]
        if stem and "." not in stem:
            return stem
    return filename


def add_entry(
    text: str,
    project_index: int,
    path_segments: Sequence[str],
    is_directory: bool,
    language: str,
    children: Iterable[AddChild] = (),
) -> str:
    """Insert a file or directory into the specification text.

    Args:
        text: Current specification text.
        project_index: Index of the owning project in the document.
        path_segments: Path below the project root, e.g.
            ``["src", "domain", "repository.rs"]``.
        is_directory: Whether the last segment is a directory.
        language: Raw language tag of the project; used to strip the
            standard extension from file names.
        children: Typed children of a directory target, added with it.

    Returns:
        The new text, or *text* unchanged when the entry already exists.

    Raises:
        EditError: If the project cannot be found or the target is empty.
    """
    segments = [segment for segment in path_segments if segment]
    if not segments:
        raise EditError("Nothing to add: empty path", "", "add")

    doc = SpecLines.parse(text)
    _resolve(doc, project_index, (), "add")

    if is_directory:
        _ensure_tree_path(doc, project_index, segments)
        _apply_children(doc, project_index, segments, list(children), language)
    else:
        _ensure_tree_path(doc, project_index, segments[:-1])
        _add_file(doc, project_index, segments[:-1], segments[-1], language)

    return doc.render()


def remove_entry(text: str, managed_path: ManagedPath) -> str:
    """Remove the entry behind *managed_path* from the specification text.

    A directory takes all of its nested files and modules with it.  A
    ``file:`` or ``tree:`` key left without items is removed as well.
    Comment lines directly above the entry, at its indent, go with it.

    Raises:
        EditError: If the entry or one of its parents cannot be found.
    """
    doc = SpecLines.parse(text)
    parents = () if managed_path.is_project_level else tuple(managed_path.module_path)
    key = "tree" if managed_path.is_directory else "file"

    host = _resolve(doc, managed_path.project_index, parents, "remove")
    item = _find_item(doc, host, key, managed_path.file_name)
    if item is None:
        raise EditError(
            f"Could not find entry '{managed_path.file_name}' in the specification",
            managed_path.file_name,
            "remove",
        )

    doc.delete(_leading_comments(doc, item.start), item.end)

    host = _resolve(doc, managed_path.project_index, parents, "remove")
    section = doc.section(host, key)
    if (
        section is not None
        and not section.items
        and not section.inline_value
        and section.line != host.start
    ):
        doc.delete(section.line, section.line + 1)

    return doc.render()


def remove_entries(text: str, managed_paths: Iterable[ManagedPath]) -> str:
    """Remove several entries, skipping those a directory removal covers."""
    for managed_path in filter_redundant_removals(list(managed_paths)):
        text = remove_entry(text, managed_path)
    return text


def has_entry(
    text: str,
    project_index: int,
    path_segments: Sequence[str],
    is_directory: bool,
    language: str,
) -> bool:
    """Whether the target of an add-request is already present."""
    segments = [segment for segment in path_segments if segment]
    if not segments:
        return False
    doc = SpecLines.parse(text)
    parents = segments if is_directory else segments[:-1]
    try:
        host = _resolve(doc, project_index, parents, "lookup")
    except EditError:
        return False
    if is_directory:
        return True
    name = strip_standard_extension(segments[-1], language)
    return _find_file(doc, host, name, language) is not None


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def _resolve(doc: SpecLines, project_index: int, segments: Sequence[str], operation: str) -> Node:
    node = doc.project(project_index)
    if node is None:
        raise EditError(
            f"Project #{project_index} not found in the specification",
            f"projects[{project_index}]",
            operation,
        )
    for segment in segments:
        child = _find_item(doc, node, "tree", segment)
        if child is None:
            raise EditError(
                f"Could not find module '{segment}' in the specification",
                segment,
                operation,
            )
        node = child
    return node


def _leading_comments(doc: SpecLines, anchor: int) -> int:
    """First line of the comment run directly above *anchor* at its indent."""
    indent = indent_of(doc.lines[anchor])
    start = anchor
    while start > 0:
        line = doc.lines[start - 1]
        if not line.strip().startswith("#") or indent_of(line) != indent:
            break
        start -= 1
    return start


def _find_item(doc: SpecLines, node: Node, key: str, name: str) -> Optional[Node]:
    section = doc.section(node, key)
    if section is None:
        return None
    for item in section.items:
        if doc.node_name(item) == name:
            return item
    return None


def _find_file(doc: SpecLines, node: Node, name: str, language: str) -> Optional[Node]:
    section = doc.section(node, "file")
    if section is None:
        return None
    wanted = CodeFile(name=name).filename(language)
    for item in section.items:
        existing = doc.node_name(item)
        if existing == name or (existing and CodeFile(name=existing).filename(language) == wanted):
            return item
    return None


# ---------------------------------------------------------------------------
# Insertion
# ---------------------------------------------------------------------------


def _ensure_tree_path(doc: SpecLines, project_index: int, segments: Sequence[str]) -> None:
    for depth, segment in enumerate(segments):
        parent = _resolve(doc, project_index, segments[:depth], "add")
        if _find_item(doc, parent, "tree", segment) is None:
            _insert_item(doc, parent, "tree", segment)


def _add_file(
    doc: SpecLines,
    project_index: int,
    directories: Sequence[str],
    filename: str,
    language: str,
) -> None:
    name = strip_standard_extension(filename, language)
    host = _resolve(doc, project_index, directories, "add")
    if _find_file(doc, host, name, language) is None:
        _insert_item(doc, host, "file", name)


def _apply_children(
    doc: SpecLines,
    project_index: int,
    segments: list[str],
    children: list[AddChild],
    language: str,
) -> None:
    ordered = sorted(children, key=lambda child: not child.is_directory)
    for child in ordered:
        if child.is_directory:
            path = segments + [child.name]
            _ensure_tree_path(doc, project_index, path)
            _apply_children(doc, project_index, path, list(child.children), language)
        else:
            _add_file(doc, project_index, segments, child.name, language)


def _insert_item(doc: SpecLines, parent: Node, key: str, name: str) -> None:
    """Append ``- name: <name>`` to the *key* section of *parent*."""
    entry = f"- name: {format_scalar(name)}"
    offset = doc.list_offset()
    section = doc.section(parent, key)

    if section is None:
        key_pad = " " * parent.key_indent
        item_pad = " " * (parent.key_indent + offset)
        position = _new_section_position(doc, parent, key)
        doc.insert(position, [f"{key_pad}{key}:", f"{item_pad}{entry}"])
        return

    if section.inline_value and not section.is_inline_empty:
        raise EditError(
            f"Cannot insert into the inline '{key}:' value of this entry",
            name,
            "add",
        )

    if section.is_inline_empty:
        doc.replace(section.line, _INLINE_EMPTY_RE.sub(":", doc.lines[section.line]))
        item_indent = section.indent + offset
        position = section.line + 1
    elif section.items:
        item_indent = section.items[0].indent
        position = section.items[-1].end
    else:
        item_indent = section.indent + offset
        position = section.end

    doc.insert(position, [f"{' ' * item_indent}{entry}"])


def _new_section_position(doc: SpecLines, parent: Node, key: str) -> int:
    # Files are listed ahead of submodules.
    if key == "file":
        tree = doc.section(parent, "tree")
        if tree is not None and tree.line != parent.start:
            return tree.line
    return parent.end
