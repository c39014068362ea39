"""Synchronise the specification text with the working tree.

The filesystem is the source of truth: managed paths missing on disk are
removed from the specification and unmanaged paths found on disk are added.
Removals are applied first; the text is then re-parsed so that additions
resolve against the post-removal tree.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from layoutgen.config import DEFAULT_SPEC_FILENAME
from layoutgen.editor.children import AddChild
from layoutgen.editor.modifier import EditError, add_entry, remove_entries
from layoutgen.spec.models import LayoutSpec
from layoutgen.spec.parser import parse_string
from layoutgen.spec.paths import ManagedPath, collect_entries, filter_redundant_removals
from layoutgen.sync.scanner import FilesystemScanner, UnmanagedEntry


@dataclass
class SyncPlan:
    """Pending changes to the specification text."""

    removals: list[ManagedPath] = field(default_factory=list)
    additions: list[UnmanagedEntry] = field(default_factory=list)
    unresolved: list[tuple[UnmanagedEntry, str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.removals and not self.additions


def resolve_project(spec: LayoutSpec, entry: UnmanagedEntry) -> tuple[int, list[str]]:
    """Attribute *entry* to a project.

    A path whose first segment names a non-root project belongs to that
    project.  Any other path goes to the root project if there is one, else
    to a project named ``.``.

    Returns:
        ``(project_index, segments)`` with *segments* relative to the
        project root.

    Raises:
        EditError: If no project claims the path.
    """
    parts = list(entry.relative_path.parts)
    if not parts:
        raise EditError("Cannot resolve an empty path to a project", "", "resolve")

    for index, project in enumerate(spec.projects):
        if not project.is_root and project.name == parts[0]:
            return index, parts[1:]

    for index, project in enumerate(spec.projects):
        if project.is_root:
            return index, parts

    for index, project in enumerate(spec.projects):
        if project.name == ".":
            return index, parts

    raise EditError(
        f"No matching project found for '{entry.display_path}'. "
        "Add a project named '.' or move the entry under an existing project directory.",
        parts[0],
        "resolve",
    )


def missing_entries(spec: LayoutSpec, root: str | Path) -> list[ManagedPath]:
    """Managed paths absent from disk, without entries a directory covers."""
    base = Path(root)
    missing = [
        entry
        for entry in collect_entries(spec)
        if not (base / entry.display_path.rstrip("/")).exists()
    ]
    return filter_redundant_removals(missing)


def plan_sync(
    spec: LayoutSpec,
    text: str,
    root: str | Path,
    spec_filename: str = DEFAULT_SPEC_FILENAME,
) -> SyncPlan:
    """Work out which entries to remove from and add to *text*.

    Additions whose edit would leave the text unchanged are dropped.  Paths
    no project claims are reported in ``unresolved`` instead.
    """
    scanner = FilesystemScanner(root, spec_filename=spec_filename)
    plan = SyncPlan(removals=missing_entries(spec, root))

    for entry in scanner.scan(spec):
        try:
            updated = _apply_addition(text, spec, entry, scanner)
        except EditError as exc:
            plan.unresolved.append((entry, str(exc)))
            continue
        if updated != text:
            plan.additions.append(entry)

    return plan


def apply_sync(
    text: str,
    plan: SyncPlan,
    root: str | Path,
    spec_filename: str = DEFAULT_SPEC_FILENAME,
) -> str:
    """Apply *plan* to *text* and return the new specification text.

    Raises:
        EditError: If an entry can no longer be located or attributed.
        SpecParseError: If the text stops parsing after the removals.
    """
    text = remove_entries(text, plan.removals)
    if not plan.additions:
        return text

    spec = parse_string(text)
    scanner = FilesystemScanner(root, spec_filename=spec_filename)
    for entry in plan.additions:
        text = _apply_addition(text, spec, entry, scanner)
    return text


def _apply_addition(
    text: str,
    spec: LayoutSpec,
    entry: UnmanagedEntry,
    scanner: FilesystemScanner,
) -> str:
    index, segments = resolve_project(spec, entry)
    language = spec.projects[index].lang

    children: list[AddChild] = []
    if entry.is_directory:
        children = scanner.collect_directory_children(entry.relative_path)

    # The project root itself: each child becomes a top-level entry.
    if not segments and entry.is_directory:
        for child in children:
            text = add_entry(
                text, index, [child.name], child.is_directory, language, child.children
            )
        return text

    return add_entry(text, index, segments, entry.is_directory, language, children)
