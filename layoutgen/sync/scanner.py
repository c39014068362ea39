"""Filesystem walker that finds paths the specification does not claim.

Walks the working tree with ``os.walk`` while honouring ``.gitignore``.
Hidden entries, dependency and build directories, generated module
manifests and project manifests are never reported.

Descent stops at the first unmanaged directory: its contents travel with it
as :class:`~layoutgen.editor.children.AddChild` children, so one directory
is added in one edit.  Clone-target directories belong to another
repository and are not descended into either.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional, Sequence

from layoutgen.config import DEFAULT_SPEC_FILENAME
from layoutgen.editor.children import AddChild
from layoutgen.spec.models import LayoutSpec
from layoutgen.spec.paths import collect_entries, project_prefix
from layoutgen.utils import read_text

# Module manifests the generator maintains itself.
MANAGED_FILES = frozenset({"mod.rs", "__init__.py", "index.ts", "index.js"})

# Build descriptors and lock files.
EXCLUDED_FILES = frozenset({
    "Cargo.toml",
    "Cargo.lock",
    "package.json",
    "package-lock.json",
    "yarn.lock",
    "pnpm-lock.yaml",
    "tsconfig.json",
    "go.mod",
    "go.sum",
    "pyproject.toml",
    "setup.py",
    "setup.cfg",
    "requirements.txt",
})

EXCLUDED_DIRS = frozenset({".git", "node_modules", "target", "__pycache__", ".venv", "venv"})


@dataclass(frozen=True)
class UnmanagedEntry:
    """A file or directory on disk that no managed path covers."""

    display_path: str
    relative_path: PurePosixPath
    is_directory: bool


# ---------------------------------------------------------------------------
# Ignore rules
# ---------------------------------------------------------------------------


@dataclass
class IgnoreRule:
    """One pattern line from a ``.gitignore`` style file."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored or "/" in self.pattern:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")
        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def parse_ignore_line(line: str) -> Optional[IgnoreRule]:
    line = line.strip()
    if not line or line.startswith("#"):
        return None
    negate = line.startswith("!")
    if negate:
        line = line[1:]
    directory_only = line.endswith("/")
    line = line.rstrip("/")
    anchored = line.startswith("/")
    line = line.lstrip("/")
    if not line:
        return None
    return IgnoreRule(pattern=line, directory_only=directory_only, anchored=anchored, negate=negate)


def load_ignore_rules(root: Path) -> list[IgnoreRule]:
    """Rules from ``.gitignore`` and ``.git/info/exclude`` below *root*."""
    rules: list[IgnoreRule] = []
    for candidate in (root / ".git" / "info" / "exclude", root / ".gitignore"):
        if not candidate.is_file():
            continue
        for raw in read_text(candidate).splitlines():
            rule = parse_ignore_line(raw)
            if rule is not None:
                rules.append(rule)
    return rules


def is_ignored(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


# ---------------------------------------------------------------------------
# Scanner
# ---------------------------------------------------------------------------


class FilesystemScanner:
    """Compares the working tree against the managed paths of a spec."""

    def __init__(self, root: str | Path, spec_filename: str = DEFAULT_SPEC_FILENAME) -> None:
        self.root = Path(root)
        self.spec_filename = spec_filename
        self.rules = load_ignore_rules(self.root)

    def scan(self, spec: LayoutSpec) -> list[UnmanagedEntry]:
        """Return unmanaged entries, directories first, then alphabetical.

        A file counts as managed only when its path equals a managed display
        path; no alternative extensions are tried.
        """
        entries = collect_entries(spec)
        managed = {entry.display_path for entry in entries}
        traversable = {
            entry.display_path
            for entry in entries
            if entry.is_directory and not entry.is_clone_target
        }
        traversable.update(project_prefix(project) for project in spec.projects)
        traversable.discard("")

        found: list[UnmanagedEntry] = []
        for rel_dir, dirnames, filenames in self._walk(self.root):
            keep: list[str] = []
            for name in dirnames:
                rel = _join(rel_dir, name)
                display = f"{rel}/"
                if display in traversable:
                    keep.append(name)
                elif display not in managed:
                    found.append(UnmanagedEntry(display, PurePosixPath(rel), True))
            dirnames[:] = keep

            for name in filenames:
                rel = _join(rel_dir, name)
                if rel not in managed:
                    found.append(UnmanagedEntry(rel, PurePosixPath(rel), False))

        return sorted(found, key=lambda entry: (not entry.is_directory, entry.display_path))

    def collect_directory_children(self, relative_dir: str | PurePosixPath) -> list[AddChild]:
        """Every file and directory below *relative_dir*, as nested children."""
        base = PurePosixPath(str(relative_dir).rstrip("/"))
        paths: list[str] = []
        for rel_dir, dirnames, filenames in self._walk(self.root / base, prefix=base.as_posix()):
            paths.extend(f"{_join(rel_dir, name)}/" for name in dirnames)
            paths.extend(_join(rel_dir, name) for name in filenames)
        return AddChild.from_paths(paths, base)

    # -- Filtering -----------------------------------------------------------

    def _walk(self, top: Path, prefix: str = "") -> Iterator[tuple[str, list[str], list[str]]]:
        """``os.walk`` yielding root-relative POSIX directory paths.

        Excluded directories are pruned before the caller sees them and
        excluded files are dropped; callers may prune *dirnames* further.
        """
        for dirpath, dirnames, filenames in os.walk(top):
            current = Path(dirpath)
            relative = current.relative_to(top).as_posix()
            rel_dir = prefix if relative == "." else _join(prefix, relative)

            dirnames[:] = sorted(
                name for name in dirnames if not self._skip(_join(rel_dir, name), name, True)
            )
            files = sorted(
                name for name in filenames if not self._skip(_join(rel_dir, name), name, False)
            )
            yield rel_dir, dirnames, files

    def _skip(self, rel_path: str, name: str, is_dir: bool) -> bool:
        if name.startswith("."):
            return True
        if is_dir and name in EXCLUDED_DIRS:
            return True
        if not is_dir and (
            name in EXCLUDED_FILES or name in MANAGED_FILES or rel_path == self.spec_filename
        ):
            return True
        return is_ignored(rel_path, is_dir, self.rules)


def _join(parent: str, name: str) -> str:
    return f"{parent}/{name}" if parent else name
