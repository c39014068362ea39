"""Generation engine.

Takes a validated ``LayoutSpec`` and materialises it below a base directory.
Files fall into three protection tiers:

1. Code files are created once with a skeleton and never touched again.
2. Module manifests (``mod.rs``, ``__init__.py``, ``index.ts`` ...) have the
   block between their marker comments regenerated on every run; the rest
   of the file is left as the developer wrote it.
3. Project files (``Cargo.toml``, ``go.mod``, ``package.json`` ...) are
   rendered once from templates and never modified afterwards.

Clone targets are populated with ``git clone``.  A failing clone is reported
as a warning and generation carries on; every other I/O failure aborts the
run with a :class:`GenerationError` naming the path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from layoutgen.config import Config
from layoutgen.scaffolder.clone import CloneFailure, GitCloner
from layoutgen.scaffolder.languages import LanguageStrategy, get_strategy
from layoutgen.scaffolder.markers import MarkerManager
from layoutgen.scaffolder.templates import TemplateRenderer
from layoutgen.spec.models import CodeFile, LayoutSpec, Module, Project
from layoutgen.spec.validator import validate_spec
from layoutgen.utils import ensure_dir, print_info, print_warning, read_text, write_text


# ---------------------------------------------------------------------------
# Results and errors
# ---------------------------------------------------------------------------


class GenerationError(Exception):
    """Raised when a directory or file cannot be created or updated."""

    def __init__(self, message: str, path: str | Path, operation: str):
        self.path = Path(path)
        self.operation = operation
        super().__init__(f"{message} ({operation} {self.path})")


@dataclass
class GenerationReport:
    """What a generation run did on disk."""

    created_directories: list[Path] = field(default_factory=list)
    created_files: list[Path] = field(default_factory=list)
    updated_manifests: list[Path] = field(default_factory=list)
    cloned: list[Path] = field(default_factory=list)
    skipped_clones: list[Path] = field(default_factory=list)
    clone_failures: list[CloneFailure] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(
            self.created_directories
            or self.created_files
            or self.updated_manifests
            or self.cloned
        )

    def summary(self) -> dict[str, str]:
        """Counts suitable for :func:`layoutgen.utils.print_summary_table`."""
        return {
            "Directories created": str(len(self.created_directories)),
            "Files created": str(len(self.created_files)),
            "Manifests updated": str(len(self.updated_manifests)),
            "Repositories cloned": str(len(self.cloned)),
            "Clones skipped": str(len(self.skipped_clones)),
            "Clone failures": str(len(self.clone_failures)),
        }


# ---------------------------------------------------------------------------
# Main generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Materialises every project of a specification.

    Projects are processed in document order.  For each project the engine
    creates its root, renders the create-once project files, creates the
    project-level files, walks the module tree in pre-order and finally
    refreshes the entry manifest.
    """

    def __init__(
        self,
        spec: LayoutSpec,
        cloner: Optional[GitCloner] = None,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.spec = spec
        self.cloner = cloner or GitCloner()
        self.renderer = renderer or TemplateRenderer()

    # -- Public API --------------------------------------------------------

    def generate(self, base_path: str | Path) -> GenerationReport:
        """Generate all projects below *base_path*.

        Args:
            base_path: Working directory.  The root project materialises here
                directly; other projects get a subdirectory named after them.

        Returns:
            A ``GenerationReport`` describing the changes.

        Raises:
            SpecValidationError: If the specification is invalid.  Nothing is
                written in that case.
            GenerationError: On the first directory or file I/O failure.
        """
        validate_spec(self.spec)

        base = Path(base_path)
        report = GenerationReport()
        for project in self.spec.projects:
            self._generate_project(base, project, report)
        return report

    # -- Projects ----------------------------------------------------------

    def _generate_project(self, base: Path, project: Project, report: GenerationReport) -> None:
        strategy = get_strategy(project.lang)
        root = base if project.is_root else base / project.name
        self._make_dir(root, report)

        context = {"name": project.name}
        for item in strategy.project_templates:
            self._render_once(item.template, root / item.filename, context, report)

        entry = strategy.entry_manifest(project, self.renderer)
        reserved: set[Path] = set()
        entry_path: Optional[Path] = None
        if entry is not None:
            entry_path = root.joinpath(*entry.relative_path.parts)
            reserved.add(entry_path)

        for codefile in project.files:
            self._create_code_file(strategy, project, root, codefile, None, reserved, report)

        for module in project.tree:
            self._generate_module(strategy, project, root, module, True, reserved, report)

        if entry is not None and entry_path is not None:
            self._write_manifest(
                strategy, entry_path, entry.declarations, entry.initial_body, report
            )

    # -- Modules -----------------------------------------------------------

    def _generate_module(
        self,
        strategy: LanguageStrategy,
        project: Project,
        parent: Path,
        module: Module,
        is_top_level: bool,
        reserved: set[Path],
        report: GenerationReport,
    ) -> None:
        path = parent / module.name

        if module.is_clone_target:
            self._clone(module, path, report)
            return

        self._make_dir(path, report)

        manifest = strategy.module_manifest(module, is_top_level)
        local_reserved = set(reserved)
        if manifest is not None:
            local_reserved.add(path / manifest)

        for codefile in module.files:
            self._create_code_file(
                strategy, project, path, codefile, module.name, local_reserved, report
            )

        for child in module.tree:
            self._generate_module(strategy, project, path, child, False, reserved, report)

        if manifest is not None:
            declarations = strategy.module_declarations(module, manifest)
            self._write_manifest(strategy, path / manifest, declarations, "", report)

    def _clone(self, module: Module, target: Path, report: GenerationReport) -> None:
        url = module.source_url or ""
        if target.exists():
            print_warning(f"Directory already exists, skipping clone: {target}")
            report.skipped_clones.append(target)
            return

        print_info(f"Cloning {url} -> {target}")
        try:
            self.cloner.clone(url, target)
        except CloneFailure as exc:
            print_warning(str(exc))
            report.clone_failures.append(exc)
            return
        report.cloned.append(target)

    # -- Files -------------------------------------------------------------

    def _create_code_file(
        self,
        strategy: LanguageStrategy,
        project: Project,
        directory: Path,
        codefile: CodeFile,
        package: Optional[str],
        reserved: set[Path],
        report: GenerationReport,
    ) -> None:
        filename = strategy.filename(codefile)
        path = directory / filename
        # Manifest paths are owned by the marker step.
        if path in reserved or path.exists():
            return
        content = strategy.skeleton(self.renderer, filename, package, project)
        self._write_new(path, content, report)

    def _write_manifest(
        self,
        strategy: LanguageStrategy,
        path: Path,
        declarations: list[str],
        initial_body: str,
        report: GenerationReport,
    ) -> None:
        markers = MarkerManager(strategy.comment)
        if not path.exists():
            content = markers.wrap(declarations)
            if initial_body:
                content = f"{content}\n{initial_body}"
            self._write_new(path, content, report)
            return

        try:
            current = read_text(path)
        except OSError as exc:
            raise GenerationError(f"Failed to read manifest: {exc}", path, "read") from exc

        if markers.extract(current) == declarations:
            return
        updated = markers.replace(current, declarations)
        if updated == current:
            return
        try:
            write_text(path, updated)
        except OSError as exc:
            raise GenerationError(f"Failed to update manifest: {exc}", path, "update") from exc
        report.updated_manifests.append(path)

    def _render_once(
        self,
        template: str,
        path: Path,
        context: dict[str, Any],
        report: GenerationReport,
    ) -> None:
        try:
            written = self.renderer.render_if_absent(template, path, context)
        except OSError as exc:
            raise GenerationError(f"Failed to create file: {exc}", path, "create") from exc
        if written is not None:
            report.created_files.append(written)

    def _write_new(self, path: Path, content: str, report: GenerationReport) -> None:
        try:
            write_text(path, content)
        except OSError as exc:
            raise GenerationError(f"Failed to create file: {exc}", path, "create") from exc
        report.created_files.append(path)

    def _make_dir(self, path: Path, report: GenerationReport) -> None:
        if path.is_dir():
            return
        try:
            ensure_dir(path)
        except OSError as exc:
            raise GenerationError(f"Failed to create directory: {exc}", path, "mkdir") from exc
        report.created_directories.append(path)


# ---------------------------------------------------------------------------
# Convenience
# ---------------------------------------------------------------------------


def generate(
    base_path: str | Path,
    spec: LayoutSpec,
    config: Optional[Config] = None,
) -> GenerationReport:
    """Generate *spec* below *base_path* with a cloner configured from *config*."""
    cloner = GitCloner.from_config(config) if config is not None else GitCloner()
    return ProjectGenerator(spec, cloner=cloner).generate(base_path)
