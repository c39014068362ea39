"""Per-language generation strategies.

Each supported language is one ``LanguageStrategy`` subclass registered in
:data:`STRATEGIES` under its ``Language`` tag.  A strategy answers a fixed
set of questions for the generator:

- which file extensions count as native code files,
- which marker comment its manifests use,
- which module-manifest file (if any) a directory receives, and what it
  declares,
- which entry manifest (if any) the project receives,
- which create-once project files are rendered at the project root,
- what skeleton a newly created code file starts with.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Optional

from layoutgen.scaffolder.templates import TemplateRenderer
from layoutgen.spec.models import CodeFile, Language, Module, Project, Visibility


# ---------------------------------------------------------------------------
# Plans
# ---------------------------------------------------------------------------


@dataclass
class ManifestPlan:
    """A marker-managed file to create or refresh.

    ``relative_path`` is relative to the project root.  ``initial_body`` is
    appended after the marker block only when the file is first created.
    """

    relative_path: PurePosixPath
    declarations: list[str] = field(default_factory=list)
    initial_body: str = ""


@dataclass(frozen=True)
class ProjectTemplate:
    """A create-once file rendered at the project root."""

    filename: str
    template: str


# ---------------------------------------------------------------------------
# Base strategy
# ---------------------------------------------------------------------------


class LanguageStrategy:
    """Behaviour shared by every language; subclasses override the hooks."""

    language: Language
    comment: str = "//"
    code_extensions: tuple[str, ...] = ()
    project_templates: tuple[ProjectTemplate, ...] = ()

    def is_code_file(self, filename: str) -> bool:
        return any(filename.endswith(f".{ext}") for ext in self.code_extensions)

    def filename(self, codefile: CodeFile) -> str:
        return codefile.filename(self.language.value)

    # -- Tier 2 ------------------------------------------------------------

    def module_manifest(self, module: Module, is_top_level: bool) -> Optional[str]:
        """Name of the marker-managed file inside *module*, if it gets one."""
        return None

    def module_declarations(self, module: Module, manifest: str) -> list[str]:
        """Declarations for every sibling code file and child module.

        Files come first in spec order, then child modules.  The manifest
        itself and clone targets are never declared.
        """
        declarations: list[str] = []
        for codefile in module.files:
            filename = self.filename(codefile)
            if filename == manifest or not self.is_code_file(filename):
                continue
            declarations.append(self.declare_file(codefile, filename))
        for child in module.tree:
            if child.is_clone_target:
                continue
            declarations.append(self.declare_module(child))
        return declarations

    def declare_file(self, codefile: CodeFile, filename: str) -> str:
        raise NotImplementedError

    def declare_module(self, module: Module) -> str:
        raise NotImplementedError

    def entry_manifest(self, project: Project, renderer: TemplateRenderer) -> Optional[ManifestPlan]:
        """The project-wide entry manifest, if this language has one."""
        return None

    # -- Tier 1 ------------------------------------------------------------

    def skeleton(
        self,
        renderer: TemplateRenderer,
        filename: str,
        package: Optional[str],
        project: Project,
    ) -> str:
        """Initial content for a newly created file.

        Args:
            renderer: Template renderer for skeletons that live in templates.
            filename: Final on-disk file name.
            package: Name of the enclosing module directory, or ``None`` for
                project-level files.
            project: Owning project.
        """
        return ""


def _stem(filename: str) -> str:
    return filename.rsplit(".", 1)[0] if "." in filename else filename


# ---------------------------------------------------------------------------
# Rust
# ---------------------------------------------------------------------------

_RUST_PREFIXES: dict[Visibility, str] = {
    Visibility.YES: "pub ",
    Visibility.NO: "",
    Visibility.CRATE: "pub(crate) ",
    Visibility.SUPER: "pub(super) ",
}

# Visibility applied when no ``pub`` is given, keyed by the declaring file.
_RUST_DEFAULT_PREFIX: dict[str, str] = {
    "main.rs": "",
    "lib.rs": "pub ",
    "mod.rs": "pub ",
}

_RUST_RESERVED = ("mod.rs", "main.rs", "lib.rs")


class RustStrategy(LanguageStrategy):
    language = Language.RUST
    code_extensions = ("rs",)
    project_templates = (ProjectTemplate("Cargo.toml", "rust/Cargo.toml.j2"),)

    @staticmethod
    def visibility_prefix(visibility: Optional[Visibility], target: str) -> str:
        """Rust visibility keyword for a ``mod`` line inside *target*."""
        if visibility is None:
            return _RUST_DEFAULT_PREFIX.get(target, "pub ")
        return _RUST_PREFIXES[visibility]

    def module_manifest(self, module: Module, is_top_level: bool) -> Optional[str]:
        # The crate root directory is wired by main.rs / lib.rs instead.
        if is_top_level and module.name == "src":
            return None
        return "mod.rs"

    def module_declarations(self, module: Module, manifest: str) -> list[str]:
        return self._declarations(module, target=manifest, skip=(manifest,))

    def entry_manifest(self, project: Project, renderer: TemplateRenderer) -> Optional[ManifestPlan]:
        src = project.find_module("src")
        if src is None:
            return None

        if self._names_entry(project, src, "main"):
            target = "main.rs"
            body = renderer.render("rust/main.rs.j2", {"name": project.name})
        elif self._names_entry(project, src, "lib"):
            target = "lib.rs"
            body = ""
        else:
            return None

        return ManifestPlan(
            relative_path=PurePosixPath("src", target),
            declarations=self._declarations(src, target=target, skip=_RUST_RESERVED),
            initial_body=body,
        )

    def _declarations(self, module: Module, target: str, skip: tuple[str, ...]) -> list[str]:
        declarations: list[str] = []
        for codefile in module.files:
            filename = self.filename(codefile)
            if filename in skip or not self.is_code_file(filename):
                continue
            prefix = self.visibility_prefix(codefile.visibility, target)
            declarations.append(f"{prefix}mod {_stem(filename)};")
        for child in module.tree:
            prefix = self.visibility_prefix(child.visibility, target)
            declarations.append(f"{prefix}mod {child.name};")
        return declarations

    def _names_entry(self, project: Project, src: Module, stem: str) -> bool:
        candidates = list(project.files) + list(src.files)
        return any(
            codefile.name == stem or self.filename(codefile) == f"{stem}.rs"
            for codefile in candidates
        )


# ---------------------------------------------------------------------------
# Python
# ---------------------------------------------------------------------------


class PythonStrategy(LanguageStrategy):
    language = Language.PYTHON
    comment = "#"
    code_extensions = ("py",)
    project_templates = (
        ProjectTemplate("requirements.txt", "python/requirements.txt.j2"),
        ProjectTemplate("setup.py", "python/setup.py.j2"),
    )

    def module_manifest(self, module: Module, is_top_level: bool) -> Optional[str]:
        return "__init__.py"

    def declare_file(self, codefile: CodeFile, filename: str) -> str:
        return f"from .{_stem(filename)} import *"

    def declare_module(self, module: Module) -> str:
        return f"from .{module.name} import *"

    def skeleton(
        self,
        renderer: TemplateRenderer,
        filename: str,
        package: Optional[str],
        project: Project,
    ) -> str:
        if filename == "main.py":
            return renderer.render("python/main.py.j2", {"name": project.name})
        return ""


# ---------------------------------------------------------------------------
# TypeScript / JavaScript
# ---------------------------------------------------------------------------


class TypeScriptStrategy(LanguageStrategy):
    language = Language.TYPESCRIPT
    code_extensions = ("ts", "tsx")
    project_templates = (
        ProjectTemplate("package.json", "typescript/package.json.j2"),
        ProjectTemplate("tsconfig.json", "typescript/tsconfig.json.j2"),
    )
    index_name = "index.ts"

    def module_manifest(self, module: Module, is_top_level: bool) -> Optional[str]:
        # An index file is only maintained where one is declared.
        if module.find_file(self.index_name, self.language.value) is None:
            return None
        return self.index_name

    def declare_file(self, codefile: CodeFile, filename: str) -> str:
        return f"export * from './{_stem(filename)}';"

    def declare_module(self, module: Module) -> str:
        return f"export * from './{module.name}';"


class JavaScriptStrategy(TypeScriptStrategy):
    language = Language.JAVASCRIPT
    code_extensions = ("js", "mjs", "jsx")
    project_templates = (ProjectTemplate("package.json", "javascript/package.json.j2"),)
    index_name = "index.js"

    def declare_file(self, codefile: CodeFile, filename: str) -> str:
        # ES modules need the real extension in the specifier.
        return f"export * from './{filename}';"

    def declare_module(self, module: Module) -> str:
        return f"export * from './{module.name}/index.js';"


# ---------------------------------------------------------------------------
# Go
# ---------------------------------------------------------------------------


class GoStrategy(LanguageStrategy):
    language = Language.GO
    code_extensions = ("go",)
    project_templates = (
        ProjectTemplate("go.mod", "go/go.mod.j2"),
        ProjectTemplate("go.sum", "go/go.sum.j2"),
    )

    def skeleton(
        self,
        renderer: TemplateRenderer,
        filename: str,
        package: Optional[str],
        project: Project,
    ) -> str:
        if not self.is_code_file(filename):
            return ""
        if "main" in _stem(filename):
            return renderer.render("go/main.go.j2", {})
        return renderer.render("go/package.go.j2", {"package": package or "main"})


# ---------------------------------------------------------------------------
# Languages without module wiring
# ---------------------------------------------------------------------------


class BashStrategy(LanguageStrategy):
    language = Language.BASH
    comment = "#"
    code_extensions = ("sh",)


class LuaStrategy(LanguageStrategy):
    language = Language.LUA
    comment = "--"
    code_extensions = ("lua",)


class AnyStrategy(LanguageStrategy):
    """Creates exactly what is named, plus an empty README at the root."""

    language = Language.ANY
    project_templates = (ProjectTemplate("README.md", "any/README.md.j2"),)

    def filename(self, codefile: CodeFile) -> str:
        return codefile.name


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

STRATEGIES: dict[Language, LanguageStrategy] = {
    strategy.language: strategy
    for strategy in (
        RustStrategy(),
        PythonStrategy(),
        TypeScriptStrategy(),
        JavaScriptStrategy(),
        GoStrategy(),
        BashStrategy(),
        LuaStrategy(),
        AnyStrategy(),
    )
}


def get_strategy(language: Language | str) -> LanguageStrategy:
    """Return the strategy for *language*.

    Raises:
        ValueError: If the tag is not a supported language.
    """
    tag = language if isinstance(language, Language) else Language.lookup(language)
    if tag is None:
        raise ValueError(f"Unsupported language: {language}")
    return STRATEGIES[tag]
